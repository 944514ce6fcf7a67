# ==============================================================================
# WSGI Entry Point - Para Gunicorn en producción
# ==============================================================================
# Este archivo es el punto de entrada para servidores WSGI como Gunicorn.
#
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/           <- Directorio de trabajo (en sys.path automáticamente)
#   ├── wsgi.py          <- Este archivo
#   ├── pyproject.toml
#   └── cadeteria/       <- Paquete Python
#       ├── main.py
#       ├── services/
#       └── repositories/
#
# La configuración sale de variables de entorno (ver cadeteria/config.py).
# ==============================================================================

from cadeteria.main import create_app
from cadeteria.config import load_settings

app = create_app()

# Para desarrollo local:
#   python wsgi.py
if __name__ == '__main__':
    settings = load_settings()
    app.run(debug=settings.debug, host=settings.host, port=settings.port)
