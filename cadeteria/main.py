from flask import Blueprint, Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from cadeteria.app_container import AppContainer
from cadeteria.config import load_settings
from cadeteria.errors import CadeteriaError, ValidationError
from cadeteria.performance_logger import get_function_stats, init_profiling

# ═══════════════════════════════════════════════════════════════════════════
# RUTAS - /api/cadeteria
# ═══════════════════════════════════════════════════════════════════════════
# Las rutas solo traducen request → servicio → response.
# Los errores de negocio se lanzan en los servicios y los convierte a
# JSON el manejador registrado en create_app().
# ═══════════════════════════════════════════════════════════════════════════

bp = Blueprint('cadeteria', __name__, url_prefix='/api/cadeteria')


def get_container() -> AppContainer:
    """Contenedor de la app en curso."""
    return current_app.extensions['cadeteria']


def _current_user() -> str:
    return (request.headers.get('X-Usuario') or 'api').strip() or 'api'


def _query_int(name: str) -> int:
    """
    Lee un parámetro entero obligatorio de la query string.

    Raises:
        ValidationError: Si falta o no es un entero
    """
    raw = request.args.get(name)
    if raw is None or not raw.strip():
        raise ValidationError(f"Falta el parámetro '{name}'.")
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"El parámetro '{name}' debe ser un número entero.")


def _json_body():
    return request.get_json(silent=True)


# ---------------------------------------------------------------------------
# Pedidos
# ---------------------------------------------------------------------------

@bp.route('/pedidos', methods=['GET'])
def get_pedidos():
    pedidos = get_container().order_service.list_orders()
    return jsonify([p.to_dict() for p in pedidos])


@bp.route('/pedidos/<int:numero>', methods=['GET'])
def get_pedido(numero):
    pedido = get_container().order_service.get_order(numero)
    return jsonify(pedido.to_dict())


@bp.route('/pedidos', methods=['POST'])
def agregar_pedido():
    pedido = get_container().order_service.create_order(_json_body(), user=_current_user())
    response = jsonify({'ok': True, 'pedido': pedido.to_dict()})
    response.status_code = 201
    response.headers['Location'] = f"{bp.url_prefix}/pedidos/{pedido.numero}"
    return response


@bp.route('/asignar', methods=['PUT'])
def asignar_pedido():
    numero = _query_int('idPedido')
    id_cadete = _query_int('idCadete')
    pedido = get_container().order_service.assign_courier(numero, id_cadete, user=_current_user())
    return jsonify({
        'ok': True,
        'message': f"Pedido {numero} asignado al cadete {id_cadete}.",
        'pedido': pedido.to_dict(),
    })


@bp.route('/cambiarEstadoPedido', methods=['PUT'])
def cambiar_estado_pedido():
    numero = _query_int('idPedido')
    nuevo_estado = request.args.get('nuevoEstado')
    if nuevo_estado is None or not nuevo_estado.strip():
        raise ValidationError("Falta el parámetro 'nuevoEstado'.")
    pedido = get_container().order_service.change_status(numero, nuevo_estado, user=_current_user())
    return jsonify({'ok': True, 'pedido': pedido.to_dict()})


@bp.route('/cambiarCadetePedido', methods=['PUT'])
def cambiar_cadete_pedido():
    numero = _query_int('idPedido')
    id_nuevo = _query_int('idNuevoCadete')
    pedido = get_container().order_service.reassign_courier(numero, id_nuevo, user=_current_user())
    return jsonify({
        'ok': True,
        'message': f"Pedido {numero} reasignado al cadete {id_nuevo}.",
        'pedido': pedido.to_dict(),
    })


@bp.route('/quitarCadete', methods=['PUT'])
def quitar_cadete():
    numero = _query_int('idPedido')
    pedido = get_container().order_service.remove_courier(numero, user=_current_user())
    return jsonify({'ok': True, 'pedido': pedido.to_dict()})


# ---------------------------------------------------------------------------
# Cadetes
# ---------------------------------------------------------------------------

@bp.route('/cadetes', methods=['GET'])
def get_cadetes():
    cadetes = get_container().courier_service.list_couriers()
    return jsonify([c.to_dict() for c in cadetes])


@bp.route('/cadetes/<int:id_cadete>', methods=['GET'])
def get_cadete(id_cadete):
    cadete = get_container().courier_service.get_courier(id_cadete)
    return jsonify(cadete.to_dict())


@bp.route('/cadetes', methods=['POST'])
def agregar_cadete():
    cadete = get_container().courier_service.add_courier(_json_body(), user=_current_user())
    response = jsonify({'ok': True, 'cadete': cadete.to_dict()})
    response.status_code = 201
    response.headers['Location'] = f"{bp.url_prefix}/cadetes/{cadete.id}"
    return response


@bp.route('/cadetes/<int:id_cadete>', methods=['DELETE'])
def eliminar_cadete(id_cadete):
    cadete = get_container().courier_service.delete_courier(id_cadete, user=_current_user())
    return jsonify({'ok': True, 'message': f"Cadete {cadete.nombre} eliminado."})


@bp.route('/cadetes/<int:id_cadete>/jornal', methods=['GET'])
def get_jornal(id_cadete):
    jornal = get_container().business_service.compute_earnings(id_cadete)
    return jsonify({'id_cadete': id_cadete, 'jornal': jornal})


# ---------------------------------------------------------------------------
# Cadetería e informe
# ---------------------------------------------------------------------------

@bp.route('/', methods=['GET'])
def get_cadeteria():
    return jsonify(get_container().business_service.get_business().to_dict())


@bp.route('/', methods=['PUT'])
def actualizar_cadeteria():
    body = _json_body()
    if not isinstance(body, dict):
        raise ValidationError("Se esperaba un objeto JSON con nombre y/o teléfono.")
    d = {str(k).lower(): v for k, v in body.items()}
    business = get_container().business_service.update_business(
        nombre=d.get('nombre'),
        telefono=d.get('telefono'),
        user=_current_user()
    )
    return jsonify({'ok': True, 'nombre': business.nombre, 'telefono': business.telefono})


@bp.route('/informe', methods=['GET'])
def get_informe():
    return jsonify(get_container().business_service.daily_report().lines())


@bp.route('/informe/detalle', methods=['GET'])
def get_informe_detalle():
    return jsonify(get_container().business_service.daily_report().to_dict())


@bp.route('/actividad', methods=['GET'])
def get_actividad():
    tipo = request.args.get('tipo')
    limit = request.args.get('limit', default=200, type=int)
    return jsonify(get_container().audit_service.get_logs(tipo, limit=max(1, limit)))


@bp.route('/rendimiento', methods=['GET'])
def get_rendimiento():
    """Llamadas, tiempo promedio y máximo (ms) de las funciones medidas."""
    return jsonify(get_function_stats())


# ═══════════════════════════════════════════════════════════════════════════
# FÁBRICA DE LA APLICACIÓN
# ═══════════════════════════════════════════════════════════════════════════

def create_app(overrides=None) -> Flask:
    """
    Crea la app Flask con su propio contenedor de dependencias.

    Args:
        overrides: Valores de configuración que reemplazan a los del
                   entorno (ej: {'data_dir': tmp_path})
    """
    settings = load_settings(overrides)

    app = Flask(__name__)
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    container = AppContainer(settings)
    app.extensions['cadeteria'] = container

    # Mide rendimiento de rutas y funciones. Logs en settings.logs_dir
    init_profiling(app, logs_dir=settings.logs_dir, enabled=settings.enable_profiling)

    if not settings.production_mode:
        container.seed_demo_data()

    app.register_blueprint(bp)

    @app.errorhandler(CadeteriaError)
    def handle_cadeteria_error(error):
        return jsonify({'ok': False, 'error': error.message}), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'ok': False, 'error': error.description}), error.code

    @app.after_request
    def set_security_headers(response):
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'
        return response

    return app


if __name__ == "__main__":
    settings = load_settings()
    app = create_app()

    if not settings.debug:
        print(f"\n{'='*50}")
        print(f"  Servidor iniciado en http://{settings.host}:{settings.port}")
        print(f"  API: http://localhost:{settings.port}/api/cadeteria/")
        print(f"  Datos: {settings.data_dir}")
        print(f"{'='*50}\n")

    app.run(debug=settings.debug, host=settings.host, port=settings.port)
