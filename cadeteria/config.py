# ==============================================================================
# CONFIGURACIÓN
# ==============================================================================
# Todo se lee de variables de entorno con valores por defecto razonables.
#
#   CADETERIA_DATA_DIR         Carpeta de los JSON (default: <paquete>/Data)
#   CADETERIA_LOGS_DIR         Carpeta de logs de rendimiento (default: <paquete>/logs)
#   CADETERIA_PRODUCTION_MODE  "0" carga datos de ejemplo si no hay archivos
#   CADETERIA_VALOR_PEDIDO     Monto por pedido entregado (default: 500)
#   ENABLE_PROFILING           "0" desactiva el profiling de rutas
#   FLASK_HOST / FLASK_PORT / FLASK_DEBUG
# ==============================================================================

import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

BASE = os.path.dirname(os.path.abspath(__file__))

_TRUE_VALUES = ('1', 'true', 'yes', 'si', 'sí', 'on')


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"La variable {name} debe ser un entero (valor: {value!r})")


@dataclass(frozen=True)
class Settings:
    """
    Configuración de la aplicación.

    Attributes:
        data_dir: Carpeta donde viven cadetes.json, pedidos.json, cadeteria.json
        logs_dir: Carpeta de logs de rendimiento
        production_mode: False = siembra datos de ejemplo en el primer arranque
        valor_pedido: Monto fijo que cobra un cadete por pedido entregado
        enable_profiling: Mide tiempos de rutas y funciones
        host, port, debug: Servidor de desarrollo
    """
    data_dir: str = os.path.join(BASE, 'Data')
    logs_dir: str = os.path.join(BASE, 'logs')
    production_mode: bool = True
    valor_pedido: int = 500
    enable_profiling: bool = True
    host: str = '0.0.0.0'
    port: int = 5000
    debug: bool = False


def load_settings(overrides: Optional[Dict[str, Any]] = None) -> Settings:
    """
    Lee la configuración del entorno y aplica overrides (útil en tests).

    Args:
        overrides: Valores que reemplazan a los del entorno, por nombre de campo

    Raises:
        ValueError: Variable numérica inválida u override desconocido
    """
    defaults = Settings()
    settings = Settings(
        data_dir=os.environ.get('CADETERIA_DATA_DIR') or defaults.data_dir,
        logs_dir=os.environ.get('CADETERIA_LOGS_DIR') or defaults.logs_dir,
        production_mode=_env_bool('CADETERIA_PRODUCTION_MODE', defaults.production_mode),
        valor_pedido=_env_int('CADETERIA_VALOR_PEDIDO', defaults.valor_pedido),
        enable_profiling=_env_bool('ENABLE_PROFILING', defaults.enable_profiling),
        host=os.environ.get('FLASK_HOST') or defaults.host,
        port=_env_int('FLASK_PORT', defaults.port),
        debug=_env_bool('FLASK_DEBUG', defaults.debug),
    )
    if overrides:
        known = {f.name for f in fields(Settings)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Opciones de configuración desconocidas: {', '.join(sorted(unknown))}")
        settings = replace(settings, **overrides)
    return settings
