# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Mide rendimiento de rutas y funciones sin afectar las respuestas.
# Guarda logs legibles en el directorio de logs para análisis humano.
#
# ACTIVAR/DESACTIVAR: init_profiling(app, enabled=...) guarda la opción en la
# config de cada app. ENABLE_PROFILING y LOGS_DIR solo se usan fuera de un
# contexto de app (ej: un servicio llamado desde un script o un test).
# ==============================================================================

import os
import time
import threading
from datetime import datetime
from functools import wraps
from collections import defaultdict

from flask import current_app, g, has_app_context, request

# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════

ENABLE_PROFILING = True

# Umbrales de tiempo (en milisegundos)
THRESHOLD_WARNING = 300
THRESHOLD_CRITICAL = 700

# Directorio de logs por defecto
LOGS_DIR = os.path.join(os.path.dirname(__file__), 'logs')

PERFORMANCE_LOG_NAME = 'performance.log'
SLOW_ROUTES_LOG_NAME = 'slow_routes.log'
SLOW_FUNCTIONS_LOG_NAME = 'slow_functions.log'

# Claves en app.config
CONFIG_ENABLED = 'PROFILING_ENABLED'
CONFIG_LOGS_DIR = 'PROFILING_LOGS_DIR'

# Mapeo de rutas a nombres legibles
ROUTE_NAMES = {
    # Pedidos
    'GET /api/cadeteria/pedidos': 'Listar pedidos',
    'GET /api/cadeteria/pedidos/<int:numero>': 'Ver pedido',
    'POST /api/cadeteria/pedidos': 'Alta de pedido',
    'PUT /api/cadeteria/asignar': 'Asignar cadete',
    'PUT /api/cadeteria/cambiarEstadoPedido': 'Cambiar estado de pedido',
    'PUT /api/cadeteria/cambiarCadetePedido': 'Cambiar cadete de pedido',
    'PUT /api/cadeteria/quitarCadete': 'Quitar cadete de pedido',

    # Cadetes
    'GET /api/cadeteria/cadetes': 'Listar cadetes',
    'GET /api/cadeteria/cadetes/<int:id_cadete>': 'Ver cadete',
    'POST /api/cadeteria/cadetes': 'Alta de cadete',
    'DELETE /api/cadeteria/cadetes/<int:id_cadete>': 'Baja de cadete',
    'GET /api/cadeteria/cadetes/<int:id_cadete>/jornal': 'Jornal de cadete',

    # Cadetería
    'GET /api/cadeteria/': 'Ver cadetería',
    'PUT /api/cadeteria/': 'Actualizar cadetería',
    'GET /api/cadeteria/informe': 'Informe de jornada',
    'GET /api/cadeteria/informe/detalle': 'Informe de jornada (detalle)',
    'GET /api/cadeteria/actividad': 'Ver actividad',
    'GET /api/cadeteria/rendimiento': 'Ver rendimiento',
}


def _settings():
    """(habilitado, carpeta de logs) de la app en curso, o los del módulo."""
    if has_app_context():
        config = current_app.config
        return config.get(CONFIG_ENABLED, ENABLE_PROFILING), config.get(CONFIG_LOGS_DIR, LOGS_DIR)
    return ENABLE_PROFILING, LOGS_DIR


# ═══════════════════════════════════════════════════════════════════════════
# ESTADÍSTICAS DE FUNCIONES (en memoria, por proceso)
# ═══════════════════════════════════════════════════════════════════════════

# Estructura: {nombre_funcion: {calls: int, total_time: float, max_time: float}}
_function_stats = defaultdict(lambda: {'calls': 0, 'total_time': 0.0, 'max_time': 0.0})
_stats_lock = threading.Lock()
_write_lock = threading.Lock()


# ═══════════════════════════════════════════════════════════════════════════
# FUNCIONES DE LOGGING
# ═══════════════════════════════════════════════════════════════════════════

def _get_timestamp():
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def _write_log(filepath, content):
    """Escribe contenido a un archivo de log (thread-safe)"""
    try:
        with _write_lock:
            os.makedirs(os.path.dirname(filepath), exist_ok=True)
            with open(filepath, 'a', encoding='utf-8') as f:
                f.write(content)
    except OSError:
        pass  # Un log que no se puede escribir no debe romper la respuesta


def _get_route_name(method, path, rule=None):
    """
    Obtiene nombre legible para una ruta.
    Usa la regla de Flask si existe, si no, la ruta tal cual.
    """
    for candidate in (path, rule):
        if candidate and f"{method} {candidate}" in ROUTE_NAMES:
            return ROUTE_NAMES[f"{method} {candidate}"]
    return f"{method} {path}"


# ═══════════════════════════════════════════════════════════════════════════
# 1️⃣ PROFILING DE RUTAS
# ═══════════════════════════════════════════════════════════════════════════

def log_route_performance(logs_dir, method, path, rule, time_ms, status, user=None):
    """
    Registra el rendimiento de una ruta en performance.log

    Args:
        logs_dir: Carpeta de logs de la app
        method: GET, POST, etc.
        path: Ruta solicitada (/api/cadeteria/asignar)
        rule: Regla de Flask
        time_ms: Tiempo en milisegundos
        status: Código HTTP de la respuesta
        user: Quién hizo la petición (opcional)
    """
    log_entry = f"""
════════════════════════════════════════
[PERFORMANCE] {_get_timestamp()}
────────────────────────────────────────
Acción: {_get_route_name(method, path, rule)}
Usuario: {user or 'anónimo'}
Ruta: {method} {path}
Estado: {status}
Tiempo: {time_ms:.0f} ms
"""
    _write_log(os.path.join(logs_dir, PERFORMANCE_LOG_NAME), log_entry)


def log_slow_route(logs_dir, method, path, rule, time_ms, user=None, level='WARNING'):
    """
    Registra una ruta lenta en slow_routes.log

    Args:
        level: 'WARNING' (>300ms) o 'CRITICAL' (>700ms)
    """
    severity = 'LENTA' if level == 'WARNING' else 'MUY LENTA'
    threshold = THRESHOLD_WARNING if level == 'WARNING' else THRESHOLD_CRITICAL

    log_entry = f"""
[{level}] {_get_timestamp()}
────────────────────────────────────────
Ruta {severity}: {_get_route_name(method, path, rule)}
Usuario: {user or 'anónimo'}
Detalle: {method} {path}
Tiempo: {time_ms:.0f} ms (umbral: {threshold} ms)
────────────────────────────────────────
"""
    _write_log(os.path.join(logs_dir, SLOW_ROUTES_LOG_NAME), log_entry)


# ═══════════════════════════════════════════════════════════════════════════
# 2️⃣ HOOKS PARA FLASK (before/after request)
# ═══════════════════════════════════════════════════════════════════════════

def init_profiling(app, logs_dir=None, enabled=True):
    """
    Inicializa el profiling en una app Flask.
    Guarda la opción y la carpeta en app.config y registra los hooks
    before_request y after_request. No afecta a otras apps del proceso.

    Uso:
        init_profiling(app, logs_dir=settings.logs_dir)
    """
    app.config[CONFIG_ENABLED] = enabled
    app.config[CONFIG_LOGS_DIR] = logs_dir or LOGS_DIR
    if not enabled:
        return

    @app.before_request
    def _start_timer():
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        if not hasattr(g, 'start_time'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000  # ms
        app_logs_dir = app.config[CONFIG_LOGS_DIR]
        method = request.method
        path = request.path
        rule = str(request.url_rule) if request.url_rule else path
        user = request.headers.get('X-Usuario')

        log_route_performance(app_logs_dir, method, path, rule, elapsed, response.status_code, user)

        if elapsed >= THRESHOLD_CRITICAL:
            log_slow_route(app_logs_dir, method, path, rule, elapsed, user, 'CRITICAL')
        elif elapsed >= THRESHOLD_WARNING:
            log_slow_route(app_logs_dir, method, path, rule, elapsed, user, 'WARNING')

        return response


# ═══════════════════════════════════════════════════════════════════════════
# 3️⃣ DECORADOR PARA FUNCIONES CLAVE
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None):
    """
    Decorador para medir rendimiento de funciones críticas.

    Uso:
        @profile_function
        def mi_funcion():
            ...

        @profile_function(name="Informe de jornada")
        def daily_report():
            ...

    Registra cantidad de llamadas, tiempo promedio y tiempo máximo.
    """
    def decorator(fn):
        func_name = name or fn.__name__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            enabled, logs_dir = _settings()
            if not enabled:
                return fn(*args, **kwargs)
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000

                with _stats_lock:
                    stats = _function_stats[func_name]
                    stats['calls'] += 1
                    stats['total_time'] += elapsed_ms
                    if elapsed_ms > stats['max_time']:
                        stats['max_time'] = elapsed_ms

                if elapsed_ms >= THRESHOLD_WARNING:
                    _log_slow_function_call(logs_dir, func_name, elapsed_ms)

        return wrapper

    # Permitir uso sin paréntesis: @profile_function
    if func is not None:
        return decorator(func)
    return decorator


def _log_slow_function_call(logs_dir, func_name, time_ms):
    """Registra una llamada lenta a una función"""
    severity = 'CRÍTICO' if time_ms >= THRESHOLD_CRITICAL else 'LENTO'

    log_entry = f"""
[{severity}] {_get_timestamp()}
Función: {func_name}
Tiempo: {time_ms:.0f} ms
────────────────────────────────────────
"""
    _write_log(os.path.join(logs_dir, SLOW_FUNCTIONS_LOG_NAME), log_entry)


# ═══════════════════════════════════════════════════════════════════════════
# 4️⃣ REPORTE DE ESTADÍSTICAS
# ═══════════════════════════════════════════════════════════════════════════

def get_function_stats():
    """
    Obtiene estadísticas de todas las funciones perfiladas.

    Returns:
        dict: {nombre: {calls, avg_time, max_time}}
    """
    with _stats_lock:
        result = {}
        for func_name, stats in _function_stats.items():
            calls = stats['calls']
            avg = stats['total_time'] / calls if calls > 0 else 0
            result[func_name] = {
                'calls': calls,
                'avg_time': round(avg, 2),
                'max_time': round(stats['max_time'], 2)
            }
        return result


def reset_stats():
    """Reinicia todas las estadísticas (útil para testing)"""
    with _stats_lock:
        _function_stats.clear()


__all__ = [
    'ENABLE_PROFILING',
    'init_profiling',
    'profile_function',
    'get_function_stats',
    'reset_stats',
]
