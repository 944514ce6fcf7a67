# ==============================================================================
# ERRORES DEL DOMINIO
# ==============================================================================
# Los servicios lanzan estas excepciones; las rutas no deciden códigos HTTP,
# el manejador registrado en main.py usa status_code de cada clase.
# ==============================================================================


class CadeteriaError(Exception):
    """Error base de la aplicación."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CadeteriaError):
    """Datos de entrada mal formados (ej: pedido sin cliente)."""
    status_code = 400


class DuplicateError(CadeteriaError):
    """Ya existe un pedido idéntico o un cadete con el mismo id."""
    status_code = 400


class NotFoundError(CadeteriaError):
    """Pedido o cadete inexistente."""
    status_code = 404


class InvalidTransitionError(CadeteriaError):
    """Se intentó modificar el cadete de un pedido ya entregado."""
    status_code = 400


class NoOpError(CadeteriaError):
    """El cambio pedido no modifica nada (mismo cadete)."""
    status_code = 400


class CourierInUseError(CadeteriaError):
    """El cadete tiene pedidos sin entregar y no puede eliminarse."""
    status_code = 409


class PersistenceError(CadeteriaError):
    """No se pudo escribir un archivo de datos."""
    status_code = 500
