# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Contratos que deben cumplir los repositorios. Los servicios dependen de
# estas interfaces y no de los archivos JSON:
#
# 1. INDEPENDENCIA DE ALMACENAMIENTO
#    - Cambiar JSON por una base embebida solo requiere otra implementación
#
# 2. TESTING
#    - Fácil crear dobles que implementen estas interfaces
#
# ==============================================================================

from typing import Any, ContextManager, Dict, List, Optional, Protocol, runtime_checkable

from cadeteria.models import Business, Courier, Order


@runtime_checkable
class ILockable(Protocol):
    """Toda colección expone su lock para el ciclo leer-modificar-guardar."""

    def locked(self) -> ContextManager[Any]:
        ...


@runtime_checkable
class ICourierRepository(ILockable, Protocol):

    def load(self) -> List[Courier]:
        """Carga todos los cadetes."""
        ...

    def save(self, cadetes: List[Courier]) -> None:
        """Guarda todos los cadetes."""
        ...

    def get_courier(self, id_cadete: int) -> Optional[Courier]:
        ...

    def courier_exists(self, id_cadete: int) -> bool:
        ...

    def get_next_id(self) -> int:
        ...


@runtime_checkable
class IOrderRepository(ILockable, Protocol):

    def load(self) -> List[Order]:
        """Carga todos los pedidos."""
        ...

    def save(self, pedidos: List[Order]) -> None:
        """Guarda todos los pedidos."""
        ...

    def get_order(self, numero: int) -> Optional[Order]:
        ...

    def get_next_number(self) -> int:
        ...

    def get_orders_by_courier(self, id_cadete: int) -> List[Order]:
        """Pedidos que referencian al cadete, en cualquier estado."""
        ...


@runtime_checkable
class IBusinessRepository(ILockable, Protocol):

    def load(self) -> Business:
        ...

    def save(self, business: Business) -> None:
        ...


@runtime_checkable
class IAuditRepository(Protocol):

    def load(self) -> List[Dict[str, Any]]:
        ...

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str,
        details: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Registra un evento de actividad."""
        ...

    def get_logs_by_type(self, log_type: str) -> List[Dict[str, Any]]:
        ...
