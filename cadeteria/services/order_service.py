# ==============================================================================
# SERVICIO DE PEDIDOS
# ==============================================================================
# Ciclo de vida del pedido y asignación de cadetes.
#
#   Pendiente → Asignado → Enviado → Entregado
#
# REGLA CRÍTICA: un pedido Entregado no puede recibir, cambiar ni perder
# su cadete. El cambio de estado manual no tiene otras restricciones.
#
# Cada operación hace leer-modificar-guardar de la colección completa
# dentro de los locks, tomados siempre en el orden cadetes, pedidos,
# cadetería.
# ==============================================================================

from typing import Any, Dict, List

from cadeteria.errors import (
    DuplicateError,
    InvalidTransitionError,
    NoOpError,
    NotFoundError,
    ValidationError,
)
from cadeteria.models import Client, Courier, Order, OrderStatus
from cadeteria.performance_logger import profile_function
from cadeteria.repositories.interfaces import ICourierRepository, IOrderRepository
from cadeteria.services.audit_service import AuditService
from cadeteria.services.business_service import BusinessService


class OrderService:
    """
    Servicio para gestión de pedidos.

    Responsabilidades:
    - Alta de pedidos (con detección de duplicados)
    - Asignar, cambiar y quitar cadetes
    - Cambiar el estado
    - Mantener sincronizada la copia de la cadetería
    """

    def __init__(
        self,
        order_repo: IOrderRepository,
        courier_repo: ICourierRepository,
        business_service: BusinessService = None,
        audit_service: AuditService = None
    ):
        self.order_repo = order_repo
        self.courier_repo = courier_repo
        self.business_service = business_service
        self.audit_service = audit_service

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def list_orders(self) -> List[Order]:
        return self.order_repo.load()

    def get_order(self, numero: int) -> Order:
        """
        Raises:
            NotFoundError: Si no existe el pedido
        """
        pedido = self.order_repo.get_order(numero)
        if pedido is None:
            raise NotFoundError(f"No se encontró un pedido con número {numero}.")
        return pedido

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _find(pedidos: List[Order], numero: int) -> Order:
        pedido = next((p for p in pedidos if p.numero == numero), None)
        if pedido is None:
            raise NotFoundError(f"No se encontró un pedido con número {numero}.")
        return pedido

    def _find_courier(self, id_cadete: int) -> Courier:
        cadete = self.courier_repo.get_courier(id_cadete)
        if cadete is None:
            raise NotFoundError(f"No se encontró un cadete con ID {id_cadete}.")
        return cadete

    def _persist(self, pedidos: List[Order]) -> None:
        self.order_repo.save(pedidos)
        if self.business_service:
            self.business_service.sync_snapshot(pedidos=pedidos)

    # =========================================================================
    # ALTA
    # =========================================================================

    @profile_function(name="Alta de pedido")
    def create_order(self, data: Dict[str, Any], user: str = 'sistema') -> Order:
        """
        Da de alta un pedido nuevo.

        Número, estado y cadete que vengan en los datos se ignoran:
        el pedido nace Pendiente, sin cadete y con número max + 1.

        Args:
            data: {"observaciones": ..., "cliente": {...}}
            user: Quién crea el pedido

        Raises:
            ValidationError: Si el pedido o el cliente son nulos
            DuplicateError: Si ya existe un pedido idéntico
        """
        if not isinstance(data, dict):
            raise ValidationError("El pedido o el cliente no pueden ser nulos.")
        d = {str(k).lower(): v for k, v in data.items()}
        if not isinstance(d.get('cliente'), dict):
            raise ValidationError("El pedido o el cliente no pueden ser nulos.")
        observaciones = d.get('observaciones')
        if observaciones is not None and not isinstance(observaciones, str):
            raise ValidationError("Las observaciones deben ser texto.")

        with self.courier_repo.locked(), self.order_repo.locked():
            pedidos = self.order_repo.load()
            nuevo = Order(
                numero=max((p.numero for p in pedidos), default=0) + 1,
                observaciones=observaciones or '',
                cliente=Client.from_dict(d['cliente']),
                id_cadete=None,
                estado=OrderStatus.PENDIENTE,
            )
            if any(p.is_duplicate_of(nuevo) for p in pedidos):
                raise DuplicateError("Ya existe un pedido idéntico.")

            pedidos.append(nuevo)
            self._persist(pedidos)

        if self.audit_service:
            self.audit_service.log_order_created(user, nuevo.numero, nuevo.cliente.nombre)
        return nuevo

    # =========================================================================
    # CADETE DEL PEDIDO
    # =========================================================================

    def assign_courier(self, numero: int, id_cadete: int, user: str = 'sistema') -> Order:
        """
        Asigna un cadete a un pedido y lo pasa a Asignado.

        El estado Entregado se verifica antes que el cadete: un pedido
        entregado falla siempre, sea válido o no el cadete.

        Raises:
            NotFoundError: Pedido o cadete inexistente
            InvalidTransitionError: El pedido ya fue entregado
        """
        with self.courier_repo.locked(), self.order_repo.locked():
            pedidos = self.order_repo.load()
            pedido = self._find(pedidos, numero)
            if pedido.is_delivered:
                raise InvalidTransitionError("No se puede asignar un pedido que ya fue entregado.")
            cadete = self._find_courier(id_cadete)

            pedido.assign_courier(cadete.id)
            pedido.change_status(OrderStatus.ASIGNADO)
            self._persist(pedidos)

        if self.audit_service:
            self.audit_service.log_courier_assigned(user, numero, cadete.id, cadete.nombre)
        return pedido

    def reassign_courier(self, numero: int, id_nuevo_cadete: int, user: str = 'sistema') -> Order:
        """
        Cambia el cadete de un pedido. El estado no se modifica.

        Raises:
            NotFoundError: Pedido o cadete inexistente
            InvalidTransitionError: El pedido ya fue entregado
            NoOpError: El pedido ya tiene asignado ese cadete
        """
        with self.courier_repo.locked(), self.order_repo.locked():
            pedidos = self.order_repo.load()
            pedido = self._find(pedidos, numero)
            if pedido.is_delivered:
                raise InvalidTransitionError("No se puede cambiar el cadete de un pedido ya entregado.")
            cadete = self._find_courier(id_nuevo_cadete)
            if pedido.id_cadete == cadete.id:
                raise NoOpError("El pedido ya tiene asignado ese cadete.")

            anterior = pedido.id_cadete
            pedido.assign_courier(cadete.id)
            self._persist(pedidos)

        if self.audit_service:
            self.audit_service.log_courier_reassigned(user, numero, anterior, cadete.id)
        return pedido

    def remove_courier(self, numero: int, user: str = 'sistema') -> Order:
        """
        Quita el cadete de un pedido. Un pedido Asignado vuelve a Pendiente.

        Raises:
            NotFoundError: Pedido inexistente
            InvalidTransitionError: El pedido ya fue entregado
            NoOpError: El pedido no tiene cadete
        """
        with self.courier_repo.locked(), self.order_repo.locked():
            pedidos = self.order_repo.load()
            pedido = self._find(pedidos, numero)
            if pedido.is_delivered:
                raise InvalidTransitionError("No se puede quitar el cadete de un pedido ya entregado.")
            if pedido.id_cadete is None:
                raise NoOpError("El pedido no tiene cadete asignado.")

            anterior = pedido.id_cadete
            pedido.remove_courier()
            if pedido.estado == OrderStatus.ASIGNADO:
                pedido.change_status(OrderStatus.PENDIENTE)
            self._persist(pedidos)

        if self.audit_service:
            self.audit_service.log_courier_removed(user, numero, anterior)
        return pedido

    # =========================================================================
    # ESTADO
    # =========================================================================

    def change_status(self, numero: int, nuevo_estado: Any, user: str = 'sistema') -> Order:
        """
        Cambia el estado de un pedido.

        No se valida la transición: cualquier estado puede pasar a cualquier
        otro. Cada cambio queda registrado con estado anterior y nuevo.

        Args:
            numero: Número de pedido
            nuevo_estado: OrderStatus, nombre ("Entregado") u ordinal (0-3)

        Raises:
            NotFoundError: Pedido inexistente
            ValidationError: Estado inválido
        """
        try:
            estado = OrderStatus.parse(nuevo_estado)
        except ValueError:
            valid = ', '.join(s.value for s in OrderStatus)
            raise ValidationError(f"Estado inválido: '{nuevo_estado}'. Valores posibles: {valid}.")

        with self.courier_repo.locked(), self.order_repo.locked():
            pedidos = self.order_repo.load()
            pedido = self._find(pedidos, numero)
            anterior = pedido.estado
            pedido.change_status(estado)
            self._persist(pedidos)

        if self.audit_service:
            self.audit_service.log_status_change(user, numero, anterior.value, estado.value)
        return pedido
