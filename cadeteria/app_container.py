# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Repositorios y servicios
# ==============================================================================
# Punto central para obtener repositorios y servicios. Facilita:
#   - Inyección de dependencias (las rutas reciben el contenedor de la app)
#   - Testing (cada test crea su propio contenedor sobre tmp_path)
#
# No es un singleton: create_app() crea un contenedor y lo guarda en
# app.extensions['cadeteria']. Dos apps no comparten estado en memoria.
# ==============================================================================

from typing import Optional

from cadeteria.config import Settings
from cadeteria.models import Business, Client, Courier, Order, OrderStatus
from cadeteria.repositories import (
    AuditRepository,
    BusinessRepository,
    CourierRepository,
    OrderRepository,
)
from cadeteria.services import (
    AuditService,
    BusinessService,
    CourierService,
    OrderService,
)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Uso:
        container = AppContainer(settings)
        order_service = container.order_service
    """

    def __init__(self, settings: Settings):
        """
        Args:
            settings: Configuración (data_dir, valor_pedido, ...)
        """
        self.settings = settings
        self._base_path = settings.data_dir

        # Repositorios (lazy loading)
        self._courier_repo: Optional[CourierRepository] = None
        self._order_repo: Optional[OrderRepository] = None
        self._business_repo: Optional[BusinessRepository] = None
        self._audit_repo: Optional[AuditRepository] = None

        # Servicios (lazy loading)
        self._audit_service: Optional[AuditService] = None
        self._business_service: Optional[BusinessService] = None
        self._order_service: Optional[OrderService] = None
        self._courier_service: Optional[CourierService] = None

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def courier_repo(self) -> CourierRepository:
        if self._courier_repo is None:
            self._courier_repo = CourierRepository(self._base_path)
        return self._courier_repo

    @property
    def order_repo(self) -> OrderRepository:
        if self._order_repo is None:
            self._order_repo = OrderRepository(self._base_path)
        return self._order_repo

    @property
    def business_repo(self) -> BusinessRepository:
        if self._business_repo is None:
            self._business_repo = BusinessRepository(self._base_path)
        return self._business_repo

    @property
    def audit_repo(self) -> AuditRepository:
        if self._audit_repo is None:
            self._audit_repo = AuditRepository(self._base_path)
        return self._audit_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def audit_service(self) -> AuditService:
        if self._audit_service is None:
            self._audit_service = AuditService(self.audit_repo)
        return self._audit_service

    @property
    def business_service(self) -> BusinessService:
        if self._business_service is None:
            self._business_service = BusinessService(
                self.business_repo,
                self.courier_repo,
                self.order_repo,
                self.audit_service,
                valor_pedido=self.settings.valor_pedido
            )
        return self._business_service

    @property
    def order_service(self) -> OrderService:
        if self._order_service is None:
            self._order_service = OrderService(
                self.order_repo,
                self.courier_repo,
                self.business_service,
                self.audit_service
            )
        return self._order_service

    @property
    def courier_service(self) -> CourierService:
        if self._courier_service is None:
            self._courier_service = CourierService(
                self.courier_repo,
                self.order_repo,
                self.business_service,
                self.audit_service
            )
        return self._courier_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def seed_demo_data(self) -> bool:
        """
        Carga cadetes y pedidos de ejemplo si todavía no hay archivos.
        Solo se usa fuera de PRODUCTION_MODE.

        Returns:
            True si se sembraron datos
        """
        if self.courier_repo.exists() or self.order_repo.exists():
            return False

        cadetes = [
            Courier(id=1, nombre="Juan Pérez", direccion="Calle Falsa 123", telefono="111111111"),
            Courier(id=2, nombre="María Gómez", direccion="Av. Siempre Viva 456", telefono="222222222"),
        ]
        pedidos = [
            Order(
                numero=1,
                observaciones="Dejar en portería",
                cliente=Client(nombre="Cliente 1", direccion="Calle A 123", telefono="333333333"),
                estado=OrderStatus.PENDIENTE,
            ),
            Order(
                numero=2,
                observaciones="Llamar al llegar",
                cliente=Client(nombre="Cliente 2", direccion="Calle B 456", telefono="444444444"),
                estado=OrderStatus.PENDIENTE,
            ),
        ]
        with self.courier_repo.locked(), self.order_repo.locked():
            self.courier_repo.save(cadetes)
            self.order_repo.save(pedidos)
        with self.business_repo.locked():
            self.business_repo.save(Business(
                nombre="Cadetería Express",
                telefono="123456789",
                cadetes=cadetes,
                pedidos=pedidos,
            ))
        self.audit_service.log_system(
            "Datos de ejemplo cargados",
            {'cadetes': len(cadetes), 'pedidos': len(pedidos)}
        )
        return True
