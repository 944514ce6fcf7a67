# ==============================================================================
# SERVICIO DE LA CADETERÍA
# ==============================================================================
# Datos generales, jornal de cada cadete e informe final de la jornada.
#
# REGLA PRINCIPAL: solo los pedidos "Entregado" cuentan para el jornal.
# - Pendiente ❌
# - Asignado ❌
# - Enviado ❌
# ==============================================================================

from typing import List, Optional

from cadeteria.errors import ValidationError
from cadeteria.models import Business, Courier, CourierReportLine, DailyReport, Order, OrderStatus
from cadeteria.performance_logger import profile_function
from cadeteria.repositories.interfaces import IBusinessRepository, ICourierRepository, IOrderRepository
from cadeteria.services.audit_service import AuditService


class BusinessService:
    """
    Servicio de la cadetería.

    Responsabilidades:
    - Mantener la copia de cadetes y pedidos en cadeteria.json
    - Calcular el jornal a cobrar por cadete
    - Generar el informe de la jornada
    """

    # Monto fijo por pedido entregado
    DEFAULT_VALOR_PEDIDO = 500

    def __init__(
        self,
        business_repo: IBusinessRepository,
        courier_repo: ICourierRepository,
        order_repo: IOrderRepository,
        audit_service: AuditService = None,
        valor_pedido: int = DEFAULT_VALOR_PEDIDO
    ):
        self.business_repo = business_repo
        self.courier_repo = courier_repo
        self.order_repo = order_repo
        self.audit_service = audit_service
        self.valor_pedido = valor_pedido

    # =========================================================================
    # DATOS GENERALES
    # =========================================================================

    def get_business(self) -> Business:
        """Cadetería con cadetes y pedidos actuales (no los de la copia)."""
        business = self.business_repo.load()
        business.cadetes = self.courier_repo.load()
        business.pedidos = self.order_repo.load()
        return business

    def update_business(
        self,
        nombre: Optional[str] = None,
        telefono: Optional[str] = None,
        user: str = 'sistema'
    ) -> Business:
        """
        Cambia nombre y/o teléfono de la cadetería.

        Raises:
            ValidationError: Si no se envió ningún dato o alguno está vacío
        """
        if nombre is None and telefono is None:
            raise ValidationError("Debe indicar nombre o teléfono.")
        if nombre is not None and not str(nombre).strip():
            raise ValidationError("El nombre de la cadetería no puede estar vacío.")
        if telefono is not None and not str(telefono).strip():
            raise ValidationError("El teléfono de la cadetería no puede estar vacío.")

        with self.courier_repo.locked(), self.order_repo.locked(), self.business_repo.locked():
            business = self.get_business()
            if nombre is not None:
                business.nombre = str(nombre).strip()
            if telefono is not None:
                business.telefono = str(telefono).strip()
            self.business_repo.save(business)

        if self.audit_service:
            self.audit_service.log_business_updated(user, business.nombre, business.telefono)
        return business

    def sync_snapshot(
        self,
        cadetes: Optional[List[Courier]] = None,
        pedidos: Optional[List[Order]] = None
    ) -> Business:
        """
        Reescribe cadeteria.json con las colecciones actuales.
        Se llama después de cada cambio en cadetes o pedidos. Toma los
        locks de cadetes y pedidos antes que el de la cadetería, igual que
        quien la llama.

        Args:
            cadetes: Colección recién guardada (se carga si es None)
            pedidos: Colección recién guardada (se carga si es None)
        """
        with self.courier_repo.locked(), self.order_repo.locked(), self.business_repo.locked():
            business = self.business_repo.load()
            business.cadetes = cadetes if cadetes is not None else self.courier_repo.load()
            business.pedidos = pedidos if pedidos is not None else self.order_repo.load()
            self.business_repo.save(business)
        return business

    # =========================================================================
    # JORNAL E INFORME
    # =========================================================================

    @staticmethod
    def _delivered_count(pedidos: List[Order], id_cadete: int) -> int:
        return sum(
            1 for p in pedidos
            if p.id_cadete == id_cadete and p.estado == OrderStatus.ENTREGADO
        )

    def compute_earnings(self, id_cadete: int) -> int:
        """
        Monto a cobrar por un cadete: valor fijo por pedido entregado.
        Un cadete inexistente cobra 0 (no es un error).
        """
        if not self.courier_repo.courier_exists(id_cadete):
            return 0
        entregados = [p for p in self.order_repo.get_orders_by_courier(id_cadete) if p.is_delivered]
        return len(entregados) * self.valor_pedido

    @profile_function(name="Informe de jornada")
    def daily_report(self) -> DailyReport:
        """
        Genera el informe final de la jornada: una línea por cadete y
        los totales globales.
        """
        cadetes = self.courier_repo.load()
        pedidos = self.order_repo.load()

        lines = []
        for cadete in cadetes:
            entregados = self._delivered_count(pedidos, cadete.id)
            lines.append(CourierReportLine(
                id_cadete=cadete.id,
                nombre=cadete.nombre,
                entregados=entregados,
                monto=entregados * self.valor_pedido,
            ))

        total_envios = sum(1 for p in pedidos if p.estado == OrderStatus.ENTREGADO)
        total_ganado = sum(line.monto for line in lines)
        promedio = sum(line.entregados for line in lines) / len(lines) if lines else 0.0

        return DailyReport(
            cadetes=lines,
            total_envios=total_envios,
            total_ganado=total_ganado,
            promedio=promedio,
        )
