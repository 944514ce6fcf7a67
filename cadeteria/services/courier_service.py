# ==============================================================================
# SERVICIO DE CADETES
# ==============================================================================
# Alta, consulta y baja de cadetes.
#
# REGLA DE BAJA: un cadete con pedidos sin entregar NO puede eliminarse.
# Los pedidos ya entregados conservan el id como referencia histórica.
# ==============================================================================

from typing import Any, Dict, List

from cadeteria.errors import CourierInUseError, DuplicateError, NotFoundError, ValidationError
from cadeteria.models import Courier
from cadeteria.models.entities import as_int
from cadeteria.repositories.interfaces import ICourierRepository, IOrderRepository
from cadeteria.services.audit_service import AuditService
from cadeteria.services.business_service import BusinessService


class CourierService:
    """
    Servicio para gestión de cadetes.
    """

    def __init__(
        self,
        courier_repo: ICourierRepository,
        order_repo: IOrderRepository,
        business_service: BusinessService = None,
        audit_service: AuditService = None
    ):
        self.courier_repo = courier_repo
        self.order_repo = order_repo
        self.business_service = business_service
        self.audit_service = audit_service

    def list_couriers(self) -> List[Courier]:
        return self.courier_repo.load()

    def get_courier(self, id_cadete: int) -> Courier:
        """
        Raises:
            NotFoundError: Si no existe el cadete
        """
        cadete = self.courier_repo.get_courier(id_cadete)
        if cadete is None:
            raise NotFoundError(f"No se encontró un cadete con ID {id_cadete}.")
        return cadete

    def _persist(self, cadetes: List[Courier]) -> None:
        self.courier_repo.save(cadetes)
        if self.business_service:
            self.business_service.sync_snapshot(cadetes=cadetes)

    def add_courier(self, data: Dict[str, Any], user: str = 'sistema') -> Courier:
        """
        Da de alta un cadete.

        Args:
            data: {"id": opcional, "nombre": ..., "direccion": ..., "telefono": ...}
                  Sin id se usa max + 1.

        Raises:
            ValidationError: Datos nulos, sin nombre o id no numérico
            DuplicateError: Ya existe un cadete con ese id
        """
        if not isinstance(data, dict):
            raise ValidationError("El cadete no puede ser nulo.")
        d = {str(k).lower(): v for k, v in data.items()}
        nombre = d.get('nombre')
        if not isinstance(nombre, str) or not nombre.strip():
            raise ValidationError("El nombre del cadete es obligatorio.")

        id_cadete = None
        if d.get('id') is not None:
            id_cadete = as_int(d.get('id'))
            if id_cadete is None or id_cadete <= 0:
                raise ValidationError("El id del cadete debe ser un entero positivo.")

        with self.courier_repo.locked():
            cadetes = self.courier_repo.load()
            if id_cadete is None:
                id_cadete = max((c.id for c in cadetes), default=0) + 1
            elif any(c.id == id_cadete for c in cadetes):
                raise DuplicateError(f"Ya existe un cadete con ID {id_cadete}.")

            nuevo = Courier(
                id=id_cadete,
                nombre=nombre.strip(),
                direccion=str(d.get('direccion') or ''),
                telefono=str(d.get('telefono') or ''),
            )
            cadetes.append(nuevo)
            self._persist(cadetes)

        if self.audit_service:
            self.audit_service.log_courier_added(user, nuevo.id, nuevo.nombre)
        return nuevo

    def delete_courier(self, id_cadete: int, user: str = 'sistema') -> Courier:
        """
        Da de baja un cadete.

        Raises:
            NotFoundError: Cadete inexistente
            CourierInUseError: Tiene pedidos asignados sin entregar
        """
        with self.courier_repo.locked(), self.order_repo.locked():
            cadetes = self.courier_repo.load()
            cadete = next((c for c in cadetes if c.id == id_cadete), None)
            if cadete is None:
                raise NotFoundError(f"No se encontró un cadete con ID {id_cadete}.")

            pendientes = [
                p.numero for p in self.order_repo.get_orders_by_courier(id_cadete)
                if not p.is_delivered
            ]
            if pendientes:
                numeros = ', '.join(f"#{n}" for n in pendientes)
                raise CourierInUseError(
                    f"El cadete {cadete.nombre} tiene pedidos sin entregar: {numeros}."
                )

            cadetes.remove(cadete)
            self._persist(cadetes)

        if self.audit_service:
            self.audit_service.log_courier_deleted(user, cadete.id, cadete.nombre)
        return cadete
