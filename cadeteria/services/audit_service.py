# ==============================================================================
# SERVICIO DE ACTIVIDAD
# ==============================================================================
# Centraliza el registro de lo que pasa en la cadetería.
# Formatea mensajes legibles y categoriza eventos.
# ==============================================================================

from typing import Any, Dict, List, Optional

from cadeteria.models import AuditType
from cadeteria.repositories.interfaces import IAuditRepository


class AuditService:
    """
    Servicio para registro y consulta de actividad.

    Toda mutación exitosa de pedidos, cadetes o cadetería deja un registro.
    """

    def __init__(self, audit_repo: IAuditRepository):
        self.audit_repo = audit_repo

    # =========================================================================
    # REGISTRO DE EVENTOS
    # =========================================================================

    def log(
        self,
        log_type: AuditType,
        user: str,
        message: str,
        related_id: Any = '',
        details: Dict[str, Any] = None
    ) -> None:
        """
        Registra un evento genérico.

        Args:
            log_type: Tipo de evento
            user: Quién realizó la acción
            message: Mensaje descriptivo
            related_id: Número de pedido o id de cadete
            details: Detalles adicionales
        """
        self.audit_repo.log(log_type.value, user, message, related_id, details)

    def log_order_created(self, user: str, numero: int, cliente: str) -> None:
        message = f"Pedido #{numero} creado para {cliente} por {user}"
        self.log(AuditType.PEDIDO, user, message, numero, {'cliente': cliente})

    def log_courier_assigned(self, user: str, numero: int, id_cadete: int, nombre: str) -> None:
        message = f"Pedido #{numero} asignado a {nombre} (ID {id_cadete}) por {user}"
        self.log(AuditType.PEDIDO, user, message, numero, {'id_cadete': id_cadete})

    def log_courier_reassigned(
        self,
        user: str,
        numero: int,
        old_id: Optional[int],
        new_id: int
    ) -> None:
        anterior = f"ID {old_id}" if old_id is not None else "sin cadete"
        message = f"Pedido #{numero}: cadete {anterior} → ID {new_id} por {user}"
        self.log(AuditType.PEDIDO, user, message, numero, {'from': old_id, 'to': new_id})

    def log_courier_removed(self, user: str, numero: int, old_id: Optional[int]) -> None:
        message = f"Pedido #{numero}: se quitó el cadete (ID {old_id}) por {user}"
        self.log(AuditType.PEDIDO, user, message, numero, {'from': old_id})

    def log_status_change(self, user: str, numero: int, old_status: str, new_status: str) -> None:
        message = f"Pedido #{numero}: {old_status} → {new_status} por {user}"
        self.log(AuditType.PEDIDO, user, message, numero, {'from': old_status, 'to': new_status})

    def log_courier_added(self, user: str, id_cadete: int, nombre: str) -> None:
        message = f"Cadete {nombre} (ID {id_cadete}) dado de alta por {user}"
        self.log(AuditType.CADETE, user, message, id_cadete)

    def log_courier_deleted(self, user: str, id_cadete: int, nombre: str) -> None:
        message = f"Cadete {nombre} (ID {id_cadete}) dado de baja por {user}"
        self.log(AuditType.CADETE, user, message, id_cadete)

    def log_business_updated(self, user: str, nombre: str, telefono: str) -> None:
        message = f"Datos de la cadetería actualizados: {nombre} / {telefono} por {user}"
        self.log(AuditType.CADETERIA, user, message, '', {'nombre': nombre, 'telefono': telefono})

    def log_system(self, message: str, details: Dict[str, Any] = None) -> None:
        self.log(AuditType.SISTEMA, 'sistema', message, '', details)

    # =========================================================================
    # CONSULTA
    # =========================================================================

    def get_logs(self, log_type: Optional[str] = None, limit: int = 200) -> List[Dict[str, Any]]:
        """
        Obtiene la actividad más reciente.

        Args:
            log_type: Filtrar por tipo (PEDIDO, CADETE, ...)
            limit: Máximo de registros devueltos
        """
        if log_type:
            logs = self.audit_repo.get_logs_by_type(log_type.upper())
        else:
            logs = self.audit_repo.load()
        return logs[:limit]
