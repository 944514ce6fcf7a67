# ==============================================================================
# REPOSITORIO DE ACTIVIDAD
# ==============================================================================
# Encapsula todo el acceso a actividad.json
# La actividad se almacena como lista, más reciente primero.
# ==============================================================================

import os
from datetime import datetime
from typing import Any, Dict, List

from cadeteria.repositories.base import ListRepository


class AuditRepository(ListRepository):
    """
    Repositorio del registro de actividad.

    Formato de datos en actividad.json:
    [
        {
            "type": "PEDIDO",
            "user": "api",
            "message": "Pedido #3 creado para Cliente 1",
            "timestamp": "2024-01-01 10:00:00",
            "related_id": "3",
            "details": {...}
        }
    ]
    """

    FILE_NAME = 'actividad.json'

    # Límite de registros para evitar archivos muy grandes
    MAX_LOGS = 5000

    def __init__(self, base_path: str):
        super().__init__(os.path.join(base_path, self.FILE_NAME))

    def load(self) -> List[Dict[str, Any]]:
        return self.get_all()

    def save(self, logs: List[Dict[str, Any]]) -> None:
        """Guarda los logs conservando solo los MAX_LOGS más recientes."""
        self.save_all(logs[:self.MAX_LOGS])

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str = '',
        details: Dict[str, Any] = None
    ) -> Dict[str, Any]:
        """
        Registra un nuevo evento de actividad.

        Args:
            log_type: Tipo de evento (PEDIDO, CADETE, CADETERIA, SISTEMA)
            user: Usuario que realizó la acción
            message: Mensaje descriptivo
            related_id: Número de pedido o id de cadete relacionado
            details: Detalles adicionales

        Returns:
            El registro guardado
        """
        log_entry = {
            'type': log_type,
            'user': user or 'sistema',
            'message': message,
            'timestamp': datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            'related_id': str(related_id) if related_id is not None else '',
            'details': details or {}
        }
        with self.locked():
            logs = self.get_all()
            logs.insert(0, log_entry)
            self.save(logs)
        return log_entry

    def get_logs_by_type(self, log_type: str) -> List[Dict[str, Any]]:
        return [log for log in self.load() if log.get('type') == log_type]
