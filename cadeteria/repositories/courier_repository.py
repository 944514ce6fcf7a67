# ==============================================================================
# REPOSITORIO DE CADETES
# ==============================================================================
# Encapsula todo el acceso a cadetes.json
# Los cadetes se almacenan como lista: [{cadete1}, {cadete2}, ...]
# ==============================================================================

import os
from typing import List, Optional

from cadeteria.models import Courier
from cadeteria.repositories.base import ListRepository


class CourierRepository(ListRepository):
    """
    Repositorio para gestión de cadetes.

    Formato de datos en cadetes.json:
    [
        {"id": 1, "nombre": "Juan Pérez", "direccion": "...", "telefono": "..."}
    ]
    """

    FILE_NAME = 'cadetes.json'

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Directorio de datos
        """
        super().__init__(os.path.join(base_path, self.FILE_NAME))

    def load(self) -> List[Courier]:
        """Carga todos los cadetes (lista vacía si no hay archivo)."""
        return [Courier.from_dict(r) for r in self.get_all()]

    def save(self, cadetes: List[Courier]) -> None:
        """Guarda la colección completa de cadetes."""
        self.save_all([c.to_dict() for c in cadetes])

    def get_courier(self, id_cadete: int) -> Optional[Courier]:
        """Busca un cadete por id."""
        return next((c for c in self.load() if c.id == id_cadete), None)

    def courier_exists(self, id_cadete: int) -> bool:
        return self.get_courier(id_cadete) is not None

    def get_next_id(self) -> int:
        """Siguiente id disponible: max + 1, empezando en 1."""
        return max((c.id for c in self.load()), default=0) + 1
