# ==============================================================================
# REPOSITORIO DE LA CADETERÍA
# ==============================================================================
# Encapsula el acceso a cadeteria.json (un único objeto).
# Guarda nombre, teléfono y una copia de cadetes y pedidos.
# ==============================================================================

import os

from cadeteria.models import Business
from cadeteria.repositories.base import ObjectRepository


class BusinessRepository(ObjectRepository):
    """
    Repositorio de los datos generales de la cadetería.

    Sin archivo (primera ejecución) devuelve una cadetería por defecto:
    "Cadetería Sin Datos" / "000-0000".
    """

    FILE_NAME = 'cadeteria.json'

    def __init__(self, base_path: str):
        super().__init__(os.path.join(base_path, self.FILE_NAME))

    def load(self) -> Business:
        data = self.get()
        if not data:
            return Business()
        return Business.from_dict(data)

    def save(self, business: Business) -> None:
        self.put(business.to_dict())
