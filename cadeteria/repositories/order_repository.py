# ==============================================================================
# REPOSITORIO DE PEDIDOS
# ==============================================================================
# Encapsula todo el acceso a pedidos.json
# Los pedidos se almacenan como lista: [{pedido1}, {pedido2}, ...]
# ==============================================================================

import os
from typing import List, Optional

from cadeteria.models import Order
from cadeteria.repositories.base import ListRepository


class OrderRepository(ListRepository):
    """
    Repositorio para gestión de pedidos.

    Formato de datos en pedidos.json:
    [
        {
            "numero": 1,
            "observaciones": "Dejar en portería",
            "cliente": {"nombre": "...", "direccion": "...", ...},
            "idCadete": null,
            "estado": "Pendiente"
        }
    ]
    """

    FILE_NAME = 'pedidos.json'

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Directorio de datos
        """
        super().__init__(os.path.join(base_path, self.FILE_NAME))

    def load(self) -> List[Order]:
        """Carga todos los pedidos (lista vacía si no hay archivo)."""
        return [Order.from_dict(r) for r in self.get_all()]

    def save(self, pedidos: List[Order]) -> None:
        """Guarda la colección completa de pedidos."""
        self.save_all([p.to_dict() for p in pedidos])

    def get_order(self, numero: int) -> Optional[Order]:
        """Busca un pedido por número."""
        return next((p for p in self.load() if p.numero == numero), None)

    def get_next_number(self) -> int:
        """
        Genera el siguiente número de pedido.
        Se recalcula como max + 1: los huecos no se reutilizan
        mientras el máximo siga existiendo.
        """
        return max((p.numero for p in self.load()), default=0) + 1

    def get_orders_by_courier(self, id_cadete: int) -> List[Order]:
        return [p for p in self.load() if p.id_cadete == id_cadete]
