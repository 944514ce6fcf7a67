# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia (archivos JSON).
#
# ESTRUCTURA:
# ├── interfaces.py           → Protocolos (contratos de cada colección)
# ├── base.py                 → Clases base JSON (ListRepository, ObjectRepository)
# ├── courier_repository.py   → Acceso a cadetes.json
# ├── order_repository.py     → Acceso a pedidos.json
# ├── business_repository.py  → Acceso a cadeteria.json
# └── audit_repository.py     → Acceso a actividad.json
# ==============================================================================

from cadeteria.repositories.interfaces import (
    ICourierRepository,
    IOrderRepository,
    IBusinessRepository,
    IAuditRepository,
)

from cadeteria.repositories.base import BaseRepository, ListRepository, ObjectRepository
from cadeteria.repositories.courier_repository import CourierRepository
from cadeteria.repositories.order_repository import OrderRepository
from cadeteria.repositories.business_repository import BusinessRepository
from cadeteria.repositories.audit_repository import AuditRepository

__all__ = [
    # Interfaces
    'ICourierRepository',
    'IOrderRepository',
    'IBusinessRepository',
    'IAuditRepository',

    # Clases base
    'BaseRepository',
    'ListRepository',
    'ObjectRepository',

    # Implementaciones JSON
    'CourierRepository',
    'OrderRepository',
    'BusinessRepository',
    'AuditRepository',
]
