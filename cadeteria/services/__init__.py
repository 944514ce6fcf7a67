# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Esta capa contiene TODA la lógica de negocio de la aplicación.
#
# PRINCIPIOS:
# 1. Los servicios orquestan operaciones entre repositorios
# 2. Aplican reglas de negocio y validaciones (lanzan errores de errors.py)
# 3. Las rutas solo llaman a servicios y traducen errores a HTTP
# 4. Los servicios NO conocen el tipo de almacenamiento
#
# ESTRUCTURA:
# ├── order_service.py    → Pedidos: alta, asignación, estados
# ├── courier_service.py  → Cadetes: alta, consulta, baja
# ├── business_service.py → Cadetería, jornal, informe de jornada
# └── audit_service.py    → Registro de actividad
# ==============================================================================

from cadeteria.services.audit_service import AuditService
from cadeteria.services.business_service import BusinessService
from cadeteria.services.order_service import OrderService
from cadeteria.services.courier_service import CourierService

__all__ = [
    'AuditService',
    'BusinessService',
    'OrderService',
    'CourierService',
]
