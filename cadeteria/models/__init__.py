# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Este módulo define todas las entidades del dominio usando dataclasses.
# Independiente del mecanismo de persistencia (archivos JSON).
# ==============================================================================

from .entities import (
    # Pedidos
    Order,
    OrderStatus,
    Client,

    # Cadetes y cadetería
    Courier,
    Business,

    # Informe
    DailyReport,
    CourierReportLine,

    # Actividad
    AuditType,
)

__all__ = [
    'Order',
    'OrderStatus',
    'Client',
    'Courier',
    'Business',
    'DailyReport',
    'CourierReportLine',
    'AuditType',
]
