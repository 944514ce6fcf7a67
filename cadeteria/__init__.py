"""API de gestión de una cadetería: cadetes, pedidos e informe de jornada."""

__version__ = "1.0.0"
