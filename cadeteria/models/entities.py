# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio de la cadetería.
# Diseñadas para ser independientes del mecanismo de persistencia.
#
# Los nombres de propiedad en JSON se leen sin distinguir mayúsculas
# (los archivos pueden editarse a mano: "Nombre", "nombre", "NOMBRE").
# ==============================================================================

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from enum import Enum


def _ci(data: Dict[str, Any]) -> Dict[str, Any]:
    """Devuelve una copia del diccionario con las claves en minúsculas."""
    if not isinstance(data, dict):
        return {}
    return {str(k).lower(): v for k, v in data.items()}


def as_int(value: Any) -> Optional[int]:
    """Convierte a int o devuelve None si no es posible."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


# ==============================================================================
# ENUMERACIONES - Estados válidos
# ==============================================================================

class OrderStatus(str, Enum):
    """Estados posibles de un pedido."""
    PENDIENTE = "Pendiente"   # Recién creado, sin cadete
    ASIGNADO = "Asignado"     # Ya tiene un cadete asignado
    ENVIADO = "Enviado"       # En camino
    ENTREGADO = "Entregado"   # Entregado al cliente (terminal)

    @property
    def is_terminal(self) -> bool:
        return self is OrderStatus.ENTREGADO

    @classmethod
    def parse(cls, value: Any) -> 'OrderStatus':
        """
        Interpreta un estado recibido por query string o leído de archivo.

        Acepta el nombre sin distinguir mayúsculas ("entregado") o el
        ordinal 0-3 (formato numérico de archivos antiguos).

        Raises:
            ValueError: Si el valor no corresponde a ningún estado
        """
        if isinstance(value, cls):
            return value
        members = list(cls)
        if isinstance(value, int) and not isinstance(value, bool):
            if 0 <= value < len(members):
                return members[value]
            raise ValueError(f"Estado inválido: {value}")
        text = str(value or '').strip()
        if text.isdigit():
            return cls.parse(int(text))
        for status in members:
            if status.value.lower() == text.lower() or status.name.lower() == text.lower():
                return status
        raise ValueError(f"Estado inválido: {value}")


# ==============================================================================
# CLIENTE
# ==============================================================================

@dataclass
class Client:
    """
    Cliente que solicita un pedido. No tiene identidad propia:
    vive embebido dentro del pedido.

    Attributes:
        nombre: Nombre del cliente
        direccion: Dirección principal
        telefono: Teléfono de contacto
        datos_referencia_direccion: Referencia adicional (opcional)
    """
    nombre: str = ''
    direccion: str = ''
    telefono: str = ''
    datos_referencia_direccion: Optional[str] = None

    def full_address(self) -> str:
        """Dirección completa, con la referencia entre paréntesis si existe."""
        if not self.datos_referencia_direccion:
            return self.direccion
        return f"{self.direccion} ({self.datos_referencia_direccion})"

    def describe(self) -> str:
        return f"Nombre: {self.nombre}, Tel: {self.telefono}, Dirección: {self.full_address()}"

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        return {
            'nombre': self.nombre,
            'direccion': self.direccion,
            'telefono': self.telefono,
            'datosReferenciaDireccion': self.datos_referencia_direccion,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Client':
        """Crea instancia desde diccionario."""
        d = _ci(data)
        return cls(
            nombre=d.get('nombre') or '',
            direccion=d.get('direccion') or '',
            telefono=d.get('telefono') or '',
            datos_referencia_direccion=d.get('datosreferenciadireccion'),
        )


# ==============================================================================
# CADETE
# ==============================================================================

@dataclass
class Courier:
    """
    Cadete: persona que entrega pedidos. Identidad = id.

    Attributes:
        id: Identificador único
        nombre: Nombre completo
        direccion: Dirección del cadete
        telefono: Teléfono de contacto
    """
    id: int
    nombre: str = ''
    direccion: str = ''
    telefono: str = ''

    def describe(self) -> str:
        return f"ID: {self.id}, Nombre: {self.nombre}, Dirección: {self.direccion}, Tel: {self.telefono}"

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        return {
            'id': self.id,
            'nombre': self.nombre,
            'direccion': self.direccion,
            'telefono': self.telefono,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Courier':
        """Crea instancia desde diccionario."""
        d = _ci(data)
        return cls(
            id=as_int(d.get('id')) or 0,
            nombre=d.get('nombre') or '',
            direccion=d.get('direccion') or '',
            telefono=d.get('telefono') or '',
        )


# ==============================================================================
# PEDIDO
# ==============================================================================

@dataclass
class Order:
    """
    Pedido de un cliente que será entregado por un cadete.

    El cadete se referencia solo por id (referencia débil): resolverlo
    es una búsqueda en la colección de cadetes, nunca una pertenencia.

    Attributes:
        numero: Identificador único, asignado como max + 1
        observaciones: Observaciones del pedido
        cliente: Cliente que solicita el pedido
        id_cadete: Id del cadete asignado o None
        estado: Estado actual del pedido
    """
    numero: int
    observaciones: str = ''
    cliente: Client = field(default_factory=Client)
    id_cadete: Optional[int] = None
    estado: OrderStatus = OrderStatus.PENDIENTE

    @property
    def is_delivered(self) -> bool:
        return self.estado.is_terminal

    def assign_courier(self, id_cadete: int) -> None:
        self.id_cadete = id_cadete

    def remove_courier(self) -> None:
        self.id_cadete = None

    def change_status(self, estado: OrderStatus) -> None:
        self.estado = estado

    def is_duplicate_of(self, other: 'Order') -> bool:
        """
        Dos pedidos son duplicados si coinciden observaciones y los
        cuatro datos del cliente (igualdad estructural, no de identidad).
        """
        return (
            self.observaciones == other.observaciones
            and self.cliente.nombre == other.cliente.nombre
            and self.cliente.direccion == other.cliente.direccion
            and self.cliente.telefono == other.cliente.telefono
            and self.cliente.datos_referencia_direccion == other.cliente.datos_referencia_direccion
        )

    def describe(self) -> str:
        cadete = f"Cadete ID {self.id_cadete}" if self.id_cadete is not None else "Sin asignar"
        return f"Pedido #{self.numero}, Estado: {self.estado.value}, Cadete: {cadete}, Cliente: {self.cliente.nombre}"

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia JSON."""
        return {
            'numero': self.numero,
            'observaciones': self.observaciones,
            'cliente': self.cliente.to_dict(),
            'idCadete': self.id_cadete,
            'estado': self.estado.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Order':
        """
        Crea instancia desde diccionario.

        Un estado ilegible se interpreta como Pendiente.
        """
        d = _ci(data)
        try:
            estado = OrderStatus.parse(d.get('estado', OrderStatus.PENDIENTE))
        except ValueError:
            estado = OrderStatus.PENDIENTE
        return cls(
            numero=as_int(d.get('numero')) or 0,
            observaciones=d.get('observaciones') or '',
            cliente=Client.from_dict(d.get('cliente') or {}),
            id_cadete=as_int(d.get('idcadete')),
            estado=estado,
        )


# ==============================================================================
# CADETERÍA
# ==============================================================================

@dataclass
class Business:
    """
    La cadetería. Las listas de cadetes y pedidos son una copia
    desnormalizada que se reescribe tras cada cambio; la fuente de
    verdad son las colecciones propias.
    """
    nombre: str = "Cadetería Sin Datos"
    telefono: str = "000-0000"
    cadetes: List[Courier] = field(default_factory=list)
    pedidos: List[Order] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'nombre': self.nombre,
            'telefono': self.telefono,
            'cadetes': [c.to_dict() for c in self.cadetes],
            'pedidos': [p.to_dict() for p in self.pedidos],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Business':
        d = _ci(data)
        default = cls()
        return cls(
            nombre=d.get('nombre') or default.nombre,
            telefono=d.get('telefono') or default.telefono,
            cadetes=[Courier.from_dict(c) for c in d.get('cadetes') or []],
            pedidos=[Order.from_dict(p) for p in d.get('pedidos') or []],
        )


# ==============================================================================
# INFORME DE JORNADA
# ==============================================================================

@dataclass
class CourierReportLine:
    """Resultado de la jornada para un cadete."""
    id_cadete: int
    nombre: str
    entregados: int
    monto: int

    def render(self) -> str:
        return f"Cadete: {self.nombre}, Envíos entregados: {self.entregados}, Monto ganado: ${self.monto}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id_cadete': self.id_cadete,
            'nombre': self.nombre,
            'entregados': self.entregados,
            'monto': self.monto,
        }


@dataclass
class DailyReport:
    """
    Informe final de la jornada.

    Attributes:
        cadetes: Una línea por cadete
        total_envios: Pedidos entregados en total (tengan o no cadete válido)
        total_ganado: Suma de lo ganado por todos los cadetes
        promedio: Promedio de entregados por cadete (0 sin cadetes)
    """
    cadetes: List[CourierReportLine] = field(default_factory=list)
    total_envios: int = 0
    total_ganado: int = 0
    promedio: float = 0.0

    def lines(self) -> List[str]:
        """
        Informe como lista de líneas, una por elemento.

        Las líneas de totales no llevan un salto de línea inicial: quien muestra el
        informe decide cómo separarlas de las líneas por cadete.
        """
        lines = [c.render() for c in self.cadetes]
        lines.append(f"Total envíos: {self.total_envios}")
        lines.append(f"Total ganado por todos los cadetes: ${self.total_ganado}")
        lines.append(f"Promedio de envíos por cadete: {self.promedio:.2f}")
        return lines

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cadetes': [c.to_dict() for c in self.cadetes],
            'total_envios': self.total_envios,
            'total_ganado': self.total_ganado,
            'promedio': round(self.promedio, 2),
        }


# ==============================================================================
# ACTIVIDAD
# ==============================================================================

class AuditType(str, Enum):
    """Tipos de eventos registrados en la actividad."""
    PEDIDO = "PEDIDO"
    CADETE = "CADETE"
    CADETERIA = "CADETERIA"
    SISTEMA = "SISTEMA"
