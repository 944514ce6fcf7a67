import pytest

from cadeteria.models import Business, Client, Courier, Order, OrderStatus


def test_full_address_without_reference():
    c = Client(nombre='Ana', direccion='Calle A 123', telefono='1')
    assert c.full_address() == 'Calle A 123'


def test_full_address_with_reference():
    c = Client(nombre='Ana', direccion='Calle A 123', telefono='1', datos_referencia_direccion='Timbre 2')
    assert c.full_address() == 'Calle A 123 (Timbre 2)'
    assert c.describe() == 'Nombre: Ana, Tel: 1, Dirección: Calle A 123 (Timbre 2)'


def test_empty_reference_is_ignored():
    c = Client(direccion='Calle A 123', datos_referencia_direccion='')
    assert c.full_address() == 'Calle A 123'


def test_order_describe_unassigned_and_assigned():
    o = Order(numero=4, cliente=Client(nombre='Ana'))
    assert o.describe() == 'Pedido #4, Estado: Pendiente, Cadete: Sin asignar, Cliente: Ana'
    o.assign_courier(2)
    assert 'Cadete: Cadete ID 2' in o.describe()


def test_courier_describe():
    c = Courier(id=1, nombre='Juan', direccion='Calle 1', telefono='111')
    assert c.describe() == 'ID: 1, Nombre: Juan, Dirección: Calle 1, Tel: 111'


@pytest.mark.parametrize('value, expected', [
    ('Entregado', OrderStatus.ENTREGADO),
    ('entregado', OrderStatus.ENTREGADO),
    ('ASIGNADO', OrderStatus.ASIGNADO),
    ('0', OrderStatus.PENDIENTE),
    (2, OrderStatus.ENVIADO),
    (OrderStatus.ENVIADO, OrderStatus.ENVIADO),
])
def test_status_parse(value, expected):
    assert OrderStatus.parse(value) is expected


@pytest.mark.parametrize('value', ['Cancelado', '', None, 7, '-1', True])
def test_status_parse_rejects_unknown(value):
    with pytest.raises(ValueError):
        OrderStatus.parse(value)


def test_only_delivered_is_terminal():
    assert [s for s in OrderStatus if s.is_terminal] == [OrderStatus.ENTREGADO]


def test_order_from_dict_is_case_insensitive():
    o = Order.from_dict({
        'Numero': 3,
        'OBSERVACIONES': 'Llamar',
        'Cliente': {'Nombre': 'Ana', 'Direccion': 'X', 'Telefono': '9', 'DatosReferenciaDireccion': 'Portón'},
        'IdCadete': 2,
        'Estado': 1,
    })
    assert o.numero == 3
    assert o.observaciones == 'Llamar'
    assert o.cliente.datos_referencia_direccion == 'Portón'
    assert o.id_cadete == 2
    assert o.estado is OrderStatus.ASIGNADO


def test_order_from_dict_unknown_status_defaults_to_pending():
    assert Order.from_dict({'numero': 1, 'estado': 'Perdido'}).estado is OrderStatus.PENDIENTE


def test_duplicate_requires_all_five_fields():
    base = Order(numero=1, observaciones='obs', cliente=Client('Ana', 'Dir', 'Tel', 'Ref'))
    same = Order(numero=9, observaciones='obs', cliente=Client('Ana', 'Dir', 'Tel', 'Ref'), estado=OrderStatus.ENTREGADO)
    assert base.is_duplicate_of(same)

    variants = [
        Order(numero=2, observaciones='otra', cliente=Client('Ana', 'Dir', 'Tel', 'Ref')),
        Order(numero=2, observaciones='obs', cliente=Client('Eva', 'Dir', 'Tel', 'Ref')),
        Order(numero=2, observaciones='obs', cliente=Client('Ana', 'Otra', 'Tel', 'Ref')),
        Order(numero=2, observaciones='obs', cliente=Client('Ana', 'Dir', 'Otro', 'Ref')),
        Order(numero=2, observaciones='obs', cliente=Client('Ana', 'Dir', 'Tel', None)),
    ]
    for other in variants:
        assert not base.is_duplicate_of(other)


def test_business_defaults():
    b = Business.from_dict({})
    assert b.nombre == 'Cadetería Sin Datos'
    assert b.telefono == '000-0000'
    assert b.cadetes == [] and b.pedidos == []
