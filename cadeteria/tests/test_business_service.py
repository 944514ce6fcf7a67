import pytest

from cadeteria.app_container import AppContainer
from cadeteria.config import load_settings
from cadeteria.errors import ValidationError

from conftest import order_payload


def _deliver(container, nombre, id_cadete):
    pedido = container.order_service.create_order(order_payload(nombre=nombre))
    container.order_service.assign_courier(pedido.numero, id_cadete)
    container.order_service.change_status(pedido.numero, 'Entregado')
    return pedido


def test_earnings_unknown_courier_is_zero(container):
    assert container.business_service.compute_earnings(99) == 0


def test_earnings_only_count_delivered(container, juan):
    svc = container.order_service
    svc.create_order(order_payload(nombre='A'))
    svc.assign_courier(1, juan.id)
    svc.create_order(order_payload(nombre='B'))
    svc.assign_courier(2, juan.id)
    svc.change_status(2, 'Enviado')
    assert container.business_service.compute_earnings(juan.id) == 0

    _deliver(container, 'C', juan.id)
    _deliver(container, 'D', juan.id)
    assert container.business_service.compute_earnings(juan.id) == 1000


def test_custom_valor_pedido(tmp_path):
    container = AppContainer(load_settings({
        'data_dir': str(tmp_path / 'Data'),
        'logs_dir': str(tmp_path / 'logs'),
        'valor_pedido': 750,
        'enable_profiling': False,
    }))
    container.courier_service.add_courier({'nombre': 'Juan'})
    _deliver(container, 'A', 1)
    assert container.business_service.compute_earnings(1) == 750


def test_report_without_couriers(container):
    assert container.business_service.daily_report().lines() == [
        "Total envíos: 0",
        "Total ganado por todos los cadetes: $0",
        "Promedio de envíos por cadete: 0.00",
    ]


def test_report_lines_and_totals(container, juan):
    container.courier_service.add_courier({'nombre': 'María'})
    container.courier_service.add_courier({'nombre': 'Pedro'})
    _deliver(container, 'A', 1)
    _deliver(container, 'B', 1)
    _deliver(container, 'C', 2)
    container.order_service.create_order(order_payload(nombre='D'))

    report = container.business_service.daily_report()
    assert report.lines() == [
        "Cadete: Juan, Envíos entregados: 2, Monto ganado: $1000",
        "Cadete: María, Envíos entregados: 1, Monto ganado: $500",
        "Cadete: Pedro, Envíos entregados: 0, Monto ganado: $0",
        "Total envíos: 3",
        "Total ganado por todos los cadetes: $1500",
        "Promedio de envíos por cadete: 1.00",
    ]
    assert report.to_dict()['promedio'] == 1.0


def test_report_average_two_decimals(container, juan):
    container.courier_service.add_courier({'nombre': 'María'})
    container.courier_service.add_courier({'nombre': 'Pedro'})
    _deliver(container, 'A', 1)
    assert container.business_service.daily_report().lines()[-1] == "Promedio de envíos por cadete: 0.33"


def test_delivered_without_courier_counts_in_total(container, juan):
    container.order_service.create_order(order_payload(nombre='A'))
    container.order_service.change_status(1, 'Entregado')
    report = container.business_service.daily_report()
    assert report.total_envios == 1
    assert report.total_ganado == 0


def test_business_defaults(container):
    business = container.business_service.get_business()
    assert business.nombre == 'Cadetería Sin Datos'
    assert business.telefono == '000-0000'


def test_update_business(container, juan):
    svc = container.business_service
    svc.update_business(nombre='Cadetería Express')
    business = svc.update_business(telefono='123456789')
    assert business.nombre == 'Cadetería Express'
    assert business.telefono == '123456789'

    stored = container.business_repo.load()
    assert stored.nombre == 'Cadetería Express'
    assert [c.id for c in stored.cadetes] == [juan.id]


@pytest.mark.parametrize('kwargs', [{}, {'nombre': ''}, {'telefono': '   '}, {'nombre': 'Ok', 'telefono': ''}])
def test_update_business_validation(container, kwargs):
    with pytest.raises(ValidationError):
        container.business_service.update_business(**kwargs)
