import itertools
import json
import os
import threading
import time

import pytest

from cadeteria.errors import (
    DuplicateError,
    InvalidTransitionError,
    NoOpError,
    NotFoundError,
    ValidationError,
)
from cadeteria.models import OrderStatus

from conftest import order_payload


def test_numbers_start_at_one_and_increment(container):
    svc = container.order_service
    numeros = [svc.create_order(order_payload(nombre=f'C{i}')).numero for i in range(3)]
    assert numeros == [1, 2, 3]


def test_numbering_is_max_plus_one(container):
    container.order_repo.save([])
    svc = container.order_service
    svc.create_order(order_payload(nombre='A'))
    svc.create_order(order_payload(nombre='B'))
    # borrado manual del archivo: queda un hueco
    container.order_repo.save([p for p in container.order_repo.load() if p.numero == 2])
    assert svc.create_order(order_payload(nombre='C')).numero == 3


def test_new_order_ignores_number_status_and_courier(container, juan):
    data = order_payload(nombre='Ana')
    data.update({'numero': 99, 'estado': 'Entregado', 'idCadete': juan.id})
    pedido = container.order_service.create_order(data)
    assert pedido.numero == 1
    assert pedido.estado is OrderStatus.PENDIENTE
    assert pedido.id_cadete is None


def test_case_insensitive_payload(container):
    pedido = container.order_service.create_order({
        'Observaciones': 'Timbre roto',
        'CLIENTE': {'Nombre': 'Ana', 'Direccion': 'Calle 9', 'Telefono': '5'},
    })
    assert pedido.observaciones == 'Timbre roto'
    assert pedido.cliente.nombre == 'Ana'


def test_duplicate_rejected(container):
    svc = container.order_service
    svc.create_order(order_payload(nombre='Ana', observaciones='x', referencia='casa'))
    with pytest.raises(DuplicateError):
        svc.create_order(order_payload(nombre='Ana', observaciones='x', referencia='casa'))
    assert len(svc.list_orders()) == 1


@pytest.mark.parametrize('field, value', [
    ('nombre', 'Eva'),
    ('observaciones', 'otra'),
    ('direccion', 'Calle Z 1'),
    ('telefono', '999'),
    ('referencia', 'portón verde'),
])
def test_one_different_field_is_not_duplicate(container, field, value):
    svc = container.order_service
    base = {'nombre': 'Ana', 'observaciones': 'x', 'direccion': 'Calle A 123', 'telefono': '333', 'referencia': 'casa'}
    svc.create_order(order_payload(**base))
    base[field] = value
    assert svc.create_order(order_payload(**base)).numero == 2


@pytest.mark.parametrize('data', [None, [], {'observaciones': 'x'}, {'cliente': None}, {'cliente': 'Ana'}])
def test_null_order_or_client(container, data):
    with pytest.raises(ValidationError):
        container.order_service.create_order(data)
    assert not container.order_repo.exists()


def test_get_order_not_found(container):
    with pytest.raises(NotFoundError):
        container.order_service.get_order(1)


def test_assign_sets_courier_and_status(container, juan):
    svc = container.order_service
    svc.create_order(order_payload())
    pedido = svc.assign_courier(1, juan.id)
    assert pedido.id_cadete == juan.id
    assert pedido.estado is OrderStatus.ASIGNADO
    assert svc.get_order(1).estado is OrderStatus.ASIGNADO


def test_assign_missing_order_or_courier(container, juan):
    svc = container.order_service
    with pytest.raises(NotFoundError):
        svc.assign_courier(5, juan.id)
    svc.create_order(order_payload())
    with pytest.raises(NotFoundError):
        svc.assign_courier(1, 42)
    pedido = svc.get_order(1)
    assert pedido.id_cadete is None
    assert pedido.estado is OrderStatus.PENDIENTE


def test_delivered_checked_before_courier(container, juan):
    svc = container.order_service
    svc.create_order(order_payload())
    svc.change_status(1, 'Entregado')
    with pytest.raises(InvalidTransitionError):
        svc.assign_courier(1, 42)
    with pytest.raises(InvalidTransitionError):
        svc.reassign_courier(1, 42)
    with pytest.raises(InvalidTransitionError):
        svc.remove_courier(1)


def test_reassign_keeps_status(container, juan):
    maria = container.courier_service.add_courier({'nombre': 'María'})
    svc = container.order_service
    svc.create_order(order_payload())
    svc.assign_courier(1, juan.id)
    svc.change_status(1, 'Enviado')

    pedido = svc.reassign_courier(1, maria.id)
    assert pedido.id_cadete == maria.id
    assert pedido.estado is OrderStatus.ENVIADO


def test_reassign_same_courier_is_noop(container, juan):
    svc = container.order_service
    svc.create_order(order_payload())
    svc.assign_courier(1, juan.id)
    with pytest.raises(NoOpError):
        svc.reassign_courier(1, juan.id)


def test_remove_courier_returns_to_pending(container, juan):
    svc = container.order_service
    svc.create_order(order_payload())
    svc.assign_courier(1, juan.id)
    pedido = svc.remove_courier(1)
    assert pedido.id_cadete is None
    assert pedido.estado is OrderStatus.PENDIENTE


def test_remove_courier_keeps_sent_status(container, juan):
    svc = container.order_service
    svc.create_order(order_payload())
    svc.assign_courier(1, juan.id)
    svc.change_status(1, 'Enviado')
    assert svc.remove_courier(1).estado is OrderStatus.ENVIADO


def test_remove_courier_without_courier(container):
    svc = container.order_service
    svc.create_order(order_payload())
    with pytest.raises(NoOpError):
        svc.remove_courier(1)


@pytest.mark.parametrize('value, expected', [
    ('entregado', OrderStatus.ENTREGADO),
    ('ENVIADO', OrderStatus.ENVIADO),
    ('1', OrderStatus.ASIGNADO),
    (0, OrderStatus.PENDIENTE),
])
def test_change_status_accepts_names_and_ordinals(container, value, expected):
    svc = container.order_service
    svc.create_order(order_payload())
    assert svc.change_status(1, value).estado is expected


def test_change_status_has_no_transition_guard(container):
    svc = container.order_service
    svc.create_order(order_payload())
    svc.change_status(1, 'Entregado')
    assert svc.change_status(1, 'Pendiente').estado is OrderStatus.PENDIENTE


def test_invalid_status_checked_before_lookup(container):
    with pytest.raises(ValidationError):
        container.order_service.change_status(99, 'Cancelado')
    with pytest.raises(NotFoundError):
        container.order_service.change_status(99, 'Enviado')


def test_mutations_sync_business_snapshot(container, juan):
    svc = container.order_service
    svc.create_order(order_payload(nombre='Ana'))
    svc.assign_courier(1, juan.id)

    with open(os.path.join(container.settings.data_dir, 'cadeteria.json'), encoding='utf-8') as f:
        snapshot = json.load(f)
    assert [c['id'] for c in snapshot['cadetes']] == [juan.id]
    assert snapshot['pedidos'][0]['idCadete'] == juan.id
    assert snapshot['pedidos'][0]['estado'] == 'Asignado'
    assert snapshot['nombre'] == 'Cadetería Sin Datos'


def test_mutations_are_audited(container, juan):
    svc = container.order_service
    svc.create_order(order_payload(nombre='Ana'), user='ana')
    svc.change_status(1, 'Enviado', user='ana')

    logs = container.audit_service.get_logs('pedido')
    assert logs[0]['details'] == {'from': 'Pendiente', 'to': 'Enviado'}
    assert logs[0]['user'] == 'ana'
    assert logs[1]['related_id'] == '1'


def test_failed_operations_are_not_audited(container):
    with pytest.raises(NotFoundError):
        container.order_service.change_status(1, 'Enviado')
    assert container.audit_service.get_logs() == []


def test_full_delivery_flow(container, juan):
    orders = container.order_service
    pedido = orders.create_order(order_payload(nombre='X'))
    assert pedido.numero == 1
    assert pedido.estado is OrderStatus.PENDIENTE

    pedido = orders.assign_courier(1, 1)
    assert pedido.estado is OrderStatus.ASIGNADO
    assert pedido.id_cadete == 1

    orders.change_status(1, 'Entregado')
    assert container.business_service.compute_earnings(1) == 500

    with pytest.raises(InvalidTransitionError):
        orders.assign_courier(1, 1)


def test_create_order_waits_for_courier_lock_first(container, juan):
    worker = threading.Thread(
        target=container.order_service.create_order,
        args=(order_payload(nombre='Ana'),),
        daemon=True,
    )
    with container.courier_repo.locked():
        worker.start()
        time.sleep(0.2)
        # el alta está esperando el lock de cadetes y no retiene el de pedidos
        assert container.order_repo._lock.acquire(timeout=1.0)
        container.order_repo._lock.release()
        assert worker.is_alive()
    worker.join(timeout=5)
    assert not worker.is_alive()
    assert container.order_service.get_order(1).cliente.nombre == 'Ana'


def test_update_business_waits_for_courier_lock_first(container, juan):
    worker = threading.Thread(
        target=container.business_service.update_business,
        kwargs={'telefono': '999'},
        daemon=True,
    )
    with container.courier_repo.locked():
        worker.start()
        time.sleep(0.2)
        assert container.business_repo._lock.acquire(timeout=1.0)
        container.business_repo._lock.release()
    worker.join(timeout=5)
    assert not worker.is_alive()
    assert container.business_repo.load().telefono == '999'


def test_concurrent_mutations_finish(container, juan):
    orders = container.order_service
    for i in range(3):
        orders.create_order(order_payload(nombre=f'Base {i}'))
    nombres = itertools.count()
    errors = []

    def repeat(fn):
        def target():
            try:
                for _ in range(10):
                    fn()
            except Exception as exc:
                errors.append(exc)
        return threading.Thread(target=target, daemon=True)

    threads = [
        repeat(lambda: orders.create_order(order_payload(nombre=f'N{next(nombres)}'))),
        repeat(lambda: orders.assign_courier(1, juan.id)),
        repeat(lambda: orders.change_status(2, 'Enviado')),
        repeat(lambda: container.business_service.update_business(telefono='123')),
        repeat(lambda: container.courier_service.add_courier({'nombre': 'Extra'})),
        repeat(container.business_service.daily_report),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=20)

    assert not any(t.is_alive() for t in threads)
    assert errors == []
    assert len(orders.list_orders()) == 13
    assert len(container.business_repo.load().pedidos) == 13
