import os
import sys

import pytest

# ensure project root is on sys.path when running from tests/ folder
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..')))

from cadeteria.app_container import AppContainer
from cadeteria.config import load_settings
from cadeteria.main import create_app


def _overrides(tmp_path, **extra):
    values = {
        'data_dir': str(tmp_path / 'Data'),
        'logs_dir': str(tmp_path / 'logs'),
        'production_mode': True,
        'enable_profiling': False,
    }
    values.update(extra)
    return values


@pytest.fixture
def data_dir(tmp_path):
    return str(tmp_path / 'Data')


@pytest.fixture
def container(tmp_path):
    return AppContainer(load_settings(_overrides(tmp_path)))


@pytest.fixture
def app(tmp_path):
    return create_app(_overrides(tmp_path))


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def make_app(tmp_path):
    """Crea apps con otra configuración sobre el mismo tmp_path."""
    def _make(**extra):
        return create_app(_overrides(tmp_path, **extra))
    return _make


@pytest.fixture
def juan(container):
    return container.courier_service.add_courier(
        {'id': 1, 'nombre': 'Juan', 'direccion': 'Calle 1', 'telefono': '111'}
    )


def order_payload(nombre='X', observaciones='', direccion='Calle A 123', telefono='333', referencia=None):
    cliente = {'nombre': nombre, 'direccion': direccion, 'telefono': telefono}
    if referencia is not None:
        cliente['datosReferenciaDireccion'] = referencia
    return {'observaciones': observaciones, 'cliente': cliente}
