import math
from datetime import date

import pytest

from app import create_app
from app.catalog import StaticCatalog
from app.config import SearchConfig
from app.geo import EARTH_RADIUS_M
from app.models import Coordinate, Medicine, Store

ORIGIN = Coordinate(latitude=3.848, longitude=11.502)


def north_of(origin, meters):
    """Coordinate `meters` due north of origin along the meridian."""
    return Coordinate(origin.latitude + math.degrees(meters / EARTH_RADIUS_M), origin.longitude)


def make_medicine(id, name, stock=10, expiry=date(2027, 6, 30), price=4.5):
    return Medicine(
        id=id,
        name=name,
        manufacturer='Acme Pharma',
        batch_number=f"B-{id}",
        expiry_date=expiry,
        price=price,
        stock=stock,
    )


def make_store(id, location, medicines=(), name=None):
    return Store(
        id=id,
        name=name or f"Store {id}",
        address=f"{id} Main Street",
        contact_number='+237 600 000 000',
        location=location,
        medicines=tuple(medicines),
    )


@pytest.fixture
def paracetamol_catalog():
    """StoreA at the origin (stock 5) and StoreB 2 km away (stock 0)."""
    store_a = make_store('A', ORIGIN, [make_medicine('a1', 'Paracetamol', stock=5)])
    store_b = make_store('B', north_of(ORIGIN, 2000), [make_medicine('b1', 'Paracetamol', stock=0)])
    return [store_a, store_b]


@pytest.fixture
def mixed_catalog():
    return [
        make_store('far', north_of(ORIGIN, 9000), [make_medicine('f1', 'Aspirin 500mg')]),
        make_store('near', north_of(ORIGIN, 300), [
            make_medicine('n1', 'Ibuprofen 200mg'),
            make_medicine('n2', 'ASPIRIN Junior', stock=0),
            make_medicine('n3', 'Aspirin 100mg', expiry=date(2020, 1, 1)),
        ]),
        make_store('mid', north_of(ORIGIN, 1500), [make_medicine('m1', 'Amoxicillin')]),
        make_store('mid-aspirin', north_of(ORIGIN, 1500), [make_medicine('m2', 'Aspirin 500mg')]),
    ]


class _TestConfig(SearchConfig):
    CATALOG_SOURCE = 'file'
    CACHE_TYPE = 'NullCache'
    SEARCH_TIMEOUT_S = 0
    PARALLEL_THRESHOLD = 1000000


@pytest.fixture
def test_config():
    return _TestConfig()


@pytest.fixture
def make_client(test_config):
    """Factory for a test client over an in-memory catalog."""
    def _make(stores=None, catalog=None, config=None):
        flask_app = create_app(config=config or test_config,
                               catalog=catalog if catalog is not None else StaticCatalog(stores or []))
        flask_app.testing = True
        return flask_app.test_client()
    return _make
