"""
Store Catalog Sources
=====================
The catalog (all stores with their embedded medicine lists) belongs to an
external collaborator. This module only reads it.

Every source exposes fetch_stores() -> list[Store] and raises
CatalogUnavailable when the list cannot be supplied. There is no retry here;
retry policy belongs to the transport or the collaborator.

Sources:
    StaticCatalog   - an in-memory list (tests, embedding in another app)
    JsonFileCatalog - a JSON export of the store API
    HttpCatalog     - the store/medicine REST API (GET /stores)
    DatabaseCatalog - the stores/medicines tables in PostgreSQL
"""
import json
import logging

import psycopg2
import requests

from .database import get_db_cursor, qualified_table
from .errors import CatalogUnavailable
from .models import Store, Medicine, Coordinate

logger = logging.getLogger(__name__)


def parse_catalog(records):
    """
    Convert raw store records into Store objects.

    Raises:
        CatalogUnavailable: if the payload is not a list of well-formed stores.
    """
    if not isinstance(records, list):
        raise CatalogUnavailable("Catalog payload is not a list of stores.")
    stores = []
    for position, record in enumerate(records):
        try:
            stores.append(Store.from_dict(record))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise CatalogUnavailable(f"Malformed store record at position {position}: {e}") from e
    return stores


class StaticCatalog:
    """Catalog backed by an in-memory sequence of Store objects."""

    def __init__(self, stores=()):
        self._stores = list(stores)

    def fetch_stores(self):
        return list(self._stores)


class JsonFileCatalog:
    """Catalog read from a JSON file holding a list of store records."""

    def __init__(self, path):
        self.path = path

    def fetch_stores(self):
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                records = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Could not read catalog file %s: %s", self.path, e)
            raise CatalogUnavailable(f"Could not read catalog file: {e}") from e
        return parse_catalog(records)


class HttpCatalog:
    """Catalog fetched from the store/medicine REST API."""

    def __init__(self, base_url, timeout=10, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_stores(self):
        url = f"{self.base_url}/stores"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            records = response.json()
        except requests.RequestException as e:
            logger.error("Store API unavailable (%s): %s", url, e)
            raise CatalogUnavailable(f"Store API unavailable: {e}") from e
        except ValueError as e:
            logger.error("Store API returned invalid JSON (%s): %s", url, e)
            raise CatalogUnavailable("Store API returned invalid JSON.") from e
        return parse_catalog(records)


class DatabaseCatalog:
    """Catalog read from the stores and medicines tables."""

    def fetch_stores(self):
        t_stores = qualified_table('stores')
        t_medicines = qualified_table('medicines')

        stores_query = f"""
            SELECT id, name, address, contact_number, latitude, longitude
            FROM {t_stores}
            ORDER BY id;
        """
        medicines_query = f"""
            SELECT id, store_id, name, manufacturer, batch_number,
                   expiry_date, price, stock
            FROM {t_medicines}
            ORDER BY store_id, position, id;
        """

        try:
            with get_db_cursor() as cursor:
                cursor.execute(stores_query)
                store_rows = cursor.fetchall()
                cursor.execute(medicines_query)
                medicine_rows = cursor.fetchall()
        except psycopg2.Error as e:
            logger.error("Catalog database unavailable: %s", e)
            raise CatalogUnavailable(f"Catalog database unavailable: {e}") from e

        try:
            inventory = {}
            for row in medicine_rows:
                inventory.setdefault(row['store_id'], []).append(Medicine(
                    id=str(row['id']),
                    name=row['name'],
                    manufacturer=row['manufacturer'] or '',
                    batch_number=row['batch_number'] or '',
                    expiry_date=row['expiry_date'],
                    price=float(row['price']),
                    stock=int(row['stock']),
                ))

            return [
                Store(
                    id=str(row['id']),
                    name=row['name'],
                    address=row['address'] or '',
                    contact_number=row['contact_number'] or '',
                    location=Coordinate(float(row['latitude']), float(row['longitude'])),
                    medicines=tuple(inventory.get(row['id'], ())),
                )
                for row in store_rows
            ]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error("Malformed catalog row: %s", e)
            raise CatalogUnavailable(f"Malformed catalog row: {e}") from e


def get_catalog(config=None):
    """
    Build the catalog source selected by CATALOG_SOURCE.

    Args:
        config: A SearchConfig; defaults to the module config.
    """
    if config is None:
        from . import get_module_config
        config = get_module_config()

    source = config.CATALOG_SOURCE
    if source == 'database':
        return DatabaseCatalog()
    if source == 'http':
        return HttpCatalog(config.CATALOG_API_URL, timeout=config.CATALOG_TIMEOUT_S)
    if source == 'file':
        return JsonFileCatalog(config.CATALOG_FILE)
    raise ValueError(f"Unknown CATALOG_SOURCE: {source!r}")
