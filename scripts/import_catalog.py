"""
Import a Store Catalog into PostgreSQL
======================================
Loads a JSON export of the store API (a list of stores, each with its
embedded medicines) into the stores/medicines tables read by the
'database' catalog source.

Usage:
    python scripts/import_catalog.py data/catalog.json            # dry run
    python scripts/import_catalog.py data/catalog.json --import   # write to DB
"""
import logging
import os
import sys

import psycopg2

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import ensure_tables_exist, get_module_config  # noqa: E402
from app.catalog import JsonFileCatalog  # noqa: E402
from app.database import get_db_connection, qualified_table  # noqa: E402
from app.errors import CatalogUnavailable  # noqa: E402

logger = logging.getLogger('import_catalog')


def import_to_database(stores):
    """
    Upsert stores and replace their medicine lists.

    Args:
        stores: list of Store

    Returns:
        tuple: (stores imported, medicines imported)
    """
    t_stores = qualified_table('stores')
    t_medicines = qualified_table('medicines')

    imported_stores = 0
    imported_medicines = 0

    with get_db_connection() as conn:
        cursor = conn.cursor()
        try:
            for store in stores:
                cursor.execute(f"""
                    INSERT INTO {t_stores} (id, name, address, contact_number, latitude, longitude)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    ON CONFLICT (id) DO UPDATE SET
                        name = EXCLUDED.name,
                        address = EXCLUDED.address,
                        contact_number = EXCLUDED.contact_number,
                        latitude = EXCLUDED.latitude,
                        longitude = EXCLUDED.longitude,
                        updated_at = CURRENT_TIMESTAMP;
                """, (
                    store.id,
                    store.name,
                    store.address,
                    store.contact_number,
                    store.location.latitude,
                    store.location.longitude
                ))
                imported_stores += 1

                cursor.execute(f"DELETE FROM {t_medicines} WHERE store_id = %s;", (store.id,))
                for position, medicine in enumerate(store.medicines):
                    cursor.execute(f"""
                        INSERT INTO {t_medicines}
                            (id, store_id, name, manufacturer, batch_number, expiry_date, price, stock, position)
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s);
                    """, (
                        medicine.id,
                        store.id,
                        medicine.name,
                        medicine.manufacturer,
                        medicine.batch_number,
                        medicine.expiry_date,
                        medicine.price,
                        medicine.stock,
                        position
                    ))
                    imported_medicines += 1

            conn.commit()
        except psycopg2.Error:
            conn.rollback()
            raise
        finally:
            cursor.close()

    return imported_stores, imported_medicines


def main(argv=None):
    """Read the catalog file, show a sample, and import it with --import."""
    argv = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(message)s')

    paths = [a for a in argv if not a.startswith('--')]
    path = paths[0] if paths else get_module_config().CATALOG_FILE

    try:
        stores = JsonFileCatalog(path).fetch_stores()
    except CatalogUnavailable as e:
        logger.error("Cannot load %s: %s", path, e)
        return 1

    total_medicines = sum(len(s.medicines) for s in stores)
    logger.info("Loaded %d stores with %d medicines from %s", len(stores), total_medicines, path)

    for store in stores[:5]:
        logger.info("  %s (%.4f, %.4f) - %d medicines", store.name,
                    store.location.latitude, store.location.longitude, len(store.medicines))

    if '--import' not in argv:
        logger.info("Dry run. Re-run with --import to write to the database.")
        return 0

    try:
        ensure_tables_exist(schema=get_module_config().DB_SCHEMA)
        imported_stores, imported_medicines = import_to_database(stores)
    except psycopg2.Error as e:
        logger.error("Database error: %s", e)
        return 1

    logger.info("Import complete: %d stores, %d medicines", imported_stores, imported_medicines)
    logger.info("Clear the search cache (app.cache.clear_search_cache) so results reflect the import.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
