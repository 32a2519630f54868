"""
Medicine Search Module - Flask Blueprint Package
================================================
Proximity-based medicine availability search: given a medicine name, a
location and a radius, list the stores in range that carry a matching
medicine, nearest first.

This module can be used standalone OR integrated into a parent Flask app.

Standalone usage:
    from app import create_app
    app = create_app()
    app.run()

Integration into a parent app:
    from app import create_search_blueprint

    # Option A: read the catalog from the parent's store API
    bp = create_search_blueprint(catalog_api_url='http://localhost:8000')
    parent_app.register_blueprint(bp, url_prefix='/medicines/api')

    # Option B: read the catalog from the parent's database
    ensure_tables_exist(db_config={...}, schema='inventory')
    bp = create_search_blueprint(db_config={...}, schema='inventory')
    parent_app.register_blueprint(bp, url_prefix='/medicines/api')
"""
import logging

from flask import Flask
from .config import SearchConfig

logger = logging.getLogger(__name__)


# ─── Module-level state (set during init) ───
_module_config = None
_module_catalog = None


def get_module_config():
    """Get the current module configuration, falling back to defaults (standalone mode)."""
    global _module_config
    if _module_config is None:
        _module_config = SearchConfig()
    return _module_config


def get_module_catalog():
    """Get the catalog source: the injected one, or the one selected by CATALOG_SOURCE."""
    if _module_catalog is not None:
        return _module_catalog
    from .catalog import get_catalog
    return get_catalog(get_module_config())


def init_search_module(config=None, db_config=None, schema='public', catalog=None):
    """
    Initialize the search module with external configuration.
    Call this BEFORE registering the blueprint when integrating into a parent app.

    Args:
        config: A SearchConfig instance, or None to use defaults.
        db_config: Database connection dict with keys: host, port, database, user, password.
                   If provided, overrides config's DB settings and selects the database catalog.
        schema: PostgreSQL schema name for the catalog tables (default: 'public').
        catalog: Optional object with fetch_stores(); overrides CATALOG_SOURCE.

    Returns:
        SearchConfig: The resolved configuration object.
    """
    global _module_config, _module_catalog

    _module_config = config if config is not None else SearchConfig()
    _module_catalog = catalog

    if db_config:
        _module_config.DB_HOST = db_config.get('host', _module_config.DB_HOST)
        _module_config.DB_PORT = db_config.get('port', _module_config.DB_PORT)
        _module_config.DB_NAME = db_config.get('database', _module_config.DB_NAME)
        _module_config.DB_USER = db_config.get('user', _module_config.DB_USER)
        _module_config.DB_PASSWORD = db_config.get('password', _module_config.DB_PASSWORD)
        _module_config.CATALOG_SOURCE = 'database'

    _module_config.DB_SCHEMA = schema

    return _module_config


def create_search_blueprint(db_config=None, schema='public', catalog_api_url=None,
                            redis_url=None, catalog=None):
    """
    Create and return the medicine search Flask Blueprint, ready to register on any Flask app.

    Args:
        db_config: Optional dict with DB connection params (host, port, database, user, password).
        schema: PostgreSQL schema for the catalog tables (default: 'public').
        catalog_api_url: Optional base URL of the store/medicine REST API.
        redis_url: Optional Redis URL for caching.
        catalog: Optional catalog object with fetch_stores().

    Returns:
        flask.Blueprint: The configured search API blueprint.

    Usage in parent app:
        bp = create_search_blueprint(catalog_api_url='http://localhost:8000')
        app.register_blueprint(bp, url_prefix='/medicines/api')

        # After registering, init cache in parent app:
        from app.cache import init_cache
        init_cache(parent_app, redis_url='redis://localhost:6379/1')
    """
    config = init_search_module(db_config=db_config, schema=schema, catalog=catalog)

    if catalog_api_url:
        config.CATALOG_API_URL = catalog_api_url
        config.CATALOG_SOURCE = 'http'
    if redis_url:
        config.REDIS_URL = redis_url

    from .routes import api_bp
    return api_bp


def ensure_tables_exist(db_config=None, schema='public'):
    """
    Create the catalog tables if they don't exist.
    Safe to call multiple times (uses IF NOT EXISTS).

    Args:
        db_config: Optional dict with DB connection params. Uses module config if not provided.
        schema: PostgreSQL schema name (default: 'public').
    """
    from .database import get_db_connection

    if db_config:
        init_search_module(db_config=db_config, schema=schema)

    s = get_module_config().DB_SCHEMA

    with get_db_connection() as conn:
        cursor = conn.cursor()

        cursor.execute(f"CREATE SCHEMA IF NOT EXISTS {s}")

        cursor.execute(f"""
            CREATE TABLE IF NOT EXISTS {s}.stores (
                id VARCHAR(64) PRIMARY KEY,
                name VARCHAR(255) NOT NULL,
                address VARCHAR(255),
                contact_number VARCHAR(50),
                latitude DOUBLE PRECISION NOT NULL CHECK (latitude BETWEEN -90 AND 90),
                longitude DOUBLE PRECISION NOT NULL CHECK (longitude BETWEEN -180 AND 180),
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        cursor.execute(f"""
            CREATE TABLE IF NOT EXISTS {s}.medicines (
                id VARCHAR(64) PRIMARY KEY,
                store_id VARCHAR(64) NOT NULL REFERENCES {s}.stores(id) ON DELETE CASCADE,
                name VARCHAR(255) NOT NULL,
                manufacturer VARCHAR(255),
                batch_number VARCHAR(100),
                expiry_date DATE,
                price NUMERIC(12, 2) NOT NULL CHECK (price > 0),
                stock INTEGER NOT NULL DEFAULT 0 CHECK (stock >= 0),
                position INTEGER NOT NULL DEFAULT 0
            )
        """)

        cursor.execute(f"CREATE INDEX IF NOT EXISTS idx_medicines_store ON {s}.medicines (store_id, position)")
        cursor.execute(f"CREATE INDEX IF NOT EXISTS idx_medicines_name ON {s}.medicines (LOWER(name))")

        conn.commit()
        cursor.close()

    logger.info("Catalog tables ensured in schema '%s'", s)


def create_app(config=None, catalog=None):
    """
    Create a standalone Flask application (for running the module independently).

    Args:
        config: Optional SearchConfig instance.
        catalog: Optional catalog object with fetch_stores().

    Returns:
        Flask: Configured Flask application.
    """
    app = Flask(__name__)

    resolved_config = init_search_module(config=config, schema=(config or SearchConfig).DB_SCHEMA,
                                         catalog=catalog)
    app.config.from_object(resolved_config)

    from .cache import init_cache
    init_cache(app, redis_url=resolved_config.REDIS_URL, cache_type=resolved_config.CACHE_TYPE)

    from .routes import api_bp
    app.register_blueprint(api_bp, url_prefix='/api')

    @app.route('/')
    def health():
        return {
            'status': 'ok',
            'service': 'Nearby Medicine Search API',
            'version': '1.0.0',
            'mode': 'standalone'
        }

    return app
