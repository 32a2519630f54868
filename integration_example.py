"""
Integration Example - How to use the medicine search as a feature module
========================================================================

This file shows how a parent Flask app (the store/inventory back-end) would
plug in the nearby medicine search.
"""
from flask import Flask

# ──────────────────────────────────────────────
# PARENT APP (your store/inventory application)
# ──────────────────────────────────────────────

parent_app = Flask(__name__)


@parent_app.route('/')
def home():
    return {'app': 'Store Inventory', 'features': ['stores', 'medicines', 'search']}


# ──────────────────────────────────────────────
# OPTION 1: Read the catalog from the store REST API
# The search module calls GET {catalog_api_url}/stores.
# ──────────────────────────────────────────────

def integrate_option_1():
    from app import create_search_blueprint
    from app.cache import init_cache

    search_bp = create_search_blueprint(catalog_api_url='http://localhost:8000')
    parent_app.register_blueprint(search_bp, url_prefix='/medicines/api')
    init_cache(parent_app, redis_url='redis://localhost:6379/1')

    # Now the search API is available at:
    #   GET /medicines/api/search?medicine_name=paracetamol&latitude=3.848&longitude=11.502&max_distance=5000
    #   GET /medicines/api/stores
    #   GET /medicines/api/health


# ──────────────────────────────────────────────
# OPTION 2: Shared database
# The catalog tables live in an 'inventory' schema
# inside the parent's existing database.
# ──────────────────────────────────────────────

def integrate_option_2():
    from app import create_search_blueprint, ensure_tables_exist
    from app.cache import init_cache

    parent_db_config = {
        'host': 'localhost',
        'port': '5432',
        'database': 'parent_app_db',
        'user': 'postgres',
        'password': 'your_password'
    }

    # Safe to call multiple times
    ensure_tables_exist(db_config=parent_db_config, schema='inventory')

    search_bp = create_search_blueprint(db_config=parent_db_config, schema='inventory')
    parent_app.register_blueprint(search_bp, url_prefix='/medicines/api')
    init_cache(parent_app)


# ──────────────────────────────────────────────
# OPTION 3: Use an external connection pool
# ──────────────────────────────────────────────

def integrate_option_3():
    from app import create_search_blueprint
    from app.cache import init_cache
    from app.database import set_external_pool
    import psycopg2.pool

    pool = psycopg2.pool.ThreadedConnectionPool(
        minconn=2,
        maxconn=10,
        host='localhost',
        port='5432',
        database='parent_app_db',
        user='postgres',
        password='your_password'
    )
    set_external_pool(pool)

    search_bp = create_search_blueprint(
        db_config={'database': 'parent_app_db', 'password': 'your_password'},
        schema='inventory'
    )
    parent_app.register_blueprint(search_bp, url_prefix='/medicines/api')
    init_cache(parent_app)


# ──────────────────────────────────────────────
# CLIENT-SIDE PRE-CHECK
# The same validator the API uses, called before sending a request.
# ──────────────────────────────────────────────

def precheck_search_form(form):
    from app.errors import ValidationError
    from app.validation import validate_search_query

    try:
        validate_search_query(
            form.get('medicine_name'),
            form.get('latitude'),
            form.get('longitude'),
            form.get('max_distance')
        )
    except ValidationError as e:
        return e.errors
    return {}


if __name__ == '__main__':
    integrate_option_1()  # Choose your preferred option
    parent_app.run(debug=True, host='0.0.0.0', port=8080)
