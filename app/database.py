"""
Database Connection and Utilities
=================================
Used by the 'database' catalog source and the catalog import script.
Supports both standalone connections and shared DB from a parent app.
The parent app can inject a connection pool via set_external_pool().
"""
import psycopg2
from psycopg2 import extras
from contextlib import contextmanager


# ─── External connection pool (set by parent app) ───
_external_pool = None


def set_external_pool(pool):
    """
    Set an external connection pool (e.g., psycopg2.pool).
    When set, get_db_connection() will use this pool instead of creating new connections.

    Args:
        pool: A connection pool with getconn()/putconn() methods,
              or an object with connect() method.
    """
    global _external_pool
    _external_pool = pool


def _get_config():
    """Get the module config (avoids circular imports)."""
    from . import get_module_config
    return get_module_config()


def get_schema():
    """Get the current schema name for table-qualified queries."""
    return _get_config().DB_SCHEMA


def qualified_table(table_name):
    """
    Return a schema-qualified table name.

    Args:
        table_name: The base table name (e.g., 'stores').

    Returns:
        str: Schema-qualified name (e.g., 'inventory.stores' or 'public.stores').
    """
    schema = get_schema()
    return f"{schema}.{table_name}"


@contextmanager
def get_db_connection():
    """
    Context manager for database connections.
    Uses external pool if set, otherwise creates a new psycopg2 connection.

    Usage:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query)
    """
    conn = None
    from_pool = False

    try:
        if _external_pool is not None and hasattr(_external_pool, 'getconn'):
            conn = _external_pool.getconn()
            from_pool = True
        elif _external_pool is not None and hasattr(_external_pool, 'connect'):
            conn = _external_pool.connect()
        else:
            conn = psycopg2.connect(**_get_config().get_db_config())

        schema = get_schema()
        if schema != 'public':
            cursor = conn.cursor()
            cursor.execute(f"SET search_path TO {schema}, public")
            cursor.close()

        yield conn
    finally:
        if conn:
            if from_pool:
                _external_pool.putconn(conn)
            else:
                conn.close()


@contextmanager
def get_db_cursor(commit=False):
    """
    Context manager for database cursors with RealDictCursor.

    Args:
        commit: If True, commits the transaction after cursor closes.

    Usage:
        with get_db_cursor() as cursor:
            cursor.execute(query)
            rows = cursor.fetchall()
    """
    with get_db_connection() as conn:
        cursor = conn.cursor(cursor_factory=extras.RealDictCursor)
        try:
            yield cursor
            if commit:
                conn.commit()
        finally:
            cursor.close()


def check_connection():
    """Report database reachability for the health endpoint."""
    try:
        with get_db_cursor() as cursor:
            cursor.execute("SELECT version() AS version;")
            pg_version = cursor.fetchone()['version']
            return {
                'status': 'connected',
                'postgresql': pg_version,
                'schema': get_schema()
            }
    except psycopg2.Error as e:
        return {
            'status': 'error',
            'error': str(e)
        }
