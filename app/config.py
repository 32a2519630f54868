"""
Medicine Search Module Configuration
====================================
Supports standalone and integrated modes.
In integrated mode, the parent app injects config via init_search_module().
"""
import os
from dotenv import load_dotenv

load_dotenv()


class SearchConfig:
    """Medicine search module configuration."""

    # Database configuration (used by the 'database' catalog source)
    DB_HOST = os.getenv('DB_HOST', 'localhost')
    DB_PORT = os.getenv('DB_PORT', '5432')
    DB_NAME = os.getenv('DB_NAME', 'medicine_db')
    DB_USER = os.getenv('DB_USER', 'postgres')
    DB_PASSWORD = os.getenv('DB_PASSWORD', 'postgres')

    # Schema for table isolation (parent app can set to 'inventory' or custom)
    DB_SCHEMA = os.getenv('DB_SCHEMA', 'public')

    # Catalog source: 'database', 'http' (external store API) or 'file' (JSON export)
    CATALOG_SOURCE = os.getenv('CATALOG_SOURCE', 'http')
    CATALOG_API_URL = os.getenv('CATALOG_API_URL', 'http://localhost:8000')
    CATALOG_FILE = os.getenv('CATALOG_FILE', 'data/catalog.json')
    CATALOG_TIMEOUT_S = float(os.getenv('CATALOG_TIMEOUT_S', 10))

    # Search configuration
    DEFAULT_SEARCH_RADIUS_M = float(os.getenv('DEFAULT_SEARCH_RADIUS_M', 5000))
    # 0 disables the upper bound
    MAX_SEARCH_RADIUS_M = float(os.getenv('MAX_SEARCH_RADIUS_M', 0))
    SEARCH_WORKERS = int(os.getenv('SEARCH_WORKERS', 4))
    PARALLEL_THRESHOLD = int(os.getenv('PARALLEL_THRESHOLD', 2000))
    SEARCH_TIMEOUT_S = float(os.getenv('SEARCH_TIMEOUT_S', 10))

    # Cache configuration
    REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')
    CACHE_TYPE = os.getenv('CACHE_TYPE', 'RedisCache')
    CACHE_DEFAULT_TIMEOUT = int(os.getenv('CACHE_DEFAULT_TIMEOUT', 300))

    def get_db_uri(self):
        """Get database connection URI."""
        return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    def get_db_config(self):
        """Get database configuration as dict."""
        return {
            'host': self.DB_HOST,
            'port': self.DB_PORT,
            'database': self.DB_NAME,
            'user': self.DB_USER,
            'password': self.DB_PASSWORD
        }

    def max_distance_limit(self):
        """Upper bound for max_distance, or None when unlimited."""
        return self.MAX_SEARCH_RADIUS_M if self.MAX_SEARCH_RADIUS_M > 0 else None
