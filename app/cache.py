"""
Cache Module - Redis-backed Caching
=====================================
Uses Flask-Caching with Redis for scalable caching of search responses.
Falls back to SimpleCache if Redis is unavailable.

Integration:
    The parent app can configure Redis URL via REDIS_URL env var
    or pass it through create_search_blueprint().

Cache invalidation:
    Call clear_search_cache() after the catalog changes (e.g. after
    scripts/import_catalog.py runs) to ensure fresh results are served.
"""
import logging
import os
from flask_caching import Cache

logger = logging.getLogger(__name__)

# Module-level cache instance
cache = Cache()

_default_config = {
    'CACHE_TYPE': 'RedisCache',
    'CACHE_REDIS_URL': os.getenv('REDIS_URL', 'redis://localhost:6379/0'),
    'CACHE_DEFAULT_TIMEOUT': 300,  # 5 minutes default TTL
    'CACHE_KEY_PREFIX': 'medsearch:',  # Namespace to avoid key collisions with parent app
}


def init_cache(app, redis_url=None, cache_type=None):
    """
    Initialize the cache with the Flask app.

    Args:
        app: Flask application instance.
        redis_url: Optional Redis URL override.
        cache_type: Optional Flask-Caching backend name. Anything other than
                    'RedisCache' (e.g. 'SimpleCache', 'NullCache') is used as-is.

    Falls back to SimpleCache if the Redis connection fails.
    """
    config = _default_config.copy()
    config['CACHE_DEFAULT_TIMEOUT'] = app.config.get('CACHE_DEFAULT_TIMEOUT', 300)

    if redis_url:
        config['CACHE_REDIS_URL'] = redis_url

    if cache_type and cache_type != 'RedisCache':
        config['CACHE_TYPE'] = cache_type
        config.pop('CACHE_REDIS_URL', None)
        app.config.update(config)
        cache.init_app(app)
        logger.info("[Cache] Using %s", cache_type)
        return

    # Try Redis first, fall back to SimpleCache
    try:
        app.config.update(config)
        cache.init_app(app)
        with app.app_context():
            cache.set('_ping', 'pong', timeout=5)
            if cache.get('_ping') == 'pong':
                cache.delete('_ping')
                logger.info("[Cache] Redis connected successfully")
                return
    except Exception as e:
        logger.warning("[Cache] Redis unavailable (%s), falling back to SimpleCache", e)

    config['CACHE_TYPE'] = 'SimpleCache'
    config.pop('CACHE_REDIS_URL', None)
    app.config.update(config)
    cache.init_app(app)
    logger.info("[Cache] Using SimpleCache (in-memory)")


def make_cache_key_search(query):
    """
    Cache key for a validated SearchQuery.

    Coordinates are kept at full precision: a cached response must never
    include stores outside the requester's own radius.
    """
    return (
        f"search:{query.medicine_name.lower()}:"
        f"{query.origin.latitude!r}:{query.origin.longitude!r}:{query.max_distance_m!r}"
    )


def clear_search_cache():
    """
    Clear all search cache entries.

    Usage from a script (inside an app context):
        from app.cache import clear_search_cache
        clear_search_cache()
    """
    try:
        cache.clear()
        logger.info("[Cache] All search cache cleared")
    except Exception as e:
        logger.warning("[Cache] Could not clear cache: %s", e)
