"""
API Routes - Medicine Search Endpoints
======================================
The catalog is read from the configured source on each request (responses
are cached); the search itself runs in-process.
"""
import logging
import time

from flask import Blueprint, request, jsonify
from werkzeug.exceptions import HTTPException

from . import get_module_config, get_module_catalog
from .cache import cache, make_cache_key_search
from .errors import ValidationError, CatalogUnavailable, SearchCancelled
from .search import search, search_concurrent
from .validation import validate_search_query

logger = logging.getLogger(__name__)

api_bp = Blueprint('medicine_search_api', __name__)


@api_bp.errorhandler(ValidationError)
def handle_validation_error(e):
    return jsonify({
        'success': False,
        'error': "Invalid search parameters.",
        'errors': e.errors
    }), 400


@api_bp.errorhandler(CatalogUnavailable)
def handle_catalog_unavailable(e):
    return jsonify({
        'success': False,
        'error': f"Store catalog unavailable: {e}"
    }), 503


@api_bp.errorhandler(SearchCancelled)
def handle_search_cancelled(e):
    logger.warning("Search aborted: %s", e)
    return jsonify({
        'success': False,
        'error': str(e)
    }), 504


@api_bp.route('/health', methods=['GET'])
def health_check():
    """Check API and catalog source health."""
    config = get_module_config()
    status = {
        'api': 'ok',
        'catalog_source': config.CATALOG_SOURCE
    }
    if config.CATALOG_SOURCE == 'database':
        from .database import check_connection
        status['database'] = check_connection()
    return jsonify(status)


@api_bp.route('/search', methods=['GET'])
def search_medicine():
    """
    Find stores near a location that stock a medicine.

    Query Parameters:
        medicine_name (str): Text contained in the medicine name, case-insensitive (required)
        latitude (float): User's latitude (required)
        longitude (float): User's longitude (required)
        max_distance (float): Search radius in meters (default: 5000)

    Returns:
        JSON with the matching stores sorted by distance (nearest first).
        Each store lists only its matching medicines, including zero-stock
        and expired ones.
    """
    config = get_module_config()

    query = validate_search_query(
        medicine_name=request.args.get('medicine_name'),
        latitude=request.args.get('latitude'),
        longitude=request.args.get('longitude'),
        max_distance=request.args.get('max_distance', default=config.DEFAULT_SEARCH_RADIUS_M),
        max_distance_limit=config.max_distance_limit()
    )

    cache_key = make_cache_key_search(query)
    stores = cache.get(cache_key)

    if stores is None:
        catalog = get_module_catalog().fetch_stores()
        deadline = time.monotonic() + config.SEARCH_TIMEOUT_S if config.SEARCH_TIMEOUT_S > 0 else None

        if config.SEARCH_WORKERS > 1 and len(catalog) >= config.PARALLEL_THRESHOLD:
            results = search_concurrent(query, catalog, workers=config.SEARCH_WORKERS,
                                        deadline=deadline)
        else:
            results = search(query, catalog, deadline=deadline)

        stores = [r.to_dict() for r in results]
        cache.set(cache_key, stores)

    return jsonify({
        'success': True,
        'count': len(stores),
        'search_params': query.to_dict(),
        'stores': stores
    })


@api_bp.route('/stores', methods=['GET'])
def get_all_stores():
    """
    List the catalog's stores (read-only).

    Query Parameters:
        limit (int): Maximum number of results (default: 100)
    """
    limit = request.args.get('limit', type=int, default=100)
    catalog = get_module_catalog().fetch_stores()

    stores = []
    for store in catalog[:max(limit, 0)]:
        summary = store.summary()
        summary['medicine_count'] = len(store.medicines)
        stores.append(summary)

    return jsonify({
        'success': True,
        'count': len(stores),
        'stores': stores
    })


@api_bp.route('/stores/<store_id>', methods=['GET'])
def get_store(store_id):
    """Get one store with its full inventory."""
    for store in get_module_catalog().fetch_stores():
        if store.id == store_id:
            return jsonify({
                'success': True,
                'store': store.to_dict()
            })

    return jsonify({
        'success': False,
        'error': f"Store '{store_id}' not found."
    }), 404


@api_bp.errorhandler(Exception)
def handle_unexpected_error(e):
    # HTTP errors (404, 405, ...) keep their own response
    if isinstance(e, HTTPException):
        return e
    logger.exception("Unhandled error in medicine search API")
    return jsonify({
        'success': False,
        'error': f"An internal error occurred: {e}"
    }), 500
