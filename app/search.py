"""
Medicine Search
===============
Finds the stores within a radius that stock a medicine matching the query,
nearest first.

The search is pure: the catalog is read, never modified, and no state is
kept between calls. A caller (e.g. an HTTP request handler) can abort a
running search with a threading.Event and/or a time.monotonic() deadline;
both are checked between store evaluations.
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor

from .errors import SearchCancelled
from .geo import distance
from .matcher import matches
from .models import SearchResult
from .ranking import rank_results

logger = logging.getLogger(__name__)


def _check_cancelled(cancel_event, deadline):
    if cancel_event is not None and cancel_event.is_set():
        raise SearchCancelled("Search cancelled by caller.")
    if deadline is not None and time.monotonic() >= deadline:
        raise SearchCancelled("Search timed out.")


def evaluate_store(query, store):
    """
    Apply the distance and name filters to one store.

    Returns:
        SearchResult, or None if the store is out of range or has no match.
    """
    d = distance(query.origin, store.location)
    # Inclusive at the boundary; a NaN distance never qualifies
    if not d <= query.max_distance_m:
        return None
    matched = matches(query, store)
    if not matched:
        return None
    return SearchResult(store=store, matched_medicines=tuple(matched), distance_m=d)


def search(query, catalog, cancel_event=None, deadline=None):
    """
    Search the catalog for stores near query.origin stocking query.medicine_name.

    Args:
        query: A validated SearchQuery.
        catalog: Sequence of Store.
        cancel_event: Optional threading.Event; when set the search aborts.
        deadline: Optional time.monotonic() value after which the search aborts.

    Returns:
        list of SearchResult sorted by ascending distance (possibly empty).

    Raises:
        SearchCancelled: if cancelled or past the deadline.
    """
    results = []
    for store in catalog:
        _check_cancelled(cancel_event, deadline)
        result = evaluate_store(query, store)
        if result is not None:
            results.append(result)
    return rank_results(results)


def _evaluate_chunk(query, indexed_stores, cancel_event, deadline):
    found = []
    for index, store in indexed_stores:
        _check_cancelled(cancel_event, deadline)
        result = evaluate_store(query, store)
        if result is not None:
            found.append((index, result))
    return found


def search_concurrent(query, catalog, workers=4, cancel_event=None, deadline=None):
    """
    Same contract as search(), with the catalog split across worker threads.

    Each worker evaluates a contiguous slice of the catalog. Partial results
    carry their catalog index so that, after joining, catalog order is
    restored before the stable ranking runs.
    """
    stores = list(catalog)
    if workers <= 1 or len(stores) <= 1:
        return search(query, stores, cancel_event=cancel_event, deadline=deadline)

    indexed = list(enumerate(stores))
    chunk_size = -(-len(indexed) // workers)
    chunks = [indexed[i:i + chunk_size] for i in range(0, len(indexed), chunk_size)]

    partials = []
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(_evaluate_chunk, query, chunk, cancel_event, deadline)
            for chunk in chunks
        ]
        try:
            for future in futures:
                partials.extend(future.result())
        except SearchCancelled:
            for future in futures:
                future.cancel()
            raise

    partials.sort(key=lambda pair: pair[0])
    logger.debug("Concurrent search over %d stores in %d chunks: %d hits",
                 len(stores), len(chunks), len(partials))
    return rank_results(result for _, result in partials)
