import threading
import time

import pytest

from app.errors import SearchCancelled
from app.geo import distance
from app.models import SearchQuery, SearchResult
from app.ranking import rank_results
from app.search import search, search_concurrent, evaluate_store
from conftest import ORIGIN, make_medicine, make_store, north_of


def _query(name, max_distance_m=5000, origin=ORIGIN):
    return SearchQuery(medicine_name=name, origin=origin, max_distance_m=max_distance_m)


def test_paracetamol_scenario(paracetamol_catalog):
    results = search(_query('paracetamol'), paracetamol_catalog)

    assert [r.store.id for r in results] == ['A', 'B']
    assert results[0].distance_m == 0.0
    assert results[1].distance_m == pytest.approx(2000, abs=0.01)
    # Zero stock is still reported
    assert results[1].matched_medicines[0].stock == 0


def test_no_matching_medicine_gives_empty_result(paracetamol_catalog):
    assert search(_query('Ibuprofen'), paracetamol_catalog) == []


def test_empty_catalog_gives_empty_result():
    assert search(_query('paracetamol'), []) == []


def test_results_are_sorted_and_within_range(mixed_catalog):
    query = _query('aspirin', max_distance_m=5000)
    results = search(query, mixed_catalog)

    assert [r.store.id for r in results] == ['near', 'mid-aspirin']
    distances = [r.distance_m for r in results]
    assert distances == sorted(distances)
    for r in results:
        assert r.distance_m <= query.max_distance_m
        assert r.matched_medicines
        assert set(r.matched_medicines) <= set(r.store.medicines)


def test_only_matching_medicines_are_returned(mixed_catalog):
    near = search(_query('aspirin'), mixed_catalog)[0]
    assert [m.id for m in near.matched_medicines] == ['n2', 'n3']


def test_boundary_is_inclusive():
    store = make_store('edge', north_of(ORIGIN, 2500), [make_medicine('e1', 'Aspirin')])
    d = distance(ORIGIN, store.location)

    assert [r.store.id for r in search(_query('aspirin', max_distance_m=d), [store])] == ['edge']
    assert search(_query('aspirin', max_distance_m=d - 1), [store]) == []


def test_equal_distances_keep_catalog_order():
    location = north_of(ORIGIN, 700)
    catalog = [
        make_store(str(i), location, [make_medicine(f"m{i}", 'Cetirizine')])
        for i in range(6)
    ]
    catalog.insert(3, make_store('closer', ORIGIN, [make_medicine('c', 'Cetirizine')]))

    results = search(_query('cetirizine'), catalog)
    assert [r.store.id for r in results] == ['closer', '0', '1', '2', '3', '4', '5']


def test_rank_results_is_stable():
    store_x = make_store('x', ORIGIN)
    store_y = make_store('y', ORIGIN)
    store_z = make_store('z', ORIGIN)
    results = [
        SearchResult(store_x, (), 10.0),
        SearchResult(store_y, (), 5.0),
        SearchResult(store_z, (), 10.0),
    ]
    assert [r.store.id for r in rank_results(results)] == ['y', 'x', 'z']


def test_search_does_not_mutate_catalog(paracetamol_catalog):
    before = list(paracetamol_catalog)
    search(_query('para'), paracetamol_catalog)
    assert paracetamol_catalog == before


def test_evaluate_store_filters_distance_before_matching():
    store = make_store('far', north_of(ORIGIN, 10000), [make_medicine('1', 'Aspirin')])
    assert evaluate_store(_query('aspirin', max_distance_m=100), store) is None


def _big_catalog():
    catalog = []
    for i in range(200):
        name = 'Loratadine' if i % 3 else 'Omeprazole'
        catalog.append(make_store(f"s{i}", north_of(ORIGIN, (i % 17) * 250), [make_medicine(f"m{i}", name)]))
    return catalog


@pytest.mark.parametrize("workers", [1, 2, 3, 8])
def test_concurrent_search_matches_sequential(workers):
    catalog = _big_catalog()
    query = _query('loratadine', max_distance_m=3000)

    expected = search(query, catalog)
    assert expected
    assert search_concurrent(query, catalog, workers=workers) == expected


def test_cancel_event_aborts_search(paracetamol_catalog):
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(SearchCancelled):
        search(_query('paracetamol'), paracetamol_catalog, cancel_event=cancel)


def test_expired_deadline_aborts_search(paracetamol_catalog):
    with pytest.raises(SearchCancelled):
        search(_query('paracetamol'), paracetamol_catalog, deadline=time.monotonic() - 1)


def test_cancel_event_aborts_concurrent_search():
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(SearchCancelled):
        search_concurrent(_query('loratadine'), _big_catalog(), workers=4, cancel_event=cancel)


def test_unset_cancel_event_lets_search_complete(paracetamol_catalog):
    results = search(_query('paracetamol'), paracetamol_catalog,
                     cancel_event=threading.Event(), deadline=time.monotonic() + 60)
    assert len(results) == 2


def test_result_distance_is_not_rounded_past_the_radius():
    store = make_store('edge', north_of(ORIGIN, 999.996), [make_medicine('e1', 'Aspirin')])
    d = distance(ORIGIN, store.location)
    results = search(_query('aspirin', max_distance_m=d), [store])

    rendered = results[0].to_dict()
    assert rendered['distance_m'] == d
    assert rendered['distance_m'] <= d
    assert rendered['distance_km'] == 1.0
