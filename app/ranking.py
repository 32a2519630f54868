"""Result ranking."""


def rank_results(results):
    """
    Order search results nearest first.

    The sort is stable: stores at equal distance keep the order in which
    they were enumerated from the catalog.
    """
    return sorted(results, key=lambda r: r.distance_m)
