"""
Medicine name matching.

A medicine matches when its name contains the searched text, ignoring case.
Stock level and expiry date play no part: zero-stock and expired line items
are returned so the caller can flag them.
"""


def name_matches(medicine_name, candidate):
    """True if candidate contains medicine_name as a case-insensitive substring."""
    return medicine_name.lower() in candidate.lower()


def matches(query, store):
    """
    Medicines of a store matching the query, in the store's inventory order.

    Returns:
        list of Medicine (possibly empty).
    """
    return [m for m in store.medicines if name_matches(query.medicine_name, m.name)]
