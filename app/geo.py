"""
Great-circle distance on a spherical Earth (haversine formula).
"""
from math import radians, cos, sin, asin, sqrt

EARTH_RADIUS_M = 6371000  # Mean radius of earth in meters


def haversine(lat1, lon1, lat2, lon2):
    """Distance in meters between two points given in decimal degrees."""
    if lat1 == lat2 and lon1 == lon2:
        return 0.0
    dLat = radians(lat2 - lat1)
    dLon = radians(lon2 - lon1)
    a = sin(dLat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dLon / 2) ** 2
    # Rounding can push a slightly above 1 for antipodal points; NaN is left to propagate
    if a > 1.0:
        a = 1.0
    c = 2 * asin(sqrt(a))
    return EARTH_RADIUS_M * c


def distance(a, b):
    """
    Great-circle distance in meters between two Coordinates.

    Symmetric, and exactly 0.0 for identical coordinates.
    """
    return haversine(a.latitude, a.longitude, b.latitude, b.longitude)
