"""
Search Query Validation
=======================
One rule set for every entry point: the HTTP boundary calls it on raw query
string values, and client code can call it as a pre-check before sending a
request.

All fields are checked independently and every violation is reported in a
single ValidationError.
"""
import math

from .errors import ValidationError
from .models import Coordinate, SearchQuery

LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)


def _to_number(value):
    """Return value as a finite float, or None if it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _check_range(errors, field, value, bounds, label):
    low, high = bounds
    if value is None:
        errors.setdefault(field, f"{label} is required.")
        return None
    number = _to_number(value)
    if number is None:
        errors[field] = f"{label} must be a number."
        return None
    if not (low <= number <= high):
        errors[field] = f"{label} must be between {low:g} and {high:g}."
        return None
    return number


def validate_coordinate(latitude, longitude):
    """
    Validate a latitude/longitude pair. Out-of-range values are rejected, never clamped.

    Returns:
        Coordinate

    Raises:
        ValidationError: with 'latitude' and/or 'longitude' entries.
    """
    errors = {}
    lat = _check_range(errors, 'latitude', latitude, LATITUDE_RANGE, 'Latitude')
    lon = _check_range(errors, 'longitude', longitude, LONGITUDE_RANGE, 'Longitude')
    if errors:
        raise ValidationError(errors)
    return Coordinate(latitude=lat, longitude=lon)


def validate_search_query(medicine_name, latitude, longitude, max_distance,
                          max_distance_limit=None):
    """
    Check and normalize the four search inputs.

    Args:
        medicine_name: Text to look for in medicine names (trimmed).
        latitude: Searcher latitude, -90..90.
        longitude: Searcher longitude, -180..180.
        max_distance: Search radius in meters, strictly positive.
        max_distance_limit: Optional transport-level upper bound for max_distance.

    Returns:
        SearchQuery: the normalized, immutable query.

    Raises:
        ValidationError: listing every offending field.
    """
    errors = {}

    name = None
    if medicine_name is None:
        errors['medicine_name'] = "Medicine name is required."
    elif not isinstance(medicine_name, str):
        errors['medicine_name'] = "Medicine name must be text."
    else:
        name = medicine_name.strip()
        if not name:
            errors['medicine_name'] = "Medicine name is required."

    try:
        origin = validate_coordinate(latitude, longitude)
    except ValidationError as e:
        errors.update(e.errors)
        origin = None

    distance = None
    if max_distance is None:
        errors['max_distance'] = "Distance is required."
    else:
        distance = _to_number(max_distance)
        if distance is None:
            errors['max_distance'] = "Distance must be a number."
        elif distance <= 0:
            errors['max_distance'] = "Distance must be greater than zero."
        elif max_distance_limit is not None and distance > max_distance_limit:
            errors['max_distance'] = f"Distance must not exceed {max_distance_limit:g} meters."

    if errors:
        raise ValidationError(errors)

    return SearchQuery(medicine_name=name, origin=origin, max_distance_m=distance)
