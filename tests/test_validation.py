import pytest

from app.errors import ValidationError
from app.models import Coordinate
from app.validation import validate_search_query, validate_coordinate


def test_valid_query_is_normalized():
    query = validate_search_query('  Paracetamol ', '3.848', '11.502', '5000')
    assert query.medicine_name == 'Paracetamol'
    assert query.origin == Coordinate(3.848, 11.502)
    assert query.max_distance_m == 5000.0


def test_numeric_inputs_are_accepted():
    query = validate_search_query('aspirin', -90, 180, 0.5)
    assert query.origin == Coordinate(-90.0, 180.0)
    assert query.max_distance_m == 0.5


@pytest.mark.parametrize("kwargs, field", [
    ({'latitude': 91}, 'latitude'),
    ({'latitude': -90.0001}, 'latitude'),
    ({'longitude': -181}, 'longitude'),
    ({'longitude': 180.5}, 'longitude'),
    ({'medicine_name': ''}, 'medicine_name'),
    ({'medicine_name': '   '}, 'medicine_name'),
    ({'max_distance': 0}, 'max_distance'),
    ({'max_distance': -10}, 'max_distance'),
])
def test_single_violation_names_the_field(kwargs, field):
    params = {'medicine_name': 'aspirin', 'latitude': 0, 'longitude': 0, 'max_distance': 100}
    params.update(kwargs)
    with pytest.raises(ValidationError) as excinfo:
        validate_search_query(**params)
    assert list(excinfo.value.errors) == [field]
    assert excinfo.value.errors[field]


def test_all_violations_are_reported_together():
    with pytest.raises(ValidationError) as excinfo:
        validate_search_query('', 91, -181, 0)
    assert set(excinfo.value.errors) == {'medicine_name', 'latitude', 'longitude', 'max_distance'}


def test_out_of_range_message_is_human_readable():
    with pytest.raises(ValidationError) as excinfo:
        validate_search_query('aspirin', 91, 0, 100)
    assert excinfo.value.errors['latitude'] == "Latitude must be between -90 and 90."


@pytest.mark.parametrize("value", ['abc', 'nan', 'inf', '-inf', True, [1]])
def test_non_numeric_values_are_rejected(value):
    with pytest.raises(ValidationError) as excinfo:
        validate_search_query('aspirin', value, value, value)
    assert set(excinfo.value.errors) == {'latitude', 'longitude', 'max_distance'}


def test_missing_fields_are_required():
    with pytest.raises(ValidationError) as excinfo:
        validate_search_query(None, None, None, None)
    errors = excinfo.value.errors
    assert errors['medicine_name'] == "Medicine name is required."
    assert errors['latitude'] == "Latitude is required."
    assert errors['longitude'] == "Longitude is required."
    assert errors['max_distance'] == "Distance is required."


def test_long_medicine_name_is_accepted():
    query = validate_search_query('x' * 5000, 0, 0, 1)
    assert len(query.medicine_name) == 5000


def test_max_distance_limit_rejects_instead_of_clamping():
    with pytest.raises(ValidationError) as excinfo:
        validate_search_query('aspirin', 0, 0, 60000, max_distance_limit=50000)
    assert 'max_distance' in excinfo.value.errors
    query = validate_search_query('aspirin', 0, 0, 50000, max_distance_limit=50000)
    assert query.max_distance_m == 50000


def test_validate_coordinate():
    assert validate_coordinate('10', '-20') == Coordinate(10.0, -20.0)
    with pytest.raises(ValidationError) as excinfo:
        validate_coordinate(100, 200)
    assert set(excinfo.value.errors) == {'latitude', 'longitude'}
