"""
Search Data Model
=================
Immutable value objects shared by the validator, the search core and the
catalog collaborators.

Catalog records come from the external store API in camelCase
(storeId, contactNumber, batchNumber, ...). snake_case keys, as produced by
the database catalog, are accepted as well.
"""
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple


def _pick(record, *keys, default=None):
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


def _require_id(record, *keys):
    value = _pick(record, *keys)
    if value is None or str(value).strip() == '':
        raise KeyError(keys[0])
    return str(value)


def _parse_date(value):
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # Accepts plain dates and full ISO timestamps ("2026-01-31T00:00:00.000Z")
    return date.fromisoformat(str(value)[:10])


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def __post_init__(self):
        # Bounds are enforced for every coordinate, including catalog data
        for label, value, bound in (('latitude', self.latitude, 90), ('longitude', self.longitude, 180)):
            if not math.isfinite(value) or not -bound <= value <= bound:
                raise ValueError(f"{label} {value!r} outside [-{bound}, {bound}]")

    def to_dict(self):
        return {'latitude': self.latitude, 'longitude': self.longitude}


@dataclass(frozen=True)
class Medicine:
    id: str
    name: str
    manufacturer: str
    batch_number: str
    expiry_date: Optional[date]
    price: float
    stock: int

    def __post_init__(self):
        if not self.id:
            raise ValueError("medicine id is required")
        if not self.name.strip():
            raise ValueError("medicine name is empty")
        if not self.price > 0:
            raise ValueError(f"price must be positive, got {self.price!r}")
        if self.stock < 0:
            raise ValueError(f"stock must not be negative, got {self.stock!r}")

    @classmethod
    def from_dict(cls, record):
        """
        Build a Medicine from a catalog record.

        Raises:
            KeyError, TypeError, ValueError: if the record is malformed.
        """
        return cls(
            id=_require_id(record, 'medicineId', 'id'),
            name=str(record['name']),
            manufacturer=str(_pick(record, 'manufacturer', default='')),
            batch_number=str(_pick(record, 'batchNumber', 'batch_number', default='')),
            expiry_date=_parse_date(_pick(record, 'expiryDate', 'expiry_date')),
            price=float(record['price']),
            stock=int(_pick(record, 'stock', default=0)),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'manufacturer': self.manufacturer,
            'batch_number': self.batch_number,
            'expiry_date': self.expiry_date.isoformat() if self.expiry_date else None,
            'price': self.price,
            'stock': self.stock,
        }


@dataclass(frozen=True)
class Store:
    id: str
    name: str
    address: str
    contact_number: str
    location: Coordinate
    medicines: Tuple[Medicine, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.id:
            raise ValueError("store id is required")

    @classmethod
    def from_dict(cls, record):
        """
        Build a Store (with its embedded medicines) from a catalog record.

        Raises:
            KeyError, TypeError, ValueError: if the record is malformed.
        """
        location = Coordinate(
            latitude=float(record['latitude']),
            longitude=float(record['longitude']),
        )
        medicines = tuple(Medicine.from_dict(m) for m in record.get('medicines') or [])
        return cls(
            id=_require_id(record, 'storeId', 'id'),
            name=str(record['name']),
            address=str(_pick(record, 'address', default='')),
            contact_number=str(_pick(record, 'contactNumber', 'contact_number', default='')),
            location=location,
            medicines=medicines,
        )

    def summary(self):
        """Presentation fields, without the inventory."""
        return {
            'id': self.id,
            'name': self.name,
            'address': self.address,
            'contact_number': self.contact_number,
            'latitude': self.location.latitude,
            'longitude': self.location.longitude,
        }

    def to_dict(self):
        data = self.summary()
        data['medicines'] = [m.to_dict() for m in self.medicines]
        return data


@dataclass(frozen=True)
class SearchQuery:
    medicine_name: str
    origin: Coordinate
    max_distance_m: float

    def to_dict(self):
        return {
            'medicine_name': self.medicine_name,
            'latitude': self.origin.latitude,
            'longitude': self.origin.longitude,
            'max_distance_m': self.max_distance_m,
        }


@dataclass(frozen=True)
class SearchResult:
    store: Store
    matched_medicines: Tuple[Medicine, ...]
    distance_m: float

    def to_dict(self):
        """Store presentation fields plus the matched medicines only."""
        data = self.store.summary()
        # Unrounded: a rounded value could read above the requested radius
        data['distance_m'] = self.distance_m
        data['distance_km'] = round(self.distance_m / 1000, 2)
        data['medicines'] = [m.to_dict() for m in self.matched_medicines]
        return data
