"""Coercion of raw source values into the shapes declared by logical types."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from connect_samples.schema.models import PropertyType

from .geo import area_shapes
from .models import DateAndTime, GeoPoint

_STRING_TYPES = {"singleLineString", "multipleLineString", "suggestedFromList"}
_TRUE = {"true", "yes", "y", "1"}
_FALSE = {"false", "no", "n", "0"}


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"not an integer: {value!r}")
        return int(value)
    s = str(value).strip()
    try:
        return int(s)
    except ValueError:
        # Socrata serialises some integer columns as "1.0"
        try:
            d = Decimal(s)
        except InvalidOperation as e:
            raise ValueError(f"not an integer: {value!r}") from e
        if not d.is_finite() or d != d.to_integral_value():
            raise ValueError(f"not an integer: {value!r}")
        return int(d)


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"not a number: {value!r}") from e


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # Socrata floating timestamps look like 2021-12-31T00:00:00.000
    return date.fromisoformat(str(value).strip()[:10])


def _to_time(value: Any) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(str(value).strip())


def _to_date_and_time(value: Any) -> DateAndTime:
    if isinstance(value, DateAndTime):
        return value
    if isinstance(value, datetime):
        return DateAndTime(local_date_and_time=value, time_zone_id="UTC")
    if isinstance(value, Mapping):
        local = value.get("localDateAndTime") or value.get("local_date_and_time")
        if local is None:
            raise ValueError(f"missing localDateAndTime: {value!r}")
        return DateAndTime(
            local_date_and_time=local if isinstance(local, datetime) else datetime.fromisoformat(str(local)),
            time_zone_id=str(value.get("timeZoneId") or value.get("time_zone_id") or "UTC"),
            is_dst=bool(value.get("isDST", value.get("is_dst", False))),
        )
    return DateAndTime(local_date_and_time=datetime.fromisoformat(str(value).strip()), time_zone_id="UTC")


def _to_point(value: Any) -> GeoPoint:
    if isinstance(value, GeoPoint):
        return value
    if isinstance(value, Mapping):
        if value.get("type") != "Point":
            raise ValueError(f"not a GeoJSON point: {value!r}")
        lon, lat = value["coordinates"]
        return GeoPoint(longitude=_to_float(lon), latitude=_to_float(lat))
    # (latitude, longitude) pair of scalar source fields
    lat, lon = value
    return GeoPoint(longitude=_to_float(lon), latitude=_to_float(lat))


def _to_area(value: Any) -> Mapping[str, Any]:
    area_shapes(value)
    return value


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def coerce(property_type: PropertyType, value: Any) -> Any:
    """Convert `value` to the Python shape of `property_type.logical_type`.

    Raises ValueError when the value cannot be represented.
    """

    lt = property_type.logical_type
    if lt in _STRING_TYPES:
        return str(value)
    if lt == "selectedFromList":
        s = str(value)
        allowed = {pv.value for pv in property_type.possible_values}
        if allowed and s not in allowed:
            raise ValueError(f"{s!r} is not one of {sorted(allowed)}")
        return s
    if lt == "integer":
        return _to_int(value)
    if lt == "decimal":
        return _to_float(value)
    if lt == "boolean":
        return _to_bool(value)
    if lt == "date":
        return _to_date(value)
    if lt == "time":
        return _to_time(value)
    if lt == "dateAndTime":
        return _to_date_and_time(value)
    if lt == "geospatial":
        return _to_point(value)
    if lt == "geospatialArea":
        return _to_area(value)
    return value
