from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union

from connect_samples.errors import DataFormatError

from .models import RawRecord


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


@dataclass(frozen=True, slots=True)
class FromField:
    """Take a property value from one named record field."""

    field: str
    mandatory: bool = False

    def extract(self, record: RawRecord) -> Any | None:
        value = record.get(self.field)
        return value if _present(value) else None

    def describe(self) -> str:
        return self.field


@dataclass(frozen=True, slots=True)
class FromPoint:
    """Combine two scalar record fields into a geospatial point."""

    latitude: str
    longitude: str
    mandatory: bool = False

    def extract(self, record: RawRecord) -> tuple[Any, Any] | None:
        lat = record.get(self.latitude)
        lon = record.get(self.longitude)
        if not (_present(lat) and _present(lon)):
            return None
        return (lat, lon)

    def describe(self) -> str:
        return f"{self.latitude}/{self.longitude}"


FieldSpec = Union[FromField, FromPoint]
RecordMapping = Mapping[str, FieldSpec]


def require(record: RawRecord, field: str) -> str:
    """Return a natural-key field as text, or fail the invocation."""

    value = record.get(field)
    if not _present(value):
        raise DataFormatError(
            f"Source record is missing mandatory field '{field}'",
            detail=f"Available fields: {', '.join(sorted(record)) or 'none'}",
        )
    return str(value)
