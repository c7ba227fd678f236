from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Mapping, Union

from connect_samples.schema.models import ItemType

RawRecord = Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class SourceIdentifier:
    """A type-tagged natural key pointing back at the originating record."""

    type: str
    key: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "key": list(self.key)}


RecordId = Union[str, SourceIdentifier]


@dataclass(frozen=True, slots=True)
class SourceReference:
    name: str
    type: str
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out = {"source": {"name": self.name, "type": self.type}}
        if self.description is not None:
            out["userText"] = self.description
        return out


@dataclass(frozen=True, slots=True)
class DateAndTime:
    local_date_and_time: datetime
    time_zone_id: str
    is_dst: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "localDateAndTime": self.local_date_and_time.isoformat(),
            "timeZoneId": self.time_zone_id,
            "isDST": self.is_dst,
        }


@dataclass(frozen=True, slots=True)
class GeoPoint:
    longitude: float
    latitude: float

    @property
    def coordinates(self) -> tuple[float, float]:
        # GeoJSON position order
        return (self.longitude, self.latitude)

    def to_dict(self) -> dict[str, Any]:
        return {"type": "Point", "coordinates": list(self.coordinates)}


def to_json_value(value: Any) -> Any:
    if isinstance(value, (SourceIdentifier, SourceReference, DateAndTime, GeoPoint)):
        return value.to_dict()
    if isinstance(value, (date, time)):
        # datetime is a subclass of date
        return value.isoformat()
    return value


def record_id_to_json(record_id: RecordId) -> Any:
    return record_id.to_dict() if isinstance(record_id, SourceIdentifier) else record_id


@dataclass(frozen=True, slots=True)
class ConnectorKey:
    """Identifies a record this connector previously returned for a seed."""

    type_id: str
    id: str


@dataclass(slots=True)
class Seed:
    """A caller-supplied entity used as an input anchor. Read-only."""

    seed_id: str
    type_id: str
    properties: dict[str, Any] = field(default_factory=dict)
    source_identifiers: tuple[SourceIdentifier, ...] = ()
    connector_keys: tuple[ConnectorKey, ...] = ()

    def is_type(self, item_type: ItemType) -> bool:
        return self.type_id == item_type.id

    def get_property(self, item_type: ItemType, name: str) -> Any | None:
        if not self.is_type(item_type):
            return None
        return self.properties.get(name)

    def connector_keys_by_type(self, item_type: ItemType) -> list[ConnectorKey]:
        return [k for k in self.connector_keys if k.type_id == item_type.id]


@dataclass(slots=True)
class ResultEntity:
    item_type: ItemType
    id: RecordId
    properties: dict[str, Any] = field(default_factory=dict)
    source_reference: SourceReference | None = None
    seed_id: str | None = None

    @property
    def type_id(self) -> str:
        return self.item_type.id

    def get_property(self, name: str) -> Any | None:
        return self.properties.get(name)

    def set_property(self, name: str, value: Any) -> None:
        from .values import coerce

        self.properties[name] = coerce(self.item_type.property_type(name), value)

    def set_properties(self, values: Mapping[str, Any]) -> None:
        for name, value in values.items():
            self.set_property(name, value)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": record_id_to_json(self.id),
            "typeId": self.type_id,
            "properties": {k: to_json_value(v) for k, v in self.properties.items()},
        }
        if self.seed_id is not None:
            out["seedId"] = self.seed_id
        if self.source_reference is not None:
            out["sourceReference"] = self.source_reference.to_dict()
        return out


@dataclass(slots=True)
class ResultLink:
    item_type: ItemType
    id: RecordId
    from_end: ResultEntity
    to_end: ResultEntity
    properties: dict[str, Any] = field(default_factory=dict)
    source_reference: SourceReference | None = None
    direction: str = "WITH"

    @property
    def type_id(self) -> str:
        return self.item_type.id

    def get_property(self, name: str) -> Any | None:
        return self.properties.get(name)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": record_id_to_json(self.id),
            "typeId": self.type_id,
            "fromEndId": record_id_to_json(self.from_end.id),
            "toEndId": record_id_to_json(self.to_end.id),
            "linkDirection": self.direction,
            "properties": {k: to_json_value(v) for k, v in self.properties.items()},
        }
        if self.source_reference is not None:
            out["sourceReference"] = self.source_reference.to_dict()
        return out
