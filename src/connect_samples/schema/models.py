from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

LogicalType = Literal[
    "singleLineString",
    "multipleLineString",
    "integer",
    "decimal",
    "boolean",
    "date",
    "time",
    "dateAndTime",
    "selectedFromList",
    "suggestedFromList",
    "geospatial",
    "geospatialArea",
]


class PossibleValue(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    value: str
    display_value: str = Field(alias="displayValue")


def possible_values(*values: str) -> tuple[PossibleValue, ...]:
    """Possible values whose display value is the value itself."""
    return tuple(PossibleValue(value=v, display_value=v) for v in values)


class PropertyType(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    logical_type: LogicalType
    possible_values: tuple[PossibleValue, ...] = ()


class ItemType(BaseModel):
    """An entity or link type. Property order is the declaration order."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    is_link: bool = False
    property_types: tuple[PropertyType, ...] = ()

    def property_type(self, name: str) -> PropertyType:
        for pt in self.property_types:
            if pt.name == name:
                return pt
        raise KeyError(f"{self.name} has no property type {name!r}")

    def has_property(self, name: str) -> bool:
        return any(pt.name == name for pt in self.property_types)


class ConnectorSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    entity_types: tuple[ItemType, ...] = ()
    link_types: tuple[ItemType, ...] = ()

    def entity_type(self, name: str) -> ItemType:
        for et in self.entity_types:
            if et.name == name:
                return et
        raise KeyError(f"schema {self.name!r} has no entity type {name!r}")

    def link_type(self, name: str) -> ItemType:
        for lt in self.link_types:
            if lt.name == name:
                return lt
        raise KeyError(f"schema {self.name!r} has no link type {name!r}")

    def item_type(self, type_id: str) -> ItemType | None:
        for it in (*self.entity_types, *self.link_types):
            if it.id == type_id:
                return it
        return None


def entity_type(type_id: str, name: str, *props: PropertyType) -> ItemType:
    return ItemType(id=type_id, name=name, is_link=False, property_types=props)


def link_type(type_id: str, name: str, *props: PropertyType) -> ItemType:
    return ItemType(id=type_id, name=name, is_link=True, property_types=props)


def prop(type_id: str, name: str, logical_type: LogicalType, values: tuple[PossibleValue, ...] = ()) -> PropertyType:
    return PropertyType(id=type_id, name=name, logical_type=logical_type, possible_values=values)
