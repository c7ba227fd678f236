"""Declarative entity/link type schemas, loaded once at import time."""

from .example import EXAMPLE_SCHEMA
from .models import ConnectorSchema, ItemType, PossibleValue, PropertyType
from .nypd import NYPD_SCHEMA

SCHEMAS: dict[str, ConnectorSchema] = {s.name: s for s in (NYPD_SCHEMA, EXAMPLE_SCHEMA)}

__all__ = [
    "ConnectorSchema",
    "EXAMPLE_SCHEMA",
    "ItemType",
    "NYPD_SCHEMA",
    "PossibleValue",
    "PropertyType",
    "SCHEMAS",
]
