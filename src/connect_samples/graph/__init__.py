"""Entity/link result graph: records, identifiers and the builder."""

from .builder import ResultGraph
from .identifiers import custom_source_identifier, pair_key, plain_identifier
from .mapping import FromField, FromPoint, require
from .models import (
    ConnectorKey,
    DateAndTime,
    GeoPoint,
    ResultEntity,
    ResultLink,
    Seed,
    SourceIdentifier,
    SourceReference,
)

__all__ = [
    "ConnectorKey",
    "DateAndTime",
    "FromField",
    "FromPoint",
    "GeoPoint",
    "ResultEntity",
    "ResultGraph",
    "ResultLink",
    "Seed",
    "SourceIdentifier",
    "SourceReference",
    "custom_source_identifier",
    "pair_key",
    "plain_identifier",
    "require",
]
