from __future__ import annotations

from typing import Callable

from .models import RecordId, SourceIdentifier

IdFactory = Callable[[str], RecordId]

# Must stay unique to the example data source; do not reuse elsewhere.
CUSTOM_SOURCE_IDENTIFIER_TYPE = "This value should be unique to your data source - do not reuse"


def plain_identifier(key: str) -> RecordId:
    return key


def custom_source_identifier(key: str) -> RecordId:
    return SourceIdentifier(type=CUSTOM_SOURCE_IDENTIFIER_TYPE, key=(key,))


def pair_key(a: str, b: str) -> str:
    """Order-independent key for an undirected pair of source ids."""
    return "-".join(sorted((a, b)))
