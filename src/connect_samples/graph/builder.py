from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Protocol, Sequence

from connect_samples.errors import DataFormatError, ValidationError
from connect_samples.schema.models import ConnectorSchema, ItemType

from .identifiers import IdFactory, pair_key, plain_identifier
from .mapping import RecordMapping
from .models import RawRecord, RecordId, ResultEntity, ResultLink, Seed, SourceReference
from .values import coerce

logger = logging.getLogger(__name__)


class FriendRecord(Protocol):
    id: str
    friends: Sequence[str]


class ResultGraph:
    """Append-only accumulator of result entities and links for one invocation.

    Entities are keyed by (type id, identifier). Adding an entity whose key is
    already present returns the existing entity, so records that share a
    natural key (e.g. many complaints in one precinct) collapse to one node.
    Links are keyed the same way; a second link with the same key must join
    the same pair of entities.
    """

    def __init__(self, schema: ConnectorSchema, source: SourceReference | None = None):
        self.schema = schema
        self.source = source
        self._entities: dict[tuple[str, RecordId], ResultEntity] = {}
        self._links: dict[tuple[str, RecordId], ResultLink] = {}

    @property
    def entities(self) -> list[ResultEntity]:
        return list(self._entities.values())

    @property
    def links(self) -> list[ResultLink]:
        return list(self._links.values())

    def get_entity(self, item_type: ItemType, record_id: RecordId) -> ResultEntity | None:
        return self._entities.get((item_type.id, record_id))

    def get_link(self, item_type: ItemType, record_id: RecordId) -> ResultLink | None:
        return self._links.get((item_type.id, record_id))

    def __contains__(self, item: object) -> bool:
        if isinstance(item, ResultEntity):
            return self._entities.get((item.type_id, item.id)) is item
        if isinstance(item, ResultLink):
            return self._links.get((item.type_id, item.id)) is item
        return False

    def _check_type(self, item_type: ItemType, *, is_link: bool) -> None:
        if item_type.is_link != is_link or self.schema.item_type(item_type.id) != item_type:
            kind = "link" if is_link else "entity"
            raise ValueError(f"{item_type.name!r} is not a {kind} type of schema {self.schema.name!r}")

    def add_entity(
        self,
        item_type: ItemType,
        record_id: RecordId,
        properties: Mapping[str, Any] | None = None,
        *,
        source: SourceReference | None = None,
    ) -> ResultEntity:
        self._check_type(item_type, is_link=False)
        key = (item_type.id, record_id)
        existing = self._entities.get(key)
        if existing is not None:
            return existing

        entity = ResultEntity(item_type=item_type, id=record_id, source_reference=source or self.source)
        if properties:
            entity.set_properties(properties)
        self._entities[key] = entity
        return entity

    def add_entity_from_record(
        self,
        item_type: ItemType,
        record: RawRecord,
        mapping: RecordMapping,
        *,
        key: str,
        id_factory: IdFactory = plain_identifier,
        source: SourceReference | None = None,
    ) -> ResultEntity:
        """Build an entity from one source record.

        `key` is the record's natural key; `id_factory` turns it into either a
        plain string identifier or a structured source identifier. Absent
        optional fields are skipped. Absent or unparsable mandatory fields
        raise DataFormatError.
        """

        record_id = id_factory(key)
        existing = self.get_entity(item_type, record_id)
        if existing is not None:
            return existing

        values: dict[str, Any] = {}
        for name, spec in mapping.items():
            property_type = item_type.property_type(name)
            raw = spec.extract(record)
            if raw is None:
                if spec.mandatory:
                    raise DataFormatError(
                        f"{item_type.name} record {key!r} is missing mandatory field '{spec.describe()}'"
                    )
                continue
            try:
                values[name] = coerce(property_type, raw)
            except (TypeError, ValueError) as e:
                if spec.mandatory:
                    raise DataFormatError(
                        f"{item_type.name} record {key!r} has an invalid '{name}' value",
                        detail=f"{spec.describe()}={raw!r} is not a valid {property_type.logical_type}: {e}",
                    ) from e
                logger.warning(f"Dropping {item_type.name}.{name} for {key!r}: {raw!r} ({e})")

        entity = self.add_entity(item_type, record_id, source=source)
        entity.properties.update(values)
        return entity

    def add_entity_from_seed(self, seed: Seed) -> ResultEntity:
        """Wrap a seed as a graph node so links can reference it.

        No properties are copied; any set afterwards are edits to the seed.
        """

        item_type = self.schema.item_type(seed.type_id)
        if item_type is None or item_type.is_link:
            raise ValidationError(
                f"Seed '{seed.seed_id}' has type '{seed.type_id}', which is not an entity type of this connector"
            )
        key = (item_type.id, seed.seed_id)
        existing = self._entities.get(key)
        if existing is not None:
            return existing
        entity = ResultEntity(item_type=item_type, id=seed.seed_id, seed_id=seed.seed_id)
        self._entities[key] = entity
        return entity

    def add_link(
        self,
        item_type: ItemType,
        record_id: RecordId,
        from_end: ResultEntity,
        to_end: ResultEntity,
        *,
        source: SourceReference | None = None,
        direction: str = "WITH",
    ) -> ResultLink:
        self._check_type(item_type, is_link=True)
        for end in (from_end, to_end):
            if end not in self:
                raise ValueError(f"link {record_id!r} end {end.id!r} is not an entity of this result")

        key = (item_type.id, record_id)
        existing = self._links.get(key)
        if existing is not None:
            if {id(existing.from_end), id(existing.to_end)} != {id(from_end), id(to_end)}:
                raise DataFormatError(
                    f"{item_type.name} identifier {record_id!r} is used by two different links"
                )
            return existing

        link = ResultLink(
            item_type=item_type,
            id=record_id,
            from_end=from_end,
            to_end=to_end,
            source_reference=source or self.source,
            direction=direction,
        )
        self._links[key] = link
        return link

    def merge_friend_graph(
        self,
        seeds: Iterable[Seed],
        *,
        link_type: ItemType,
        lookup: Callable[[Callable[[Any], bool]], Iterable[FriendRecord]],
        extract_ids: Callable[[Seed], set[str]],
        add_person: Callable[["ResultGraph", Any, IdFactory], ResultEntity],
        id_factory: IdFactory = plain_identifier,
    ) -> None:
        """Add every seed's people, their friends, and one link per pair.

        A seed may stand for several merged source records, so all of its ids
        are matched. Link identifiers come from the sorted pair of source ids,
        so a pair reached from either side yields a single link.
        """

        for seed in seeds:
            ids = extract_ids(seed)
            people = list(lookup(lambda person: person.id in ids))
            logger.debug(f"Seed {seed.seed_id} resolved to {len(people)} of {len(ids)} ids")

            for person in people:
                friend_ids = set(person.friends)
                for friend in lookup(lambda candidate: candidate.id in friend_ids):
                    person_entity = add_person(self, person, id_factory)
                    friend_entity = add_person(self, friend, id_factory)
                    self.add_link(
                        link_type, id_factory(pair_key(person.id, friend.id)), person_entity, friend_entity
                    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "entities": [e.to_dict() for e in self._entities.values()],
            "links": [link.to_dict() for link in self._links.values()],
        }
