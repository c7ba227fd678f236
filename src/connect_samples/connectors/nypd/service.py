from __future__ import annotations

import logging
from typing import Callable

from connect_samples.errors import ValidationError
from connect_samples.graph.builder import ResultGraph
from connect_samples.graph.models import Seed
from connect_samples.schema.models import possible_values
from connect_samples.schema.nypd import COMPLAINT, LOCATED_AT, LOCATION, NYPD_SCHEMA, PERSON, SUSPECT_OF, VICTIM_OF
from connect_samples.services.models import ConditionSpec, SeedConstraint, ServiceDefinition, ServiceRequest
from connect_samples.settings import settings

from .client import NypdClient
from .mapping import NYPD_SOURCE, add_complaint, add_link, add_location, add_suspect, add_victim

logger = logging.getLogger(__name__)

BOROUGHS = possible_values("BROOKLYN", "BRONX", "MANHATTAN", "QUEENS", "STATEN ISLAND")
LAW_CATEGORIES = possible_values("FELONY", "MISDEMEANOR", "VIOLATION")


def soql_string(value: str) -> str:
    """Quote a SoQL string literal."""
    return "'" + value.replace("'", "''") + "'"


def _seed_text(seed: Seed, name: str) -> str:
    item_type = COMPLAINT if seed.is_type(COMPLAINT) else LOCATION
    value = seed.get_property(item_type, name)
    if value is None or str(value).strip() == "":
        raise ValidationError(f"Seed '{seed.seed_id}' has no '{name}' value")
    return str(value)


def _seed_int(seed: Seed, name: str) -> int:
    text = _seed_text(seed, name)
    try:
        return int(text)
    except ValueError:
        raise ValidationError(f"Seed '{seed.seed_id}' has a non-numeric '{name}' value: {text!r}") from None


class NypdConnector:
    """Services over the NYPD complaint dataset.

    Each invocation opens its own client and performs its fetches in order.
    """

    def __init__(self, client_factory: Callable[[], NypdClient] = NypdClient):
        self.client_factory = client_factory

    def new_result(self) -> ResultGraph:
        return ResultGraph(NYPD_SCHEMA, source=NYPD_SOURCE)

    async def fetch(self, *, limit: int, where: str | None = None):
        client = self.client_factory()
        try:
            return await client.request_data(limit=limit, where=where)
        finally:
            await client.aclose()

    async def get_all(self, request: ServiceRequest) -> ResultGraph:
        result = self.new_result()
        data = await self.fetch(limit=settings.nypd_get_all_limit)

        for datum in data:
            location = add_location(result, datum)
            complaint = add_complaint(result, datum)
            suspect = add_suspect(result, datum)
            victim = add_victim(result, datum)

            add_link(result, LOCATED_AT, datum, complaint, location)
            add_link(result, VICTIM_OF, datum, victim, complaint)
            add_link(result, SUSPECT_OF, datum, suspect, complaint)

        return result

    async def find_complaint(self, request: ServiceRequest) -> ResultGraph:
        borough = request.conditions["borough"]
        law_category = request.conditions["law-category"]
        where = f"boro_nm={soql_string(borough)} AND law_cat_cd={soql_string(law_category)}"

        result = self.new_result()
        for datum in await self.fetch(limit=settings.nypd_search_limit, where=where):
            add_complaint(result, datum)
        return result

    async def find_similar_complaint(self, request: ServiceRequest) -> ResultGraph:
        seed = request.seeds[0]
        level_of_offence = seed.get_property(COMPLAINT, "Level Of Offence") or ""

        result = self.new_result()
        where = f"law_cat_cd={soql_string(str(level_of_offence))}"
        for datum in await self.fetch(limit=settings.nypd_search_limit, where=where):
            add_complaint(result, datum)
        return result

    async def expand(self, request: ServiceRequest) -> ResultGraph:
        seed = request.seeds[0]
        is_complaint = seed.is_type(COMPLAINT)
        if is_complaint:
            where = f"cmplnt_num={soql_string(_seed_text(seed, 'Complaint Number'))}"
        else:
            borough = _seed_text(seed, "Borough Name")
            where = f"boro_nm={soql_string(borough)} AND addr_pct_cd={_seed_int(seed, 'Precinct Code')}"

        data = await self.fetch(limit=settings.nypd_search_limit, where=where)

        result = self.new_result()
        seed_entity = result.add_entity_from_seed(seed)

        for datum in data:
            complaint = seed_entity if is_complaint else add_complaint(result, datum)
            location = add_location(result, datum) if is_complaint else seed_entity
            suspect = add_suspect(result, datum)
            victim = add_victim(result, datum)

            add_link(result, LOCATED_AT, datum, complaint, location)
            add_link(result, VICTIM_OF, datum, victim, complaint)
            add_link(result, SUSPECT_OF, datum, suspect, complaint)

        return result

    async def expand_with_conditions(self, request: ServiceRequest) -> ResultGraph:
        seed = request.seeds[0]
        include_people = bool(request.conditions.get("person"))
        where = f"cmplnt_num={soql_string(_seed_text(seed, 'Complaint Number'))}"
        data = await self.fetch(limit=settings.nypd_search_limit, where=where)

        result = self.new_result()
        seed_entity = result.add_entity_from_seed(seed)

        for datum in data:
            if include_people:
                suspect = add_suspect(result, datum)
                victim = add_victim(result, datum)
                add_link(result, SUSPECT_OF, datum, suspect, seed_entity)
                add_link(result, VICTIM_OF, datum, victim, seed_entity)

            location = add_location(result, datum)
            add_link(result, LOCATED_AT, datum, seed_entity, location)

        return result

    def definitions(self) -> tuple[ServiceDefinition, ...]:
        return (
            ServiceDefinition(
                id="nypd-get-all",
                name="NYPD Connector: Get all",
                description="A service that retrieves all data.",
                schema=NYPD_SCHEMA,
                handler=self.get_all,
                result_item_types=(COMPLAINT, LOCATION, PERSON, LOCATED_AT, SUSPECT_OF, VICTIM_OF),
            ),
            ServiceDefinition(
                id="nypd-search",
                name="NYPD Connector: Search",
                description="A service for conditional searches.",
                schema=NYPD_SCHEMA,
                handler=self.find_complaint,
                conditions=(
                    ConditionSpec(
                        id="borough",
                        label="Borough name",
                        logical_type="selectedFromList",
                        mandatory=True,
                        possible_values=BOROUGHS,
                    ),
                    ConditionSpec(
                        id="law-category",
                        label="Law category",
                        logical_type="selectedFromList",
                        mandatory=True,
                        possible_values=LAW_CATEGORIES,
                    ),
                ),
                result_item_types=(COMPLAINT,),
            ),
            ServiceDefinition(
                id="nypd-find-similar",
                name="NYPD Connector: Find like this complaint",
                description="A service that finds a similar complaint.",
                schema=NYPD_SCHEMA,
                handler=self.find_similar_complaint,
                seeds=SeedConstraint(types=(COMPLAINT,), min=1, max=1),
                result_item_types=(COMPLAINT,),
            ),
            ServiceDefinition(
                id="nypd-expand",
                name="NYPD Connector: Expand",
                description="A service that executes an expand operation on a seed.",
                schema=NYPD_SCHEMA,
                handler=self.expand,
                seeds=SeedConstraint(types=(COMPLAINT, LOCATION), min=1, max=1),
                result_item_types=(COMPLAINT, LOCATION, PERSON, LOCATED_AT, SUSPECT_OF, VICTIM_OF),
            ),
            ServiceDefinition(
                id="nypd-expand-with-conditions",
                name="NYPD Connector: Expand with conditions",
                description="A service that executes an expand operation on a seed, with conditions.",
                schema=NYPD_SCHEMA,
                handler=self.expand_with_conditions,
                conditions=(ConditionSpec(id="person", label="Person", logical_type="boolean"),),
                seeds=SeedConstraint(types=(COMPLAINT,), min=1, max=1),
                result_item_types=(LOCATION, PERSON, LOCATED_AT, SUSPECT_OF, VICTIM_OF),
            ),
        )
