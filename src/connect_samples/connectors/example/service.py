from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from email.utils import format_datetime
from typing import Any

from connect_samples.asyncjobs import AsyncJob
from connect_samples.auth import API_KEY_AUTHENTICATOR
from connect_samples.graph.builder import ResultGraph
from connect_samples.graph.geo import point_in_area
from connect_samples.graph.identifiers import (
    CUSTOM_SOURCE_IDENTIFIER_TYPE,
    IdFactory,
    custom_source_identifier,
    plain_identifier,
)
from connect_samples.graph.models import DateAndTime, GeoPoint, ResultEntity, Seed, SourceReference
from connect_samples.schema.example import ADDRESS, EXAMPLE_SCHEMA, FRIENDS_WITH, PERSON, TWEET
from connect_samples.schema.models import PossibleValue
from connect_samples.services.models import (
    ConditionSpec,
    RequestInformation,
    SeedConstraint,
    ServiceDefinition,
    ServiceRequest,
)
from connect_samples.settings import settings

from .data import Person, lookup_people

logger = logging.getLogger(__name__)

EXAMPLE_SOURCE = SourceReference(
    name="Example source name",
    type="Example source type",
    description="An example source reference from a connected data source",
)

WILDCARD = "*"

NAME_CONTAINS = ConditionSpec(
    id="term",
    label="Name contains",
    logical_type="singleLineString",
    mandatory=True,
    default=WILDCARD,
)

LONDON_AREA: dict[str, Any] = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "properties": {},
            "geometry": {
                "type": "Polygon",
                "coordinates": [
                    [
                        [-0.725756, 51.198028],
                        [-0.725756, 51.750276],
                        [0.402121, 51.750276],
                        [0.402121, 51.198028],
                        [-0.725756, 51.198028],
                    ]
                ],
            },
        }
    ],
}

STATIONS: tuple[dict[str, Any], ...] = (
    {"id": "address-1", "first_line": "Piccadilly Circus Station", "postcode": "W1J 9HP", "coordinates": (-0.133869, 51.510067)},
    {"id": "address-2", "first_line": "Temple Station", "postcode": "WC2R 2PH", "coordinates": (-0.1142, 51.511)},
    {"id": "address-3", "first_line": "Hyde Park Corner Station", "postcode": "SW1X 7LY", "coordinates": (-0.15278, 51.50278)},
    {"id": "address-4", "first_line": "Birmingham New Street Station", "postcode": "B2 4QA", "coordinates": (-1.899, 52.4778)},
    {"id": "address-5", "first_line": "Beasdale Station", "postcode": "PH39 4NR", "coordinates": (-5.7636, 56.9002)},
)

TWEETS: tuple[dict[str, str], ...] = (
    {"id": "tweet-1", "user": "user1", "contents": "My first tweet"},
    {"id": "tweet-2", "user": "user2", "contents": "It's hot today"},
)

DATA_SOURCES = (
    PossibleValue(value="dataSource1", display_value="Data Source 1"),
    PossibleValue(value="dataSource2", display_value="Data Source 2"),
    PossibleValue(value="dataSource3", display_value="Data Source 3"),
    PossibleValue(value="dataSource4", display_value="Data Source 4"),
)


def contains_ignore_case(source: str, search_value: str) -> bool:
    return search_value.lower() in source.lower()


def add_person(graph: ResultGraph, person: Person, id_factory: IdFactory = plain_identifier) -> ResultEntity:
    born = date.fromisoformat(person.dob)
    return graph.add_entity(
        PERSON,
        id_factory(person.id),
        {
            "First Name": person.forename,
            "Last Name": person.surname,
            "Year of Birth": born,
            # rough age from the year of birth
            "Age": date.today().year - born.year,
            "SSN": person.ssn,
            "SSN Issued Date and Time": DateAndTime(
                local_date_and_time=datetime.fromisoformat(person.issued_date_and_time),
                time_zone_id="Europe/London",
                is_dst=False,
            ),
        },
    )


def ids_from_connector_keys(seed: Seed) -> set[str]:
    # A chart item holding several records gives one seed several keys.
    return {k.id for k in seed.connector_keys_by_type(PERSON)}


def ids_from_custom_source_identifiers(seed: Seed) -> set[str]:
    return {sid.key[0] for sid in seed.source_identifiers if sid.type == CUSTOM_SOURCE_IDENTIFIER_TYPE and sid.key}


def new_result() -> ResultGraph:
    return ResultGraph(EXAMPLE_SCHEMA, source=EXAMPLE_SOURCE)


def find_people(term: str, id_factory: IdFactory = plain_identifier) -> ResultGraph:
    result = new_result()

    def matches(person: Person) -> bool:
        return (
            term == WILDCARD
            or contains_ignore_case(person.forename, term)
            or contains_ignore_case(person.surname, term)
        )

    for person in lookup_people(matches):
        add_person(result, person, id_factory)
    return result


def friends_of_seeds(seeds, extract_ids, id_factory: IdFactory = plain_identifier) -> ResultGraph:
    result = new_result()
    result.merge_friend_graph(
        seeds,
        link_type=FRIENDS_WITH,
        lookup=lookup_people,
        extract_ids=extract_ids,
        add_person=add_person,
        id_factory=id_factory,
    )
    return result


def example_search(request: ServiceRequest) -> ResultGraph:
    return find_people(request.conditions["term"])


def example_search_custom_ids(request: ServiceRequest) -> ResultGraph:
    return find_people(request.conditions["term"], custom_source_identifier)


def find_like_this(request: ServiceRequest) -> ResultGraph:
    seed = request.seeds[0]
    forename = seed.get_property(PERSON, "First Name") or ""
    surname = seed.get_property(PERSON, "Last Name") or ""
    dob = seed.get_property(PERSON, "Year of Birth")
    use_year_of_birth = bool(request.conditions.get("use-year-of-birth"))
    charted = ids_from_connector_keys(seed)

    def matches(person: Person) -> bool:
        # skip records already on the chart
        if person.id in charted:
            return False
        return (
            person.forename == forename
            or person.surname == surname
            or (use_year_of_birth and bool(dob) and person.dob[:4] == str(dob)[:4])
        )

    result = new_result()
    for person in lookup_people(matches):
        add_person(result, person)
    return result


def expand_friends(request: ServiceRequest) -> ResultGraph:
    return friends_of_seeds(request.seeds, ids_from_connector_keys)


def expand_friends_custom_ids(request: ServiceRequest) -> ResultGraph:
    return friends_of_seeds(request.seeds, ids_from_custom_source_identifiers, custom_source_identifier)


def edit_middle_names(request: ServiceRequest) -> ResultGraph:
    result = new_result()
    for seed in request.seeds:
        if seed.is_type(PERSON):
            entity = result.add_entity_from_seed(seed)
            entity.set_property("Middle Name", "Returned middle name")
    return result


def async_search(request: ServiceRequest) -> AsyncJob:
    seconds = request.conditions.get("duration")
    job = AsyncJob(
        produce=lambda: find_people(WILDCARD),
        # an explicit 0 runs immediately; only a missing duration takes the default
        duration_seconds=seconds if seconds is not None else settings.async_default_duration_seconds,
        should_fail=bool(request.conditions.get("should-fail")),
    )
    started = format_datetime(datetime.now(timezone.utc), usegmt=True)
    job.add_substatus("information", f"Query started - {started}")
    return job


def api_auth_search(request: ServiceRequest) -> ResultGraph:
    result = new_result()
    for tweet in TWEETS:
        entity = result.add_entity(TWEET, tweet["id"])
        entity.set_property("Contents", tweet["contents"])
        entity.set_property("User name", tweet["user"])
        entity.set_property("Length", len(tweet["contents"]))
    return result


async def can_select_restricted_data_source(request_info: RequestInformation) -> bool:
    return "RestrictedDataSourceAccess" in request_info.user.groups


async def data_sources(request_info: RequestInformation) -> tuple[PossibleValue, ...]:
    return DATA_SOURCES


async def default_data_source(request_info: RequestInformation) -> str:
    return (await data_sources(request_info))[0].value


async def data_source_description(request_info: RequestInformation) -> str:
    if await can_select_restricted_data_source(request_info):
        return "A service which can search a selection of data sources"
    return "A service which can search a single data source"


async def hide_data_source_choice(request_info: RequestInformation) -> bool:
    return not await can_select_restricted_data_source(request_info)


def hide_data_source_service(request_info: RequestInformation) -> bool:
    return "DataSourceAccess" not in request_info.user.groups


async def search_results_from_data_source(data_source: str, search_term: str) -> list[str]:
    return [
        f"tweet {i} containing search term '{search_term}' from data source '{data_source}'" for i in (1, 2)
    ]


async def search_selected_data_source(request: ServiceRequest) -> ResultGraph:
    # A hidden condition arrives as None.
    data_source = request.conditions.get("data-source") or DATA_SOURCES[0].value
    search_term = request.conditions.get("search-term") or ""

    result = new_result()
    for i, text in enumerate(await search_results_from_data_source(data_source, search_term), start=1):
        entity = result.add_entity(TWEET, f"{data_source}-tweet-{i}")
        entity.set_property("Contents", text)
        entity.set_property("User name", "user1")
        entity.set_property("Length", len(text))
    return result


def stations_within_area(request: ServiceRequest) -> ResultGraph:
    area = request.conditions["area"]
    result = new_result()
    for station in STATIONS:
        if point_in_area(station["coordinates"], area):
            lon, lat = station["coordinates"]
            entity = result.add_entity(ADDRESS, station["id"])
            entity.set_property("First line", station["first_line"])
            entity.set_property("Postcode", station["postcode"])
            entity.set_property("Coordinates", GeoPoint(longitude=lon, latitude=lat))
    return result


def definitions() -> tuple[ServiceDefinition, ...]:
    person_seeds = SeedConstraint(types=(PERSON,), min=1, max=10)
    return (
        ServiceDefinition(
            id="example-search",
            name="Example Search",
            description=(
                "An example that queries a data set of people by searching for text in their names. "
                f"You can also use '{WILDCARD}' to retrieve all data."
            ),
            schema=EXAMPLE_SCHEMA,
            handler=example_search,
            conditions=(NAME_CONTAINS,),
            result_item_types=(PERSON,),
        ),
        ServiceDefinition(
            id="example-seeded-search-1",
            name="Example Seeded Search 1 ('find like this')",
            description=(
                "An example that queries a data set of people to find targets similar to those supplied as "
                "seeds, according to their given name, family name, or year of birth."
            ),
            schema=EXAMPLE_SCHEMA,
            handler=find_like_this,
            conditions=(ConditionSpec(id="use-year-of-birth", label="Consider year of birth", logical_type="boolean"),),
            seeds=SeedConstraint(types=(PERSON,), min=1, max=1),
            result_item_types=(PERSON,),
        ),
        ServiceDefinition(
            id="example-seeded-search-2",
            name="Example Seeded Search 2 ('expand')",
            description="An example that queries a data set of people to find the friends of those supplied as seeds.",
            schema=EXAMPLE_SCHEMA,
            handler=expand_friends,
            seeds=person_seeds,
            result_item_types=(PERSON, FRIENDS_WITH),
        ),
        ServiceDefinition(
            id="example-seeded-search-3",
            name="Example Seeded Search 3 ('edit property values')",
            description="An example that populates or replaces the middle names of people supplied as seeds.",
            schema=EXAMPLE_SCHEMA,
            handler=edit_middle_names,
            seeds=person_seeds,
            result_item_types=(PERSON,),
        ),
        ServiceDefinition(
            id="async-example-search",
            name="Async Example Search",
            description=(
                "An example async query that returns all the people and has a default polling interval of "
                f"{settings.async_polling_interval_seconds} s.\n\n"
                "The query will also provide a substatus with the query start time."
            ),
            schema=EXAMPLE_SCHEMA,
            handler=async_search,
            conditions=(
                ConditionSpec(
                    id="duration",
                    label="Duration in seconds",
                    logical_type="integer",
                    min_value=0,
                    default=settings.async_default_duration_seconds,
                ),
                ConditionSpec(id="should-fail", label="Should fail", logical_type="boolean", default=False),
            ),
            async_polling_interval=settings.async_polling_interval_seconds,
            result_item_types=(PERSON,),
        ),
        ServiceDefinition(
            id="api-auth-search",
            name="API Key Authenticated Search",
            description="An API key authenticated service. Authentication tokens expire after 1 min.",
            schema=EXAMPLE_SCHEMA,
            handler=api_auth_search,
            authenticator=API_KEY_AUTHENTICATOR.id,
            result_item_types=(TWEET,),
        ),
        ServiceDefinition(
            id="search-data-source",
            name="Search Within a Data Source",
            description=data_source_description,
            schema=EXAMPLE_SCHEMA,
            handler=search_selected_data_source,
            conditions=(
                ConditionSpec(
                    id="data-source",
                    label="Choose data source",
                    logical_type="selectedFromList",
                    possible_values=data_sources,
                    default=default_data_source,
                    hide=hide_data_source_choice,
                ),
                ConditionSpec(id="search-term", label="Search Term", logical_type="singleLineString"),
            ),
            hide=hide_data_source_service,
            result_item_types=(TWEET,),
        ),
        ServiceDefinition(
            id="stations-within-area",
            name="Search for Stations Within an Area",
            schema=EXAMPLE_SCHEMA,
            handler=stations_within_area,
            conditions=(
                ConditionSpec(id="area", label="The area", logical_type="geospatialArea", default=LONDON_AREA),
            ),
            result_item_types=(ADDRESS,),
        ),
        ServiceDefinition(
            id="example-search-custom-ids",
            name="Example Search with Custom Source Identifiers",
            description=(
                "An example that queries a data set of people by searching for text in their names. "
                f"You can also use '{WILDCARD}' to retrieve all data."
            ),
            schema=EXAMPLE_SCHEMA,
            handler=example_search_custom_ids,
            conditions=(NAME_CONTAINS,),
            result_item_types=(PERSON,),
        ),
        ServiceDefinition(
            id="example-seeded-search-2-custom-ids",
            name="Example Seeded Search 2 ('expand') with Custom Source Identifiers",
            description=(
                "An example that queries a data set of people to find the friends of those supplied as seeds "
                "using custom source identifiers."
            ),
            schema=EXAMPLE_SCHEMA,
            handler=expand_friends_custom_ids,
            seeds=person_seeds,
            result_item_types=(PERSON, FRIENDS_WITH),
        ),
    )
