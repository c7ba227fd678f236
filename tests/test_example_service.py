"""
Tests for the example connector services
"""

from datetime import date

import pytest

from connect_samples.connectors.example import service
from connect_samples.graph.geo import point_in_area
from connect_samples.graph.identifiers import CUSTOM_SOURCE_IDENTIFIER_TYPE
from connect_samples.graph.models import DateAndTime, SourceIdentifier
from connect_samples.schema.example import FRIENDS_WITH, PERSON
from connect_samples.services.models import RequestInformation, ServiceRequest, UserInformation


def _ids(graph):
    return [e.id for e in graph.entities]


@pytest.mark.unit
def test_wildcard_returns_everyone():
    graph = service.example_search(ServiceRequest(conditions={"term": "*"}))
    assert _ids(graph) == ["p1", "p2", "p3", "p4", "p5", "p6", "p7", "p8"]


@pytest.mark.unit
def test_search_is_case_insensitive_on_either_name():
    graph = service.example_search(ServiceRequest(conditions={"term": "SMI"}))
    assert _ids(graph) == ["p1", "p2"]


@pytest.mark.unit
def test_person_properties():
    graph = service.example_search(ServiceRequest(conditions={"term": "Mary"}))
    mary = graph.entities[0]

    assert mary.get_property("Year of Birth") == date(1980, 3, 14)
    assert mary.get_property("Age") == date.today().year - 1980
    issued = mary.get_property("SSN Issued Date and Time")
    assert isinstance(issued, DateAndTime)
    assert issued.time_zone_id == "Europe/London" and issued.is_dst is False
    assert mary.source_reference == service.EXAMPLE_SOURCE


@pytest.mark.unit
def test_search_with_custom_source_identifiers():
    graph = service.example_search_custom_ids(ServiceRequest(conditions={"term": "Mary"}))
    assert _ids(graph) == [SourceIdentifier(type=CUSTOM_SOURCE_IDENTIFIER_TYPE, key=("p1",))]


@pytest.mark.unit
def test_find_like_this_excludes_charted_records(person_seed):
    seed = person_seed("s", "p1", properties={"First Name": "Mary", "Last Name": "Smith"})
    graph = service.find_like_this(ServiceRequest(seeds=(seed,)))
    assert _ids(graph) == ["p2"]


@pytest.mark.unit
def test_find_like_this_considers_year_of_birth(person_seed):
    seed = person_seed("s", "p1", properties={"First Name": "Mary", "Last Name": "Smith", "Year of Birth": "1980-03-14"})

    without = service.find_like_this(ServiceRequest(conditions={"use-year-of-birth": False}, seeds=(seed,)))
    with_year = service.find_like_this(ServiceRequest(conditions={"use-year-of-birth": True}, seeds=(seed,)))

    assert _ids(without) == ["p2"]
    assert _ids(with_year) == ["p2", "p3"]


@pytest.mark.unit
def test_expand_friends(person_seed):
    graph = service.expand_friends(ServiceRequest(seeds=(person_seed("s", "p4"),)))

    assert sorted(link.id for link in graph.links) == ["p2-p4", "p4-p5"]
    assert all(link.type_id == FRIENDS_WITH.id for link in graph.links)


@pytest.mark.unit
def test_expand_friends_with_custom_source_identifiers(person_seed):
    seed = person_seed("s")
    seed.source_identifiers = (
        SourceIdentifier(type=CUSTOM_SOURCE_IDENTIFIER_TYPE, key=("p6",)),
        SourceIdentifier(type="someone else's", key=("p1",)),
    )
    graph = service.expand_friends_custom_ids(ServiceRequest(seeds=(seed,)))

    assert [link.id.key for link in graph.links] == [("p5-p6",)]


@pytest.mark.unit
def test_edit_middle_names(person_seed):
    seeds = (person_seed("s1", "p1"), person_seed("s2", "p2"))
    graph = service.edit_middle_names(ServiceRequest(seeds=seeds))

    assert [(e.seed_id, e.properties) for e in graph.entities] == [
        ("s1", {"Middle Name": "Returned middle name"}),
        ("s2", {"Middle Name": "Returned middle name"}),
    ]


@pytest.mark.unit
def test_stations_within_default_area():
    graph = service.stations_within_area(ServiceRequest(conditions={"area": service.LONDON_AREA}))
    assert _ids(graph) == ["address-1", "address-2", "address-3"]
    coordinates = graph.entities[1].get_property("Coordinates")
    assert coordinates.to_dict() == {"type": "Point", "coordinates": [-0.1142, 51.511]}


@pytest.mark.unit
def test_point_in_polygon_with_hole():
    outer = [[0, 0], [10, 0], [10, 10], [0, 10], [0, 0]]
    hole = [[4, 4], [6, 4], [6, 6], [4, 6], [4, 4]]
    area = {
        "type": "FeatureCollection",
        "features": [{"type": "Feature", "geometry": {"type": "Polygon", "coordinates": [outer, hole]}}],
    }
    assert point_in_area((1, 1), area)
    assert not point_in_area((5, 5), area)
    assert not point_in_area((11, 5), area)
    assert point_in_area((0, 5), area)
    assert point_in_area((4, 5), area)


@pytest.mark.unit
def test_api_auth_search_returns_tweets():
    graph = service.api_auth_search(ServiceRequest())
    assert [(e.id, e.get_property("Length")) for e in graph.entities] == [("tweet-1", 14), ("tweet-2", 14)]


@pytest.mark.asyncio
async def test_data_source_search_uses_chosen_source():
    graph = await service.search_selected_data_source(
        ServiceRequest(conditions={"data-source": "dataSource2", "search-term": "rain"})
    )
    assert _ids(graph) == ["dataSource2-tweet-1", "dataSource2-tweet-2"]
    assert "'rain'" in graph.entities[0].get_property("Contents")


@pytest.mark.asyncio
async def test_data_source_search_defaults_when_condition_hidden():
    graph = await service.search_selected_data_source(
        ServiceRequest(conditions={"data-source": None, "search-term": "x"})
    )
    assert _ids(graph)[0] == "dataSource1-tweet-1"


@pytest.mark.asyncio
async def test_data_source_visibility_follows_groups():
    restricted = RequestInformation(user=UserInformation(groups=("DataSourceAccess", "RestrictedDataSourceAccess")))
    plain = RequestInformation(user=UserInformation(groups=("DataSourceAccess",)))

    assert service.hide_data_source_service(RequestInformation())
    assert not service.hide_data_source_service(plain)
    assert await service.hide_data_source_choice(plain)
    assert not await service.hide_data_source_choice(restricted)
    assert await service.data_source_description(restricted) == "A service which can search a selection of data sources"


@pytest.mark.unit
def test_async_search_starts_job_with_substatus():
    job = service.async_search(ServiceRequest(conditions={"duration": 3, "should-fail": False}))

    assert job.duration_seconds == 3
    assert job.substatuses[0].type == "information"
    assert job.substatuses[0].message.startswith("Query started - ")
    assert job.substatuses[0].message.endswith("GMT")


@pytest.mark.unit
@pytest.mark.parametrize("conditions, expected", [({"duration": 0}, 0), ({}, 10), ({"duration": None}, 10)])
def test_async_search_duration_zero_is_kept(conditions, expected):
    job = service.async_search(ServiceRequest(conditions=conditions))
    assert job.duration_seconds == expected
