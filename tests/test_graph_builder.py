"""
Tests for the result graph builder
"""

from datetime import date, time

import pytest

from connect_samples.connectors.example.data import PEOPLE, Person, lookup_people
from connect_samples.connectors.example.service import add_person
from connect_samples.connectors.nypd.mapping import (
    COMPLAINT_FIELDS,
    LOCATION_FIELDS,
    NYPD_SOURCE,
    add_complaint,
    add_location,
)
from connect_samples.errors import DataFormatError, ValidationError
from connect_samples.graph import GeoPoint, ResultGraph, Seed, SourceIdentifier
from connect_samples.graph.identifiers import custom_source_identifier, pair_key
from connect_samples.schema.example import EXAMPLE_SCHEMA, FRIENDS_WITH
from connect_samples.schema.nypd import COMPLAINT, LOCATED_AT, LOCATION, NYPD_SCHEMA


def _nypd_graph():
    return ResultGraph(NYPD_SCHEMA, source=NYPD_SOURCE)


def _friend_graph(seeds, people=PEOPLE, id_factory=None):
    graph = ResultGraph(EXAMPLE_SCHEMA)
    kwargs = {"id_factory": id_factory} if id_factory else {}
    graph.merge_friend_graph(
        seeds,
        link_type=FRIENDS_WITH,
        lookup=lambda predicate: lookup_people(predicate, people),
        extract_ids=lambda seed: {k.id for k in seed.connector_keys},
        add_person=add_person,
        **kwargs,
    )
    return graph


@pytest.mark.unit
def test_entity_round_trips_declared_properties(sample_complaint):
    graph = _nypd_graph()
    complaint = add_complaint(graph, sample_complaint)

    assert complaint.id == "Complaint: 261427284"
    assert complaint.get_property("Complaint Number") == "261427284"
    assert complaint.get_property("Jurisdiction Code") == 0
    assert complaint.get_property("Offence Classification Code") == 341
    assert complaint.get_property("Internal Classification Code") == 333
    assert complaint.get_property("Complaint Start Date") == date(2023, 1, 3)
    assert complaint.get_property("Complaint Start Time") == time(17, 45)
    assert complaint.get_property("Level Of Offence") == "MISDEMEANOR"
    assert complaint.source_reference == NYPD_SOURCE


@pytest.mark.unit
def test_location_builds_point_from_two_fields(sample_complaint):
    location = add_location(_nypd_graph(), sample_complaint)

    assert location.id == "Borough: BROOKLYN Precinct: 75"
    assert location.get_property("Precinct Code") == 75
    assert location.get_property("Coordinates") == GeoPoint(longitude=-73.882, latitude=40.666)
    # parks_nm is absent from the row
    assert location.get_property("Park Name") is None
    assert "Park Name" not in location.properties


@pytest.mark.unit
def test_missing_optional_fields_are_omitted(minimal_complaint):
    complaint = add_complaint(_nypd_graph(), minimal_complaint)
    assert complaint.properties == {"Complaint Number": "100"}


@pytest.mark.unit
def test_non_numeric_mandatory_field_raises(minimal_complaint):
    row = dict(minimal_complaint, addr_pct_cd="first")
    with pytest.raises(DataFormatError) as exc_info:
        _nypd_graph().add_entity_from_record(LOCATION, row, LOCATION_FIELDS, key="Borough: BROOKLYN Precinct: first")
    assert exc_info.value.status == 422


@pytest.mark.unit
def test_non_numeric_optional_field_is_dropped(minimal_complaint):
    row = dict(minimal_complaint, ky_cd="n/a")
    complaint = add_complaint(_nypd_graph(), row)
    assert "Offence Classification Code" not in complaint.properties


@pytest.mark.unit
def test_missing_natural_key_raises():
    with pytest.raises(DataFormatError):
        add_complaint(_nypd_graph(), {"boro_nm": "BRONX"})


@pytest.mark.unit
def test_building_twice_is_idempotent(sample_complaint, minimal_complaint):
    rows = [sample_complaint, minimal_complaint]

    def build():
        graph = _nypd_graph()
        for row in rows:
            complaint = add_complaint(graph, row)
            location = add_location(graph, row)
            graph.add_link(LOCATED_AT, row["cmplnt_num"], complaint, location)
        return graph.to_dict()

    assert build() == build()


@pytest.mark.unit
def test_shared_natural_key_collapses_to_one_entity(minimal_complaint):
    graph = _nypd_graph()
    first = add_location(graph, minimal_complaint)
    second = add_location(graph, dict(minimal_complaint, cmplnt_num="101"))

    assert first is second
    ids = [(e.type_id, e.id) for e in graph.entities]
    assert len(ids) == len(set(ids)) == 1


@pytest.mark.unit
def test_link_requires_member_endpoints(minimal_complaint):
    graph = _nypd_graph()
    complaint = add_complaint(graph, minimal_complaint)
    stranger = add_location(_nypd_graph(), minimal_complaint)

    with pytest.raises(ValueError):
        graph.add_link(LOCATED_AT, "100", complaint, stranger)
    assert graph.links == []


@pytest.mark.unit
def test_link_identifier_reused_for_other_ends_raises(minimal_complaint):
    graph = _nypd_graph()
    complaint = add_complaint(graph, minimal_complaint)
    location = add_location(graph, minimal_complaint)
    other = add_location(graph, dict(minimal_complaint, addr_pct_cd="2"))

    graph.add_link(LOCATED_AT, "100", complaint, location)
    with pytest.raises(DataFormatError):
        graph.add_link(LOCATED_AT, "100", complaint, other)


@pytest.mark.unit
def test_links_carry_graph_source(minimal_complaint):
    graph = _nypd_graph()
    link = graph.add_link(
        LOCATED_AT, "100", add_complaint(graph, minimal_complaint), add_location(graph, minimal_complaint)
    )
    assert link.source_reference == NYPD_SOURCE


@pytest.mark.unit
def test_seed_is_wrapped_without_properties():
    graph = _nypd_graph()
    seed = Seed(seed_id="seed-1", type_id=COMPLAINT.id, properties={"Complaint Number": "100"})
    entity = graph.add_entity_from_seed(seed)

    assert entity.id == "seed-1"
    assert entity.seed_id == "seed-1"
    assert entity.properties == {}
    assert entity.source_reference is None


@pytest.mark.unit
def test_seed_of_foreign_type_is_rejected():
    with pytest.raises(ValidationError):
        _nypd_graph().add_entity_from_seed(Seed(seed_id="s", type_id="nope"))


@pytest.mark.unit
def test_pair_key_is_order_independent():
    assert pair_key("p1", "p2") == pair_key("p2", "p1") == "p1-p2"


@pytest.mark.unit
def test_friend_link_id_same_from_either_side(person_seed):
    from_a = _friend_graph([person_seed("a", "p1")])
    from_b = _friend_graph([person_seed("b", "p2")])

    link_a = from_a.get_link(FRIENDS_WITH, "p1-p2")
    link_b = from_b.get_link(FRIENDS_WITH, "p1-p2")
    assert link_a is not None and link_b is not None
    assert {link_a.from_end.id, link_a.to_end.id} == {link_b.from_end.id, link_b.to_end.id} == {"p1", "p2"}


@pytest.mark.unit
def test_two_seeds_on_same_person_yield_one_link(person_seed):
    people = (
        Person("p1", "Ann", "A", "1980-01-01", "1", "2000-01-01T00:00:00", ("p2",)),
        Person("p2", "Ben", "B", "1981-01-01", "2", "2001-01-01T00:00:00", ()),
    )
    graph = _friend_graph([person_seed("s1", "p1"), person_seed("s2", "p1")], people=people)

    assert [link.id for link in graph.links] == ["p1-p2"]
    assert sorted(e.id for e in graph.entities) == ["p1", "p2"]


@pytest.mark.unit
def test_mutual_friends_from_both_seeds_yield_one_link(person_seed):
    graph = _friend_graph([person_seed("s1", "p1"), person_seed("s2", "p2")])
    assert [link.id for link in graph.links].count("p1-p2") == 1


@pytest.mark.unit
def test_seed_with_several_ids_takes_union(person_seed):
    graph = _friend_graph([person_seed("merged", "p3", "p6")])
    link_ids = sorted(str(link.id) for link in graph.links)
    # p3 is friends with p1; p6 with p5
    assert link_ids == ["p1-p3", "p5-p6"]


@pytest.mark.unit
def test_friend_graph_with_source_identifiers(person_seed):
    graph = _friend_graph([person_seed("a", "p7")])
    assert graph.links == []

    graph = _friend_graph([person_seed("a", "p3")], id_factory=custom_source_identifier)
    link = graph.links[0]
    assert isinstance(link.id, SourceIdentifier)
    assert link.id.key == ("p1-p3",)
    assert link.to_dict()["id"] == {"type": link.id.type, "key": ["p1-p3"]}
