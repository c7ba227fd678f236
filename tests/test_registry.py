"""
Tests for the service table and request validation
"""

import pytest

from connect_samples.asyncjobs import AsyncJob
from connect_samples.auth import issue_token
from connect_samples.connectors.registry import build_registry
from connect_samples.errors import AuthenticationError, NotFoundError, ValidationError
from connect_samples.graph.builder import ResultGraph
from connect_samples.graph.models import Seed
from connect_samples.schema.example import PERSON, TWEET
from connect_samples.schema.nypd import COMPLAINT
from connect_samples.services.models import RequestInformation, ServiceRequest, UserInformation


@pytest.fixture
def registry(nypd_backend, minimal_complaint):
    connector, _ = nypd_backend([minimal_complaint])
    return build_registry(connector)


@pytest.mark.asyncio
async def test_mandatory_condition_default_applies(registry):
    graph = await registry.invoke("example-search", ServiceRequest())
    assert isinstance(graph, ResultGraph)
    assert len(graph.entities) == 8


@pytest.mark.asyncio
async def test_unknown_service(registry):
    with pytest.raises(NotFoundError):
        await registry.invoke("nope", ServiceRequest())


@pytest.mark.asyncio
async def test_unknown_condition_rejected(registry):
    with pytest.raises(ValidationError):
        await registry.invoke("example-search", ServiceRequest(conditions={"colour": "red"}))


@pytest.mark.asyncio
async def test_missing_mandatory_condition_rejected(registry):
    with pytest.raises(ValidationError) as exc_info:
        await registry.invoke("nypd-search", ServiceRequest(conditions={"borough": "BRONX"}))
    assert "Law category" in exc_info.value.title


@pytest.mark.asyncio
async def test_value_outside_possible_values_rejected(registry):
    with pytest.raises(ValidationError):
        await registry.invoke(
            "nypd-search", ServiceRequest(conditions={"borough": "HOBOKEN", "law-category": "FELONY"})
        )


@pytest.mark.asyncio
async def test_integer_condition_below_minimum_rejected(registry):
    with pytest.raises(ValidationError):
        await registry.invoke("async-example-search", ServiceRequest(conditions={"duration": -1}))


@pytest.mark.asyncio
async def test_condition_values_are_coerced(registry):
    job = await registry.invoke("async-example-search", ServiceRequest(conditions={"duration": "3", "should-fail": "true"}))
    assert isinstance(job, AsyncJob)
    assert job.duration_seconds == 3
    assert job.should_fail is True


@pytest.mark.asyncio
async def test_seed_cardinality_enforced(registry):
    seeds = tuple(Seed(seed_id=f"s{i}", type_id=COMPLAINT.id) for i in range(2))
    with pytest.raises(ValidationError):
        await registry.invoke("nypd-expand", ServiceRequest(seeds=seeds))
    with pytest.raises(ValidationError):
        await registry.invoke("nypd-expand", ServiceRequest())


@pytest.mark.asyncio
async def test_seed_type_enforced(registry):
    seed = Seed(seed_id="s", type_id=TWEET.id)
    with pytest.raises(ValidationError):
        await registry.invoke("example-seeded-search-3", ServiceRequest(seeds=(seed,)))


@pytest.mark.asyncio
async def test_seeds_rejected_by_unseeded_service(registry):
    seed = Seed(seed_id="s", type_id=PERSON.id)
    with pytest.raises(ValidationError):
        await registry.invoke("example-search", ServiceRequest(seeds=(seed,)))


@pytest.mark.asyncio
async def test_authenticated_service_needs_valid_token(registry):
    with pytest.raises(AuthenticationError):
        await registry.invoke("api-auth-search", ServiceRequest())

    graph = await registry.invoke("api-auth-search", ServiceRequest(token=issue_token()))
    assert [e.id for e in graph.entities] == ["tweet-1", "tweet-2"]


@pytest.mark.asyncio
async def test_hidden_service_not_listed_or_invocable(registry):
    listed = [s["id"] for s in await registry.describe()]
    assert "search-data-source" not in listed
    with pytest.raises(NotFoundError):
        await registry.invoke("search-data-source", ServiceRequest())

    info = RequestInformation(user=UserInformation(groups=("DataSourceAccess",)))
    listed = {s["id"]: s for s in await registry.describe(info)}
    entry = listed["search-data-source"]
    assert entry["description"] == "A service which can search a single data source"
    assert [c["id"] for c in entry["conditions"]] == ["search-term"]


@pytest.mark.asyncio
async def test_hidden_condition_arrives_empty(registry):
    info = RequestInformation(user=UserInformation(groups=("DataSourceAccess",)))
    graph = await registry.invoke(
        "search-data-source",
        ServiceRequest(conditions={"data-source": "dataSource3", "search-term": "x"}, request_info=info),
    )
    assert graph.entities[0].id == "dataSource1-tweet-1"


@pytest.mark.asyncio
async def test_describe_reports_dynamic_condition_details(registry):
    info = RequestInformation(user=UserInformation(groups=("DataSourceAccess", "RestrictedDataSourceAccess")))
    entry = {s["id"]: s for s in await registry.describe(info)}["search-data-source"]
    choice = entry["conditions"][0]

    assert choice["defaultValue"] == "dataSource1"
    assert choice["possibleValues"][1] == {"value": "dataSource2", "displayValue": "Data Source 2"}


@pytest.mark.asyncio
async def test_describe_seed_constraints_and_async(registry):
    entries = {s["id"]: s for s in await registry.describe()}

    assert entries["example-seeded-search-2"]["seedConstraints"]["max"] == 10
    assert entries["async-example-search"]["async"] == {"pollingIntervalInSeconds": 1}
    assert entries["api-auth-search"]["authenticatorId"] == "api-key"


@pytest.mark.unit
def test_duplicate_registration_rejected(registry):
    with pytest.raises(ValueError):
        registry.register(registry.get("example-search"))
