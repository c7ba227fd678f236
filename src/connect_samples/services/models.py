from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, TypeVar, Union

from connect_samples.asyncjobs import AsyncJob
from connect_samples.graph.builder import ResultGraph
from connect_samples.graph.models import Seed
from connect_samples.schema.models import ConnectorSchema, ItemType, LogicalType, PossibleValue

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class UserInformation:
    groups: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RequestInformation:
    user: UserInformation = field(default_factory=UserInformation)


# A value fixed at definition time or computed per request.
Dynamic = Union[T, Callable[[RequestInformation], Union[T, Awaitable[T]]]]


@dataclass(frozen=True, slots=True)
class ConditionSpec:
    id: str
    label: str
    logical_type: LogicalType
    mandatory: bool = False
    default: Dynamic[Any] = None
    possible_values: Dynamic[tuple[PossibleValue, ...]] = ()
    min_value: int | None = None
    hide: Dynamic[bool] = False


@dataclass(frozen=True, slots=True)
class SeedConstraint:
    types: tuple[ItemType, ...]
    min: int = 1
    max: int | None = None


@dataclass(frozen=True, slots=True)
class ServiceRequest:
    conditions: dict[str, Any] = field(default_factory=dict)
    seeds: tuple[Seed, ...] = ()
    token: str | None = None
    request_info: RequestInformation = field(default_factory=RequestInformation)


ServiceOutcome = Union[ResultGraph, AsyncJob]
Handler = Callable[[ServiceRequest], Union[ServiceOutcome, Awaitable[ServiceOutcome]]]


@dataclass(frozen=True, slots=True)
class ServiceDefinition:
    """One entry of the service table.

    `handler` receives the validated request. Async services return an
    AsyncJob for the caller to poll; all others return a ResultGraph.
    """

    id: str
    name: str
    schema: ConnectorSchema
    handler: Handler
    description: Dynamic[str] = ""
    conditions: tuple[ConditionSpec, ...] = ()
    seeds: SeedConstraint | None = None
    result_item_types: tuple[ItemType, ...] = ()
    async_polling_interval: int | None = None
    authenticator: str | None = None
    hide: Dynamic[bool] = False

    @property
    def is_async(self) -> bool:
        return self.async_polling_interval is not None
