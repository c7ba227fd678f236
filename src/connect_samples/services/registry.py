from __future__ import annotations

import inspect
import logging
from typing import Any, Iterable

from connect_samples.auth import Authenticator, verify_token
from connect_samples.errors import NotFoundError, ValidationError
from connect_samples.graph.values import coerce
from connect_samples.schema.models import PropertyType

from .models import (
    ConditionSpec,
    Dynamic,
    RequestInformation,
    ServiceDefinition,
    ServiceOutcome,
    ServiceRequest,
)

logger = logging.getLogger(__name__)


async def resolve(value: Dynamic[Any], request_info: RequestInformation) -> Any:
    if callable(value):
        value = value(request_info)
        if inspect.isawaitable(value):
            value = await value
    return value


class ServiceRegistry:
    """Explicit service table, built once at startup."""

    def __init__(self) -> None:
        self._services: dict[str, ServiceDefinition] = {}
        self._authenticators: dict[str, Authenticator] = {}

    def register(self, definition: ServiceDefinition) -> ServiceDefinition:
        if definition.id in self._services:
            raise ValueError(f"service {definition.id!r} is already registered")
        if definition.authenticator and definition.authenticator not in self._authenticators:
            raise ValueError(f"service {definition.id!r} uses unknown authenticator {definition.authenticator!r}")
        self._services[definition.id] = definition
        return definition

    def register_all(self, definitions: Iterable[ServiceDefinition]) -> None:
        for d in definitions:
            self.register(d)

    def register_authenticator(self, authenticator: Authenticator) -> Authenticator:
        self._authenticators[authenticator.id] = authenticator
        return authenticator

    def authenticator(self, authenticator_id: str) -> Authenticator:
        try:
            return self._authenticators[authenticator_id]
        except KeyError:
            raise NotFoundError(f"No authenticator with id '{authenticator_id}'") from None

    @property
    def authenticators(self) -> list[Authenticator]:
        return list(self._authenticators.values())

    def login(self, authenticator_id: str, fields: dict[str, str]) -> str:
        return self.authenticator(authenticator_id).login(fields)

    @property
    def services(self) -> list[ServiceDefinition]:
        return list(self._services.values())

    def get(self, service_id: str) -> ServiceDefinition:
        try:
            return self._services[service_id]
        except KeyError:
            raise NotFoundError(f"No service with id '{service_id}'") from None

    async def is_hidden(self, definition: ServiceDefinition, request_info: RequestInformation) -> bool:
        return bool(await resolve(definition.hide, request_info))

    async def describe_condition(self, spec: ConditionSpec, request_info: RequestInformation) -> dict[str, Any] | None:
        if await resolve(spec.hide, request_info):
            return None
        out: dict[str, Any] = {
            "id": spec.id,
            "label": spec.label,
            "logicalType": spec.logical_type,
            "isMandatory": spec.mandatory,
        }
        default = await resolve(spec.default, request_info)
        if default is not None:
            out["defaultValue"] = default
        values = await resolve(spec.possible_values, request_info)
        if values:
            out["possibleValues"] = [pv.model_dump(by_alias=True) for pv in values]
        if spec.min_value is not None:
            out["minValue"] = spec.min_value
        return out

    async def describe(self, request_info: RequestInformation | None = None) -> list[dict[str, Any]]:
        """The service table as the requesting user sees it."""

        request_info = request_info or RequestInformation()
        out = []
        for d in self._services.values():
            if await self.is_hidden(d, request_info):
                continue
            conditions = [await self.describe_condition(c, request_info) for c in d.conditions]
            entry: dict[str, Any] = {
                "id": d.id,
                "name": d.name,
                "description": await resolve(d.description, request_info),
                "schema": d.schema.name,
                "conditions": [c for c in conditions if c is not None],
                "resultItemTypeIds": [t.id for t in d.result_item_types],
            }
            if d.seeds is not None:
                entry["seedConstraints"] = {
                    "connectorIds": [d.schema.name],
                    "typeIds": [t.id for t in d.seeds.types],
                    "min": d.seeds.min,
                    "max": d.seeds.max,
                }
            if d.is_async:
                entry["async"] = {"pollingIntervalInSeconds": d.async_polling_interval}
            if d.authenticator:
                entry["authenticatorId"] = d.authenticator
            out.append(entry)
        return out

    async def validate(self, definition: ServiceDefinition, request: ServiceRequest) -> ServiceRequest:
        """Apply defaults and check conditions and seeds; return the normalized request."""

        request_info = request.request_info
        known = {c.id for c in definition.conditions}
        unknown = sorted(set(request.conditions) - known)
        if unknown:
            raise ValidationError(f"Unknown conditions for '{definition.id}': {', '.join(unknown)}")

        conditions: dict[str, Any] = {}
        for spec in definition.conditions:
            if await resolve(spec.hide, request_info):
                # hidden conditions never carry a value
                conditions[spec.id] = None
                continue
            value = request.conditions.get(spec.id)
            if value is None:
                value = await resolve(spec.default, request_info)
            if value is None:
                if spec.mandatory:
                    raise ValidationError(f"Condition '{spec.label}' is mandatory")
                conditions[spec.id] = None
                continue

            values = tuple(await resolve(spec.possible_values, request_info) or ())
            pt = PropertyType(id=spec.id, name=spec.label, logical_type=spec.logical_type, possible_values=values)
            try:
                value = coerce(pt, value)
            except (TypeError, ValueError) as e:
                raise ValidationError(f"Condition '{spec.label}' is not a valid {spec.logical_type}", detail=str(e)) from e
            if spec.min_value is not None and value < spec.min_value:
                raise ValidationError(f"Condition '{spec.label}' must be at least {spec.min_value}")
            conditions[spec.id] = value

        seeds = request.seeds
        constraint = definition.seeds
        if constraint is None:
            if seeds:
                raise ValidationError(f"Service '{definition.id}' does not accept seeds")
        else:
            if len(seeds) < constraint.min or (constraint.max is not None and len(seeds) > constraint.max):
                upper = constraint.max if constraint.max is not None else "any number of"
                raise ValidationError(
                    f"Service '{definition.id}' requires between {constraint.min} and {upper} seeds",
                    detail=f"{len(seeds)} supplied",
                )
            allowed = {t.id for t in constraint.types}
            for seed in seeds:
                if seed.type_id not in allowed:
                    raise ValidationError(
                        f"Seed '{seed.seed_id}' has type '{seed.type_id}', expected one of {sorted(allowed)}"
                    )

        return ServiceRequest(
            conditions=conditions, seeds=seeds, token=request.token, request_info=request_info
        )

    async def invoke(self, service_id: str, request: ServiceRequest) -> ServiceOutcome:
        definition = self.get(service_id)
        if await self.is_hidden(definition, request.request_info):
            raise NotFoundError(f"No service with id '{service_id}'")
        if definition.authenticator:
            verify_token(request.token)

        validated = await self.validate(definition, request)
        logger.info(f"Invoking {definition.id} ({len(validated.seeds)} seeds)")
        outcome = definition.handler(validated)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        return outcome
