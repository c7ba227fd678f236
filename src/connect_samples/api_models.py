from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .graph.models import ConnectorKey, Seed, SourceIdentifier


class _Camel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SourceIdentifierIn(_Camel):
    type: str
    key: list[str]


class ConnectorKeyIn(_Camel):
    type_id: str | None = Field(default=None, alias="typeId")
    id: str


class SeedIn(_Camel):
    seed_id: str = Field(alias="seedId")
    type_id: str = Field(alias="typeId")
    properties: dict[str, Any] = Field(default_factory=dict)
    source_identifiers: list[SourceIdentifierIn] = Field(default_factory=list, alias="sourceIdentifiers")
    connector_keys: list[ConnectorKeyIn] = Field(default_factory=list, alias="connectorKeys")

    def to_seed(self) -> Seed:
        return Seed(
            seed_id=self.seed_id,
            type_id=self.type_id,
            properties=dict(self.properties),
            source_identifiers=tuple(SourceIdentifier(type=s.type, key=tuple(s.key)) for s in self.source_identifiers),
            connector_keys=tuple(ConnectorKey(type_id=k.type_id or self.type_id, id=k.id) for k in self.connector_keys),
        )


class AcquireIn(_Camel):
    conditions: dict[str, Any] = Field(default_factory=dict)
    seeds: list[SeedIn] = Field(default_factory=list)


class LoginIn(_Camel):
    fields: dict[str, str] = Field(default_factory=dict)
