from __future__ import annotations

import logging

from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse

from .api_models import AcquireIn, LoginIn
from .asyncjobs import AsyncJob, AsyncJobStore
from .connectors.registry import build_registry
from .errors import ConnectorError, NotFoundError
from .schema import SCHEMAS
from .services.models import RequestInformation, ServiceRequest, UserInformation
from .services.registry import ServiceRegistry

logger = logging.getLogger(__name__)


def request_information(x_user_groups: str | None) -> RequestInformation:
    groups = tuple(g.strip() for g in (x_user_groups or "").split(",") if g.strip())
    return RequestInformation(user=UserInformation(groups=groups))


def bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    return token.strip() if scheme.lower() == "bearer" else None


def create_app(registry: ServiceRegistry | None = None, jobs: AsyncJobStore | None = None):
    if registry is None:
        registry = build_registry()
    if jobs is None:
        jobs = AsyncJobStore()

    app = FastAPI(title="Connect Samples - Connector Gateway", version="0.1.0")

    @app.exception_handler(ConnectorError)
    async def connector_error(_request: Request, exc: ConnectorError):
        return JSONResponse(exc.to_problem(), status_code=exc.status, media_type="application/problem+json")

    @app.get("/health")
    async def health():
        return {"ok": True}

    @app.get("/config")
    async def config(x_user_groups: str | None = Header(default=None)):
        info = request_information(x_user_groups)
        return {
            "services": await registry.describe(info),
            "authenticators": [a.describe() for a in registry.authenticators],
        }

    @app.get("/schema/{connector}")
    async def schema(connector: str):
        found = SCHEMAS.get(connector)
        if found is None:
            raise NotFoundError(f"No schema for connector '{connector}'")
        return found.model_dump(by_alias=True)

    @app.post("/authenticators/{authenticator_id}")
    async def login(authenticator_id: str, payload: LoginIn):
        return {"token": registry.login(authenticator_id, payload.fields)}

    @app.post("/services/{service_id}/acquire")
    async def acquire(
        service_id: str,
        payload: AcquireIn,
        authorization: str | None = Header(default=None),
        x_user_groups: str | None = Header(default=None),
    ):
        request = ServiceRequest(
            conditions=payload.conditions,
            seeds=tuple(s.to_seed() for s in payload.seeds),
            token=bearer_token(authorization),
            request_info=request_information(x_user_groups),
        )
        outcome = await registry.invoke(service_id, request)
        if isinstance(outcome, AsyncJob):
            job_id = jobs.submit(outcome)
            definition = registry.get(service_id)
            return {"queryId": job_id, "pollingIntervalInSeconds": definition.async_polling_interval}
        return outcome.to_dict()

    @app.get("/async/{query_id}")
    async def poll(query_id: str):
        return jobs.poll(query_id).snapshot()

    @app.get("/async/{query_id}/results")
    async def results(query_id: str):
        return jobs.results(query_id).to_dict()

    return app
