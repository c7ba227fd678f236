from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Literal

import jwt

from .errors import AuthenticationError
from .settings import settings

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


@dataclass(frozen=True, slots=True)
class AuthenticationField:
    id: str
    label: str
    type: Literal["text", "password"] = "text"


@dataclass(frozen=True, slots=True)
class Authenticator:
    """Exchanges credential fields for an opaque bearer token."""

    id: str
    description: str
    fields: tuple[AuthenticationField, ...]
    login: Callable[[dict[str, str]], str] = field(compare=False)

    def describe(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "fields": [{"id": f.id, "label": f.label, "type": f.type} for f in self.fields],
        }


def issue_token(*, secret: str | None = None, ttl_seconds: int | None = None) -> str:
    now = datetime.now(timezone.utc)
    ttl = ttl_seconds if ttl_seconds is not None else settings.jwt_ttl_seconds
    payload = {"iat": now, "exp": now + timedelta(seconds=ttl)}
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm=JWT_ALGORITHM)


def verify_token(token: str | None, *, secret: str | None = None) -> dict:
    """Check signature and expiry; raise AuthenticationError otherwise."""

    if not token:
        raise AuthenticationError(
            "Authentication required", detail="This service requires an authentication token."
        )
    try:
        return jwt.decode(token, secret or settings.jwt_secret, algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError as e:
        logger.info(f"Rejected token: {type(e).__name__}")
        raise AuthenticationError(f"A '{type(e).__name__}' occurred when verifying the token.") from e


def login_api_key(fields: dict[str, str]) -> str:
    if fields.get("apikey") == settings.api_key:
        return issue_token()
    raise AuthenticationError(
        "Invalid credentials",
        detail="Refer to the authenticator configuration for details.",
        type="https://example.com",
        instance="instance url",
    )


API_KEY_AUTHENTICATOR = Authenticator(
    id="api-key",
    description=f"This service requires authentication. The valid API key is '{settings.api_key}'.",
    fields=(AuthenticationField(id="apikey", label="API key", type="password"),),
    login=login_api_key,
)
