from __future__ import annotations

from typing import Any


class ConnectorError(Exception):
    """A terminal failure for one service invocation.

    Mirrors the problem-details shape the gateway expects: `status`, `title`,
    and optionally `detail`, `type` and `instance`.
    """

    default_status = 500

    def __init__(
        self,
        title: str,
        *,
        status: int | None = None,
        detail: str | None = None,
        type: str | None = None,
        instance: str | None = None,
    ):
        super().__init__(title)
        self.title = title
        self.status = status if status is not None else self.default_status
        self.detail = detail
        self.type = type
        self.instance = instance

    def to_problem(self) -> dict[str, Any]:
        problem: dict[str, Any] = {"status": self.status, "title": self.title}
        for key in ("detail", "type", "instance"):
            value = getattr(self, key)
            if value is not None:
                problem[key] = value
        return problem


class TransportError(ConnectorError):
    """Non-2xx response or network failure while fetching source data."""

    default_status = 502

    def __init__(self, title: str, *, upstream_status: int | None = None, **kwargs: Any):
        super().__init__(title, **kwargs)
        self.upstream_status = upstream_status


class DataFormatError(ConnectorError):
    """A mandatory source field is missing or does not parse to its logical type."""

    default_status = 422


class AuthenticationError(ConnectorError):
    default_status = 401


class ValidationError(ConnectorError):
    """Seeds or conditions do not satisfy the service's declared constraints."""

    default_status = 400


class NotFoundError(ConnectorError):
    default_status = 404
