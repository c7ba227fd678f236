from __future__ import annotations

from connect_samples.auth import API_KEY_AUTHENTICATOR
from connect_samples.services.registry import ServiceRegistry

from . import example
from .nypd import NypdConnector


def build_registry(nypd: NypdConnector | None = None) -> ServiceRegistry:
    """The service table for both sample connectors."""

    registry = ServiceRegistry()
    registry.register_authenticator(API_KEY_AUTHENTICATOR)
    registry.register_all((nypd or NypdConnector()).definitions())
    registry.register_all(example.definitions())
    return registry
