"""Service table: definitions, request validation and dispatch."""

from .models import (
    ConditionSpec,
    RequestInformation,
    SeedConstraint,
    ServiceDefinition,
    ServiceRequest,
    UserInformation,
)
from .registry import ServiceRegistry

__all__ = [
    "ConditionSpec",
    "RequestInformation",
    "SeedConstraint",
    "ServiceDefinition",
    "ServiceRegistry",
    "ServiceRequest",
    "UserInformation",
]
