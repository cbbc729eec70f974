"""Request/response schemas that are not domain models."""

from .auth import CurrentUser
from .common import APIInfo, HealthStatus

__all__ = ["APIInfo", "CurrentUser", "HealthStatus"]
