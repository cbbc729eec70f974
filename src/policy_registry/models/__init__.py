"""Domain models package for the Policy Registry.

This package exports the Pydantic models for inbound payloads, normalized
writes and formatted records.
"""

from .base import BaseModelConfig, LenientModelConfig
from .policy import PolicyPayload, PolicyRecord, PolicyWrite, format_policy_row

__all__ = [
    "BaseModelConfig",
    "LenientModelConfig",
    "PolicyPayload",
    "PolicyRecord",
    "PolicyWrite",
    "format_policy_row",
]
