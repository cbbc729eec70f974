# Policy Registry - Insurance Policy Records API
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Policy models for the three shapes a record takes.

- :class:`PolicyPayload`: the raw inbound body. Every field is optional and
  untyped because input is coerced, never rejected.
- :class:`PolicyWrite`: the normalized, typed column set sent to the store.
- :class:`PolicyRecord`: a stored row formatted for the API response.
"""

from decimal import Decimal
from typing import Any

from beartype import beartype
from pydantic import Field, field_serializer, field_validator

from ..services.normalization import format_date, format_timestamp
from .base import BaseModelConfig, LenientModelConfig

TEXT_FIELDS: tuple[str, ...] = (
    "assured",
    "address",
    "coc_number",
    "or_number",
    "policy_number",
    "policy_type",
    "model",
    "make",
    "body_type",
    "color",
    "mv_file_no",
    "plate_no",
    "chassis_no",
    "motor_no",
)
DATE_FIELDS: tuple[str, ...] = (
    "date_issued",
    "date_received",
    "insurance_from_date",
    "insurance_to_date",
)
MONEY_FIELDS: tuple[str, ...] = (
    "premium",
    "other_charges",
    "auth_fee",
    "doc_stamps",
    "e_vat",
    "lgt",
    "total_premium",
)
TIMESTAMP_FIELDS: tuple[str, ...] = ("created_at", "updated_at", "deleted_at")
REQUIRED_ON_UPDATE: tuple[str, ...] = ("assured", "coc_number", "or_number")


@beartype
class PolicyPayload(LenientModelConfig):
    """Inbound create/update body exactly as the client sent it."""

    assured: Any = Field(default=None, description="Name of the assured party")
    address: Any = Field(default=None, description="Address of the assured")
    coc_number: Any = Field(default=None, description="Certificate of cover number")
    or_number: Any = Field(default=None, description="Official receipt number")
    policy_number: Any = Field(default=None, description="Insurer policy number")
    policy_type: Any = Field(default=None, description="Policy type label")
    policy_year: Any = Field(default=None, description="Policy year")
    date_issued: Any = Field(default=None, description="Date issued (YYYY-MM-DD)")
    date_received: Any = Field(default=None, description="Date received (YYYY-MM-DD)")
    insurance_from_date: Any = Field(default=None, description="Coverage start")
    insurance_to_date: Any = Field(default=None, description="Coverage end")
    model: Any = Field(default=None, description="Vehicle model")
    make: Any = Field(default=None, description="Vehicle make")
    body_type: Any = Field(default=None, description="Vehicle body type")
    color: Any = Field(default=None, description="Vehicle color")
    mv_file_no: Any = Field(default=None, description="Motor vehicle file number")
    plate_no: Any = Field(default=None, description="Plate number")
    chassis_no: Any = Field(default=None, description="Chassis number")
    motor_no: Any = Field(default=None, description="Motor number")
    premium: Any = Field(default=None, description="Basic premium")
    other_charges: Any = Field(default=None, description="Other charges")
    auth_fee: Any = Field(default=None, description="Authentication fee")
    doc_stamps: Any = Field(default=None, description="Documentary stamps (update only)")
    e_vat: Any = Field(default=None, description="E-VAT (update only)")
    lgt: Any = Field(default=None, description="Local government tax (update only)")
    total_premium: Any = Field(default=None, description="Total premium (update only)")

    def missing_required(self) -> list[str]:
        """Names of update-mandatory fields the client left empty."""
        return [name for name in REQUIRED_ON_UPDATE if not getattr(self, name)]


@beartype
class PolicyWrite(BaseModelConfig):
    """Normalized column values for an insert or a wholesale update."""

    assured: str = Field(default="")
    address: str = Field(default="")
    coc_number: str = Field(default="")
    or_number: str = Field(default="")
    policy_number: str = Field(default="")
    policy_type: str = Field(default="")
    policy_year: int = Field(...)
    date_issued: str | None = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    date_received: str | None = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    insurance_from_date: str | None = Field(
        default=None, pattern=r"^\d{4}-\d{2}-\d{2}$"
    )
    insurance_to_date: str | None = Field(
        default=None, pattern=r"^\d{4}-\d{2}-\d{2}$"
    )
    model: str = Field(default="")
    make: str = Field(default="")
    body_type: str = Field(default="")
    color: str = Field(default="")
    mv_file_no: str = Field(default="")
    plate_no: str = Field(default="")
    chassis_no: str = Field(default="")
    motor_no: str = Field(default="")
    premium: Decimal = Field(...)
    other_charges: Decimal = Field(...)
    auth_fee: Decimal = Field(...)
    doc_stamps: Decimal = Field(...)
    e_vat: Decimal = Field(...)
    lgt: Decimal = Field(...)
    total_premium: Decimal = Field(...)

    def to_row(self) -> dict[str, Any]:
        """Column mapping in declaration order, as handed to the store."""
        return self.model_dump()


@beartype
class PolicyRecord(LenientModelConfig):
    """Stored policy formatted for output.

    Calendar dates come out as ``YYYY-MM-DD``; audit timestamps as full
    ISO-8601 UTC strings.
    """

    id: int
    assured: str | None = None
    address: str | None = None
    coc_number: str | None = None
    or_number: str | None = None
    policy_number: str | None = None
    policy_type: str | None = None
    policy_year: int | None = None
    date_issued: str | None = None
    date_received: str | None = None
    insurance_from_date: str | None = None
    insurance_to_date: str | None = None
    model: str | None = None
    make: str | None = None
    body_type: str | None = None
    color: str | None = None
    mv_file_no: str | None = None
    plate_no: str | None = None
    chassis_no: str | None = None
    motor_no: str | None = None
    premium: Decimal | None = None
    other_charges: Decimal | None = None
    auth_fee: Decimal | None = None
    doc_stamps: Decimal | None = None
    e_vat: Decimal | None = None
    lgt: Decimal | None = None
    total_premium: Decimal | None = None
    created_at: str | None = None
    updated_at: str | None = None
    deleted_at: str | None = None

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def format_calendar_date(cls, v: Any) -> str | None:
        return format_date(v)

    @field_validator(*TIMESTAMP_FIELDS, mode="before")
    @classmethod
    def format_audit_timestamp(cls, v: Any) -> str | None:
        return format_timestamp(v)

    @field_serializer(*MONEY_FIELDS, when_used="json")
    def money_as_number(self, v: Decimal | None) -> float | None:
        return float(v) if v is not None else None


@beartype
def format_policy_row(row: dict[str, Any]) -> PolicyRecord:
    """Format one stored row for output."""
    return PolicyRecord.model_validate(row)


__all__ = [
    "DATE_FIELDS",
    "MONEY_FIELDS",
    "TEXT_FIELDS",
    "PolicyPayload",
    "PolicyRecord",
    "PolicyWrite",
    "format_policy_row",
]
