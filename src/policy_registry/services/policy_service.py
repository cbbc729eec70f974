# Policy Registry - Insurance Policy Records API
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Policy business logic service."""

import re
from datetime import datetime, timezone
from decimal import Decimal
from typing import Final

from beartype import beartype

from ..core.logging_utils import get_logger
from ..core.result_types import Err, Ok, PolicyError, Result
from ..core.store import (
    Filter,
    InsertQuery,
    Ordering,
    PolicyStore,
    SelectQuery,
    StoreError,
    UpdateQuery,
)
from ..models.policy import (
    DATE_FIELDS,
    TEXT_FIELDS,
    PolicyPayload,
    PolicyRecord,
    PolicyWrite,
    format_policy_row,
)
from .normalization import clean_text, parse_decimal, parse_year, validate_date
from .premium import DEFAULT_AUTH_FEE, PremiumCalculator

logger = get_logger(__name__)

DEFAULT_TABLE: Final = "insurance_policies"
_ID_PATTERN: Final = re.compile(r"[+-]?\d{1,19}", re.ASCII)
_MIN_ID: Final = -(2**63)
_MAX_ID: Final = 2**63 - 1
_ZERO: Final = Decimal("0")


@beartype
def normalize_policy(payload: PolicyPayload, *, recompute: bool) -> PolicyWrite:
    """Coerce a raw payload into storable column values.

    With ``recompute`` the derived charges come from the premium calculator
    (create). Without it they are taken from the payload as sent, each
    defaulting to 0 (update).
    """
    values: dict[str, object] = {
        name: clean_text(getattr(payload, name)) for name in TEXT_FIELDS
    }
    values.update(
        {name: validate_date(getattr(payload, name)) for name in DATE_FIELDS}
    )
    values["policy_year"] = parse_year(payload.policy_year)

    premium = parse_decimal(payload.premium, _ZERO)
    other_charges = parse_decimal(payload.other_charges, _ZERO)
    auth_fee = parse_decimal(payload.auth_fee, DEFAULT_AUTH_FEE)

    if recompute:
        charges = PremiumCalculator.calculate(premium, other_charges, auth_fee)
        values.update(
            premium=charges.premium,
            other_charges=charges.other_charges,
            auth_fee=charges.auth_fee,
            doc_stamps=charges.doc_stamps,
            e_vat=charges.e_vat,
            lgt=charges.lgt,
            total_premium=charges.total_premium,
        )
    else:
        values.update(
            premium=premium,
            other_charges=other_charges,
            auth_fee=auth_fee,
            doc_stamps=parse_decimal(payload.doc_stamps, _ZERO),
            e_vat=parse_decimal(payload.e_vat, _ZERO),
            lgt=parse_decimal(payload.lgt, _ZERO),
            total_premium=parse_decimal(payload.total_premium, _ZERO),
        )

    return PolicyWrite.model_validate(values)


@beartype
def parse_policy_id(raw: str) -> int | None:
    """Return the integer id in ``raw``, or None when it is not a bigint.

    Signed values are accepted; ``-1`` simply matches no row.
    """
    text = raw.strip()
    if not _ID_PATTERN.fullmatch(text):
        return None
    value = int(text)
    return value if _MIN_ID <= value <= _MAX_ID else None


class PolicyService:
    """Service for policy business logic.

    Holds no state besides the injected store; one instance per request is
    fine. Every store call is a single round trip.
    """

    def __init__(self, store: PolicyStore, table: str = DEFAULT_TABLE) -> None:
        """Initialize policy service with dependency validation."""
        if store is None:
            raise ValueError("Policy store required")
        self._store = store
        self._table = table

    @beartype
    async def create(self, payload: PolicyPayload) -> Result[int, PolicyError]:
        """Create a new policy and return its id."""
        logger.info(
            "Received dates: %s",
            {
                name: (getattr(payload, name), type(getattr(payload, name)).__name__)
                for name in DATE_FIELDS
            },
        )
        policy = normalize_policy(payload, recompute=True)
        logger.info(
            "Validated dates: %s", {name: getattr(policy, name) for name in DATE_FIELDS}
        )

        try:
            rows = await self._store.insert(
                InsertQuery(self._table, (policy.to_row(),), returning=("id",))
            )
        except StoreError as e:
            logger.error("Error creating policy: %s", e.message)
            return Err(PolicyError.store("Error creating policy", e.message))

        if not rows:
            logger.error("Error creating policy: insert returned no rows")
            return Err(
                PolicyError.store("Error creating policy", "Insert returned no rows")
            )
        return Ok(int(rows[0]["id"]))

    @beartype
    async def list_active(self) -> Result[list[PolicyRecord], PolicyError]:
        """List policies that are not soft-deleted, newest id first."""
        query = SelectQuery(
            self._table,
            filters=(Filter.is_null("deleted_at"),),
            order_by=(Ordering("id", ascending=False),),
        )
        try:
            rows = await self._store.select(query)
        except StoreError as e:
            logger.error("Error fetching policies: %s", e.message)
            return Err(PolicyError.store("Error fetching policies", e.message))
        return Ok([format_policy_row(row) for row in rows])

    @beartype
    async def get(self, policy_id: str) -> Result[PolicyRecord, PolicyError]:
        """Get an active policy by id."""
        key = parse_policy_id(policy_id)
        if key is None:
            return Err(PolicyError.not_found())

        query = SelectQuery(
            self._table,
            filters=(Filter.eq("id", key), Filter.is_null("deleted_at")),
            limit=1,
        )
        try:
            rows = await self._store.select(query)
        except StoreError as e:
            logger.error("Error fetching policy %s: %s", policy_id, e.message)
            return Err(PolicyError.store("Error fetching policy", e.message))

        if not rows:
            return Err(PolicyError.not_found())
        return Ok(format_policy_row(rows[0]))

    @beartype
    async def update(
        self, policy_id: str, payload: PolicyPayload
    ) -> Result[int, PolicyError]:
        """Overwrite every field of a policy.

        Derived charges are stored as sent rather than recomputed. The
        soft-delete marker is not consulted, so deleted rows can be edited.
        """
        missing = payload.missing_required()
        if missing:
            logger.error("Error updating policy %s: missing %s", policy_id, missing)
            return Err(
                PolicyError.validation(
                    "Error updating policy",
                    "Required fields missing: assured, coc_number, or_number",
                )
            )

        key = parse_policy_id(policy_id)
        if key is None:
            return Err(PolicyError.not_found())

        policy = normalize_policy(payload, recompute=False)
        query = UpdateQuery(
            self._table,
            values=policy.to_row(),
            filters=(Filter.eq("id", key),),
            returning=("id",),
        )
        try:
            rows = await self._store.update(query)
        except StoreError as e:
            logger.error("Error updating policy %s: %s", policy_id, e.message)
            return Err(PolicyError.store("Error updating policy", e.message))

        if not rows:
            return Err(PolicyError.not_found())
        return Ok(key)

    @beartype
    async def soft_delete(self, policy_id: str) -> Result[int, PolicyError]:
        """Mark an active policy as deleted."""
        key = parse_policy_id(policy_id)
        if key is None:
            logger.error("Error deleting policy: invalid id %r", policy_id)
            return Err(PolicyError.validation("Invalid policy ID"))

        query = UpdateQuery(
            self._table,
            values={"deleted_at": datetime.now(timezone.utc)},
            filters=(Filter.eq("id", key), Filter.is_null("deleted_at")),
            returning=("id",),
        )
        try:
            rows = await self._store.update(query)
        except StoreError as e:
            logger.error("Error deleting policy %s: %s", policy_id, e.message)
            return Err(PolicyError.store("Error deleting policy", e.message))

        if not rows:
            return Err(PolicyError.not_found("Policy not found or already deleted"))
        return Ok(key)

    @beartype
    async def list_deleted(self) -> Result[list[PolicyRecord], PolicyError]:
        """List soft-deleted policies, most recently deleted first."""
        query = SelectQuery(
            self._table,
            filters=(Filter.not_null("deleted_at"),),
            order_by=(Ordering("deleted_at", ascending=False),),
        )
        try:
            rows = await self._store.select(query)
        except StoreError as e:
            logger.error("Error fetching deleted policies: %s", e.message)
            return Err(PolicyError.store("Error fetching deleted policies", e.message))
        return Ok([format_policy_row(row) for row in rows])

    @beartype
    async def restore(self, policy_id: str) -> Result[int, PolicyError]:
        """Clear the soft-delete marker, whatever the current state."""
        key = parse_policy_id(policy_id)
        if key is None:
            return Err(PolicyError.not_found())

        query = UpdateQuery(
            self._table,
            values={"deleted_at": None},
            filters=(Filter.eq("id", key),),
            returning=("id",),
        )
        try:
            rows = await self._store.update(query)
        except StoreError as e:
            logger.error("Error restoring policy %s: %s", policy_id, e.message)
            return Err(PolicyError.store("Error restoring policy", e.message))

        if not rows:
            return Err(PolicyError.not_found())
        return Ok(key)
