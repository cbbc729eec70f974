"""Unit tests for policy models."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from policy_registry.models.policy import (
    PolicyPayload,
    PolicyRecord,
    PolicyWrite,
    format_policy_row,
)
from policy_registry.services.policy_service import normalize_policy


class TestPolicyPayload:
    """Test the raw inbound body model."""

    def test_unknown_keys_are_ignored(self) -> None:
        payload = PolicyPayload.model_validate({"assured": "A", "id": 99, "extra": 1})

        assert payload.assured == "A"
        assert not hasattr(payload, "extra")

    def test_values_are_not_coerced(self) -> None:
        payload = PolicyPayload.model_validate({"premium": "12.5abc", "policy_year": []})

        assert payload.premium == "12.5abc"
        assert payload.policy_year == []

    def test_missing_required(self) -> None:
        payload = PolicyPayload(assured="A", coc_number="", or_number=None)

        assert payload.missing_required() == ["coc_number", "or_number"]

    def test_nothing_missing(self) -> None:
        payload = PolicyPayload(assured="A", coc_number="C", or_number="O")

        assert payload.missing_required() == []


class TestNormalizePolicy:
    """Test conversion of a payload into storable values."""

    def test_create_recomputes_derived_charges(self) -> None:
        payload = PolicyPayload(premium="1000", doc_stamps=1, total_premium=1)

        policy = normalize_policy(payload, recompute=True)

        assert policy.doc_stamps == Decimal("125")
        assert policy.total_premium == Decimal("1300.40")

    def test_update_keeps_client_charges(self) -> None:
        payload = PolicyPayload(premium=1000, doc_stamps="1", total_premium="2")

        policy = normalize_policy(payload, recompute=False)

        assert policy.doc_stamps == Decimal("1")
        assert policy.e_vat == Decimal("0")
        assert policy.total_premium == Decimal("2")
        assert policy.auth_fee == Decimal("50.40")

    def test_empty_payload_gets_defaults(self) -> None:
        policy = normalize_policy(PolicyPayload(), recompute=True)

        assert policy.assured == ""
        assert policy.date_issued is None
        assert policy.policy_year == date.today().year
        assert policy.premium == Decimal("0")

    def test_row_has_every_writable_column(self) -> None:
        row = normalize_policy(PolicyPayload(), recompute=True).to_row()

        assert "id" not in row
        assert "deleted_at" not in row
        assert len(row) == 26


class TestPolicyWrite:
    """Test the normalized write model."""

    def test_rejects_malformed_dates(self) -> None:
        with pytest.raises(ValidationError):
            PolicyWrite(
                policy_year=2024,
                date_issued="15/01/2024",
                premium=Decimal("0"),
                other_charges=Decimal("0"),
                auth_fee=Decimal("50.40"),
                doc_stamps=Decimal("0"),
                e_vat=Decimal("0"),
                lgt=Decimal("0"),
                total_premium=Decimal("0"),
            )


class TestPolicyRecord:
    """Test output formatting of stored rows."""

    def test_formats_dates_timestamps_and_money(self) -> None:
        record = format_policy_row(
            {
                "id": 7,
                "assured": "A",
                "date_issued": date(2024, 1, 15),
                "premium": Decimal("1000.00"),
                "total_premium": Decimal("1300.400"),
                "created_at": datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
                "deleted_at": None,
            }
        )

        body = record.model_dump(mode="json")

        assert body["id"] == 7
        assert body["date_issued"] == "2024-01-15"
        assert body["premium"] == 1000.0
        assert body["total_premium"] == 1300.4
        assert body["created_at"] == "2024-01-15T10:00:00.000Z"
        assert body["deleted_at"] is None

    def test_python_dump_keeps_decimals(self) -> None:
        record = PolicyRecord(id=1, premium=Decimal("12.50"))

        assert record.model_dump()["premium"] == Decimal("12.50")
