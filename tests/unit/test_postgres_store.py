"""Unit tests for SQL rendering and error wrapping in PostgresPolicyStore."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import asyncpg
import pytest

from policy_registry.core.database import Database, PostgresPolicyStore
from policy_registry.core.store import (
    Filter,
    InsertQuery,
    Ordering,
    PolicyStore,
    SelectQuery,
    StoreError,
    UpdateQuery,
)

TABLE = "insurance_policies"


@pytest.fixture
def store(mock_db: MagicMock) -> PostgresPolicyStore:
    """Create a store over a mocked pool wrapper."""
    return PostgresPolicyStore(mock_db)


class TestRendering:
    """Test SQL produced for each query shape."""

    def test_implements_protocol(self, store: PostgresPolicyStore) -> None:
        assert isinstance(store, PolicyStore)

    def test_select_active(self, store: PostgresPolicyStore) -> None:
        sql, params = store.render_select(
            SelectQuery(
                TABLE,
                columns=("id", "assured"),
                filters=(Filter.is_null("deleted_at"),),
                order_by=(Ordering("id", ascending=False),),
            )
        )

        assert sql == (
            'SELECT "id", "assured" FROM "insurance_policies" '
            'WHERE "deleted_at" IS NULL ORDER BY "id" DESC'
        )
        assert params == []

    def test_select_one(self, store: PostgresPolicyStore) -> None:
        sql, params = store.render_select(
            SelectQuery(
                TABLE,
                columns=("id",),
                filters=(Filter.eq("id", 5), Filter.is_null("deleted_at")),
                limit=1,
            )
        )

        assert sql == (
            'SELECT "id" FROM "insurance_policies" '
            'WHERE "id" = $1 AND "deleted_at" IS NULL LIMIT 1'
        )
        assert params == [5]

    def test_insert_casts_dates(self, store: PostgresPolicyStore) -> None:
        sql, params = store.render_insert(
            InsertQuery(
                TABLE,
                ({"assured": "A", "date_issued": "2024-01-15", "premium": Decimal("1")},),
                returning=("id",),
            )
        )

        assert sql == (
            'INSERT INTO "insurance_policies" ("assured", "date_issued", "premium") '
            'VALUES ($1, $2::text::date, $3) RETURNING "id"'
        )
        assert params == ["A", "2024-01-15", Decimal("1")]

    def test_update_binds_values_before_filters(
        self, store: PostgresPolicyStore
    ) -> None:
        stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
        sql, params = store.render_update(
            UpdateQuery(
                TABLE,
                values={"deleted_at": stamp},
                filters=(Filter.eq("id", 3), Filter.is_null("deleted_at")),
                returning=("id",),
            )
        )

        assert sql == (
            'UPDATE "insurance_policies" SET "deleted_at" = $1 '
            'WHERE "id" = $2 AND "deleted_at" IS NULL RETURNING "id"'
        )
        assert params == [stamp, 3]

    def test_unknown_column_rejected(self, store: PostgresPolicyStore) -> None:
        with pytest.raises(StoreError, match="Unknown column"):
            store.render_select(SelectQuery(TABLE, columns=("id; DROP TABLE x",)))

    def test_invalid_table_rejected(self, store: PostgresPolicyStore) -> None:
        with pytest.raises(StoreError, match="Invalid table name"):
            store.render_select(SelectQuery('policies"; --'))

    def test_empty_update_rejected(self, store: PostgresPolicyStore) -> None:
        with pytest.raises(StoreError):
            store.render_update(UpdateQuery(TABLE, values={}, filters=()))


class TestExecution:
    """Test result conversion and driver error wrapping."""

    @pytest.mark.asyncio
    async def test_rows_are_plain_dicts(
        self, store: PostgresPolicyStore, mock_db: MagicMock
    ) -> None:
        mock_db.fetch.return_value = [{"id": 1}, {"id": 2}]

        rows = await store.select(SelectQuery(TABLE, columns=("id",)))

        assert rows == [{"id": 1}, {"id": 2}]
        mock_db.fetch.assert_awaited_once_with('SELECT "id" FROM "insurance_policies"')

    @pytest.mark.asyncio
    async def test_postgres_error_is_wrapped(
        self, store: PostgresPolicyStore, mock_db: MagicMock
    ) -> None:
        mock_db.fetch.side_effect = asyncpg.UndefinedTableError(
            'relation "insurance_policies" does not exist'
        )

        with pytest.raises(StoreError) as exc_info:
            await store.select(SelectQuery(TABLE))

        assert "does not exist" in exc_info.value.message
        assert exc_info.value.code == "42P01"

    @pytest.mark.asyncio
    async def test_connection_error_is_wrapped(
        self, store: PostgresPolicyStore, mock_db: MagicMock
    ) -> None:
        mock_db.fetch.side_effect = ConnectionRefusedError("connection refused")

        with pytest.raises(StoreError, match="Database unavailable"):
            await store.select(SelectQuery(TABLE))


class TestDatabase:
    """Test the pool wrapper without a server."""

    @pytest.mark.asyncio
    async def test_acquire_before_connect(self) -> None:
        db = Database()

        assert not db.is_connected
        with pytest.raises(StoreError, match="not initialized"):
            await db.fetch("SELECT 1")

    @pytest.mark.asyncio
    async def test_health_check_reports_failure(self) -> None:
        result = await Database().health_check()

        assert result.is_err()
        assert "not initialized" in result.unwrap_err()

    @pytest.mark.asyncio
    async def test_health_check_ok(self) -> None:
        db = Database()
        db.fetchval = AsyncMock(return_value=1)  # type: ignore[method-assign]

        result = await db.health_check()

        assert result.unwrap() is True
