"""Test configuration and fixtures for the Policy Registry.

Provides an in-memory :class:`PolicyStore`, a FastAPI test client wired to
it, and bearer tokens signed with the test secret.
"""

from collections.abc import Generator, Mapping
from datetime import date, datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from policy_registry.api.dependencies import get_db, get_policy_store
from policy_registry.core.config import clear_settings_cache
from policy_registry.core.database import DATE_COLUMNS, Database, reset_database
from policy_registry.core.result_types import Ok
from policy_registry.core.security import get_security, reset_security
from policy_registry.core.store import (
    POLICY_COLUMNS,
    Filter,
    FilterOp,
    InsertQuery,
    Row,
    SelectQuery,
    StoreError,
    UpdateQuery,
)

# Configure pytest-asyncio
pytest_plugins = ["pytest_asyncio"]


class InMemoryPolicyStore:
    """Dict-backed PolicyStore mirroring the PostgreSQL table's behavior.

    Ids auto-increment from 1, calendar dates are stored as ``date`` values
    and audit timestamps are maintained on insert and update. Set
    ``fail_with`` to make every call raise that error.
    """

    def __init__(self) -> None:
        self.rows: dict[int, Row] = {}
        self.calls: list[str] = []
        self.fail_with: StoreError | None = None
        self._next_id = 1

    async def select(self, query: SelectQuery) -> list[Row]:
        self._record("select")
        matched = [row for row in self.rows.values() if _matches(row, query.filters)]
        # Stable multi-key sort: apply the least significant key first
        for ordering in reversed(query.order_by):
            matched.sort(
                key=lambda row: _sort_key(row[ordering.column]),
                reverse=not ordering.ascending,
            )
        if query.limit is not None:
            matched = matched[: query.limit]
        return [_project(row, query.columns) for row in matched]

    async def insert(self, query: InsertQuery) -> list[Row]:
        self._record("insert")
        created = []
        for values in query.rows:
            now = datetime.now(timezone.utc)
            row: Row = {column: None for column in POLICY_COLUMNS}
            row.update(_coerce(values))
            row.update(id=self._next_id, created_at=now, updated_at=now, deleted_at=None)
            self.rows[self._next_id] = row
            self._next_id += 1
            created.append(_project(row, query.returning))
        return created

    async def update(self, query: UpdateQuery) -> list[Row]:
        self._record("update")
        values = _coerce(query.values)
        changed = []
        for row in self.rows.values():
            if _matches(row, query.filters):
                row.update(values)
                row["updated_at"] = datetime.now(timezone.utc)
                changed.append(_project(row, query.returning))
        return changed

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with is not None:
            raise self.fail_with


def _matches(row: Row, filters: tuple[Filter, ...]) -> bool:
    for flt in filters:
        value = row.get(flt.column)
        if flt.op is FilterOp.IS_NULL and value is not None:
            return False
        if flt.op is FilterOp.NOT_NULL and value is None:
            return False
        if flt.op is FilterOp.EQ and value != flt.value:
            return False
    return True


def _coerce(values: Mapping[str, Any]) -> Row:
    row = dict(values)
    for column in DATE_COLUMNS & row.keys():
        if row[column] is not None:
            try:
                row[column] = date.fromisoformat(row[column])
            except ValueError as e:
                raise StoreError(
                    f"date/time field value out of range: {row[column]}"
                ) from e
    return row


def _sort_key(value: Any) -> tuple[bool, Any]:
    # PostgreSQL sorts NULL above every value
    return (value is None, 0 if value is None else value)


def _project(row: Row, columns: tuple[str, ...]) -> Row:
    return {column: row[column] for column in columns}


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Drop cached settings, security and database instances around each test."""
    clear_settings_cache()
    reset_security()
    reset_database()
    yield
    clear_settings_cache()
    reset_security()
    reset_database()


@pytest.fixture
def memory_store() -> InMemoryPolicyStore:
    """Create an empty in-memory policy store."""
    return InMemoryPolicyStore()


@pytest.fixture
def mock_db() -> MagicMock:
    """Create mock database for testing."""
    db = MagicMock(spec=Database)
    db.fetch = AsyncMock(return_value=[])
    db.fetchval = AsyncMock(return_value=1)
    db.health_check = AsyncMock(return_value=Ok(True))
    return db


@pytest.fixture
def test_app(memory_store: InMemoryPolicyStore, mock_db: MagicMock) -> FastAPI:
    """Create the application with the store and pool overridden."""
    from policy_registry.main import create_app

    app = create_app()
    app.dependency_overrides[get_policy_store] = lambda: memory_store
    app.dependency_overrides[get_db] = lambda: mock_db
    return app


@pytest.fixture
def test_client(test_app: FastAPI) -> TestClient:
    """Create test client for FastAPI app.

    The client is not entered as a context manager, so the lifespan (and
    its pool connection) never runs.
    """
    return TestClient(test_app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Bearer header carrying a valid token for a test user."""
    token = get_security().create_access_token("user-123", email="agent@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sample_policy_data() -> dict[str, Any]:
    """Sample create payload as a front end would send it."""
    return {
        "assured": "Juan Dela Cruz",
        "address": "123 Rizal St, Quezon City",
        "coc_number": "COC-2024-0001",
        "or_number": "OR-5512",
        "policy_number": "POL-2024-001",
        "policy_type": "CTPL",
        "policy_year": 2024,
        "date_issued": "2024-01-15",
        "date_received": "2024-01-16",
        "insurance_from_date": "2024-01-15",
        "insurance_to_date": "2025-01-15",
        "model": "Vios",
        "make": "Toyota",
        "body_type": "Sedan",
        "color": "Silver",
        "mv_file_no": "1301-00000123456",
        "plate_no": "ABC 1234",
        "chassis_no": "NCP150-1234567",
        "motor_no": "2NR-7654321",
        "premium": 1000,
        "other_charges": 0,
    }
