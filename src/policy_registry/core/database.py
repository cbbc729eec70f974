# Policy Registry - Insurance Policy Records API
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Database connection management with asyncpg and connection pooling.

Also provides :class:`PostgresPolicyStore`, the production implementation of
the :class:`~policy_registry.core.store.PolicyStore` query interface.
"""

import asyncio
import contextlib
from collections.abc import AsyncIterator, Iterable, Mapping
from typing import Any

import asyncpg
from attrs import field, frozen
from beartype import beartype

from .config import get_settings
from .logging_utils import get_logger
from .result_types import Err, Ok, Result
from .store import (
    POLICY_COLUMNS,
    Filter,
    FilterOp,
    InsertQuery,
    Ordering,
    Row,
    SelectQuery,
    StoreError,
    UpdateQuery,
)

logger = get_logger(__name__)

# Bound as text and cast server-side so malformed calendar values are
# rejected by PostgreSQL itself rather than by the driver's codec.
DATE_COLUMNS: frozenset[str] = frozenset(
    {"date_issued", "date_received", "insurance_from_date", "insurance_to_date"}
)


@frozen
class PoolConfig:
    """Immutable pool configuration."""

    dsn: str = field()
    min_connections: int = field(default=2)
    max_connections: int = field(default=10)
    command_timeout: float = field(default=30.0)


class Database:
    """asyncpg pool wrapper shared by every request."""

    def __init__(self, config: PoolConfig | None = None) -> None:
        """Initialize database manager; the pool is opened by ``connect``."""
        if config is None:
            settings = get_settings()
            config = PoolConfig(
                dsn=settings.database_url,
                min_connections=settings.database_pool_min,
                max_connections=settings.database_pool_max,
                command_timeout=settings.database_command_timeout,
            )
        self._config = config
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        """Open the connection pool (idempotent)."""
        if self._pool is not None:
            return
        self._pool = await asyncpg.create_pool(
            self._config.dsn,
            min_size=self._config.min_connections,
            max_size=self._config.max_connections,
            command_timeout=self._config.command_timeout,
        )
        logger.info(
            "Database pool opened (min=%d, max=%d)",
            self._config.min_connections,
            self._config.max_connections,
        )

    async def disconnect(self) -> None:
        """Close the connection pool."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("Database pool closed")

    @contextlib.asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Borrow a connection from the pool."""
        if self._pool is None:
            raise StoreError("Database pool is not initialized")
        async with self._pool.acquire() as conn:
            yield conn

    async def fetch(self, query: str, *args: Any) -> list[asyncpg.Record]:
        """Execute a query and fetch all results."""
        async with self.acquire() as conn:
            return await conn.fetch(query, *args)

    async def fetchval(self, query: str, *args: Any) -> Any:
        """Execute a query and fetch a single value."""
        async with self.acquire() as conn:
            return await conn.fetchval(query, *args)

    @beartype
    async def health_check(self) -> Result[bool, str]:
        """Round-trip a trivial query to verify connectivity."""
        try:
            value = await self.fetchval("SELECT 1")
            return Ok(value == 1)
        except (StoreError, asyncpg.PostgresError, OSError, asyncio.TimeoutError) as e:
            return Err(f"Health check failed: {str(e)}")

    @property
    def is_connected(self) -> bool:
        """Check if database is connected."""
        return self._pool is not None


def _quote(identifier: str) -> str:
    if identifier not in POLICY_COLUMNS:
        raise StoreError(f"Unknown column: {identifier}")
    return f'"{identifier}"'


class _SQLBuilder:
    """Accumulates positional parameters while rendering a statement."""

    def __init__(self) -> None:
        self.params: list[Any] = []

    def bind(self, column: str, value: Any) -> str:
        self.params.append(value)
        placeholder = f"${len(self.params)}"
        if column in DATE_COLUMNS:
            return f"{placeholder}::text::date"
        return placeholder

    def where(self, filters: Iterable[Filter]) -> str:
        clauses = []
        for flt in filters:
            column = _quote(flt.column)
            if flt.op is FilterOp.IS_NULL:
                clauses.append(f"{column} IS NULL")
            elif flt.op is FilterOp.NOT_NULL:
                clauses.append(f"{column} IS NOT NULL")
            else:
                clauses.append(f"{column} = {self.bind(flt.column, flt.value)}")
        return f" WHERE {' AND '.join(clauses)}" if clauses else ""

    @staticmethod
    def order(order_by: Iterable[Ordering]) -> str:
        parts = [
            f"{_quote(o.column)} {'ASC' if o.ascending else 'DESC'}" for o in order_by
        ]
        return f" ORDER BY {', '.join(parts)}" if parts else ""

    @staticmethod
    def columns(columns: Iterable[str]) -> str:
        return ", ".join(_quote(c) for c in columns)


class PostgresPolicyStore:
    """PolicyStore rendering query values to parameterized SQL."""

    def __init__(self, database: Database) -> None:
        self._db = database

    @beartype
    def render_select(self, query: SelectQuery) -> tuple[str, list[Any]]:
        sql = _SQLBuilder()
        text = f"SELECT {sql.columns(query.columns)} FROM {_table(query.table)}"
        text += sql.where(query.filters)
        text += sql.order(query.order_by)
        if query.limit is not None:
            text += f" LIMIT {int(query.limit)}"
        return text, sql.params

    @beartype
    def render_insert(self, query: InsertQuery) -> tuple[str, list[Any]]:
        if not query.rows:
            raise StoreError("Insert requires at least one row")
        columns = list(query.rows[0].keys())
        sql = _SQLBuilder()
        tuples = []
        for row in query.rows:
            if list(row.keys()) != columns:
                raise StoreError("All inserted rows must share the same columns")
            tuples.append(
                "(" + ", ".join(sql.bind(c, row[c]) for c in columns) + ")"
            )
        text = (
            f"INSERT INTO {_table(query.table)} ({sql.columns(columns)}) "
            f"VALUES {', '.join(tuples)} "
            f"RETURNING {sql.columns(query.returning)}"
        )
        return text, sql.params

    @beartype
    def render_update(self, query: UpdateQuery) -> tuple[str, list[Any]]:
        if not query.values:
            raise StoreError("Update requires at least one value")
        sql = _SQLBuilder()
        assignments = ", ".join(
            f"{_quote(column)} = {sql.bind(column, value)}"
            for column, value in query.values.items()
        )
        text = f"UPDATE {_table(query.table)} SET {assignments}"
        text += sql.where(query.filters)
        text += f" RETURNING {sql.columns(query.returning)}"
        return text, sql.params

    async def select(self, query: SelectQuery) -> list[Row]:
        return await self._run(*self.render_select(query))

    async def insert(self, query: InsertQuery) -> list[Row]:
        return await self._run(*self.render_insert(query))

    async def update(self, query: UpdateQuery) -> list[Row]:
        return await self._run(*self.render_update(query))

    async def _run(self, text: str, params: list[Any]) -> list[Row]:
        try:
            records = await self._db.fetch(text, *params)
        except asyncpg.PostgresError as e:
            raise StoreError(str(e), getattr(e, "sqlstate", None)) from e
        except (OSError, asyncio.TimeoutError, asyncpg.InterfaceError) as e:
            raise StoreError(f"Database unavailable: {str(e)}") from e
        return [_record_to_row(record) for record in records]


def _table(name: str) -> str:
    if not name.replace("_", "").isalnum():
        raise StoreError(f"Invalid table name: {name}")
    return f'"{name}"'


def _record_to_row(record: Mapping[str, Any]) -> Row:
    return dict(record.items())


# Global database instance
_database: Database | None = None


@beartype
def get_database() -> Database:
    """Get global database instance."""
    global _database
    if _database is None:
        _database = Database()
    return _database


@beartype
def reset_database() -> None:
    """Forget the global instance (for testing)."""
    global _database
    _database = None
