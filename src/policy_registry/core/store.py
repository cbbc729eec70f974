# Policy Registry - Insurance Policy Records API
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Narrow data-access interface used by the policy service.

Queries are plain immutable values (table, columns, filters, ordering) so the
service layer never depends on a particular driver's API shape. Any backend
that implements :class:`PolicyStore` can serve the API: asyncpg in
production, an in-memory table in tests.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from attrs import field, frozen

Row = dict[str, Any]

POLICY_COLUMNS: tuple[str, ...] = (
    "id",
    "assured",
    "address",
    "coc_number",
    "or_number",
    "policy_number",
    "policy_type",
    "policy_year",
    "date_issued",
    "date_received",
    "insurance_from_date",
    "insurance_to_date",
    "model",
    "make",
    "body_type",
    "color",
    "mv_file_no",
    "plate_no",
    "chassis_no",
    "motor_no",
    "premium",
    "other_charges",
    "auth_fee",
    "doc_stamps",
    "e_vat",
    "lgt",
    "total_premium",
    "created_at",
    "updated_at",
    "deleted_at",
)


class StoreError(Exception):
    """Failure signalled by the data store (connection, constraint, syntax...)."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class FilterOp(str, Enum):
    """Supported filter predicates."""

    EQ = "eq"
    IS_NULL = "is_null"
    NOT_NULL = "not_null"


@frozen
class Filter:
    """Single column predicate; ``value`` is only meaningful for ``EQ``."""

    column: str = field()
    op: FilterOp = field(default=FilterOp.EQ)
    value: Any = field(default=None)

    @classmethod
    def eq(cls, column: str, value: Any) -> "Filter":
        return cls(column, FilterOp.EQ, value)

    @classmethod
    def is_null(cls, column: str) -> "Filter":
        return cls(column, FilterOp.IS_NULL)

    @classmethod
    def not_null(cls, column: str) -> "Filter":
        return cls(column, FilterOp.NOT_NULL)


@frozen
class Ordering:
    """ORDER BY clause for a single column."""

    column: str = field()
    ascending: bool = field(default=True)


@frozen
class SelectQuery:
    """Filtered, ordered read of a table."""

    table: str = field()
    columns: tuple[str, ...] = field(default=POLICY_COLUMNS)
    filters: tuple[Filter, ...] = field(default=())
    order_by: tuple[Ordering, ...] = field(default=())
    limit: int | None = field(default=None)


@frozen
class InsertQuery:
    """Insert of one or more rows returning the stored representation."""

    table: str = field()
    rows: tuple[Mapping[str, Any], ...] = field()
    returning: tuple[str, ...] = field(default=POLICY_COLUMNS)


@frozen
class UpdateQuery:
    """Update of every row matching ``filters``, returning the changed rows."""

    table: str = field()
    values: Mapping[str, Any] = field()
    filters: tuple[Filter, ...] = field()
    returning: tuple[str, ...] = field(default=POLICY_COLUMNS)


@runtime_checkable
class PolicyStore(Protocol):
    """Persistence operations the policy service relies on.

    Implementations raise :class:`StoreError` on failure. An empty result is
    never an error: it is returned as an empty list.
    """

    async def select(self, query: SelectQuery) -> list[Row]: ...

    async def insert(self, query: InsertQuery) -> list[Row]: ...

    async def update(self, query: UpdateQuery) -> list[Row]: ...
