# Policy Registry - Insurance Policy Records API
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Input coercion and output formatting for policy fields.

Inbound values are coerced, never rejected: malformed dates become ``None``
and unparsable numbers fall back to a default so the write still proceeds.
"""

import math
import re
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Final

from beartype import beartype

_DATE_EXACT: Final = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
_DATE_PREFIX: Final = re.compile(r"^\d{4}-\d{2}-\d{2}", re.ASCII)
_NUMBER_PREFIX: Final = re.compile(
    r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII
)
_INTEGER_PREFIX: Final = re.compile(r"^\s*([+-]?\d+)", re.ASCII)

# Sentinels front ends send for "no date"
_EMPTY_DATE_MARKERS: Final = frozenset({"false", "0000-00-00", "null", "undefined"})


@beartype
def validate_date(value: Any) -> str | None:
    """Return ``value`` as a ``YYYY-MM-DD`` string, or ``None``.

    Only the digit layout is checked; ``2024-13-45`` passes.
    """
    if not value:
        return None
    if isinstance(value, str) and value in _EMPTY_DATE_MARKERS:
        return None

    text = str(value).strip()
    if not text:
        return None
    if _DATE_EXACT.fullmatch(text):
        return text
    return None


@beartype
def format_date(value: Any) -> str | None:
    """Render a stored calendar date as ``YYYY-MM-DD``.

    Date and datetime values are formatted from their own fields, without
    any timezone conversion.
    """
    if not value:
        return None
    if isinstance(value, str):
        return value[:10] if _DATE_PREFIX.match(value) else None
    if isinstance(value, (date, datetime)):
        return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
    return None


@beartype
def format_timestamp(value: Any) -> str | None:
    """Render an audit timestamp as ISO-8601 UTC with millisecond precision."""
    if not value:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return None
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime(value.year, value.month, value.day)
    else:
        return None

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (
        moment.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def _as_text(value: Any) -> str:
    # Client-side string conversion: arrays join with commas, objects are opaque
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(_as_text(item) for item in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


@beartype
def clean_text(value: Any) -> str:
    """Stringify and trim; empty values become ``''``.

    Lists render as comma-joined items and objects as ``[object Object]``.
    """
    if not value and not isinstance(value, dict):
        return ""
    return _as_text(value).strip()


@beartype
def parse_decimal(value: Any, default: Decimal) -> Decimal:
    """Parse the leading numeric part of ``value``.

    ``"12.5abc"`` gives ``12.5``. Unparsable input yields ``default``, and
    so does any number that is zero or infinite as a double (``"1e999"``).
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        if isinstance(value, (int, float, Decimal)):
            number = Decimal(str(value))
        else:
            match = _NUMBER_PREFIX.match(str(value))
            if match is None:
                return default
            number = Decimal(match.group(1))
    except InvalidOperation:
        return default

    if not number.is_finite():
        return default
    as_double = float(number)
    if not math.isfinite(as_double) or as_double == 0:
        return default
    return number


@beartype
def parse_year(value: Any, *, today: date | None = None) -> int:
    """Parse the leading integer part of ``value``; fall back to this year."""
    fallback = (today or date.today()).year
    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, float):
        if not math.isfinite(value):
            return fallback
        year = int(value)
    elif isinstance(value, int):
        year = value
    else:
        match = _INTEGER_PREFIX.match(str(value))
        if match is None:
            return fallback
        year = int(match.group(1))
    return year or fallback
