# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Read contract the resolution engine needs from the remote store."""

from __future__ import annotations

import datetime as dt
import re
from typing import Any, Dict, List, Protocol, Sequence, Tuple

DEFAULT_TABLE = "daily_content"
DEFAULT_FALLBACK_LIMIT = 200

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

Row = Dict[str, Any]


class StoreError(RuntimeError):
    """Raised when a remote query fails for transport or query reasons."""


class RowFetcher(Protocol):
    def list_by_day_and_region(self, day: str, region_variants: Sequence[str]) -> List[Row]: ...

    def list_recent_by_region(self, region_variants: Sequence[str], limit: int) -> List[Row]: ...


def day_range(day: str) -> Tuple[dt.datetime, dt.datetime]:
    """Return the half-open UTC range ``[day 00:00, day+1 00:00)``."""

    try:
        start_date = dt.date.fromisoformat(str(day).strip()[:10])
    except ValueError as exc:
        raise StoreError(f"invalid day anchor {day!r}") from exc
    start = dt.datetime(start_date.year, start_date.month, start_date.day, tzinfo=dt.timezone.utc)
    return start, start + dt.timedelta(days=1)


def validate_table_name(table: str) -> str:
    if not _IDENTIFIER_RE.match(table or ""):
        raise ValueError(f"invalid table name: {table!r}")
    return table


__all__ = [
    "DEFAULT_FALLBACK_LIMIT",
    "DEFAULT_TABLE",
    "Row",
    "RowFetcher",
    "StoreError",
    "day_range",
    "validate_table_name",
]
