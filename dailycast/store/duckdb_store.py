# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Thin DuckDB readers for the daily content table."""

from __future__ import annotations

import logging
import os
import pathlib
from typing import Any, List, Optional, Sequence
from urllib.parse import urlparse

from dailycast.records import ROW_COLUMNS
from dailycast.store._duckdb_available import get_duckdb
from dailycast.store.base import (
    DEFAULT_TABLE,
    Row,
    StoreError,
    day_range,
    validate_table_name,
)

LOGGER = logging.getLogger(__name__)
if not LOGGER.handlers:  # pragma: no cover - silence library default
    LOGGER.addHandler(logging.NullHandler())
DEBUG_ENABLED = os.getenv("DAILYCAST_DEBUG") == "1"
if DEBUG_ENABLED:
    LOGGER.setLevel(logging.DEBUG)

_MEMORY_ALIASES = {
    ":memory:",
    "duckdb:///:memory:",
    "duckdb://memory",
    "duckdb://:memory:",
    "duckdb:memory",
}


def canonicalize_duckdb_target(url_or_path: str | None) -> str:
    """Return the filesystem path (or ``:memory:``) for a DuckDB target."""

    raw = (url_or_path or "").strip()
    if not raw or raw in _MEMORY_ALIASES:
        return ":memory:"

    if raw.startswith("duckdb://"):
        parsed = urlparse(raw)
        path = parsed.path or ""
        if parsed.netloc and parsed.netloc != ":memory:":
            path = f"{parsed.netloc}{path}"
        if path == ":memory:":
            return ":memory:"
        if path.startswith("//"):
            path = "/" + path.lstrip("/")
    else:
        path = raw

    if not os.path.isabs(path):
        path = os.path.join(os.getcwd(), path)
    return str(pathlib.Path(path).expanduser().resolve())


_OFFSET_PATTERN = r"[T ]\d\d:\d\d(:\d\d(\.\d+)?)?(Z|[+-]\d\d(:?\d\d)?)$"
_UTC_ISO_FORMAT = "%Y-%m-%dT%H:%M:%S+00:00"


def _strip_timezone_expr(column: str) -> str:
    pattern = r"(Z|[+-]\d\d:?\d\d)$"
    return f"REGEXP_REPLACE(CAST({column} AS VARCHAR), '{pattern}', '')"


def _is_tz_aware(day_type: str) -> bool:
    return "TIME ZONE" in day_type or day_type == "TIMESTAMPTZ"


def _day_parsed_expr(column: str = "day", day_type: str = "") -> str:
    """SQL expression yielding the day as a UTC wall-clock TIMESTAMP.

    Text values carrying an offset are read as instants and shifted to UTC;
    stripping the offset is the last resort. Naive values are already UTC.
    """

    if _is_tz_aware(day_type):
        return f"timezone('UTC', {column})"
    text = f"CAST({column} AS VARCHAR)"
    return (
        f"CASE WHEN regexp_matches({text}, '{_OFFSET_PATTERN}') THEN COALESCE("
        f"timezone('UTC', TRY_CAST({text} AS TIMESTAMPTZ)), "
        f"TRY_CAST({_strip_timezone_expr(column)} AS TIMESTAMP)"
        f") ELSE TRY_CAST({column} AS TIMESTAMP) END"
    )


def _placeholders(values: Sequence[Any]) -> str:
    return ", ".join("?" for _ in values)


class DuckDBRowFetcher:
    """Read-only access to the daily content table in a DuckDB database."""

    def __init__(
        self,
        db_url: Optional[str] = None,
        *,
        conn: Any = None,
        table: str = DEFAULT_TABLE,
    ) -> None:
        self.table = validate_table_name(table)
        self.path = canonicalize_duckdb_target(db_url) if conn is None else None
        self._conn = conn
        self._day_type: Optional[str] = None

    @property
    def conn(self):
        if self._conn is None:
            duckdb = get_duckdb()
            try:
                self._conn = duckdb.connect(self.path)
            except duckdb.Error as exc:
                raise StoreError(f"unable to open DuckDB database {self.path}: {exc}") from exc
        return self._conn

    def day_column_type(self) -> str:
        """Declared type of the ``day`` column, ``""`` when the table is missing."""

        if self._day_type is not None:
            return self._day_type
        duckdb = get_duckdb()
        try:
            row = self.conn.execute(
                """
                SELECT data_type
                FROM information_schema.columns
                WHERE table_schema = 'main' AND table_name = ? AND column_name = 'day'
                """,
                [self.table],
            ).fetchone()
        except duckdb.Error as exc:
            raise StoreError(f"unable to inspect {self.table}: {exc}") from exc
        if not row:
            return ""
        self._day_type = str(row[0]).upper()
        return self._day_type

    def _select_columns(self, day_type: str) -> str:
        columns = []
        for column in ROW_COLUMNS:
            if column == "day" and _is_tz_aware(day_type):
                # Aware values come back as UTC text; fetching them natively needs pytz.
                column = f"strftime(timezone('UTC', day), '{_UTC_ISO_FORMAT}') AS day"
            columns.append(column)
        return ", ".join(columns)

    def _fetch(self, query: str, params: List[Any]) -> List[Row]:
        conn = self.conn
        duckdb = get_duckdb()
        LOGGER.debug("DuckDB query table=%s params=%s", self.table, params)
        try:
            cursor = conn.execute(query, params)
            names = [column[0] for column in cursor.description]
            records = cursor.fetchall()
        except duckdb.Error as exc:
            raise StoreError(f"DuckDB query on {self.table} failed: {exc}") from exc
        return [dict(zip(names, record)) for record in records]

    def list_by_day_and_region(self, day: str, region_variants: Sequence[str]) -> List[Row]:
        """Return rows for ``day`` across the region spellings in ``region_variants``."""

        if not region_variants:
            return []
        start, end = day_range(day)
        day_type = self.day_column_type()
        day_expr = _day_parsed_expr(day_type=day_type)
        query = f"""
            SELECT {self._select_columns(day_type)}
            FROM {self.table}
            WHERE region IN ({_placeholders(region_variants)})
              AND {day_expr} >= ?
              AND {day_expr} < ?
        """
        params = [*region_variants, start.replace(tzinfo=None), end.replace(tzinfo=None)]
        return self._fetch(query, params)

    def list_recent_by_region(self, region_variants: Sequence[str], limit: int) -> List[Row]:
        """Return the newest ``limit`` rows for the region, any day."""

        if not region_variants or limit <= 0:
            return []
        day_type = self.day_column_type()
        query = f"""
            SELECT {self._select_columns(day_type)}
            FROM {self.table}
            WHERE region IN ({_placeholders(region_variants)})
            ORDER BY {_day_parsed_expr(day_type=day_type)} DESC NULLS LAST
            LIMIT {int(limit)}
        """
        return self._fetch(query, list(region_variants))

    def close(self) -> None:
        if self._conn is not None:
            try:
                self._conn.close()
            finally:
                self._conn = None


__all__ = ["DuckDBRowFetcher", "canonicalize_duckdb_target"]
