# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""DuckDB table helpers for local development stores and tests."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from dailycast.records import ROW_COLUMNS
from dailycast.store.base import DEFAULT_TABLE, validate_table_name

DAY_TYPES = {"DATE", "TIMESTAMP", "TIMESTAMPTZ", "VARCHAR"}


def init_schema(conn, *, table: str = DEFAULT_TABLE, day_type: str = "DATE") -> None:
    """Create the daily content table if it does not exist."""

    table = validate_table_name(table)
    day_type = day_type.upper()
    if day_type not in DAY_TYPES:
        raise ValueError(f"unsupported day column type: {day_type}")
    conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {table} (
            subject TEXT NOT NULL,
            region TEXT NOT NULL,
            day {day_type} NOT NULL,
            primary_text TEXT,
            affirmation TEXT,
            deeper_insight TEXT
        )
        """
    )


def load_rows(conn, rows: Iterable[Mapping[str, Any]], *, table: str = DEFAULT_TABLE) -> int:
    """Insert ``rows`` into ``table``; missing columns are stored as NULL."""

    table = validate_table_name(table)
    columns = ", ".join(ROW_COLUMNS)
    placeholders = ", ".join("?" for _ in ROW_COLUMNS)
    values = [[row.get(column) for column in ROW_COLUMNS] for row in rows]
    if not values:
        return 0
    conn.executemany(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", values)
    return len(values)


__all__ = ["init_schema", "load_rows"]
