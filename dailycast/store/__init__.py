# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Remote row fetchers for the daily content table."""

from __future__ import annotations

import os

from dailycast import config

from .base import (
    DEFAULT_FALLBACK_LIMIT,
    DEFAULT_TABLE,
    RowFetcher,
    StoreError,
    day_range,
)
from .duckdb_store import DuckDBRowFetcher
from .rest_store import DEFAULT_TIMEOUT, RestRowFetcher

VALID_BACKENDS = {"duckdb", "rest"}


def normalize_backend(value: str | None, *, default: str = "duckdb") -> str:
    """Normalise a backend string, defaulting to ``default`` when invalid."""

    if value is None:
        return default
    backend = value.strip().lower()
    if backend in {"db", "duck"}:
        backend = "duckdb"
    if backend in {"http", "postgrest", "supabase"}:
        backend = "rest"
    if backend not in VALID_BACKENDS:
        return default
    return backend


def get_default_store() -> RowFetcher:
    """Build the row fetcher described by the ``store`` config section."""

    settings = config.section("store")
    table = settings.get("table") or DEFAULT_TABLE
    backend = normalize_backend(os.getenv("DAILYCAST_STORE_BACKEND") or settings.get("backend"))
    if backend == "rest":
        return RestRowFetcher(
            os.getenv("DAILYCAST_REST_URL") or settings.get("rest_url") or "",
            table=table,
            headers=settings.get("headers") or {},
            timeout=float(settings.get("timeout") or DEFAULT_TIMEOUT),
        )
    db_url = os.getenv("DAILYCAST_DB_URL") or settings.get("db_url")
    return DuckDBRowFetcher(db_url, table=table)


__all__ = [
    "DEFAULT_FALLBACK_LIMIT",
    "DEFAULT_TABLE",
    "DuckDBRowFetcher",
    "RestRowFetcher",
    "RowFetcher",
    "StoreError",
    "VALID_BACKENDS",
    "day_range",
    "get_default_store",
    "normalize_backend",
]
