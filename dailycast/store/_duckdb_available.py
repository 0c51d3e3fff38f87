# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Helpers for probing DuckDB availability."""

from __future__ import annotations

from importlib import import_module
from types import ModuleType
from typing import Optional

DUCKDB_AVAILABLE: bool
_DUCKDB_MODULE: Optional[ModuleType]
_DUCKDB_IMPORT_ERROR: Optional[Exception]

try:  # pragma: no cover - minimal import guard
    _module = import_module("duckdb")
except Exception as exc:  # pragma: no cover - dependency missing
    DUCKDB_AVAILABLE = False
    _DUCKDB_MODULE = None
    _DUCKDB_IMPORT_ERROR = exc
else:  # pragma: no branch - import succeeded
    DUCKDB_AVAILABLE = True
    _DUCKDB_MODULE = _module
    _DUCKDB_IMPORT_ERROR = None


def get_duckdb() -> ModuleType:
    """Return the imported DuckDB module or raise a helpful error."""

    if not DUCKDB_AVAILABLE or _DUCKDB_MODULE is None:
        raise RuntimeError(
            "DuckDB is required for the duckdb store backend but is not installed. "
            "Install duckdb or set store.backend to 'rest'."
        ) from _DUCKDB_IMPORT_ERROR
    return _DUCKDB_MODULE


__all__ = ["DUCKDB_AVAILABLE", "get_duckdb"]
