# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Row fetcher for PostgREST-style HTTP read endpoints."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import requests

from dailycast.records import ROW_COLUMNS
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
if os.getenv("DAILYCAST_DEBUG") == "1":
    LOGGER.setLevel(logging.DEBUG)

DEFAULT_TIMEOUT = 10


def _quote(value: str) -> str:
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def in_filter(values: Sequence[str]) -> str:
    return "in.(" + ",".join(_quote(value) for value in values) + ")"


def _iso_z(value) -> str:
    return value.strftime("%Y-%m-%dT%H:%M:%S.000Z")


class RestRowFetcher:
    """Reads the daily content table through ``GET {base_url}/{table}``."""

    def __init__(
        self,
        base_url: str,
        *,
        table: str = DEFAULT_TABLE,
        headers: Optional[Mapping[str, str]] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Any = None,
    ) -> None:
        if not base_url:
            raise ValueError("base_url is required for the REST store")
        self.base_url = base_url.rstrip("/")
        self.table = validate_table_name(table)
        self.headers: Dict[str, str] = {"Accept": "application/json", **dict(headers or {})}
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.table}"

    def _get(self, params: List[Tuple[str, str]]) -> List[Row]:
        LOGGER.debug("REST query url=%s params=%s", self.url, params)
        try:
            response = self.session.get(
                self.url, params=params, headers=self.headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise StoreError(f"request to {self.url} failed: {exc}") from exc

        status = getattr(response, "status_code", 0)
        if not 200 <= int(status) < 300:
            body = (getattr(response, "text", "") or "")[:200]
            raise StoreError(f"{self.url} returned HTTP {status}: {body}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise StoreError(f"{self.url} returned a non-JSON body") from exc
        if not isinstance(payload, list):
            raise StoreError(f"{self.url} returned {type(payload).__name__}, expected a list")
        return [row for row in payload if isinstance(row, dict)]

    def list_by_day_and_region(self, day: str, region_variants: Sequence[str]) -> List[Row]:
        if not region_variants:
            return []
        start, end = day_range(day)
        params = [
            ("select", ",".join(ROW_COLUMNS)),
            ("region", in_filter(region_variants)),
            ("day", f"gte.{_iso_z(start)}"),
            ("day", f"lt.{_iso_z(end)}"),
        ]
        return self._get(params)

    def list_recent_by_region(self, region_variants: Sequence[str], limit: int) -> List[Row]:
        if not region_variants or limit <= 0:
            return []
        params = [
            ("select", ",".join(ROW_COLUMNS)),
            ("region", in_filter(region_variants)),
            ("order", "day.desc"),
            ("limit", str(int(limit))),
        ]
        return self._get(params)


__all__ = ["DEFAULT_TIMEOUT", "RestRowFetcher", "in_filter"]
