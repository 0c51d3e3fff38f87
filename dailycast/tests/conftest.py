# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pytest

from dailycast import config
from dailycast.store.base import StoreError

_ENV_VARS = (
    "DAILYCAST_CONFIG_PATH",
    "DAILYCAST_CACHE",
    "DAILYCAST_DB_URL",
    "DAILYCAST_DEBUG",
    "DAILYCAST_DIAG",
    "DAILYCAST_REST_URL",
    "DAILYCAST_STORE_BACKEND",
    "DAILYCAST_TZ",
)

NOW = dt.datetime(2026, 10, 19, 12, 0, tzinfo=dt.timezone.utc)
TODAY = "2026-10-19"
YESTERDAY = "2026-10-18"
TOMORROW = "2026-10-20"


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    config.load.cache_clear()
    yield
    config.load.cache_clear()


class FakeStore:
    """In-memory row fetcher that records every call."""

    def __init__(
        self,
        day_rows: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        recent_rows: Optional[List[Dict[str, Any]]] = None,
        *,
        fail_days: Iterable[str] = (),
        fail_all_days: bool = False,
        fail_recent: bool = False,
    ) -> None:
        self.day_rows = day_rows or {}
        self.recent_rows = recent_rows or []
        self.fail_days = set(fail_days)
        self.fail_all_days = fail_all_days
        self.fail_recent = fail_recent
        self.calls: List[tuple] = []

    def list_by_day_and_region(self, day: str, region_variants: Sequence[str]) -> List[Dict[str, Any]]:
        self.calls.append(("day", day, tuple(region_variants)))
        if self.fail_all_days or day in self.fail_days:
            raise StoreError(f"boom for {day}")
        return [dict(row) for row in self.day_rows.get(day, []) if row.get("region") in region_variants]

    def list_recent_by_region(self, region_variants: Sequence[str], limit: int) -> List[Dict[str, Any]]:
        self.calls.append(("recent", tuple(region_variants), limit))
        if self.fail_recent:
            raise StoreError("recent boom")
        rows = [dict(row) for row in self.recent_rows if row.get("region") in region_variants]
        return rows[:limit]

    @property
    def day_calls(self) -> List[str]:
        return [call[1] for call in self.calls if call[0] == "day"]

    @property
    def recent_calls(self) -> List[tuple]:
        return [call for call in self.calls if call[0] == "recent"]


def make_row(subject: str, region: str, day: str, text: str = "", **extra: Any) -> Dict[str, Any]:
    row = {"subject": subject, "region": region, "day": day, "primary_text": text}
    row.update(extra)
    return row
