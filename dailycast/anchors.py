# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Day anchors that tolerate timezone and device-clock skew."""

from __future__ import annotations

import datetime as dt
import os
from typing import List, Optional

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dailycast import config

DEFAULT_TIMEZONE = "UTC"
ONE_DAY = dt.timedelta(days=1)


def _as_instant(value: Optional[dt.datetime]) -> dt.datetime:
    if value is None:
        return dt.datetime.now(dt.timezone.utc)
    if value.tzinfo is None:
        # naive instants are treated as UTC wall time
        return value.replace(tzinfo=dt.timezone.utc)
    return value


def _format_ymd(day: dt.date) -> str:
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def resolve_user_timezone(explicit: Optional[str] = None) -> str:
    """Return the first loadable IANA zone name, falling back to UTC.

    Preference order: ``explicit``, ``DAILYCAST_TZ``, ``TZ``, the configured
    ``timezone`` and finally ``UTC``.
    """

    candidates = [
        explicit,
        os.getenv("DAILYCAST_TZ"),
        os.getenv("TZ"),
        config.load().get("timezone"),
        DEFAULT_TIMEZONE,
    ]
    for candidate in candidates:
        if not candidate or not isinstance(candidate, str):
            continue
        name = candidate.strip().lstrip(":")
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            continue
        return name
    return DEFAULT_TIMEZONE


def ymd_in_tz(instant: Optional[dt.datetime], tz_name: str) -> str:
    """Return ``YYYY-MM-DD`` for ``instant`` as seen in ``tz_name``."""

    try:
        zone = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        zone = ZoneInfo(DEFAULT_TIMEZONE)
    return _format_ymd(_as_instant(instant).astimezone(zone).date())


def anchor_utc(instant: Optional[dt.datetime] = None) -> str:
    return _format_ymd(_as_instant(instant).astimezone(dt.timezone.utc).date())


def anchor_local(instant: Optional[dt.datetime] = None) -> str:
    """Day according to the host clock's own local time."""

    return _format_ymd(_as_instant(instant).astimezone().date())


def build_anchors(
    now: Optional[dt.datetime] = None,
    override_day: Optional[str] = None,
    *,
    timezone_name: Optional[str] = None,
) -> List[str]:
    """Return candidate day strings, most likely first.

    ``override_day`` bypasses all timezone handling. Otherwise the order is
    user-zone today, UTC today, host-clock today, user-zone yesterday and
    user-zone tomorrow, de-duplicated.
    """

    if override_day:
        return [override_day]

    instant = _as_instant(now)
    tz_name = resolve_user_timezone(timezone_name)
    anchors = [
        ymd_in_tz(instant, tz_name),
        anchor_utc(instant),
        anchor_local(instant),
        ymd_in_tz(instant - ONE_DAY, tz_name),
        ymd_in_tz(instant + ONE_DAY, tz_name),
    ]
    return [anchor for anchor in dict.fromkeys(anchors) if anchor]


__all__ = [
    "anchor_local",
    "anchor_utc",
    "build_anchors",
    "resolve_user_timezone",
    "ymd_in_tz",
]
