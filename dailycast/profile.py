# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Resolve a daily record straight from a caller profile."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from dailycast.engine import DailyResolver, ResolveOptions
from dailycast.labels import has_cusp_marker
from dailycast.records import DailyRecord


@dataclass(frozen=True)
class DailyView:
    day: str
    subject: str
    region: str
    daily: str
    affirmation: str
    deeper: str
    raw: DailyRecord


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _requester_id(value: Any) -> str:
    if value is None or isinstance(value, (Mapping, list, tuple, set)):
        return ""
    return str(value).strip()


def subject_label(profile: Mapping[str, Any]) -> str:
    """Prefer the cusp name, then the primary subject, then the preferred subject."""

    cusp = profile.get("cusp_result")
    if isinstance(cusp, Mapping):
        for key in ("cusp_name", "primary_subject"):
            label = _text(cusp.get(key))
            if label:
                return label
    return _text(profile.get("preferred_subject"))


def get_accessible_reading(
    profile: Optional[Mapping[str, Any]],
    *,
    force_day: Optional[str] = None,
    use_cache: Optional[bool] = None,
    debug: bool = False,
    resolver: Optional[DailyResolver] = None,
    now: Optional[dt.datetime] = None,
) -> Optional[DailyView]:
    profile = profile or {}
    label = subject_label(profile)
    options = ResolveOptions(
        user_id=_requester_id(profile.get("id")) or _requester_id(profile.get("email")) or None,
        force_day=force_day,
        use_cache=use_cache is not False,
        debug=debug,
        allow_component_fallback=not has_cusp_marker(label),
    )
    region = profile.get("region") or profile.get("hemisphere")
    record = (resolver or DailyResolver()).resolve(label, region, options, now=now)
    if record is None:
        return None
    return DailyView(
        day=record.day,
        subject=record.subject,
        region=record.region,
        daily=record.primary_text,
        affirmation=record.affirmation,
        deeper=record.deeper_insight,
        raw=record,
    )


__all__ = ["DailyView", "get_accessible_reading", "subject_label"]
