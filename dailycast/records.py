# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""The resolved daily content record and its boundary mapping."""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

from dailycast.regions import to_canonical_region

SOURCE_TAG = "daily_content"

CONTENT_FIELDS = ("primary_text", "affirmation", "deeper_insight")
ROW_COLUMNS = ("subject", "region", "day") + CONTENT_FIELDS
REQUIRED_FIELDS = ("subject", "region", "day")


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value)


def day_to_str(value: Any) -> str:
    """Stringify a store day value without changing its granularity."""

    if value is None:
        return ""
    if isinstance(value, (dt.datetime, dt.date)):
        return value.isoformat()
    return _text(value).strip()


@dataclass(frozen=True)
class DailyRecord:
    subject: str
    region: str
    day: str
    primary_text: str = ""
    affirmation: str = ""
    deeper_insight: str = ""
    source_tag: str = SOURCE_TAG

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "DailyRecord":
        """Map a raw store row into a record, coercing missing content to ``""``."""

        return cls(
            subject=_text(row.get("subject")).strip(),
            region=to_canonical_region(row.get("region")),
            day=day_to_str(row.get("day")),
            primary_text=_text(row.get("primary_text")),
            affirmation=_text(row.get("affirmation")),
            deeper_insight=_text(row.get("deeper_insight")),
        )

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Optional["DailyRecord"]:
        """Rebuild a record from a cache payload; malformed payloads yield ``None``."""

        if not is_well_formed(payload):
            return None
        record = cls.from_row(payload)
        tag = _text(payload.get("source_tag")) or SOURCE_TAG
        if tag != record.source_tag:
            record = cls(**{**asdict(record), "source_tag": tag})
        return record

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def is_well_formed(payload: Any) -> bool:
    if not isinstance(payload, Mapping):
        return False
    return all(_text(payload.get(name)).strip() for name in REQUIRED_FIELDS)


__all__ = [
    "CONTENT_FIELDS",
    "DailyRecord",
    "ROW_COLUMNS",
    "SOURCE_TAG",
    "day_to_str",
    "is_well_formed",
]
