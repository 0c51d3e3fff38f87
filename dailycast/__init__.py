# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Resolve daily content records for a subject, region and day."""

from .anchors import anchor_local, anchor_utc, build_anchors, ymd_in_tz
from .cache import cache_key
from .engine import DailyResolver, ResolveOptions, resolve
from .labels import build_subject_attempts, labels_equivalent, normalize_label
from .profile import DailyView, get_accessible_reading
from .records import SOURCE_TAG, DailyRecord
from .regions import region_variants, to_canonical_region

__all__ = [
    "DailyRecord",
    "DailyResolver",
    "DailyView",
    "ResolveOptions",
    "SOURCE_TAG",
    "anchor_local",
    "anchor_utc",
    "build_anchors",
    "build_subject_attempts",
    "cache_key",
    "get_accessible_reading",
    "labels_equivalent",
    "normalize_label",
    "region_variants",
    "resolve",
    "to_canonical_region",
    "ymd_in_tz",
]
