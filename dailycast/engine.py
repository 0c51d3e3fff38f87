# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Staged resolution of a daily content record.

``resolve`` tries, in order:

1. the local cache, for every day anchor and subject attempt;
2. one date-scoped store query per anchor, matching subjects in memory;
3. the most recent rows for the region, ignoring the day.

Anchors are always the outer loop so a correct day beats a more specific
subject spelling. Store errors only skip the anchor or stage they occur in.
"""

from __future__ import annotations

import datetime as dt
import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Sequence

from dailycast import config
from dailycast.anchors import anchor_local, anchor_utc, build_anchors, resolve_user_timezone
from dailycast.cache import RecordCache, cache_key, get_default_cache
from dailycast.common.logs import dict_counts
from dailycast.diag import diag_enabled, get_logger as get_diag_logger, log_json
from dailycast.labels import build_subject_attempts, labels_equivalent
from dailycast.records import DailyRecord
from dailycast.regions import region_variants, to_canonical_region
from dailycast.store import (
    DEFAULT_FALLBACK_LIMIT,
    RowFetcher,
    StoreError,
    get_default_store,
)
from dailycast.store.base import Row

LOGGER = logging.getLogger(__name__)
if not LOGGER.handlers:  # pragma: no cover - silence library default
    LOGGER.addHandler(logging.NullHandler())
if os.getenv("DAILYCAST_DEBUG") == "1":
    LOGGER.setLevel(logging.DEBUG)

DIAG_LOGGER = get_diag_logger(f"{__name__}.diag")

PROBE_LIMIT = 3


@dataclass(frozen=True)
class ResolveOptions:
    user_id: Optional[str] = None
    force_day: Optional[str] = None
    use_cache: bool = True
    debug: bool = False
    allow_component_fallback: bool = False
    timezone: Optional[str] = None


def _configured_fallback_limit() -> int:
    value = config.section("resolution").get("fallback_limit", DEFAULT_FALLBACK_LIMIT)
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return DEFAULT_FALLBACK_LIMIT
    return limit if limit > 0 else DEFAULT_FALLBACK_LIMIT


def _first_match(rows: Sequence[Row], attempts: Sequence[str]) -> tuple[Optional[str], Optional[Row]]:
    for attempt in attempts:
        for row in rows:
            if labels_equivalent(str(row.get("subject") or ""), attempt):
                return attempt, row
    return None, None


class DailyResolver:
    """Resolves records against a store and a cache."""

    def __init__(
        self,
        store: Optional[RowFetcher] = None,
        cache: Optional[RecordCache] = None,
        *,
        fallback_limit: Optional[int] = None,
    ) -> None:
        self._store = store
        self._cache = cache
        self.fallback_limit = fallback_limit or _configured_fallback_limit()

    @property
    def store(self) -> RowFetcher:
        if self._store is None:
            self._store = get_default_store()
        return self._store

    @property
    def cache(self) -> RecordCache:
        if self._cache is None:
            self._cache = get_default_cache()
        return self._cache

    def resolve(
        self,
        raw_subject: Optional[str],
        raw_region: Optional[str],
        options: Optional[ResolveOptions] = None,
        *,
        now: Optional[dt.datetime] = None,
    ) -> Optional[DailyRecord]:
        """Return the best record for the subject/region, or ``None`` when none exists."""

        opts = options or ResolveOptions()
        debug = opts.debug
        region = to_canonical_region(raw_region)
        instant = now or dt.datetime.now(dt.timezone.utc)
        anchors = build_anchors(instant, opts.force_day, timezone_name=opts.timezone)
        attempts = build_subject_attempts(
            raw_subject, allow_component_fallback=opts.allow_component_fallback
        )

        log_json(
            DIAG_LOGGER,
            "resolve_attempts",
            force=debug,
            subject=raw_subject,
            attempts=attempts,
            anchors=anchors,
            region=region,
            user_tz=resolve_user_timezone(opts.timezone),
            today_utc=anchor_utc(instant),
            today_local=anchor_local(instant),
        )
        if not attempts:
            log_json(DIAG_LOGGER, "resolve_no_attempts", force=debug, subject=raw_subject)
            return None

        if opts.use_cache:
            cached = self._from_cache(opts.user_id, attempts, region, anchors, debug)
            if cached is not None:
                return cached

        variants = region_variants(region)
        for day in anchors:
            record = self._from_day(day, attempts, region, variants, opts, debug)
            if record is not None:
                return record

        log_json(DIAG_LOGGER, "resolve_latest_fallback", force=debug, region=region)
        record = self._from_latest(attempts, variants, debug)
        if record is not None:
            return record

        log_json(
            DIAG_LOGGER,
            "resolve_not_found",
            force=debug,
            attempts=attempts,
            anchors=anchors,
            region=region,
        )
        return None

    def _from_cache(
        self,
        user_id: Optional[str],
        attempts: Sequence[str],
        region: str,
        anchors: Sequence[str],
        debug: bool,
    ) -> Optional[DailyRecord]:
        cache = self.cache
        for day in anchors:
            for attempt in attempts:
                key = cache_key(user_id, attempt, region, day)
                try:
                    payload = cache.get(key)
                except Exception:  # pragma: no cover - caches are best-effort
                    LOGGER.debug("cache get failed key=%s", key, exc_info=True)
                    payload = None
                if payload is None:
                    continue
                record = DailyRecord.from_dict(payload)
                if record is None:
                    continue
                log_json(
                    DIAG_LOGGER,
                    "resolve_cache_hit",
                    force=debug,
                    key=key,
                    subject=attempt,
                    day=day,
                    source=record.source_tag,
                )
                return record
        return None

    def _from_day(
        self,
        day: str,
        attempts: Sequence[str],
        region: str,
        variants: List[str],
        opts: ResolveOptions,
        debug: bool,
    ) -> Optional[DailyRecord]:
        try:
            rows = self.store.list_by_day_and_region(day, variants)
        except StoreError as exc:
            log_json(DIAG_LOGGER, "resolve_day_error", force=debug, day=day, error=str(exc))
            return None

        log_json(
            DIAG_LOGGER,
            "resolve_day_rows",
            force=debug,
            day=day,
            variants=variants,
            count=len(rows),
            regions=dict_counts(row.get("region") for row in rows) if debug or diag_enabled() else {},
        )
        if not rows:
            if debug:
                self._probe(variants)
            return None

        attempt, row = _first_match(rows, attempts)
        if row is None:
            log_json(
                DIAG_LOGGER,
                "resolve_day_unmatched",
                force=debug,
                day=day,
                attempts=list(attempts),
                sample=[r.get("subject") for r in rows[:3]],
            )
            return None

        record = DailyRecord.from_row(row)
        if opts.use_cache:
            key = cache_key(opts.user_id, attempt, region, day)
            try:
                self.cache.set(key, record.to_dict())
            except Exception:  # pragma: no cover - caches are best-effort
                LOGGER.debug("cache set failed key=%s", key, exc_info=True)
        log_json(
            DIAG_LOGGER,
            "resolve_day_hit",
            force=debug,
            day=day,
            wanted=attempt,
            subject=record.subject,
            record_day=record.day,
            has_primary=bool(record.primary_text),
            has_affirmation=bool(record.affirmation),
            has_deeper=bool(record.deeper_insight),
        )
        return record

    def _from_latest(
        self, attempts: Sequence[str], variants: List[str], debug: bool
    ) -> Optional[DailyRecord]:
        try:
            rows = self.store.list_recent_by_region(variants, self.fallback_limit)
        except StoreError as exc:
            log_json(DIAG_LOGGER, "resolve_latest_error", force=debug, error=str(exc))
            return None

        attempt, row = _first_match(rows, attempts)
        if row is None:
            return None
        record = DailyRecord.from_row(row)
        log_json(
            DIAG_LOGGER,
            "resolve_latest_hit",
            force=debug,
            wanted=attempt,
            subject=record.subject,
            record_day=record.day,
        )
        return record

    def _probe(self, variants: List[str]) -> None:
        """Log a few any-day rows so date mismatches are visible while debugging."""

        try:
            sample = self.store.list_recent_by_region(variants, PROBE_LIMIT)
        except StoreError as exc:
            log_json(DIAG_LOGGER, "resolve_probe_error", force=True, error=str(exc))
            return
        log_json(
            DIAG_LOGGER,
            "resolve_probe",
            force=True,
            variants=variants,
            sample=[{k: row.get(k) for k in ("subject", "region", "day")} for row in sample],
        )


def resolve(
    raw_subject: Optional[str],
    raw_region: Optional[str],
    options: Optional[ResolveOptions] = None,
    *,
    store: Optional[RowFetcher] = None,
    cache: Optional[RecordCache] = None,
    now: Optional[dt.datetime] = None,
) -> Optional[DailyRecord]:
    """Resolve with the given or configured store and cache."""

    return DailyResolver(store, cache).resolve(raw_subject, raw_region, options, now=now)


__all__ = ["DailyResolver", "PROBE_LIMIT", "ResolveOptions", "resolve"]
