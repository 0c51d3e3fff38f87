# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest

duckdb = pytest.importorskip("duckdb")

from dailycast.cache import MemoryCache, cache_key
from dailycast.engine import ResolveOptions, resolve
from dailycast.regions import region_variants
from dailycast.store import DuckDBRowFetcher, StoreError, get_default_store
from dailycast.store.duckdb_store import canonicalize_duckdb_target
from dailycast.store.schema import init_schema, load_rows
from dailycast.tests.conftest import NOW, TODAY

NORTH = region_variants("Northern")


@pytest.fixture
def conn():
    con = duckdb.connect(":memory:")
    yield con
    con.close()


def _day_values(day_type: str):
    if day_type == "DATE":
        return dt.date(2026, 10, 19), dt.date(2026, 10, 20), "2026-10-19"
    if day_type == "TIMESTAMP":
        return (
            dt.datetime(2026, 10, 19, 23, 30),
            dt.datetime(2026, 10, 20, 0, 0),
            "2026-10-19T23:30:00",
        )
    if day_type == "TIMESTAMPTZ":
        return (
            "2026-10-19 23:30:00+00",
            "2026-10-20 00:00:00+00",
            "2026-10-19T23:30:00+00:00",
        )
    return "2026-10-19T05:00:00Z", "2026-10-20T00:00:00Z", "2026-10-19T05:00:00Z"


@pytest.mark.parametrize("day_type", ["DATE", "TIMESTAMP", "TIMESTAMPTZ", "VARCHAR"])
def test_list_by_day_uses_half_open_utc_range(conn, day_type):
    conn.execute("SET TimeZone = 'America/New_York'")
    inside, next_day, expected = _day_values(day_type)
    init_schema(conn, day_type=day_type)
    load_rows(
        conn,
        [
            {"subject": "Aries", "region": "NORTHERN", "day": inside, "primary_text": "in"},
            {"subject": "Aries", "region": "Northern", "day": next_day, "primary_text": "next"},
            {"subject": "Aries", "region": "Southern", "day": inside, "primary_text": "south"},
        ],
    )
    fetcher = DuckDBRowFetcher(conn=conn)

    rows = fetcher.list_by_day_and_region(TODAY, NORTH)

    assert [row["primary_text"] for row in rows] == ["in"]
    record_day = rows[0]["day"]
    assert (record_day.isoformat() if hasattr(record_day, "isoformat") else record_day) == expected


def _texts_by_day(fetcher: DuckDBRowFetcher):
    return {
        day: sorted(row["primary_text"] for row in fetcher.list_by_day_and_region(day, NORTH))
        for day in ("2026-10-19", "2026-10-20")
    }


def test_tz_aware_column_is_bucketed_by_utc_day_not_session_zone(conn):
    conn.execute("SET TimeZone = 'America/New_York'")
    init_schema(conn, day_type="TIMESTAMPTZ")
    load_rows(
        conn,
        [{"subject": "Aries", "region": "Northern", "day": "2026-10-20 02:00:00+00", "primary_text": "utc-20"}],
    )
    fetcher = DuckDBRowFetcher(conn=conn)

    assert _texts_by_day(fetcher) == {"2026-10-19": [], "2026-10-20": ["utc-20"]}
    assert fetcher.day_column_type() in {"TIMESTAMP WITH TIME ZONE", "TIMESTAMPTZ"}
    assert fetcher.list_recent_by_region(NORTH, 1)[0]["day"] == "2026-10-20T02:00:00+00:00"


def test_text_days_with_offsets_are_read_as_instants(conn):
    init_schema(conn, day_type="VARCHAR")
    load_rows(
        conn,
        [
            {"subject": "Aries", "region": "Northern", "day": "2026-10-20T02:00:00+05:00", "primary_text": "utc-19"},
            {"subject": "Aries", "region": "Northern", "day": "2026-10-19T22:00:00-04:00", "primary_text": "utc-20"},
            {"subject": "Aries", "region": "Northern", "day": "2026-10-19", "primary_text": "plain-19"},
        ],
    )
    fetcher = DuckDBRowFetcher(conn=conn)

    assert _texts_by_day(fetcher) == {
        "2026-10-19": ["plain-19", "utc-19"],
        "2026-10-20": ["utc-20"],
    }
    days = {row["primary_text"]: row["day"] for row in fetcher.list_by_day_and_region("2026-10-19", NORTH)}
    assert days["utc-19"] == "2026-10-20T02:00:00+05:00"


def test_list_recent_orders_by_day_descending(conn):
    init_schema(conn)
    load_rows(
        conn,
        [
            {"subject": "Aries", "region": "NH", "day": dt.date(2026, 10, 1)},
            {"subject": "Aries", "region": "NH", "day": dt.date(2026, 10, 5)},
            {"subject": "Aries", "region": "northern", "day": dt.date(2026, 10, 3)},
            {"subject": "Aries", "region": "SH", "day": dt.date(2026, 10, 9)},
        ],
    )
    fetcher = DuckDBRowFetcher(conn=conn)

    rows = fetcher.list_recent_by_region(NORTH, 2)

    assert [row["day"] for row in rows] == [dt.date(2026, 10, 5), dt.date(2026, 10, 3)]
    assert fetcher.list_recent_by_region(NORTH, 0) == []


def test_missing_table_raises_store_error(conn):
    fetcher = DuckDBRowFetcher(conn=conn)
    with pytest.raises(StoreError):
        fetcher.list_by_day_and_region(TODAY, NORTH)
    with pytest.raises(StoreError):
        fetcher.list_recent_by_region(NORTH, 5)


def test_invalid_anchor_raises_store_error(conn):
    init_schema(conn)
    with pytest.raises(StoreError):
        DuckDBRowFetcher(conn=conn).list_by_day_and_region("not-a-day", NORTH)


def test_invalid_table_name_is_rejected():
    with pytest.raises(ValueError):
        DuckDBRowFetcher(":memory:", table="daily; DROP TABLE x")


def test_file_backed_store_from_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    db_path = tmp_path / "daily.duckdb"
    con = duckdb.connect(str(db_path))
    init_schema(con, table="readings")
    load_rows(con, [{"subject": "Leo", "region": "Southern", "day": dt.date(2026, 10, 19)}], table="readings")
    con.close()

    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        f"store:\n  backend: duckdb\n  db_url: duckdb:///{db_path}\n  table: readings\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("DAILYCAST_CONFIG_PATH", str(config_path))

    store = get_default_store()
    try:
        assert isinstance(store, DuckDBRowFetcher)
        assert store.path == str(db_path.resolve())
        rows = store.list_by_day_and_region(TODAY, region_variants("Southern"))
        assert [row["subject"] for row in rows] == ["Leo"]
    finally:
        store.close()


def test_canonicalize_targets(tmp_path: Path):
    assert canonicalize_duckdb_target(None) == ":memory:"
    assert canonicalize_duckdb_target("duckdb:///:memory:") == ":memory:"
    target = tmp_path / "x.duckdb"
    assert canonicalize_duckdb_target(f"duckdb:///{target}") == str(target.resolve())
    assert canonicalize_duckdb_target(str(target)) == str(target.resolve())


def test_engine_end_to_end_against_duckdb(conn):
    init_schema(conn, day_type="TIMESTAMP")
    load_rows(
        conn,
        [
            {
                "subject": "Gemini–Cancer Cusp",
                "region": "northern",
                "day": dt.datetime(2026, 10, 19, 6, 0),
                "primary_text": "Between two tides.",
                "affirmation": None,
                "deeper_insight": "Look twice.",
            },
            {"subject": "Aries", "region": "Northern", "day": dt.datetime(2026, 9, 1)},
        ],
    )
    cache = MemoryCache()
    store = DuckDBRowFetcher(conn=conn)

    record = resolve(
        "gemini-cancer cusp",
        "NH",
        ResolveOptions(timezone="UTC"),
        store=store,
        cache=cache,
        now=NOW,
    )

    assert record.subject == "Gemini–Cancer Cusp"
    assert record.region == "Northern"
    assert record.day == "2026-10-19T06:00:00"
    assert record.affirmation == ""
    assert record.deeper_insight == "Look twice."
    assert cache.get(cache_key(None, "Gemini–Cancer Cusp", "Northern", TODAY)) is not None

    older = resolve("aries", "Northern", ResolveOptions(timezone="UTC"), store=store, cache=cache, now=NOW)
    assert older.day == "2026-09-01T00:00:00"
    assert cache.get(cache_key(None, "Aries", "Northern", TODAY)) is None
