# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Best-effort key/value caches for resolved records.

Every backend swallows storage failures: ``get`` misses and ``set`` does
nothing. Entries never expire.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from dailycast import config

DEFAULT_CACHE_PATH = Path(".cache") / "dailycast_cache.json"
ANON = "anon"


def cache_key(requester: Optional[str], subject: str, region: str, day: str) -> str:
    return f"daily:{requester or ANON}:{subject}:{region}:{day}"


class RecordCache(Protocol):
    def get(self, key: str) -> Dict[str, Any] | None: ...

    def set(self, key: str, value: Dict[str, Any]) -> None: ...


class NullCache:
    """Storage that is not available in this execution context."""

    def get(self, key: str) -> Dict[str, Any] | None:
        return None

    def set(self, key: str, value: Dict[str, Any]) -> None:
        return


class MemoryCache:
    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Dict[str, Any] | None:
        with self._lock:
            value = self._data.get(key)
        return dict(value) if isinstance(value, dict) else None

    def set(self, key: str, value: Dict[str, Any]) -> None:
        try:
            snapshot = json.loads(json.dumps(value))
        except (TypeError, ValueError):
            return
        with self._lock:
            self._data[key] = snapshot

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class JsonFileCache:
    """Single JSON file holding every cached entry."""

    def __init__(self, path: Path | str = DEFAULT_CACHE_PATH) -> None:
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        try:
            if not self.path.exists():
                return {}
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except Exception:
            return {}
        return data if isinstance(data, dict) else {}

    def _persist(self, cache: Dict[str, Any]) -> None:
        try:
            payload = json.dumps(cache, ensure_ascii=False)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(payload)
        except Exception:
            return

    def get(self, key: str) -> Dict[str, Any] | None:
        value = self._load().get(key)
        return value if isinstance(value, dict) else None

    def set(self, key: str, value: Dict[str, Any]) -> None:
        cache = self._load()
        cache[key] = value
        self._persist(cache)


def is_enabled() -> bool:
    settings = config.section("cache")
    return config.env_flag("DAILYCAST_CACHE", bool(settings.get("enabled", True)))


def get_default_cache() -> RecordCache:
    """Build the cache described by configuration."""

    if not is_enabled():
        return NullCache()
    path = config.section("cache").get("path") or DEFAULT_CACHE_PATH
    return JsonFileCache(path)


__all__ = [
    "JsonFileCache",
    "MemoryCache",
    "NullCache",
    "RecordCache",
    "cache_key",
    "get_default_cache",
    "is_enabled",
]
