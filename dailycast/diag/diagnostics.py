# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Diagnostic logging helpers gated by the ``DAILYCAST_DIAG`` flag.

Per-call tracing (``ResolveOptions.debug``) passes ``force=True`` so a single
resolution can be traced without flipping the process-wide flag.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any


def diag_enabled() -> bool:
    """Return ``True`` when detailed diagnostics should be emitted."""

    return os.getenv("DAILYCAST_DIAG") == "1"


def get_logger(name: str) -> logging.Logger:
    """Return a logger configured for diagnostics when enabled."""

    logger = logging.getLogger(name)
    if not diag_enabled():
        return logger
    has_diag_handler = any(getattr(handler, "_dailycast_diag", False) for handler in logger.handlers)
    if not has_diag_handler:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        handler._dailycast_diag = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    return logger


def log_json(logger: logging.Logger, msg: str, *, force: bool = False, **payload: Any) -> None:
    """Emit ``msg`` with a JSON payload when diagnostics are enabled.

    Forced entries are written at INFO so they surface without reconfiguring
    the logger level.
    """

    enabled = diag_enabled()
    if not (enabled or force):
        return
    try:
        serialised = json.dumps(payload, default=str, sort_keys=True, ensure_ascii=False)
    except Exception:
        serialised = str(payload)
    level = logging.DEBUG if enabled else logging.INFO
    logger.log(level, "%s %s", msg, serialised)
