# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Diagnostics helpers gated behind the ``DAILYCAST_DIAG`` flag."""

from __future__ import annotations

from .diagnostics import diag_enabled, get_logger, log_json

__all__ = [
    "diag_enabled",
    "get_logger",
    "log_json",
]
