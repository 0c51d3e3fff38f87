# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Shared helpers used across dailycast modules."""

from .logs import dict_counts

__all__ = ["dict_counts"]
