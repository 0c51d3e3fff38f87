# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Logging helpers shared across dailycast modules."""
from __future__ import annotations
from typing import Iterable

import pandas as pd


def dict_counts(values: Iterable | None) -> dict[str, int]:
    """Return a stable mapping of value counts for diagnostic logging."""

    if values is None:
        return {}
    if not isinstance(values, pd.Series):
        values = pd.Series(list(values), dtype=object)
    if values.empty:
        return {}
    normalised = values.fillna("").astype(str)
    counts = normalised.value_counts(dropna=False, sort=False)
    return {str(index): int(count) for index, count in counts.items()}
