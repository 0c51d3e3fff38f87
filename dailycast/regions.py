# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Region normalisation for the two-valued region attribute."""

from __future__ import annotations

from typing import List, Optional

NORTHERN = "Northern"
SOUTHERN = "Southern"
DEFAULT_REGION = SOUTHERN

_ALIASES = {
    "northern": NORTHERN,
    "nh": NORTHERN,
    "southern": SOUTHERN,
    "sh": SOUTHERN,
}
_CODES = {NORTHERN: "NH", SOUTHERN: "SH"}


def to_canonical_region(value: Optional[object]) -> str:
    """Return ``"Northern"`` or ``"Southern"``.

    Unrecognised or missing input maps to ``DEFAULT_REGION``; this is a
    business rule rather than an error path.
    """

    if value is None:
        return DEFAULT_REGION
    key = str(value).strip().lower()
    return _ALIASES.get(key, DEFAULT_REGION)


def region_variants(canonical: str) -> List[str]:
    """Return the textual encodings the store may hold for ``canonical``."""

    region = to_canonical_region(canonical)
    variants = [region, region.upper(), region.lower(), _CODES[region]]
    return list(dict.fromkeys(variants))


__all__ = [
    "DEFAULT_REGION",
    "NORTHERN",
    "SOUTHERN",
    "region_variants",
    "to_canonical_region",
]
