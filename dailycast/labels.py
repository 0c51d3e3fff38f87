# Dailycast
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Subject label normalisation and matching.

Labels arrive in many spellings: ``"gemini-cancer cusp"``,
``"Gemini–Cancer Cusp"``, ``"GEMINI — CANCER"``. Canonical forms join
components with an en-dash; matching is looser and compares hyphenated,
lower-cased, suffix-free forms.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

EN_DASH = "–"
CUSP_SUFFIX = "Cusp"

_WHITESPACE_RE = re.compile(r"\s+")
_DASH_RE = re.compile("[–—]")
_CUSP_MARKER_RE = re.compile(r"\bcusp\b", re.IGNORECASE)
_TRAILING_CUSP_RE = re.compile(r"\s*cusp\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class LabelForms:
    """Canonical spellings derived from a raw subject label."""

    compound_no_suffix: str = ""
    components: List[str] = field(default_factory=list)
    has_suffix: bool = False
    compound_with_suffix: Optional[str] = None


def _collapse(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip()


def _title_word(word: str) -> str:
    return word[0].upper() + word[1:].lower() if word else ""


def has_cusp_marker(label: Optional[str]) -> bool:
    return bool(label) and bool(_CUSP_MARKER_RE.search(label))


def normalize_label(raw: Optional[str]) -> LabelForms:
    """Return the canonical forms for ``raw``; blank input yields empty forms."""

    if not raw or not raw.strip():
        return LabelForms()

    text = _collapse(raw)
    has_suffix = has_cusp_marker(text)
    hyphenated = _DASH_RE.sub("-", text)
    base = _TRAILING_CUSP_RE.sub("", hyphenated).strip()

    components: List[str] = []
    for part in base.split("-"):
        words = [_title_word(word) for word in part.strip().split(" ")]
        component = " ".join(words).strip()
        if component:
            components.append(component)

    compound = EN_DASH.join(components)
    with_suffix = f"{compound} {CUSP_SUFFIX}" if has_suffix and compound else None
    return LabelForms(
        compound_no_suffix=compound,
        components=components,
        has_suffix=has_suffix,
        compound_with_suffix=with_suffix,
    )


def _match_form(value: str) -> str:
    text = _collapse(value)
    text = _DASH_RE.sub("-", text)
    text = _TRAILING_CUSP_RE.sub("", text)
    return text.lower()


def labels_equivalent(a: Optional[str], b: Optional[str]) -> bool:
    """Compare two labels ignoring case, dash style and a trailing "Cusp"."""

    if not a or not b:
        return False
    return _match_form(a) == _match_form(b)


def build_subject_attempts(
    raw: Optional[str], *, allow_component_fallback: bool = False
) -> List[str]:
    """Return candidate subject spellings, most specific first.

    Individual components are only tried for cusp labels when
    ``allow_component_fallback`` is set; plain labels always include them.
    """

    forms = normalize_label(raw)
    attempts: List[str] = []
    if forms.compound_with_suffix:
        attempts.append(forms.compound_with_suffix)
        attempts.append(forms.compound_with_suffix.replace(EN_DASH, "-"))
    if forms.compound_no_suffix:
        attempts.append(forms.compound_no_suffix)
        attempts.append(forms.compound_no_suffix.replace(EN_DASH, "-"))
    if not forms.has_suffix or allow_component_fallback:
        attempts.extend(forms.components)

    seen: set[str] = set()
    ordered: List[str] = []
    for attempt in attempts:
        if attempt and attempt not in seen:
            seen.add(attempt)
            ordered.append(attempt)
    return ordered


__all__ = [
    "CUSP_SUFFIX",
    "EN_DASH",
    "LabelForms",
    "build_subject_attempts",
    "has_cusp_marker",
    "labels_equivalent",
    "normalize_label",
]
