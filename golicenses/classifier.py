"""License text classification by anchor phrases."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Protocol, runtime_checkable

from golicenses.core.config import DEFAULT_CONFIDENCE_THRESHOLD
from golicenses.exceptions import ClassificationError

MAX_LICENSE_BYTES = 128 * 1024

# Phrases are matched against lower-cased, quote-free, whitespace-collapsed text.
ANCHOR_PHRASES: dict[str, tuple[str, ...]] = {
    "MIT": (
        "permission is hereby granted, free of charge, to any person obtaining a copy",
        "the above copyright notice and this permission notice shall be included",
    ),
    "Apache-2.0": (
        "apache license",
        "version 2.0, january 2004",
        "terms and conditions for use, reproduction, and distribution",
    ),
    "BSD-3-Clause": (
        "redistribution and use in source and binary forms",
        "this software is provided by the copyright holders and contributors",
        "neither the name of",
    ),
    "BSD-2-Clause": (
        "redistribution and use in source and binary forms",
        "this software is provided by the copyright holders and contributors",
    ),
    "ISC": (
        "permission to use, copy, modify, and/or distribute this software for any purpose",
        "the software is provided as is and the author disclaims",
    ),
    "MPL-2.0": (
        "mozilla public license version 2.0",
        "exhibit a - source code form license notice",
    ),
    "GPL-2.0": (
        "gnu general public license",
        "version 2, june 1991",
    ),
    "GPL-3.0": (
        "gnu general public license",
        "version 3, 29 june 2007",
        "the gnu general public license is a free, copyleft license",
    ),
    "LGPL-2.1": (
        "gnu lesser general public license",
        "version 2.1, february 1999",
    ),
    "LGPL-3.0": (
        "gnu lesser general public license",
        "version 3, 29 june 2007",
    ),
    "AGPL-3.0": (
        "gnu affero general public license",
        "version 3, 19 november 2007",
    ),
    "EPL-2.0": (
        "eclipse public license - v 2.0",
        "eclipse.org/legal/epl-2.0",
    ),
    "CC0-1.0": (
        "cc0 1.0 universal",
        "creative commons corporation is not a law firm",
    ),
    "BSL-1.0": (
        "boost software license - version 1.0",
        "permission is hereby granted, free of charge, to any person or organization",
    ),
    "Zlib": (
        "this software is provided as-is, without any express or implied warranty",
        "altered source versions must be plainly marked as such",
    ),
    "Unlicense": (
        "this is free and unencumbered software released into the public domain",
    ),
}

_WS_RE = re.compile(r"\s+")


@runtime_checkable
class LicenseClassifier(Protocol):
    """Interface for license identification."""

    def identify(self, license_path: str) -> tuple[str, float]: ...


def normalize_license_text(text: str) -> str:
    """Lower-case, drop quotes and collapse whitespace."""
    text = text.lower().replace('"', "").replace("'", "")
    return _WS_RE.sub(" ", text).strip()


def score_license_text(text: str) -> tuple[str | None, float]:
    """Return the best matching license family and its confidence for *text*."""
    normalized = normalize_license_text(text)
    best_name: str | None = None
    best_key = (0.0, 0)
    for name, phrases in ANCHOR_PHRASES.items():
        matched = sum(1 for phrase in phrases if phrase in normalized)
        if not matched:
            continue
        key = (matched / len(phrases), matched)
        if key > best_key:
            best_name, best_key = name, key
    return best_name, best_key[0]


class PhraseClassifier:
    """Identify license families from anchor phrases in the license text."""

    def __init__(self, confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD) -> None:
        self.confidence_threshold = confidence_threshold

    def identify(self, license_path: str) -> tuple[str, float]:
        try:
            with open(license_path, "rb") as f:
                raw = f.read(MAX_LICENSE_BYTES)
        except OSError as e:
            raise ClassificationError(f"cannot read {license_path}: {e}") from e

        name, confidence = score_license_text(raw.decode("utf-8", errors="replace"))
        if name is None or confidence < self.confidence_threshold:
            raise ClassificationError(
                f"{Path(license_path).name}: no license matched with confidence "
                f">= {self.confidence_threshold} (best: {name or 'none'} at {confidence:.2f})"
            )
        return name, confidence
