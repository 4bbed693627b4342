"""License report — resolve URLs and license names per library, render CSV."""

from __future__ import annotations

import csv
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TextIO

import structlog

from golicenses.classifier import LicenseClassifier
from golicenses.core.config import DEFAULT_GIT_REMOTES
from golicenses.exceptions import ClassificationError, ProvenanceError
from golicenses.models import Library, SkippedLibrary
from golicenses.provenance import resolve, unvendor

log = structlog.get_logger("golicenses.report")

UNKNOWN = "Unknown"
NOT_APPLICABLE = "n/a"


@dataclass(frozen=True)
class LicenseRow:
    """One output record per library."""

    name: str
    license_url: str
    license_name: str

    def as_row(self) -> list[str]:
        return [self.name, self.license_url, self.license_name]


@dataclass(frozen=True)
class SkippedRow:
    package_path: str
    reason: str

    def as_row(self) -> list[str]:
        return [self.package_path, self.reason]


def license_row(
    library: Library,
    classifier: LicenseClassifier,
    git_remotes: Sequence[str] = DEFAULT_GIT_REMOTES,
    stop_dirs: Iterable[str] = (),
) -> LicenseRow:
    """Resolve URL and license family for one library; failures become "Unknown"."""
    name = unvendor(library.name)
    if not library.license_path:
        return LicenseRow(name=name, license_url=UNKNOWN, license_name=UNKNOWN)

    try:
        provenance = resolve(library, git_remotes, stop_dirs)
        license_url = provenance.url or NOT_APPLICABLE
    except ProvenanceError as e:
        log.error(
            "report.url_unknown",
            library=library.name,
            license_path=library.license_path,
            host=e.host,
            error=str(e),
        )
        license_url = UNKNOWN

    try:
        license_name, _ = classifier.identify(library.license_path)
    except ClassificationError as e:
        log.error("report.license_unknown", license_path=library.license_path, error=str(e))
        license_name = UNKNOWN

    return LicenseRow(name=name, license_url=license_url, license_name=license_name)


def build_report(
    libraries: Sequence[Library],
    classifier: LicenseClassifier,
    *,
    git_remotes: Sequence[str] = DEFAULT_GIT_REMOTES,
    stop_dirs: Iterable[str] = (),
    workers: int = 1,
) -> list[LicenseRow]:
    """Build one row per library, in the order *libraries* are given."""
    stops = tuple(stop_dirs)

    def _row(lib: Library) -> LicenseRow:
        return license_row(lib, classifier, git_remotes, stops)

    if workers > 1 and len(libraries) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(_row, libraries))
    return [_row(lib) for lib in libraries]


def skipped_rows(skipped: Iterable[SkippedLibrary]) -> list[SkippedRow]:
    return [SkippedRow(package_path=s.package_path, reason=s.reason.value) for s in skipped]


def write_csv(rows: Iterable[LicenseRow | SkippedRow], stream: TextIO) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    for row in rows:
        writer.writerow(row.as_row())
