"""License file discovery — find the license governing a package directory."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

import structlog

from golicenses.classifier import LicenseClassifier
from golicenses.exceptions import ClassificationError, LicenseDiscoveryError

log = structlog.get_logger("golicenses.finder")

LICENSE_FILE_RE = re.compile(r"^(LICEN[SC]E|COPYING|README|NOTICE)(\..+)?$", re.IGNORECASE)

# A vendor directory is a boundary: code above it belongs to another project.
_VENDOR_DIR_RE = re.compile(r".+/vendor/?$")

# Module cache entries are named <module>@<version>.
_VERSIONED_DIR_RE = re.compile(r"^[^@]+@v[^@]*$")


def is_versioned_module_dir(directory: str) -> bool:
    """True for a module cache directory such as ``bar@v1.2.3``."""
    return bool(_VERSIONED_DIR_RE.match(os.path.basename(directory)))


def is_module_root(directory: str, entries: Iterable[str] = ()) -> bool:
    """True if *directory* is the top of a Go module.

    *entries* is the directory listing when the caller already has it.
    """
    if is_versioned_module_dir(directory):
        return True
    if "go.mod" in entries:
        return os.path.isfile(os.path.join(directory, "go.mod"))
    return False


@runtime_checkable
class LicenseFinder(Protocol):
    """Interface for nearest-license lookup.

    Returns ``""`` when no license governs *directory*; raises
    :class:`LicenseDiscoveryError` when the lookup itself fails.
    """

    def find_nearest(self, directory: str) -> str: ...


class FileSystemLicenseFinder:
    """Walk upwards from a directory until a license file is found."""

    def __init__(
        self,
        classifier: LicenseClassifier | None = None,
        stop_dirs: Iterable[str] = (),
    ) -> None:
        self._classifier = classifier
        self._stop_dirs = {os.path.normpath(d) for d in stop_dirs}

    def find_nearest(self, directory: str) -> str:
        current = os.path.normpath(os.path.abspath(directory))
        while not self._is_boundary(current):
            try:
                entries = sorted(os.listdir(current))
            except OSError as e:
                raise LicenseDiscoveryError(f"cannot list {current}: {e}") from e
            for entry in entries:
                if not LICENSE_FILE_RE.match(entry):
                    continue
                candidate = os.path.join(current, entry)
                if not os.path.isfile(candidate):
                    continue
                if self._accepts(candidate):
                    return candidate
            # Packages of one module never take a license from outside it.
            if is_module_root(current, entries):
                break
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent
        log.debug("finder.no_license", directory=directory)
        return ""

    def _is_boundary(self, directory: str) -> bool:
        return directory in self._stop_dirs or bool(_VENDOR_DIR_RE.match(directory))

    def _accepts(self, path: str) -> bool:
        # Without a classifier every name match counts.
        if self._classifier is None:
            return True
        try:
            self._classifier.identify(path)
        except ClassificationError:
            return False
        return True
