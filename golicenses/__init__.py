"""golicenses: group Go dependencies into libraries and locate their licenses."""

__version__ = "0.1.0"

from golicenses.exceptions import (
    ClassificationError,
    GraphError,
    LicenseDiscoveryError,
    LicensesError,
    ProvenanceError,
    UnsupportedHostError,
)
from golicenses.graph import GoListWalker, PackageGraph
from golicenses.grouper import group_libraries
from golicenses.models import Library, Package, ProvenanceResult, SkippedLibrary, SkipReason
from golicenses.provenance import resolve

__all__ = [
    "ClassificationError",
    "GoListWalker",
    "GraphError",
    "LicenseDiscoveryError",
    "LicensesError",
    "Library",
    "Package",
    "PackageGraph",
    "ProvenanceError",
    "ProvenanceResult",
    "SkipReason",
    "SkippedLibrary",
    "UnsupportedHostError",
    "group_libraries",
    "resolve",
]
