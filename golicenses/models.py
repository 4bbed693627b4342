"""Data models shared by the grouping and provenance engines."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(eq=False)
class Package:
    """A single Go package as reported by the graph loader."""

    import_path: str
    source_files: list[str] = field(default_factory=list)
    other_files: list[str] = field(default_factory=list)
    imports: list[Package] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"Package({self.import_path!r})"


class SkipReason(str, Enum):
    """Why a package was left out of (or flagged during) grouping."""

    STANDARD_LIBRARY = "standard-library"
    NON_ANALYZABLE_FILES = "non-analyzable-files"
    LICENSE_DISCOVERY_FAILED = "license-discovery-failed"


@dataclass(frozen=True)
class SkippedLibrary:
    """A package excluded from grouping, or grouped with a warning."""

    package_path: str
    reason: SkipReason
    detail: str = ""


def common_ancestor(paths: list[str] | tuple[str, ...]) -> str:
    """Return the longest common slash-delimited prefix of *paths*."""
    if not paths:
        return ""
    if len(paths) == 1:
        return paths[0]
    split = [p.split("/") for p in paths]
    common: list[str] = []
    for segments in zip(*split):
        if any(s != segments[0] for s in segments[1:]):
            break
        common.append(segments[0])
    return "/".join(common)


@dataclass(frozen=True)
class Library:
    """A collection of packages covered by the same license file.

    ``license_path`` is empty when no license was found; such a library
    always holds exactly one package.
    """

    license_path: str
    packages: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.packages:
            raise ValueError("a library needs at least one package")
        if not self.license_path and len(self.packages) != 1:
            raise ValueError(
                f"unlicensed library must have exactly one package, got {list(self.packages)}"
            )

    @property
    def name(self) -> str:
        """Common prefix of the import paths for all packages in this library."""
        return common_ancestor(self.packages)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ProvenanceResult:
    """Canonical location of a license file.

    An empty ``host`` means no public license URL applies (for example
    packages shipped with the Go distribution itself). ``path`` may carry a
    query string.
    """

    host: str
    path: str = ""

    @property
    def url(self) -> str | None:
        if not self.host:
            return None
        return f"https://{self.host}/{self.path.lstrip('/')}"
