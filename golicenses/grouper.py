"""Library grouping — turn a package graph into license-sharing libraries."""

from __future__ import annotations

import os
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor

import structlog

from golicenses.exceptions import GraphError, LicenseDiscoveryError
from golicenses.finder import LicenseFinder
from golicenses.graph import PackageGraph
from golicenses.models import Library, Package, SkippedLibrary, SkipReason

log = structlog.get_logger("golicenses.grouper")


def is_std_lib(pkg: Package, goroot: str) -> bool:
    """Return True if *pkg* ships with the Go distribution rooted at *goroot*."""
    if not pkg.source_files or not goroot:
        return False
    root = goroot if goroot.endswith("/") else goroot + "/"
    return pkg.source_files[0].startswith(root)


def package_dir(pkg: Package) -> str | None:
    """Directory holding *pkg*'s files, or None for an empty package."""
    if pkg.source_files:
        return os.path.dirname(pkg.source_files[0])
    if pkg.other_files:
        return os.path.dirname(pkg.other_files[0])
    return None


def _check_errors(graph: PackageGraph) -> None:
    package_errors = [
        (pkg.import_path, err) for pkg in graph.walk() for err in pkg.errors
    ]
    if package_errors:
        roots = graph.entry_points or [p.import_path for p in graph.roots]
        raise GraphError(roots, package_errors)


def _lookup(finder: LicenseFinder, directory: str) -> tuple[str, LicenseDiscoveryError | None]:
    try:
        return finder.find_nearest(directory), None
    except LicenseDiscoveryError as e:
        return "", e


def group_libraries(
    graph: PackageGraph,
    finder: LicenseFinder,
    *,
    workers: int = 1,
) -> tuple[list[Library], list[SkippedLibrary]]:
    """Return the libraries used by *graph*'s roots, directly or transitively.

    A library is one or more packages covered by the same license file.
    Packages without a license become individual libraries. Standard
    library packages are reported as skipped.

    Raises :class:`GraphError` if any reachable package failed to load.
    """
    _check_errors(graph)

    skipped: list[SkippedLibrary] = []
    candidates: list[tuple[Package, str]] = []
    for pkg in graph.walk():
        if is_std_lib(pkg, graph.goroot):
            skipped.append(
                SkippedLibrary(
                    package_path=pkg.import_path,
                    reason=SkipReason.STANDARD_LIBRARY,
                    detail="Go standard library has no license requirement",
                )
            )
            continue
        if pkg.other_files:
            files = ", ".join(pkg.other_files)
            log.warning("grouper.non_go_files", package=pkg.import_path, files=pkg.other_files)
            skipped.append(
                SkippedLibrary(
                    package_path=pkg.import_path,
                    reason=SkipReason.NON_ANALYZABLE_FILES,
                    detail=f"contains non-Go code that can't be inspected for dependencies: {files}",
                )
            )
        directory = package_dir(pkg)
        if directory is None:
            continue
        candidates.append((pkg, directory))

    directories = [d for _, d in candidates]
    if workers > 1 and len(candidates) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            lookups = list(executor.map(lambda d: _lookup(finder, d), directories))
    else:
        lookups = [_lookup(finder, d) for d in directories]

    by_license: dict[str, list[str]] = defaultdict(list)
    for (pkg, _), (license_path, err) in zip(candidates, lookups):
        if err is not None:
            log.error("grouper.license_lookup_failed", package=pkg.import_path, error=str(err))
            skipped.append(
                SkippedLibrary(
                    package_path=pkg.import_path,
                    reason=SkipReason.LICENSE_DISCOVERY_FAILED,
                    detail=f"failed to find license for {pkg.import_path}: {err}",
                )
            )
        by_license[license_path].append(pkg.import_path)

    libraries: list[Library] = []
    for license_path, members in by_license.items():
        if not license_path:
            # No license: every package stands alone.
            libraries.extend(Library(license_path="", packages=(m,)) for m in members)
            continue
        libraries.append(Library(license_path=license_path, packages=tuple(sorted(members))))

    libraries.sort(key=lambda lib: (lib.name, lib.license_path))
    skipped.sort(key=lambda s: (s.package_path, s.reason.value))
    log.info("grouper.done", libraries=len(libraries), skipped=len(skipped))
    return libraries, skipped
