"""Package import graph — loading via ``go list`` and traversal."""

from __future__ import annotations

import json
import os
import subprocess
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import structlog

from golicenses.exceptions import GraphError
from golicenses.models import Package

log = structlog.get_logger("golicenses.graph")

# ``go list`` fields holding files the Go toolchain cannot analyse for imports.
_OTHER_FILE_FIELDS = (
    "CFiles",
    "CXXFiles",
    "MFiles",
    "HFiles",
    "FFiles",
    "SFiles",
    "SwigFiles",
    "SwigCXXFiles",
    "SysoFiles",
)


@dataclass
class PackageGraph:
    """Root packages of a load plus the Go runtime root they were built against."""

    roots: list[Package]
    goroot: str = ""
    entry_points: list[str] = field(default_factory=list)
    # os.pathsep separated, as `go env GOPATH` prints it.
    gopath: str = ""
    gomodcache: str = ""

    def search_roots(self) -> tuple[str, ...]:
        """Directories that upward license and .git searches must not cross.

        These are `<GOROOT>/src`, `<entry>/src` for each GOPATH entry and the
        module cache. Anything above them belongs to no Go package.
        """
        roots: list[str] = []
        if self.goroot:
            roots.append(os.path.join(self.goroot, "src"))
        roots.extend(os.path.join(p, "src") for p in self.gopath.split(os.pathsep) if p)
        if self.gomodcache:
            roots.append(self.gomodcache)
        return tuple(os.path.normpath(r) for r in roots)

    def walk(self) -> Iterator[Package]:
        """Yield every reachable package exactly once, depth-first.

        Uses an explicit stack and a visited-set keyed by import path, so
        deep graphs do not hit the recursion limit and cycles terminate.
        """
        visited: set[str] = set()
        stack: list[Package] = list(reversed(self.roots))
        while stack:
            pkg = stack.pop()
            if pkg.import_path in visited:
                continue
            visited.add(pkg.import_path)
            yield pkg
            for dep in reversed(pkg.imports):
                if dep.import_path not in visited:
                    stack.append(dep)


@runtime_checkable
class GraphWalker(Protocol):
    """Interface for anything that can load a package graph."""

    def load(self, entry_points: Sequence[str]) -> PackageGraph: ...


def decode_json_stream(text: str) -> list[dict]:
    """Decode the concatenated JSON objects printed by ``go list -json``."""
    decoder = json.JSONDecoder()
    objects: list[dict] = []
    idx = 0
    end = len(text)
    while True:
        while idx < end and text[idx].isspace():
            idx += 1
        if idx >= end:
            break
        try:
            obj, idx = decoder.raw_decode(text, idx)
        except json.JSONDecodeError as e:
            raise GraphError([], [("go list", f"malformed output: {e}")]) from e
        objects.append(obj)
    return objects


def _abs(directory: str, names: list[str] | None) -> list[str]:
    return [os.path.join(directory, n) for n in names or []]


def packages_from_go_list(records: list[dict]) -> list[Package]:
    """Build linked :class:`Package` objects and return the root packages."""
    by_path: dict[str, Package] = {}
    for rec in records:
        directory = rec.get("Dir", "")
        other: list[str] = []
        for fld in _OTHER_FILE_FIELDS:
            other.extend(_abs(directory, rec.get(fld)))
        errors = []
        if rec.get("Error"):
            errors.append(rec["Error"].get("Err", "unknown error"))
        sources = _abs(directory, rec.get("GoFiles")) + _abs(directory, rec.get("CgoFiles"))
        by_path[rec["ImportPath"]] = Package(
            import_path=rec["ImportPath"],
            source_files=sources,
            other_files=other,
            errors=errors,
        )

    for rec in records:
        pkg = by_path[rec["ImportPath"]]
        for imp in rec.get("Imports") or []:
            dep = by_path.get(imp)
            if dep is not None:
                pkg.imports.append(dep)

    return [by_path[r["ImportPath"]] for r in records if not r.get("DepOnly")]


class GoListWalker:
    """Load the transitive import graph with ``go list -e -json -deps``."""

    def __init__(self, go: str = "go", env: dict[str, str] | None = None) -> None:
        self._go = go
        self._env = env

    def load(self, entry_points: Sequence[str]) -> PackageGraph:
        env_out = self._run(["env", "GOROOT", "GOPATH", "GOMODCACHE"], list(entry_points))
        # One line per variable; GOMODCACHE is missing on toolchains older than 1.15.
        goroot, gopath, gomodcache = (env_out.splitlines() + ["", "", ""])[:3]
        out = self._run(["list", "-e", "-json", "-deps", "--", *entry_points], list(entry_points))
        roots = packages_from_go_list(decode_json_stream(out))
        log.debug("graph.loaded", entry_points=list(entry_points), roots=len(roots))
        return PackageGraph(
            roots=roots,
            goroot=goroot.strip(),
            entry_points=list(entry_points),
            gopath=gopath.strip(),
            gomodcache=gomodcache.strip(),
        )

    def _run(self, args: list[str], entry_points: list[str]) -> str:
        cmd = [self._go, *args]
        env = None if self._env is None else {**os.environ, **self._env}
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, env=env)
        except FileNotFoundError as e:
            raise GraphError(entry_points, [(self._go, f"go toolchain not found: {e}")]) from e
        if proc.returncode != 0:
            raise GraphError(
                entry_points,
                [(" ".join(cmd), f"exit {proc.returncode}: {proc.stderr.strip()}")],
            )
        return proc.stdout
