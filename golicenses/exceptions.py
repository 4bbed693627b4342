"""Custom exceptions for golicenses."""

from __future__ import annotations


class LicensesError(Exception):
    """Base exception for all golicenses errors."""


class GraphError(LicensesError):
    """Raised when any reachable package failed to load.

    Aggregates the errors of every failing package into one message; the
    whole run is aborted and no partial library set is produced.
    """

    def __init__(self, roots: list[str], package_errors: list[tuple[str, str]]):
        self.roots = roots
        self.package_errors = package_errors
        lines = [f"errors for {roots!r}:"]
        lines.extend(f"{path}: {err}" for path, err in package_errors)
        super().__init__("\n".join(lines))


class LicenseDiscoveryError(LicensesError):
    """Raised when the license lookup for a package directory fails."""


class ProvenanceError(LicensesError):
    """Raised when no public URL can be derived for a library's license file."""

    def __init__(
        self,
        message: str,
        *,
        host: str = "",
        library: str = "",
        attempts: list[str] | None = None,
    ):
        self.host = host
        self.library = library
        self.attempts = attempts or []
        super().__init__(message)


class UnsupportedHostError(ProvenanceError):
    """Raised when an import path starts with a host token we have no template for."""

    def __init__(self, host: str, library: str, rel_path: str = ""):
        super().__init__(
            f"unsupported package host {host!r} for {library!r} (file: {rel_path!r})",
            host=host,
            library=library,
        )


class GitRemoteError(ProvenanceError):
    """Raised when a Git remote is missing or its URL cannot be parsed."""


class ClassificationError(LicensesError):
    """Raised when a license file cannot be identified with enough confidence."""
