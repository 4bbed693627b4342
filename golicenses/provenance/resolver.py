"""Provenance resolution — find the canonical URL of a library's license."""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence

import structlog

from golicenses.core.config import DEFAULT_GIT_REMOTES
from golicenses.exceptions import ProvenanceError
from golicenses.models import Library, ProvenanceResult
from golicenses.provenance.git import find_git_repo
from golicenses.provenance.hosts import library_file_url

log = structlog.get_logger("golicenses.provenance")


def resolve(
    library: Library,
    git_remotes: Sequence[str] = DEFAULT_GIT_REMOTES,
    stop_dirs: Iterable[str] = (),
) -> ProvenanceResult:
    """Return where *library*'s license file lives on the web.

    Tries the Git remotes of the enclosing working copy first (in
    *git_remotes* order), then falls back to the import-path host table.
    Raises :class:`ProvenanceError` carrying every attempt's error if both
    strategies fail.
    """
    if not library.license_path:
        raise ProvenanceError(
            f"library {library.name!r} has no license file", library=library.name
        )

    attempts: list[str] = []
    repo = find_git_repo(library.license_path, stop_dirs)
    if repo is not None:
        try:
            remotes = repo.remotes()
        except ProvenanceError as e:
            attempts.append(str(e))
        else:
            for remote in git_remotes:
                try:
                    result = repo.file_url(library.license_path, remote, remotes)
                except ProvenanceError as e:
                    attempts.append(str(e))
                    continue
                log.debug("provenance.git_remote", library=library.name, remote=remote)
                return result

    rel_path = os.path.basename(library.license_path)
    try:
        return library_file_url(library.name, rel_path)
    except ProvenanceError as e:
        attempts.append(str(e))
        raise ProvenanceError(
            f"cannot determine license URL for {library.name!r} "
            f"(host {e.host!r}):\n- " + "\n- ".join(attempts),
            host=e.host,
            library=library.name,
            attempts=attempts,
        ) from e
