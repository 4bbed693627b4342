"""Git working-copy utilities — remotes and browse URLs for local files."""

from __future__ import annotations

import os
import posixpath
import subprocess
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import structlog

from golicenses.exceptions import GitRemoteError
from golicenses.finder import is_versioned_module_dir
from golicenses.models import ProvenanceResult

log = structlog.get_logger("golicenses.provenance")

# Branch convention per host when browsing a file at the repository root.
_GIT_BROWSE_PREFIX: dict[str, str] = {
    "github.com": "blob/master",
    "gitlab.com": "-/raw/master",
    "bitbucket.org": "src/master",
}
_GOOGLESOURCE_PREFIX = "+/refs/heads/master"
_DEFAULT_PREFIX = "blob/master"


def parse_remote_url(remote_url: str) -> tuple[str, str] | None:
    """Split a Git remote URL into ``(host, repo path)``.

    Handles:
      - https://github.com/owner/repo(.git)
      - ssh://git@github.com:22/owner/repo.git
      - git://host/owner/repo
      - git@github.com:owner/repo.git

    Returns None for local paths and anything without both a host and a path.
    """
    url = remote_url.strip().rstrip("/")
    if url.endswith(".git"):
        url = url[:-4]

    scheme, sep, rest = url.partition("://")
    if sep:
        if scheme not in ("http", "https", "ssh", "git", "git+ssh"):
            return None
        authority, _, path = rest.partition("/")
        host = authority.rsplit("@", 1)[-1].split(":", 1)[0]
    else:
        # scp-like syntax: [user@]host:path
        authority, colon, path = url.partition(":")
        if not colon or "/" in authority:
            return None
        host = authority.rsplit("@", 1)[-1]

    path = path.strip("/")
    if not host or not path:
        return None
    return host.lower(), path


def browse_path(host: str, repo_path: str, rel_path: str) -> str:
    """Host-relative path of *rel_path* (relative to the repo root) in the web UI."""
    if host.endswith(".googlesource.com"):
        prefix = _GOOGLESOURCE_PREFIX
    else:
        prefix = _GIT_BROWSE_PREFIX.get(host, _DEFAULT_PREFIX)
    return posixpath.join(repo_path, prefix, rel_path)


@dataclass(frozen=True)
class GitRepo:
    """A local Git working copy."""

    root: str

    def remotes(self) -> dict[str, str]:
        """Map each configured remote name to its (first) URL."""
        try:
            proc = subprocess.run(
                ["git", "-C", self.root, "config", "--get-regexp", r"^remote\..*\.url$"],
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise GitRemoteError(f"git not available: {e}") from e
        # Exit 1 just means "no remotes configured".
        if proc.returncode not in (0, 1):
            raise GitRemoteError(
                f"git config failed in {self.root} (exit {proc.returncode}): "
                f"{proc.stderr.strip()}"
            )
        remotes: dict[str, str] = {}
        for line in proc.stdout.splitlines():
            key, _, value = line.partition(" ")
            name = key[len("remote.") : -len(".url")]
            remotes.setdefault(name, value.strip())
        return remotes

    def file_url(
        self,
        file_path: str,
        remote: str,
        remotes: Mapping[str, str] | None = None,
    ) -> ProvenanceResult:
        """Browse URL of *file_path* on the host behind *remote*.

        Pass *remotes* (as returned by :meth:`remotes`) to avoid running
        ``git`` again when trying several remotes.
        """
        if remotes is None:
            remotes = self.remotes()
        remote_url = remotes.get(remote)
        if remote_url is None:
            raise GitRemoteError(f"remote {remote!r} not configured in {self.root}")
        parsed = parse_remote_url(remote_url)
        if parsed is None:
            raise GitRemoteError(f"cannot parse URL {remote_url!r} of remote {remote!r}")
        host, repo_path = parsed
        rel_path = os.path.relpath(file_path, self.root).replace(os.sep, "/")
        return ProvenanceResult(host=host, path=browse_path(host, repo_path, rel_path))


def find_git_repo(file_path: str, stop_dirs: Iterable[str] = ()) -> GitRepo | None:
    """Return the working copy containing *file_path*, or None.

    Walks upwards looking for a ``.git`` entry (a directory, or a file for
    worktrees and submodules), without going past any of *stop_dirs* or out
    of a module cache directory.
    """
    stops = {os.path.normpath(d) for d in stop_dirs}
    current = os.path.dirname(os.path.abspath(file_path))
    while current not in stops:
        if os.path.exists(os.path.join(current, ".git")):
            return GitRepo(root=current)
        if is_versioned_module_dir(current):
            break
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent
    log.debug("git.no_repo", file=file_path)
    return None
