"""Provenance engine — map license files to canonical public URLs."""

from golicenses.provenance.git import GitRepo, find_git_repo, parse_remote_url
from golicenses.provenance.hosts import (
    HOST_REGISTRY,
    HostTemplate,
    library_file_url,
    register_host,
    strip_version,
    unvendor,
)
from golicenses.provenance.resolver import resolve

__all__ = [
    "GitRepo",
    "HOST_REGISTRY",
    "HostTemplate",
    "find_git_repo",
    "library_file_url",
    "parse_remote_url",
    "register_host",
    "resolve",
    "strip_version",
    "unvendor",
]
