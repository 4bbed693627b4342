"""Host templates — map import-path host tokens to public license URLs.

Each supported host token (the first segment of an import path) is registered
as a :class:`HostTemplate` holding the canonical public host and a function
that builds the host-relative path from the remaining import-path segments.
"""

from __future__ import annotations

import posixpath
import re
from collections.abc import Callable
from dataclasses import dataclass

from golicenses.exceptions import ProvenanceError, UnsupportedHostError
from golicenses.models import ProvenanceResult

# (segments after the host token, file path relative to the license dir, library name)
PathTemplate = Callable[[list[str], str, str], str]

_TRAILING_VERSION_RE = re.compile(r"/v\d+$")
_WHOLE_VERSION_RE = re.compile(r"^v\d+$")
_GOPKG_VERSION_RE = re.compile(r"^(?P<pkg>[^/]+)\.v\d+$")


@dataclass(frozen=True)
class HostTemplate:
    """How to turn an import path under *token* into a license URL."""

    token: str
    public_host: str  # "" means no public URL applies
    build_path: PathTemplate | None = None


HOST_REGISTRY: dict[str, HostTemplate] = {}


def register_host(template: HostTemplate) -> None:
    HOST_REGISTRY[template.token] = template


def strip_version(path: str) -> str:
    """Drop a trailing Go major-version element (``/v2`` or a bare ``v2``).

    Versioned module paths do not appear in the repository layout.
    """
    path = _TRAILING_VERSION_RE.sub("", path)
    return _WHOLE_VERSION_RE.sub("", path)


def unvendor(import_path: str) -> str:
    """Remove everything up to and including the last ``/vendor/``."""
    idx = import_path.rfind("/vendor/")
    if idx == -1:
        return import_path
    return import_path[idx + len("/vendor/") :]


def _join(*parts: str) -> str:
    return posixpath.join(*[p for p in parts if p])


def _need(segments: list[str], count: int, name: str) -> None:
    if len(segments) < count or not all(segments[:count]):
        raise ProvenanceError(f"cannot determine URL for {name!r} package", library=name)


def _subpath(segments: list[str], start: int) -> str:
    return strip_version("/".join(segments[start:]))


def _branch_layout(branch_prefix: str) -> PathTemplate:
    """``<org>/<project>/<branch_prefix>/<subpath>/<file>`` hosts."""

    def build(segments: list[str], rel_path: str, name: str) -> str:
        _need(segments, 2, name)
        org, project = segments[0], segments[1]
        return _join(org, project, branch_prefix, _subpath(segments, 2), rel_path)

    return build


def _github_org(org: str) -> PathTemplate:
    """Vanity hosts whose projects live under one GitHub organisation."""

    def build(segments: list[str], rel_path: str, name: str) -> str:
        _need(segments, 1, name)
        return _join(org, segments[0], "blob/master", _subpath(segments, 1), rel_path)

    return build


def _sslmate(segments: list[str], rel_path: str, name: str) -> str:
    # software.sslmate.com/src/<project>/...
    _need(segments, 2, name)
    return _join("SSLMate", segments[1], "blob/master", _subpath(segments, 2), rel_path)


def _gopkg(segments: list[str], rel_path: str, name: str) -> str:
    # gopkg.in/pkg.v3 -> go-pkg/pkg, gopkg.in/user/pkg.v3 -> user/pkg
    _need(segments, 1, name)
    first = _GOPKG_VERSION_RE.match(segments[0])
    if first:
        pkg = first.group("pkg")
        return _join(f"go-{pkg}", pkg, "blob/master", "/".join(segments[1:]), rel_path)
    _need(segments, 2, name)
    second = _GOPKG_VERSION_RE.match(segments[1])
    if not second:
        raise ProvenanceError(f"cannot determine URL for {name!r} package", library=name)
    return _join(
        segments[0], second.group("pkg"), "blob/master", "/".join(segments[2:]), rel_path
    )


def _googlesource(segments: list[str], rel_path: str, name: str) -> str:
    _need(segments, 1, name)
    return _join(segments[0], "+/refs/heads/master", _subpath(segments, 1), rel_path)


def _azure(include_org: bool) -> PathTemplate:
    """``<project>/_git/<repo>?path=<file>`` hosts."""

    def build(segments: list[str], rel_path: str, name: str) -> str:
        _need(segments, 3, name)
        org, project = segments[0], segments[1]
        repo = segments[2].removesuffix(".git")
        path = _join(_subpath(segments, 3), rel_path)
        prefix = _join(org, project) if include_org else project
        return f"{prefix}/_git/{repo}?path={path}"

    return build


def _fixed(path: str) -> PathTemplate:
    def build(segments: list[str], rel_path: str, name: str) -> str:
        return path

    return build


def _pkg_go_dev(segments: list[str], rel_path: str, name: str) -> str:
    return f"{name}?tab=licenses"


for _template in (
    HostTemplate("github.com", "github.com", _branch_layout("blob/master")),
    HostTemplate("gitlab.com", "gitlab.com", _branch_layout("-/raw/master")),
    HostTemplate("bitbucket.org", "bitbucket.org", _branch_layout("src/master")),
    HostTemplate("k8s.io", "github.com", _github_org("kubernetes")),
    HostTemplate("sigs.k8s.io", "github.com", _github_org("kubernetes-sigs")),
    HostTemplate("gomodules.xyz", "github.com", _github_org("gomodules")),
    HostTemplate("go.uber.org", "github.com", _github_org("uber-go")),
    HostTemplate("go.etcd.io", "github.com", _github_org("etcd-io")),
    HostTemplate("kubevirt.io", "github.com", _github_org("kubevirt")),
    HostTemplate("code.cloudfoundry.org", "github.com", _github_org("cloudfoundry")),
    HostTemplate("helm.sh", "github.com", _github_org("helm")),
    HostTemplate("software.sslmate.com", "github.com", _sslmate),
    HostTemplate("gopkg.in", "github.com", _gopkg),
    HostTemplate("go.googlesource.com", "go.googlesource.com", _googlesource),
    HostTemplate("dev.azure.com", "dev.azure.com", _azure(include_org=True)),
    HostTemplate("msazure.visualstudio.com", "msazure.visualstudio.com", _azure(include_org=False)),
    HostTemplate(
        "go.starlark.net", "github.com", _fixed("google/starlark-go/blob/master/LICENSE")
    ),
    HostTemplate(
        "cloud.google.com", "github.com", _fixed("googleapis/google-cloud-go/blob/master/LICENSE")
    ),
    HostTemplate("go.opencensus.io", "pkg.go.dev", _pkg_go_dev),
    HostTemplate("contrib.go.opencensus.io", "pkg.go.dev", _pkg_go_dev),
    HostTemplate("golang.zx2c4.com", "pkg.go.dev", _pkg_go_dev),
    # Shipped with Go itself; no separate license URL.
    HostTemplate("golang.org", ""),
    HostTemplate("google.golang.org", ""),
):
    register_host(_template)


def library_file_url(name: str, rel_path: str) -> ProvenanceResult:
    """Derive the public location of *rel_path* inside the library *name*.

    *rel_path* is relative to the directory holding the library's license.
    Raises :class:`UnsupportedHostError` for unknown host tokens and
    :class:`ProvenanceError` when the import path is too short.
    """
    name = unvendor(name)
    host, _, rest = name.partition("/")
    template = HOST_REGISTRY.get(host)
    if template is None:
        raise UnsupportedHostError(host, name, rel_path)
    if not template.public_host or template.build_path is None:
        return ProvenanceResult(host="")
    segments = rest.split("/") if rest else []
    try:
        path = template.build_path(segments, rel_path, name)
    except ProvenanceError as e:
        e.host = host
        raise
    return ProvenanceResult(host=template.public_host, path=path)
