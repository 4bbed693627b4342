"""Tests for the shared data models."""

from __future__ import annotations

import pytest

from golicenses.models import (
    Library,
    ProvenanceResult,
    SkippedLibrary,
    SkipReason,
    common_ancestor,
)


class TestCommonAncestor:
    def test_empty(self):
        assert common_ancestor([]) == ""

    def test_single_path_is_returned_unchanged(self):
        assert common_ancestor(["github.com/foo/bar/baz"]) == "github.com/foo/bar/baz"

    def test_siblings(self):
        assert common_ancestor(["a/x", "a/y"]) == "a"

    def test_parent_and_child(self):
        paths = ["github.com/foo/bar", "github.com/foo/bar/sub"]
        assert common_ancestor(paths) == "github.com/foo/bar"

    def test_prefix_must_end_on_segment_boundary(self):
        assert common_ancestor(["a/b", "a/bc"]) == "a"

    def test_nothing_in_common(self):
        assert common_ancestor(["a/x", "b/y"]) == ""

    def test_order_does_not_matter(self):
        paths = ["k8s.io/api/core/v1", "k8s.io/api/apps/v1", "k8s.io/api"]
        assert common_ancestor(paths) == common_ancestor(list(reversed(paths))) == "k8s.io/api"


class TestLibrary:
    def test_name_is_common_prefix(self):
        lib = Library(license_path="/src/a/LICENSE", packages=("a/x", "a/y"))
        assert lib.name == "a"
        assert str(lib) == "a"

    def test_singleton_name_is_member(self):
        lib = Library(license_path="", packages=("b/z",))
        assert lib.name == "b/z"

    def test_unlicensed_library_must_be_singleton(self):
        with pytest.raises(ValueError, match="exactly one package"):
            Library(license_path="", packages=("a/x", "a/y"))

    def test_library_needs_members(self):
        with pytest.raises(ValueError):
            Library(license_path="/src/a/LICENSE", packages=())

    def test_is_immutable(self):
        lib = Library(license_path="/src/a/LICENSE", packages=("a/x",))
        with pytest.raises(AttributeError):
            lib.license_path = "/elsewhere"  # type: ignore[misc]


class TestSkippedLibrary:
    def test_reason_values(self):
        assert SkipReason.STANDARD_LIBRARY.value == "standard-library"
        assert SkipReason.NON_ANALYZABLE_FILES.value == "non-analyzable-files"
        assert SkipReason.LICENSE_DISCOVERY_FAILED.value == "license-discovery-failed"

    def test_equality(self):
        a = SkippedLibrary("fmt", SkipReason.STANDARD_LIBRARY)
        b = SkippedLibrary("fmt", SkipReason.STANDARD_LIBRARY)
        assert a == b


class TestProvenanceResult:
    def test_url(self):
        result = ProvenanceResult(host="github.com", path="foo/bar/blob/master/LICENSE")
        assert result.url == "https://github.com/foo/bar/blob/master/LICENSE"

    def test_url_keeps_query(self):
        result = ProvenanceResult(host="dev.azure.com", path="org/p/_git/r?path=LICENSE")
        assert result.url == "https://dev.azure.com/org/p/_git/r?path=LICENSE"

    def test_empty_host_has_no_url(self):
        assert ProvenanceResult(host="").url is None
