"""Tests for report building and CSV rendering."""

from __future__ import annotations

import io
from unittest.mock import patch

import pytest
from conftest import StaticClassifier

from golicenses.models import Library, SkippedLibrary, SkipReason
from golicenses.provenance import resolve as real_resolve
from golicenses.report import (
    NOT_APPLICABLE,
    UNKNOWN,
    LicenseRow,
    SkippedRow,
    build_report,
    license_row,
    skipped_rows,
    write_csv,
)


@pytest.fixture(autouse=True)
def no_git_repos():
    with patch("golicenses.provenance.resolver.find_git_repo", return_value=None):
        yield


class TestLicenseRow:
    def test_resolved(self, static_classifier):
        lib = Library(license_path="/mod/github.com/foo/bar@v1.0.0/LICENSE", packages=("github.com/foo/bar",))
        assert license_row(lib, static_classifier) == LicenseRow(
            name="github.com/foo/bar",
            license_url="https://github.com/foo/bar/blob/master/LICENSE",
            license_name="MIT",
        )

    def test_unlicensed(self, static_classifier):
        lib = Library(license_path="", packages=("github.com/foo/bar",))
        assert license_row(lib, static_classifier) == LicenseRow(
            name="github.com/foo/bar", license_url=UNKNOWN, license_name=UNKNOWN
        )

    def test_unsupported_host_is_not_fatal(self, static_classifier):
        lib = Library(license_path="/mod/example.com/x/LICENSE", packages=("example.com/x",))
        row = license_row(lib, static_classifier)
        assert row.license_url == UNKNOWN
        assert row.license_name == "MIT"

    def test_classification_failure(self):
        lib = Library(license_path="/mod/github.com/foo/bar/LICENSE", packages=("github.com/foo/bar",))
        classifier = StaticClassifier(failing={"/mod/github.com/foo/bar/LICENSE"})
        row = license_row(lib, classifier)
        assert row.license_url.startswith("https://github.com/")
        assert row.license_name == UNKNOWN

    def test_go_distribution(self, static_classifier):
        lib = Library(license_path="/mod/golang.org/x/net/LICENSE", packages=("golang.org/x/net/http2",))
        assert license_row(lib, static_classifier).license_url == NOT_APPLICABLE

    def test_vendor_prefix_removed_from_name(self, static_classifier):
        lib = Library(
            license_path="/app/vendor/github.com/foo/bar/LICENSE",
            packages=("example.com/app/vendor/github.com/foo/bar",),
        )
        assert license_row(lib, static_classifier).name == "github.com/foo/bar"


class TestBuildReport:
    def test_one_row_per_library_in_order(self, static_classifier):
        libraries = [
            Library(license_path="", packages=("a/solo",)),
            Library(license_path="/m/github.com/x/y/LICENSE", packages=("github.com/x/y",)),
            Library(license_path="/m/unknown.host/p/LICENSE", packages=("unknown.host/p",)),
        ]
        rows = build_report(libraries, static_classifier)
        assert [r.name for r in rows] == ["a/solo", "github.com/x/y", "unknown.host/p"]
        assert [r.license_url for r in rows] == [
            UNKNOWN,
            "https://github.com/x/y/blob/master/LICENSE",
            UNKNOWN,
        ]

    def test_parallel_keeps_order(self, static_classifier):
        libraries = [
            Library(license_path=f"/m/github.com/org/p{i:02d}/LICENSE", packages=(f"github.com/org/p{i:02d}",))
            for i in range(30)
        ]
        serial = build_report(libraries, static_classifier, workers=1)
        parallel = build_report(libraries, static_classifier, workers=6)
        assert serial == parallel
        assert [r.name for r in parallel] == [lib.name for lib in libraries]

    def test_git_remotes_are_passed_through(self, static_classifier):
        lib = Library(license_path="/m/github.com/x/y/LICENSE", packages=("github.com/x/y",))
        with patch("golicenses.report.resolve", wraps=real_resolve) as resolve:
            build_report([lib], static_classifier, git_remotes=("upstream",), stop_dirs=["/m"])
        assert resolve.call_args.args[1] == ("upstream",)
        assert resolve.call_args.args[2] == ("/m",)


class TestCsv:
    def test_write_license_rows(self):
        out = io.StringIO()
        write_csv(
            [
                LicenseRow("github.com/x/y", "https://github.com/x/y/blob/master/LICENSE", "MIT"),
                LicenseRow("a, b", UNKNOWN, UNKNOWN),
            ],
            out,
        )
        assert out.getvalue() == (
            "github.com/x/y,https://github.com/x/y/blob/master/LICENSE,MIT\n"
            '"a, b",Unknown,Unknown\n'
        )

    def test_skipped_rows(self):
        skipped = [
            SkippedLibrary("fmt", SkipReason.STANDARD_LIBRARY, "Go standard library"),
            SkippedLibrary("x/cgo", SkipReason.NON_ANALYZABLE_FILES, "impl.c"),
        ]
        rows = skipped_rows(skipped)
        assert rows == [
            SkippedRow("fmt", "standard-library"),
            SkippedRow("x/cgo", "non-analyzable-files"),
        ]
        out = io.StringIO()
        write_csv(rows, out)
        assert out.getvalue() == "fmt,standard-library\nx/cgo,non-analyzable-files\n"
