"""Shared pytest fixtures for golicenses tests."""

from __future__ import annotations

import pytest

from golicenses.exceptions import ClassificationError, LicenseDiscoveryError
from golicenses.models import Package

GOROOT = "/usr/local/go"

MIT_TEXT = """MIT License

Copyright (c) 2020 Example Authors

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction.

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND.
"""

BSD3_TEXT = """Copyright (c) 2009 The Go Authors. All rights reserved.

Redistribution and use in source and binary forms, with or without
modification, are permitted provided that the following conditions are
met:

   * Neither the name of Google Inc. nor the names of its
contributors may be used to endorse or promote products derived from
this software without specific prior written permission.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS
"AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES.
"""


class DictFinder:
    """License finder backed by a directory -> license path mapping."""

    def __init__(self, mapping: dict[str, str], failing: set[str] | None = None):
        self.mapping = mapping
        self.failing = failing or set()
        self.calls: list[str] = []

    def find_nearest(self, directory: str) -> str:
        self.calls.append(directory)
        if directory in self.failing:
            raise LicenseDiscoveryError(f"permission denied: {directory}")
        return self.mapping.get(directory, "")


class StaticClassifier:
    """Classifier returning a fixed answer, or failing for selected paths."""

    def __init__(self, name: str = "MIT", failing: set[str] | None = None):
        self.name = name
        self.failing = failing or set()

    def identify(self, license_path: str) -> tuple[str, float]:
        if license_path in self.failing:
            raise ClassificationError(f"unknown license in {license_path}")
        return self.name, 1.0


@pytest.fixture
def make_package():
    """Factory: ``make_package("a/x")`` -> package with one file in /src/a/x."""

    def _make(
        import_path: str,
        *,
        files: list[str] | None = None,
        other: list[str] | None = None,
        imports: list[Package] | None = None,
        errors: list[str] | None = None,
    ) -> Package:
        if files is None:
            files = [f"/src/{import_path}/{import_path.rsplit('/', 1)[-1]}.go"]
        return Package(
            import_path=import_path,
            source_files=files,
            other_files=other or [],
            imports=imports or [],
            errors=errors or [],
        )

    return _make


@pytest.fixture
def static_classifier():
    return StaticClassifier()
