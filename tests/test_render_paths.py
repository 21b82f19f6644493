# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for output path computation."""

from __future__ import annotations

import pytest

from cliopatra.render import compute_base_directory, parent_directory, rename_output


@pytest.mark.parametrize(
    ("file", "all_files", "expected"),
    [
        ("test.txt", [], "."),
        ("foobar/test.txt", [], "foobar"),
        ("foobar/foo/test.txt", [], "foobar/foo"),
        ("foobar/foo/test.txt", ["foobar/"], "foobar"),
        ("foobar/foo/test.txt", ["foobar/foo/", "foo/"], "foobar/foo"),
        ("foobar/foo/test.txt", ["foobar/foo/", "foobar/", "foo/"], "foobar"),
        ("foobar/foo/test.txt", ["foobar/foo/test.txt", "foobar/", "foo/"], "foobar"),
        ("foobar/foo/test.txt", ["foobar/foo/test.txt"], "foobar/foo"),
    ],
)
def test_compute_base_directory(file: str, all_files: list[str], expected: str) -> None:
    assert compute_base_directory(file, all_files) == expected


@pytest.mark.parametrize(
    ("file", "all_files"),
    [
        ("test.txt", []),
        ("foobar/test.txt", []),
        ("foobar/foo/test.txt", []),
        ("foobar/foo/test.txt", ["foobar/"]),
        ("foobar/foo/test.txt", ["foobar/foo/", "foo/"]),
    ],
)
def test_explicit_base_directory_wins(file: str, all_files: list[str]) -> None:
    assert compute_base_directory(file, all_files, "foobar") == "foobar"


def test_parent_directory_of_directory_root() -> None:
    assert parent_directory("docs/") == "docs"
    assert parent_directory("readme.md") == "."


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("out/readme.tmpl.md", "out/readme.md"),
        ("out/page.tmpl", "out/page.txt"),
        ("out/plain.md", "out/plain.md"),
    ],
)
def test_rename_output_prefers_longest_suffix(path: str, expected: str) -> None:
    renames = {".tmpl": ".txt", ".tmpl.md": ".md"}

    assert rename_output(path, renames) == expected
