# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Output path computation for rendered templates."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence


def parent_directory(path: str) -> str:
    """Return the directory part of ``path``, ``"."`` when it has none.

    A trailing separator marks ``path`` itself as a directory, so
    ``parent_directory("docs/")`` is ``"docs"``.
    """

    head = os.path.dirname(path)
    if not head:
        return "."
    return os.path.normpath(head)


def compute_base_directory(file: str, all_files: Sequence[str], explicit_base: str | None = None) -> str:
    """Return the directory ``file``'s output path is made relative to.

    An explicit base always wins. Otherwise the shortest entry of
    ``all_files`` that prefixes ``file`` is chosen (first one on ties) and its
    directory returned; roots must end with a separator to count as
    directories. Without any match, ``file``'s own directory is used.

    Args:
        file: Path of the template being rendered.
        all_files: Candidate roots, typically the render inputs.
        explicit_base: Base directory configured by the user.

    Returns:
        str: The base directory.
    """

    if explicit_base:
        return explicit_base
    best: str | None = None
    for candidate in all_files:
        if not file.startswith(candidate):
            continue
        if best is None or len(candidate) < len(best):
            best = candidate
    return parent_directory(best if best is not None else file)


def rename_output(path: str, renames: Mapping[str, str]) -> str:
    """Substitute the longest suffix of ``path`` found in ``renames``.

    Ties between equally long suffixes go to the first entry.
    """

    best: str | None = None
    for suffix in renames:
        if suffix and path.endswith(suffix) and (best is None or len(suffix) > len(best)):
            best = suffix
    if best is None:
        return path
    return path[: -len(best)] + renames[best]


__all__ = ["compute_base_directory", "parent_directory", "rename_output"]
