# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Path matching and directory walking shared by scans, renders and watchers."""

from __future__ import annotations

import os
from collections.abc import Iterator, Sequence
from fnmatch import fnmatchcase
from typing import Final

_ANY_DEPTH: Final[str] = "**"


def _as_posix(path: str) -> str:
    return path.replace(os.sep, "/") if os.sep != "/" else path


def _match_segments(parts: Sequence[str], pattern: Sequence[str]) -> bool:
    if not pattern:
        return not parts
    head, rest = pattern[0], pattern[1:]
    if head == _ANY_DEPTH:
        return any(_match_segments(parts[index:], rest) for index in range(len(parts) + 1))
    return bool(parts) and fnmatchcase(parts[0], head) and _match_segments(parts[1:], rest)


def matches_mask(path: str, mask: str) -> bool:
    """Return ``True`` when ``path`` matches the glob ``mask``.

    The mask is matched against the whole path one segment at a time: ``*``
    and ``?`` never cross a ``/`` while a ``**`` segment spans zero or more
    directories.
    """

    return _match_segments(_as_posix(path).split("/"), _as_posix(mask).split("/"))


def matches_any(path: str, masks: Sequence[str]) -> bool:
    """Return ``True`` when ``masks`` is empty or any mask matches ``path``."""

    if not masks:
        return True
    return any(matches_mask(path, mask) for mask in masks)


def is_hidden(name: str) -> bool:
    """Return ``True`` for dot-prefixed entry names."""

    return name.startswith(".")


def walk_files(root: str, *, skip_hidden: bool = True) -> Iterator[str]:
    """Yield file paths under ``root`` depth-first, directories before files.

    Entries are visited in sorted name order. Symlinked directories are not
    followed.

    Raises:
        OSError: If ``root`` or one of its subdirectories cannot be listed.
    """

    with os.scandir(root) as iterator:
        entries = sorted(iterator, key=lambda entry: entry.name)
    directories: list[str] = []
    files: list[str] = []
    for entry in entries:
        if skip_hidden and is_hidden(entry.name):
            continue
        if entry.is_dir(follow_symlinks=False):
            directories.append(entry.path)
        elif entry.is_file():
            files.append(entry.path)
    for directory in directories:
        yield from walk_files(directory, skip_hidden=skip_hidden)
    yield from files


__all__ = ["is_hidden", "matches_any", "matches_mask", "walk_files"]
