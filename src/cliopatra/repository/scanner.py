# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Discovery of program definition files below repository roots."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

from ..paths import walk_files
from ..program import Program
from ..types import DEFINITION_SUFFIXES


def is_definition_file(path: str) -> bool:
    """Return ``True`` when ``path`` carries a definition file extension."""

    return path.endswith(DEFINITION_SUFFIXES) and not os.path.basename(path).startswith(".")


def definition_files(root: str) -> Iterator[str]:
    """Lazily yield absolute definition file paths below ``root``.

    Dot-prefixed files and directories are skipped.

    Raises:
        OSError: If a directory cannot be listed.
    """

    for path in walk_files(os.path.abspath(root)):
        if is_definition_file(path):
            yield path


def load_programs(root: str) -> Iterator[tuple[str, Program]]:
    """Yield ``(path, program)`` pairs for every definition below ``root``.

    Raises:
        OSError: If a directory or file cannot be read.
        DefinitionError: If a definition document is malformed.
    """

    for path in definition_files(root):
        yield path, Program.from_file(Path(path))


__all__ = ["definition_files", "is_definition_file", "load_programs"]
