# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Program repositories backed by directories of definition files."""

from __future__ import annotations

from .locks import ReaderWriterLock
from .scanner import definition_files, is_definition_file, load_programs
from .store import ProgramRepository, RepositoryEntry

__all__ = (
    "ProgramRepository",
    "ReaderWriterLock",
    "RepositoryEntry",
    "definition_files",
    "is_definition_file",
    "load_programs",
)
