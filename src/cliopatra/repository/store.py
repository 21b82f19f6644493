# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Live, name-indexed store of program definitions backed by directories."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ..cancellation import CancellationToken
from ..errors import DefinitionError, DuplicateProgramError, RepositoryError
from ..program import Program
from ..types import DEFINITION_MASKS
from ..watcher import DEFAULT_INTERVAL, FileWatcher
from .locks import ReaderWriterLock
from .scanner import is_definition_file, load_programs

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RepositoryEntry:
    """A program together with the absolute path it was loaded from."""

    path: str
    program: Program


class ProgramRepository:
    """Programs loaded from one or more root directories, kept current by watching.

    Every name in the index maps to exactly one source path and vice versa.
    All access goes through a single reader/writer lock. Programs returned by
    :meth:`get_programs` and :meth:`get_program` are shared with the store and
    must be cloned before being mutated.
    """

    def __init__(self, directories: Sequence[str | Path], *, interval: float = DEFAULT_INTERVAL) -> None:
        """Create an empty repository over ``directories``.

        Args:
            directories: Root directories, scanned in the given order.
            interval: Polling interval used by :meth:`watch`.
        """

        self._directories: tuple[str, ...] = tuple(str(directory) for directory in directories)
        self._interval = interval
        self._entries: dict[str, RepositoryEntry] = {}
        self._path_index: dict[str, str] = {}
        self._lock = ReaderWriterLock()

    @property
    def directories(self) -> tuple[str, ...]:
        """Return the configured root directories."""

        return self._directories

    def load(self) -> None:
        """Scan every root and replace the index with the programs found.

        The new index is built aside and only installed when the whole scan
        succeeds; on failure the previous index is left untouched.

        Raises:
            RepositoryError: If a root or a definition file cannot be read.
            DefinitionError: If a definition document is malformed.
            DuplicateProgramError: If two files declare the same program name.
        """

        with self._lock.write_locked():
            entries: dict[str, RepositoryEntry] = {}
            path_index: dict[str, str] = {}
            for directory in self._directories:
                if not os.path.isdir(directory):
                    raise RepositoryError(f"could not read repository {directory}: not a directory")
                try:
                    for path, program in load_programs(directory):
                        existing = entries.get(program.name)
                        if existing is not None:
                            raise DuplicateProgramError(program.name, source=path, existing=existing.path)
                        entries[program.name] = RepositoryEntry(path=path, program=program)
                        path_index[path] = program.name
                except OSError as exc:
                    raise RepositoryError(f"could not load programs from repository {directory}: {exc}") from exc
            self._entries = entries
            self._path_index = path_index
        LOGGER.debug("loaded %d program(s) from %s", len(entries), ", ".join(self._directories))

    def get_programs(self) -> dict[str, Program]:
        """Return a name-keyed snapshot of the stored programs."""

        with self._lock.read_locked():
            return {name: entry.program for name, entry in self._entries.items()}

    def get_program(self, name: str) -> Program | None:
        """Return the program registered under ``name``, if any."""

        with self._lock.read_locked():
            entry = self._entries.get(name)
        return entry.program if entry is not None else None

    def path_for(self, name: str) -> str | None:
        """Return the source path of program ``name``, if any."""

        with self._lock.read_locked():
            entry = self._entries.get(name)
        return entry.path if entry is not None else None

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._entries)

    def __contains__(self, name: object) -> bool:
        with self._lock.read_locked():
            return name in self._entries

    def apply_write(self, path: str) -> None:
        """Reparse ``path`` after it was created or modified.

        Parse failures are logged and the previous state is kept. A program
        whose name is already taken by another file replaces that entry. When
        the file previously declared a different name, that stale entry is
        dropped.
        """

        path = os.path.abspath(path)
        if not is_definition_file(path):
            LOGGER.debug("ignoring non-definition file %s", path)
            return
        try:
            program = Program.from_file(Path(path))
        except (DefinitionError, OSError) as exc:
            LOGGER.warning("could not load program from %s: %s", path, exc)
            return

        with self._lock.write_locked():
            previous_name = self._path_index.get(path)
            if previous_name is not None and previous_name != program.name:
                stale = self._entries.get(previous_name)
                if stale is not None and stale.path == path:
                    del self._entries[previous_name]
                LOGGER.info("program %s in %s renamed to %s", previous_name, path, program.name)
            displaced = self._entries.get(program.name)
            if displaced is not None and displaced.path != path:
                self._path_index.pop(displaced.path, None)
                LOGGER.warning("program %s from %s replaced by %s", program.name, displaced.path, path)
            if previous_name is None:
                LOGGER.info("adding program %s from %s", program.name, path)
            else:
                LOGGER.info("updating program %s from %s", program.name, path)
            self._entries[program.name] = RepositoryEntry(path=path, program=program)
            self._path_index[path] = program.name

    def apply_remove(self, path: str) -> None:
        """Forget the program loaded from ``path``; unknown paths are ignored."""

        path = os.path.abspath(path)
        with self._lock.write_locked():
            name = self._path_index.pop(path, None)
            if name is None:
                LOGGER.debug("no program indexed for removed path %s", path)
                return
            entry = self._entries.get(name)
            if entry is not None and entry.path == path:
                del self._entries[name]
        LOGGER.info("removing program %s from %s", name, path)

    def watch(self, token: CancellationToken) -> None:
        """Apply filesystem changes below the roots until ``token`` fires.

        Raises:
            OperationCancelledError: When ``token`` is cancelled.
        """

        watcher = FileWatcher(
            paths=self._directories,
            masks=DEFINITION_MASKS,
            on_write=self.apply_write,
            on_remove=self.apply_remove,
            interval=self._interval,
        )
        watcher.run(token)


__all__ = ["ProgramRepository", "RepositoryEntry"]
