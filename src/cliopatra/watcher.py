# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Polling filesystem watcher delivering write and remove callbacks."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Final

from .cancellation import CancellationToken
from .errors import OperationCancelledError
from .paths import matches_any, walk_files

LOGGER = logging.getLogger(__name__)

DEFAULT_INTERVAL: Final[float] = 0.5

PathCallback = Callable[[str], None]
Fingerprint = tuple[int, int]


@dataclass(slots=True)
class FileWatcher:
    """Watch ``paths`` recursively and report changed or removed files.

    Each poll compares ``(mtime_ns, size)`` fingerprints of every non-hidden
    file matching ``masks``. New or changed files trigger ``on_write``,
    vanished files trigger ``on_remove``; both fire in sorted path order.
    Paths are reported absolute.

    Attributes:
        paths: Root files or directories to watch.
        masks: Glob masks restricting reported files; empty matches everything.
        on_write: Callback for created or modified files.
        on_remove: Callback for removed files.
        interval: Seconds between polls.
    """

    paths: Sequence[str]
    masks: Sequence[str] = ()
    on_write: PathCallback | None = None
    on_remove: PathCallback | None = None
    interval: float = DEFAULT_INTERVAL
    _state: dict[str, Fingerprint] = field(default_factory=dict, init=False, repr=False)

    def snapshot(self) -> dict[str, Fingerprint]:
        """Return fingerprints of every watched file currently on disk."""

        state: dict[str, Fingerprint] = {}
        for root in self.paths:
            absolute_root = os.path.abspath(root)
            if os.path.isfile(absolute_root):
                candidates: list[str] = [absolute_root]
            elif os.path.isdir(absolute_root):
                try:
                    candidates = list(walk_files(absolute_root))
                except OSError as exc:
                    LOGGER.warning("could not scan %s: %s", absolute_root, exc)
                    continue
            else:
                continue
            for candidate in candidates:
                if not matches_any(candidate, self.masks):
                    continue
                try:
                    stat = os.stat(candidate)
                except OSError:
                    continue
                state[candidate] = (stat.st_mtime_ns, stat.st_size)
        return state

    def prime(self) -> None:
        """Record the current state so only later changes are reported."""

        self._state = self.snapshot()

    def poll(self) -> None:
        """Compare the filesystem to the last snapshot and fire callbacks.

        Raises:
            Exception: Propagated from a callback; undelivered paths are
                reported again on the next poll.
        """

        current = self.snapshot()
        previous = self._state
        changed = sorted(path for path, fingerprint in current.items() if previous.get(path) != fingerprint)
        removed = sorted(path for path in previous if path not in current)
        for path in changed:
            LOGGER.debug("watcher write event: %s", path)
            if self.on_write is not None:
                self.on_write(path)
            previous[path] = current[path]
        for path in removed:
            LOGGER.debug("watcher remove event: %s", path)
            if self.on_remove is not None:
                self.on_remove(path)
            del previous[path]

    def run(self, token: CancellationToken) -> None:
        """Poll until ``token`` is cancelled.

        Raises:
            OperationCancelledError: Always, once ``token`` fires.
        """

        self.prime()
        LOGGER.info("watching %s (masks: %s)", ", ".join(self.paths), ", ".join(self.masks) or "*")
        while not token.wait(self.interval):
            self.poll()
        raise OperationCancelledError("watch cancelled")


__all__ = ["DEFAULT_INTERVAL", "FileWatcher", "PathCallback"]
