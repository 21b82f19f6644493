# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Cooperative cancellation shared by watch loops and child processes."""

from __future__ import annotations

import threading

from .errors import OperationCancelledError


class CancellationToken:
    """Signal shared between long-running tasks that should stop together."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation; idempotent."""

        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Return ``True`` once :meth:`cancel` has been called."""

        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block up to ``timeout`` seconds, returning ``True`` when cancelled."""

        return self._event.wait(timeout)

    def raise_if_cancelled(self) -> None:
        """Raise :class:`OperationCancelledError` when cancellation was requested."""

        if self._event.is_set():
            raise OperationCancelledError("operation cancelled")


__all__ = ["CancellationToken"]
