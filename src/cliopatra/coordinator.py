# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Run independent watch loops side by side under one cancellation token."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait

from .cancellation import CancellationToken
from .errors import OperationCancelledError

LOGGER = logging.getLogger(__name__)

WatchTask = Callable[[CancellationToken], None]


def run_concurrently(tasks: Sequence[WatchTask], token: CancellationToken) -> None:
    """Run ``tasks`` in parallel until one fails, all finish, or ``token`` fires.

    A task raising an exception cancels the others; a task that returns
    normally leaves the rest running. Cancellation outcomes are
    swallowed; the first genuine failure is re-raised once every task has
    returned. ``KeyboardInterrupt`` cancels ``token``.

    Args:
        tasks: Callables accepting the shared token, typically watch loops.
        token: Cancellation token shared by all tasks.

    Raises:
        OperationCancelledError: If every task stopped because of cancellation.
        Exception: The first non-cancellation failure raised by a task.
    """

    if not tasks:
        return
    with ThreadPoolExecutor(max_workers=len(tasks), thread_name_prefix="cliopatra-watch") as executor:
        futures = [executor.submit(task, token) for task in tasks]
        try:
            wait(futures, return_when=FIRST_EXCEPTION)
        except KeyboardInterrupt:
            LOGGER.info("interrupted, stopping watchers")
        token.cancel()
        failures: list[BaseException] = []
        for future in futures:
            failure = future.exception()
            if failure is not None and not isinstance(failure, OperationCancelledError):
                failures.append(failure)
    if failures:
        raise failures[0]
    raise OperationCancelledError("watchers stopped")


__all__ = ["WatchTask", "run_concurrently"]
