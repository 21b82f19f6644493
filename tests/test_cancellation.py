# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for cancellation tokens and concurrent watch coordination."""

from __future__ import annotations

import threading

import pytest

from cliopatra.cancellation import CancellationToken
from cliopatra.coordinator import run_concurrently
from cliopatra.errors import CliopatraError, OperationCancelledError, RepositoryError


def test_token_reports_cancellation() -> None:
    token = CancellationToken()
    assert not token.cancelled
    assert token.wait(0.01) is False

    token.cancel()
    token.cancel()
    assert token.cancelled
    assert token.wait(0) is True
    with pytest.raises(OperationCancelledError):
        token.raise_if_cancelled()


def test_cancellation_is_not_a_library_failure() -> None:
    assert not issubclass(OperationCancelledError, CliopatraError)


def _loop_until_cancelled(token: CancellationToken) -> None:
    while not token.wait(0.01):
        pass
    raise OperationCancelledError("stopped")


def test_run_concurrently_stops_every_task_on_cancel() -> None:
    token = CancellationToken()
    timer = threading.Timer(0.1, token.cancel)
    timer.start()

    with pytest.raises(OperationCancelledError):
        run_concurrently([_loop_until_cancelled, _loop_until_cancelled], token)
    assert token.cancelled


def test_run_concurrently_propagates_first_failure_and_cancels_others() -> None:
    token = CancellationToken()

    def _fail(_: CancellationToken) -> None:
        raise RepositoryError("boom")

    with pytest.raises(RepositoryError, match="boom"):
        run_concurrently([_loop_until_cancelled, _fail], token)
    assert token.cancelled


def test_run_concurrently_without_tasks_returns() -> None:
    run_concurrently([], CancellationToken())


def test_run_concurrently_keeps_watching_after_a_task_returns() -> None:
    token = CancellationToken()
    finished = threading.Event()
    observed: list[bool] = []

    def _returns_early(_: CancellationToken) -> None:
        finished.set()

    def _watch(current: CancellationToken) -> None:
        finished.wait(1)
        observed.append(current.cancelled)
        _loop_until_cancelled(current)

    timer = threading.Timer(0.1, token.cancel)
    timer.start()

    with pytest.raises(OperationCancelledError):
        run_concurrently([_returns_early, _watch], token)
    assert observed == [False]
