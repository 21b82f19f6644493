# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Child process execution with streamed output and cancellation."""

from __future__ import annotations

import logging
import os
import shutil

# Bandit: subprocess usage is intentional; commands are argument lists built
# from program definitions and never go through a shell.
import subprocess  # nosec B404
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import IO, Final, Protocol

from .cancellation import CancellationToken
from .errors import ExecutionError, OperationCancelledError

LOGGER = logging.getLogger(__name__)

POLL_INTERVAL: Final[float] = 0.05
TERMINATE_GRACE_PERIOD: Final[float] = 2.0
_CHUNK_SIZE: Final[int] = 4096


class TextWriter(Protocol):
    """Destination accepting decoded standard output."""

    def write(self, text: str, /) -> object:
        """Write ``text`` to the destination."""


@dataclass(slots=True)
class ProcessRequest:
    """Everything needed to spawn one child process."""

    path: str
    args: Sequence[str]
    env: Mapping[str, str]
    stdin: str = ""

    @property
    def command(self) -> list[str]:
        """Return the full command line."""

        return [self.path, *self.args]


def merge_environment(overrides: Mapping[str, str], base: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return ``base`` (default: the inherited environment) updated with ``overrides``."""

    merged = dict(os.environ if base is None else base)
    merged.update(overrides)
    return merged


def resolve_executable(path: str, env: Mapping[str, str]) -> str:
    """Return the executable to spawn for ``path``.

    Paths containing a separator are used as given; bare names are looked up on
    the ``PATH`` of ``env``.

    Raises:
        ExecutionError: If ``path`` is empty or cannot be found.
    """

    if not path:
        raise ExecutionError("program has no path")
    if os.sep in path or (os.altsep is not None and os.altsep in path):
        return path
    resolved = shutil.which(path, path=env.get("PATH"))
    if resolved is None:
        raise ExecutionError(f"executable '{path}' was not found on PATH", command=[path])
    return resolved


def _pump_stdout(stream: IO[str], writer: TextWriter, failures: list[BaseException]) -> None:
    try:
        while True:
            chunk = stream.read(_CHUNK_SIZE)
            if not chunk:
                break
            writer.write(chunk)
    except (OSError, ValueError) as exc:
        failures.append(exc)
    finally:
        stream.close()


def _collect_stderr(stream: IO[str], sink: list[str]) -> None:
    try:
        sink.append(stream.read())
    finally:
        stream.close()


def _feed_stdin(stream: IO[str], payload: str) -> None:
    try:
        stream.write(payload)
    except BrokenPipeError:
        LOGGER.debug("child closed stdin before consuming all input")
    finally:
        try:
            stream.close()
        except BrokenPipeError:
            pass


def _stop(process: subprocess.Popen[str]) -> None:
    process.terminate()
    try:
        process.wait(timeout=TERMINATE_GRACE_PERIOD)
    except subprocess.TimeoutExpired:
        process.kill()
        process.wait()


def run_process(
    request: ProcessRequest,
    writer: TextWriter,
    *,
    token: CancellationToken | None = None,
) -> None:
    """Run ``request`` streaming standard output into ``writer``.

    Args:
        request: Executable, arguments, environment and stdin payload.
        writer: Destination for decoded standard output.
        token: Optional cancellation token; when it fires the child is terminated.

    Raises:
        ExecutionError: If the process cannot be spawned or exits non-zero.
        OperationCancelledError: If ``token`` fires before the process exits.
    """

    executable = resolve_executable(request.path, request.env)
    command = [executable, *request.args]
    LOGGER.debug("spawning %s", command)
    if token is not None:
        token.raise_if_cancelled()
    try:
        # Bandit: argument list execution without shell expansion.
        process = subprocess.Popen(  # nosec B603
            command,
            env=dict(request.env),
            stdin=subprocess.PIPE if request.stdin else subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except OSError as exc:
        raise ExecutionError(f"could not start '{request.path}': {exc}", command=command) from exc

    failures: list[BaseException] = []
    stderr_chunks: list[str] = []
    assert process.stdout is not None and process.stderr is not None  # nosec B101
    threads = [
        threading.Thread(target=_pump_stdout, args=(process.stdout, writer, failures), daemon=True),
        threading.Thread(target=_collect_stderr, args=(process.stderr, stderr_chunks), daemon=True),
    ]
    if request.stdin:
        assert process.stdin is not None  # nosec B101
        threads.append(threading.Thread(target=_feed_stdin, args=(process.stdin, request.stdin), daemon=True))
    for thread in threads:
        thread.start()

    while True:
        try:
            returncode = process.wait(timeout=POLL_INTERVAL)
            break
        except subprocess.TimeoutExpired:
            if token is not None and token.cancelled:
                LOGGER.debug("cancelling %s", command)
                _stop(process)
                for thread in threads:
                    thread.join(timeout=TERMINATE_GRACE_PERIOD)
                raise OperationCancelledError(f"'{request.path}' cancelled") from None

    for thread in threads:
        thread.join()
    stderr = "".join(stderr_chunks)
    if failures:
        raise ExecutionError(f"could not forward output of '{request.path}'", command=command) from failures[0]
    if returncode != 0:
        raise ExecutionError(
            f"'{request.path}' exited with status {returncode}.",
            command=command,
            returncode=returncode,
            stderr=stderr,
        )


__all__ = [
    "ProcessRequest",
    "TextWriter",
    "merge_environment",
    "resolve_executable",
    "run_process",
]
