# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import os
import textwrap
import threading
import time
from collections.abc import Callable
from pathlib import Path

import pytest

from cliopatra.cancellation import CancellationToken

WriteDefinition = Callable[..., Path]


@pytest.fixture
def write_definition(tmp_path: Path) -> WriteDefinition:
    """Return a helper writing a dedented YAML definition below ``tmp_path``."""

    def _write(relative: str, content: str, *, root: Path | None = None) -> Path:
        target = (root or tmp_path) / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
        return target

    return _write


@pytest.fixture
def repo_dir(tmp_path: Path, write_definition: WriteDefinition) -> Path:
    """Return a repository directory holding an ``echoer`` and a ``greeter`` program."""

    root = tmp_path / "repo"
    write_definition(
        "echoer.yaml",
        """
        name: echoer
        description: Print hi
        path: /bin/echo
        args:
          - name: word
            default: hi
        """,
        root=root,
    )
    write_definition(
        "nested/greeter.yml",
        """
        name: greeter
        description: Greet someone
        path: /bin/echo
        flags:
          loud:
            type: bool
        args:
          - name: who
        """,
        root=root,
    )
    return root


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep user configuration and environment overrides out of every test."""

    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for name in ("CLIOPATRA_CONFIG", "CLIOPATRA_REPOSITORIES", "CLIOPATRA_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def wait_for(condition: Callable[[], bool], *, nudge: Callable[[], None] | None = None, timeout: float = 5.0) -> bool:
    """Poll ``condition`` until it holds, calling ``nudge`` between attempts."""

    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        if nudge is not None:
            nudge()
        time.sleep(0.02)
    return condition()


def bump_mtime(path: Path) -> Callable[[], None]:
    """Return a callable advancing ``path``'s mtime by one second per call."""

    def _bump() -> None:
        stat = path.stat()
        os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000_000))

    return _bump


def start_watch(task: Callable[[CancellationToken], None]) -> Callable[[], BaseException | None]:
    """Run ``task`` on a thread; the returned callable cancels it and returns its outcome."""

    token = CancellationToken()
    outcome: list[BaseException] = []

    def _target() -> None:
        try:
            task(token)
        except Exception as exc:  # noqa: BLE001
            outcome.append(exc)

    thread = threading.Thread(target=_target, daemon=True)
    thread.start()

    def _stop() -> BaseException | None:
        token.cancel()
        thread.join(timeout=5)
        assert not thread.is_alive()
        return outcome[0] if outcome else None

    return _stop
