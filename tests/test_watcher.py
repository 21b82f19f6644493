# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for glob masks, directory walking and the polling watcher."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from cliopatra.cancellation import CancellationToken
from cliopatra.errors import OperationCancelledError
from cliopatra.paths import matches_any, matches_mask, walk_files
from cliopatra.watcher import FileWatcher


@pytest.mark.parametrize(
    ("path", "mask", "expected"),
    [
        ("/repo/a.yaml", "**/*.yaml", True),
        ("a.yaml", "**/*.yaml", True),
        ("/repo/deep/nested/a.yml", "**/*.yml", True),
        ("/repo/a.yaml.bak", "**/*.yaml", False),
        ("readme.md", "*.md", True),
        ("/repo/docs/readme.md", "*.md", False),
        ("/repo/docs/readme.md", "**/*.md", True),
        ("docs/b.md", "docs/*.md", True),
        ("docs/a/b.md", "docs/*.md", False),
        ("docs/a/b/c.md", "docs/**/*.md", True),
        ("docs/b.md", "docs/**/*.md", True),
        ("/repo/docs/readme.txt", "**/*.md", False),
    ],
)
def test_matches_mask(path: str, mask: str, expected: bool) -> None:
    assert matches_mask(path, mask) is expected


def test_empty_masks_match_everything() -> None:
    assert matches_any("/anything", ())
    assert not matches_any("/a.txt", ("*.md", "*.yaml"))


def test_walk_files_is_sorted_and_skips_hidden_entries(tmp_path: Path) -> None:
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "z.txt").write_text("z", encoding="utf-8")
    (tmp_path / "a.txt").write_text("a", encoding="utf-8")
    (tmp_path / ".hidden").mkdir()
    (tmp_path / ".hidden" / "x.txt").write_text("x", encoding="utf-8")
    (tmp_path / ".dotfile").write_text("d", encoding="utf-8")

    visible = list(walk_files(str(tmp_path)))
    assert visible == [str(tmp_path / "b" / "z.txt"), str(tmp_path / "a.txt")]

    everything = list(walk_files(str(tmp_path), skip_hidden=False))
    assert str(tmp_path / ".hidden" / "x.txt") in everything
    assert str(tmp_path / ".dotfile") in everything


class _Recorder:
    def __init__(self) -> None:
        self.writes: list[str] = []
        self.removes: list[str] = []


def _watcher(root: Path, recorder: _Recorder, masks: tuple[str, ...] = ()) -> FileWatcher:
    return FileWatcher(
        paths=[str(root)],
        masks=masks,
        on_write=recorder.writes.append,
        on_remove=recorder.removes.append,
    )


def test_poll_reports_new_changed_and_removed_files(tmp_path: Path) -> None:
    existing = tmp_path / "existing.yaml"
    existing.write_text("a", encoding="utf-8")
    recorder = _Recorder()
    watcher = _watcher(tmp_path, recorder)
    watcher.prime()

    watcher.poll()
    assert recorder.writes == []

    created = tmp_path / "sub" / "created.yaml"
    created.parent.mkdir()
    created.write_text("new", encoding="utf-8")
    existing.write_text("changed content", encoding="utf-8")
    watcher.poll()
    assert recorder.writes == sorted([str(created), str(existing)])

    existing.unlink()
    watcher.poll()
    assert recorder.removes == [str(existing)]


def test_poll_applies_masks(tmp_path: Path) -> None:
    recorder = _Recorder()
    watcher = _watcher(tmp_path, recorder, masks=("**/*.yaml",))
    watcher.prime()

    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
    (tmp_path / "prog.yaml").write_text("name: x", encoding="utf-8")
    watcher.poll()

    assert recorder.writes == [str(tmp_path / "prog.yaml")]


def test_callback_failure_is_retried_on_next_poll(tmp_path: Path) -> None:
    calls: list[str] = []

    def _flaky(path: str) -> None:
        calls.append(path)
        if len(calls) == 1:
            raise RuntimeError("transient")

    watcher = FileWatcher(paths=[str(tmp_path)], on_write=_flaky)
    watcher.prime()
    (tmp_path / "a.txt").write_text("a", encoding="utf-8")

    with pytest.raises(RuntimeError):
        watcher.poll()
    watcher.poll()
    assert calls == [str(tmp_path / "a.txt")] * 2


def test_run_stops_with_cancellation(tmp_path: Path) -> None:
    token = CancellationToken()
    watcher = FileWatcher(paths=[str(tmp_path)], interval=0.01)
    timer = threading.Timer(0.05, token.cancel)
    timer.start()

    with pytest.raises(OperationCancelledError):
        watcher.run(token)
