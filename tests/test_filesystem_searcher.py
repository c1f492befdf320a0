# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the concurrent, ranked filesystem search."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

import pytest

from whatexec.cancellation import CancellationToken
from whatexec.detection.magic import ELF_MAGIC
from whatexec.discovery.ranking import APPLICATION_DATA_SCORE, DEFAULT_SCORE, CandidateRanker
from whatexec.environment.known_folders import KnownFolders
from whatexec.platform import HostPlatform
from whatexec.resolution.filesystem import FilesystemSearcher
from whatexec.resolution.models import IssueKind, ResolutionSource, SearchDecision, SearchMode

ELF = ELF_MAGIC + b"\x00" * 60


def _searcher(roots, detector, fake_drives, folders: KnownFolders | None = None, **kwargs) -> FilesystemSearcher:
    ranker = CandidateRanker(folders or KnownFolders(), platform=HostPlatform.LINUX)
    return FilesystemSearcher(detector, fake_drives(roots), ranker, platform=HostPlatform.LINUX, **kwargs)


def _deny(monkeypatch: pytest.MonkeyPatch, *locked: Path) -> None:
    original = os.scandir
    denied = set(locked)

    def _scandir(path="."):
        if Path(os.fspath(path)) in denied:
            raise PermissionError(13, "Permission denied", os.fspath(path))
        return original(path)

    monkeypatch.setattr(os, "scandir", _scandir)


def test_first_match_prefers_system_copy_over_temp_copy(
    workspace: Path,
    make_binary,
    linux_detector,
    fake_drives,
) -> None:
    drive_a = workspace / "drive_a"
    drive_b = workspace / "drive_b"
    make_binary(drive_a / "tmp" / "tool", ELF)
    system_copy = make_binary(drive_b / "usr" / "bin" / "tool", ELF)
    folders = KnownFolders(system=(drive_b / "usr",))
    searcher = _searcher([drive_a, drive_b], linux_detector, fake_drives, folders)

    found = searcher.locate_first(["tool"])

    assert found["tool"].path == system_copy
    assert found["tool"].priority == APPLICATION_DATA_SCORE
    assert found["tool"].source is ResolutionSource.FILESYSTEM


def test_locate_returns_every_instance_ranked(workspace: Path, make_binary, linux_detector, fake_drives) -> None:
    drive_a = workspace / "drive_a"
    drive_b = workspace / "drive_b"
    temp_copy = make_binary(drive_a / "tmp" / "tool", ELF)
    desktop_copy = make_binary(drive_a / "Desktop" / "tool", ELF)
    programs_copy = make_binary(drive_b / "Programs" / "tool", ELF)
    make_binary(drive_b / "Programs" / "tool-notes", ELF)
    folders = KnownFolders(programs=(drive_b / "Programs",), desktop=(drive_a / "Desktop",))
    searcher = _searcher([drive_a, drive_b], linux_detector, fake_drives, folders)

    found = searcher.locate(["tool"])

    assert [item.path for item in found["tool"]] == [programs_copy, desktop_copy, temp_copy]


def test_non_executable_matches_are_ignored(workspace: Path, make_binary, linux_detector, fake_drives) -> None:
    make_binary(workspace / "a" / "tool", b"#!/bin/sh\n")
    make_binary(workspace / "b" / "tool", ELF, executable=False)
    searcher = _searcher([workspace], linux_detector, fake_drives)

    assert searcher.locate(["tool"]) == {}


def test_permission_denied_directory_does_not_hide_other_results(
    workspace: Path,
    make_binary,
    linux_detector,
    fake_drives,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    locked = workspace / "locked"
    make_binary(locked / "secret-tool", ELF)
    wanted = make_binary(workspace / "open" / "tool", ELF)
    _deny(monkeypatch, locked)
    searcher = _searcher([workspace], linux_detector, fake_drives)

    result = searcher.search(["tool", "secret-tool"])

    assert result.matches["tool"][0].path == wanted
    assert "secret-tool" not in result.matches
    assert [issue.kind for issue in result.issues] == [IssueKind.PERMISSION_DENIED]
    assert result.issues[0].path == locked


def test_issue_callback_can_abort_the_search(
    workspace: Path,
    make_binary,
    linux_detector,
    fake_drives,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    locked = workspace / "a_locked"
    locked.mkdir()
    make_binary(workspace / "b_open" / "tool", ELF)
    _deny(monkeypatch, locked)
    searcher = _searcher([workspace], linux_detector, fake_drives)

    result = searcher.search(["tool"], on_issue=lambda issue: SearchDecision.ABORT)

    assert result.aborted
    assert result.matches == {}


def test_issue_callback_can_continue_the_search(
    workspace: Path,
    make_binary,
    linux_detector,
    fake_drives,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    locked = workspace / "a_locked"
    locked.mkdir()
    wanted = make_binary(workspace / "b_open" / "tool", ELF)
    _deny(monkeypatch, locked)
    seen = []
    searcher = _searcher([workspace], linux_detector, fake_drives)

    result = searcher.search(["tool"], on_issue=lambda issue: seen.append(issue) or SearchDecision.CONTINUE)

    assert not result.aborted
    assert result.matches["tool"][0].path == wanted
    assert [issue.path for issue in seen] == [locked]


def test_cancelled_search_returns_partial_results(workspace: Path, make_binary, linux_detector, fake_drives) -> None:
    make_binary(workspace / "bin" / "tool", ELF)
    token = CancellationToken()
    token.cancel()
    searcher = _searcher([workspace], linux_detector, fake_drives)

    result = searcher.search(["tool"], cancel=token)

    assert result.cancelled
    assert result.matches == {}


def test_search_depth_limits_the_walk(workspace: Path, make_binary, linux_detector, fake_drives) -> None:
    make_binary(workspace / "one" / "two" / "tool", ELF)
    searcher = _searcher([workspace], linux_detector, fake_drives)

    assert searcher.locate(["tool"], search_depth=1) == {}
    assert "tool" in searcher.locate(["tool"], search_depth=2)


def test_explicit_roots_replace_drive_enumeration(workspace: Path, make_binary, linux_detector, fake_drives) -> None:
    wanted = make_binary(workspace / "project" / "bin" / "tool", ELF)
    drives = fake_drives([workspace / "elsewhere"])
    searcher = FilesystemSearcher(linux_detector, drives, CandidateRanker(KnownFolders(), platform=HostPlatform.LINUX))

    found = searcher.locate_first(["tool"], roots=[workspace / "project"])

    assert found["tool"].path == wanted
    assert drives.calls == 0


def test_found_callback_reports_each_validated_candidate(
    workspace: Path,
    make_binary,
    linux_detector,
    fake_drives,
) -> None:
    make_binary(workspace / "a" / "tool", ELF)
    make_binary(workspace / "b" / "tool", ELF)
    seen: list[Path] = []
    searcher = _searcher([workspace], linux_detector, fake_drives)

    searcher.search(["tool"], mode=SearchMode.ALL, on_found=lambda found: seen.append(found.path))

    assert sorted(seen) == [workspace / "a" / "tool", workspace / "b" / "tool"]


def test_scan_lists_ranked_executables_with_limit(workspace: Path, make_binary, linux_detector, fake_drives) -> None:
    make_binary(workspace / "bin" / "alpha", ELF)
    make_binary(workspace / "bin" / "beta", ELF)
    make_binary(workspace / "bin" / "readme", b"text")
    make_binary(workspace / "Programs" / "gamma", ELF)
    folders = KnownFolders(programs=(workspace / "Programs",))
    searcher = _searcher([workspace], linux_detector, fake_drives, folders)

    everything = searcher.scan()
    limited = searcher.scan(limit=1)

    assert [item.path.name for item in everything.executables] == ["gamma", "alpha", "beta"]
    assert [item.priority for item in everything.executables][-1] == DEFAULT_SCORE
    assert len(limited.executables) == 1


def test_async_locate_first(workspace: Path, make_binary, linux_detector, fake_drives) -> None:
    wanted = make_binary(workspace / "bin" / "tool", ELF)
    searcher = _searcher([workspace], linux_detector, fake_drives)

    found = asyncio.run(searcher.locate_first_async(["tool"]))

    assert found["tool"].path == wanted


def test_async_scan_and_locate(workspace: Path, make_binary, linux_detector, fake_drives) -> None:
    make_binary(workspace / "bin" / "alpha", ELF)
    make_binary(workspace / "opt" / "alpha", ELF)
    searcher = _searcher([workspace], linux_detector, fake_drives)

    async def _run():
        return await searcher.scan_async(), await searcher.locate_async(["alpha"])

    scanned, located = asyncio.run(_run())

    assert len(scanned.executables) == 2
    assert len(located["alpha"]) == 2


class CountingDetector:
    """Detector delegating to a real one while counting validations."""

    def __init__(self, inner) -> None:
        self.inner = inner
        self.calls = 0

    def is_executable(self, path: Path, cancel: CancellationToken | None = None) -> bool:
        self.calls += 1
        return self.inner.is_executable(path, cancel)


def test_first_mode_stops_at_best_reachable_score_without_programs_folders(
    workspace: Path,
    make_binary,
    linux_detector,
    fake_drives,
) -> None:
    system_root = workspace / "usr"
    for index in range(5):
        make_binary(system_root / f"bin{index}" / "tool", ELF)
    detector = CountingDetector(linux_detector)
    searcher = _searcher([workspace], detector, fake_drives, KnownFolders(system=(system_root,)))

    found = searcher.locate_first(["tool"])

    assert found["tool"].path == system_root / "bin0" / "tool"
    assert found["tool"].priority == APPLICATION_DATA_SCORE
    assert detector.calls == 1
