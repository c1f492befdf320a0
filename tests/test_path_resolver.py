# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for PATH-ordered resolution."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from whatexec.detection.executable import ExecutableFileDetector
from whatexec.detection.magic import ELF_MAGIC, MZ_MAGIC
from whatexec.environment.path_variable import PathEnvironmentReader
from whatexec.errors import ExecutableNotFoundError
from whatexec.platform import HostPlatform
from whatexec.resolution.models import ResolutionSource
from whatexec.resolution.path_resolver import PathResolver

ELF = ELF_MAGIC + b"\x00" * 60


class ExplodingEnvironment:
    """PATH source that fails the test when consulted."""

    def directories(self) -> list[str] | None:
        raise AssertionError("PATH must not be consulted")

    def extensions(self) -> list[str]:
        raise AssertionError("PATHEXT must not be consulted")


def _linux_resolver(path_value: str | None, detector: ExecutableFileDetector) -> PathResolver:
    environ = {} if path_value is None else {"PATH": path_value}
    reader = PathEnvironmentReader(platform=HostPlatform.LINUX, environ=environ)
    return PathResolver(reader, detector, platform=HostPlatform.LINUX)


def test_first_path_directory_wins(workspace: Path, make_binary, linux_detector) -> None:
    usr_bin = workspace / "usr" / "bin"
    local_bin = workspace / "usr" / "local" / "bin"
    make_binary(usr_bin / "git", ELF)
    make_binary(local_bin / "git", ELF)
    resolver = _linux_resolver(f"{usr_bin}:{local_bin}", linux_detector)

    resolved = resolver.resolve(["git"])

    assert resolved["git"].path == usr_bin / "git"
    assert resolved["git"].source is ResolutionSource.PATH


def test_invalid_candidates_are_skipped(workspace: Path, make_binary, linux_detector) -> None:
    first = workspace / "first"
    second = workspace / "second"
    make_binary(first / "tool", b"not a binary")
    make_binary(second / "tool", ELF)
    resolver = _linux_resolver(f"{first}:{second}", linux_detector)

    assert resolver.try_resolve_one("tool").path == second / "tool"


def test_rooted_names_never_consult_path(workspace: Path, make_binary, linux_detector) -> None:
    binary = make_binary(workspace / "opt" / "tool", ELF)
    resolver = PathResolver(ExplodingEnvironment(), linux_detector, platform=HostPlatform.LINUX)

    resolved = resolver.try_resolve([str(binary), str(workspace / "opt" / "missing")])

    assert list(resolved) == [str(binary)]
    assert resolved[str(binary)].path == binary


def test_relative_names_with_separator_resolve_against_working_directory(
    workspace: Path,
    make_binary,
    linux_detector,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    make_binary(workspace / "bin" / "tool", ELF)
    monkeypatch.chdir(workspace)
    resolver = PathResolver(ExplodingEnvironment(), linux_detector, platform=HostPlatform.LINUX)

    assert resolver.resolve_one("bin/tool").path == workspace / "bin" / "tool"


def test_windows_tries_every_extension_before_the_next_directory(tmp_path: Path, make_binary) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    make_binary(first / "tool.COM", b"com image", executable=False)
    make_binary(second / "tool.EXE", MZ_MAGIC + b"\x00" * 60, executable=False)
    reader = PathEnvironmentReader(
        platform=HostPlatform.WINDOWS,
        environ={"PATH": f"{first};{second}", "PATHEXT": ".EXE;.COM"},
    )
    resolver = PathResolver(reader, ExecutableFileDetector(HostPlatform.WINDOWS), platform=HostPlatform.WINDOWS)

    assert resolver.resolve_one("tool").path == first / "tool.COM"


def test_windows_names_with_extension_are_tried_as_is(tmp_path: Path, make_binary) -> None:
    bin_dir = tmp_path / "bin"
    make_binary(bin_dir / "tool.exe", MZ_MAGIC + b"\x00" * 60, executable=False)
    make_binary(bin_dir / "tool.exe.COM", b"decoy", executable=False)
    reader = PathEnvironmentReader(platform=HostPlatform.WINDOWS, environ={"PATH": str(bin_dir), "PATHEXT": ".COM"})
    resolver = PathResolver(reader, ExecutableFileDetector(HostPlatform.WINDOWS), platform=HostPlatform.WINDOWS)

    assert resolver.resolve_one("tool.exe").path == bin_dir / "tool.exe"


def test_windows_dotted_names_count_as_having_an_extension(tmp_path: Path, make_binary) -> None:
    bin_dir = tmp_path / "bin"
    make_binary(bin_dir / "python3.11.exe", MZ_MAGIC + b"\x00" * 60, executable=False)
    reader = PathEnvironmentReader(platform=HostPlatform.WINDOWS, environ={"PATH": str(bin_dir), "PATHEXT": ".EXE"})
    resolver = PathResolver(reader, ExecutableFileDetector(HostPlatform.WINDOWS), platform=HostPlatform.WINDOWS)

    assert resolver.candidate_extensions("python3.11") == [""]
    assert resolver.try_resolve_one("python3.11") is None
    assert resolver.resolve_one("python3.11.exe").path == bin_dir / "python3.11.exe"


def test_unset_path_reports_names_as_missing(linux_detector) -> None:
    resolver = _linux_resolver(None, linux_detector)

    assert resolver.try_resolve(["git", "ls"]) == {}


def test_must_resolve_form_names_every_missing_executable(workspace: Path, make_binary, linux_detector) -> None:
    bin_dir = workspace / "bin"
    make_binary(bin_dir / "git", ELF)
    resolver = _linux_resolver(str(bin_dir), linux_detector)

    with pytest.raises(ExecutableNotFoundError) as excinfo:
        resolver.resolve(["git", "missing-tool", "also-missing"])

    assert excinfo.value.names == ("missing-tool", "also-missing")
    assert "'missing-tool'" in str(excinfo.value)


def test_found_callback_fires_per_resolved_name(workspace: Path, make_binary, linux_detector) -> None:
    bin_dir = workspace / "bin"
    make_binary(bin_dir / "git", ELF)
    resolver = _linux_resolver(str(bin_dir), linux_detector)
    seen: list[str] = []

    resolver.try_resolve(["git", "missing"], on_found=lambda found: seen.append(found.query))

    assert seen == ["git"]


def test_async_variant(workspace: Path, make_binary, linux_detector) -> None:
    bin_dir = workspace / "bin"
    make_binary(bin_dir / "git", ELF)
    resolver = _linux_resolver(str(bin_dir), linux_detector)

    resolved = asyncio.run(resolver.try_resolve_async(["git"]))

    assert resolved["git"].path == bin_dir / "git"
