# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the ``whatexec`` command line interface."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from whatexec.cli.app import app
from whatexec.detection.magic import ELF_MAGIC

ELF = ELF_MAGIC + b"\x00" * 60


@pytest.fixture
def cli_layout(workspace: Path, make_binary, monkeypatch: pytest.MonkeyPatch) -> dict[str, Path]:
    """Create a PATH directory, an empty search root and a tool outside PATH."""

    monkeypatch.chdir(workspace)
    path_dir = workspace / "path-bin"
    search_root = workspace / "search-root"
    make_binary(path_dir / "git", ELF)
    make_binary(search_root / "opt" / "tool", ELF)
    make_binary(search_root / "share" / "tool", ELF)
    make_binary(search_root / "share" / "notes.txt", b"hello", executable=False)
    return {"path_dir": path_dir, "search_root": search_root}


def _invoke(args: list[str], layout: dict[str, Path]):
    runner = CliRunner()
    return runner.invoke(app, args, env={"PATH": str(layout["path_dir"])})


def test_find_prints_path_hit(cli_layout: dict[str, Path]) -> None:
    result = _invoke(["find", "git", "--root", str(cli_layout["search_root"]), "--no-emoji"], cli_layout)

    assert result.exit_code == 0
    assert str(cli_layout["path_dir"] / "git") in result.output


def test_find_falls_back_to_search_root(cli_layout: dict[str, Path]) -> None:
    result = _invoke(["find", "tool", "--root", str(cli_layout["search_root"]), "--no-emoji"], cli_layout)

    assert result.exit_code == 0
    assert str(cli_layout["search_root"] / "opt" / "tool") in result.output
    assert str(cli_layout["search_root"] / "share" / "tool") not in result.output


def test_find_verbose_reports_each_match_as_an_event(cli_layout: dict[str, Path]) -> None:
    result = _invoke(
        ["find", "tool", "--verbose", "--root", str(cli_layout["search_root"]), "--no-emoji"],
        cli_layout,
    )

    assert result.exit_code == 0
    assert "[found] name=tool source=filesystem path=" in result.output


def test_find_all_lists_every_instance(cli_layout: dict[str, Path]) -> None:
    result = _invoke(
        ["find", "tool", "--all", "--root", str(cli_layout["search_root"]), "--no-emoji"],
        cli_layout,
    )

    assert result.exit_code == 0
    assert str(cli_layout["search_root"] / "opt" / "tool") in result.output
    assert str(cli_layout["search_root"] / "share" / "tool") in result.output


def test_find_reports_missing_names_with_exit_code(cli_layout: dict[str, Path]) -> None:
    result = _invoke(
        ["find", "git", "missing-tool", "--root", str(cli_layout["search_root"]), "--no-emoji"],
        cli_layout,
    )

    assert result.exit_code == 1
    assert str(cli_layout["path_dir"] / "git") in result.output
    assert "Could not locate 'missing-tool'" in result.output


def test_find_strict_names_every_missing_executable(cli_layout: dict[str, Path]) -> None:
    result = _invoke(
        ["find", "missing-a", "missing-b", "--strict", "--root", str(cli_layout["search_root"]), "--no-emoji"],
        cli_layout,
    )

    assert result.exit_code == 1
    assert "Could not locate executable(s): 'missing-a', 'missing-b'" in result.output


def test_find_rejects_invalid_configuration(cli_layout: dict[str, Path]) -> None:
    Path("whatexec.toml").write_text("[search]\nmax_workers = 0\n", encoding="utf-8")

    result = _invoke(["find", "git", "--no-emoji"], cli_layout)

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_search_lists_executables(cli_layout: dict[str, Path]) -> None:
    result = _invoke(["search", str(cli_layout["search_root"]), "--no-emoji"], cli_layout)

    assert result.exit_code == 0
    assert str(cli_layout["search_root"] / "opt" / "tool") in result.output
    assert "notes.txt" not in result.output
    assert "Found 2 executable(s)" in result.output


def test_search_respects_limit(cli_layout: dict[str, Path]) -> None:
    result = _invoke(["search", str(cli_layout["search_root"]), "--limit", "1", "--no-emoji"], cli_layout)

    assert result.exit_code == 0
    assert "Found 1 executable(s)" in result.output


def test_search_rejects_missing_directory(cli_layout: dict[str, Path]) -> None:
    result = _invoke(["search", str(cli_layout["search_root"] / "absent"), "--no-emoji"], cli_layout)

    assert result.exit_code == 2
    assert "Not a directory" in result.output


def test_help_lists_commands() -> None:
    result = CliRunner().invoke(app, ["--help"])

    assert result.exit_code == 0
    assert "find" in result.output
    assert "search" in result.output
