# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Option declarations and option containers shared by the CLI commands."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

SEARCH_PANEL = "Search"
CACHE_PANEL = "Cache"
OUTPUT_PANEL = "Output"

NAMES_ARGUMENT = Annotated[
    list[str],
    typer.Argument(help="Executable names, file names or paths to locate.", show_default=False),
]
DIRECTORY_ARGUMENT = Annotated[
    Path | None,
    typer.Argument(help="Directory to inventory; every eligible drive when omitted.", show_default=False),
]
ALL_OPTION = Annotated[
    bool,
    typer.Option(
        "--all",
        "-a",
        help="Report every instance found on disk instead of the best match.",
        rich_help_panel=SEARCH_PANEL,
    ),
]
LIMIT_OPTION = Annotated[
    int | None,
    typer.Option(
        "--limit",
        "-l",
        min=1,
        help="Maximum number of results reported per name.",
        rich_help_panel=SEARCH_PANEL,
    ),
]
STRICT_OPTION = Annotated[
    bool,
    typer.Option(
        "--strict",
        help="Fail with a single error naming every executable not found.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]
DEPTH_OPTION = Annotated[
    int | None,
    typer.Option(
        "--depth",
        "-d",
        min=0,
        help="Maximum directory depth of the filesystem search.",
        rich_help_panel=SEARCH_PANEL,
    ),
]
TIMEOUT_OPTION = Annotated[
    float | None,
    typer.Option(
        "--timeout",
        "-t",
        min=0.0,
        help="Stop searching after this many seconds.",
        rich_help_panel=SEARCH_PANEL,
    ),
]
ROOT_OPTION = Annotated[
    list[Path] | None,
    typer.Option(
        "--root",
        "-r",
        help="Search this directory instead of every drive (repeatable).",
        rich_help_panel=SEARCH_PANEL,
    ),
]
INTERACTIVE_OPTION = Annotated[
    bool,
    typer.Option(
        "--interactive",
        "-i",
        help="Ask whether to continue when a directory cannot be read.",
        rich_help_panel=SEARCH_PANEL,
    ),
]
VERBOSE_OPTION = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Show skipped directories and search progress.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]
CACHE_OPTION = Annotated[
    bool,
    typer.Option(
        "--cache/--no-cache",
        help="Cache the PATH directory and extension lists.",
        rich_help_panel=CACHE_PANEL,
    ),
]
CACHE_LIFETIME_OPTION = Annotated[
    float | None,
    typer.Option(
        "--cache-lifetime",
        min=0.01,
        help="Lifetime in minutes of the cached PATH lists.",
        rich_help_panel=CACHE_PANEL,
    ),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option(
        "--emoji/--no-emoji",
        help="Toggle emoji output.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]


def normalize_cli_values(values: Sequence[str] | None) -> tuple[str, ...]:
    """Return stripped, non-empty CLI values preserving order and dropping duplicates."""

    if not values:
        return ()
    cleaned: dict[str, None] = {}
    for entry in values:
        stripped = entry.strip()
        if stripped:
            cleaned.setdefault(stripped, None)
    return tuple(cleaned)


@dataclass(slots=True)
class FindCLIOptions:
    """Capture the options supplied to ``whatexec find``."""

    names: tuple[str, ...]
    all_instances: bool = False
    limit: int | None = None
    strict: bool = False
    depth: int | None = None
    timeout: float | None = None
    roots: tuple[Path, ...] | None = None
    interactive: bool = False
    verbose: bool = False
    use_cache: bool = True
    cache_lifetime: float | None = None
    emoji: bool = True


@dataclass(slots=True)
class SearchCLIOptions:
    """Capture the options supplied to ``whatexec search``."""

    directory: Path | None = None
    limit: int | None = None
    depth: int | None = None
    timeout: float | None = None
    verbose: bool = False
    emoji: bool = True


__all__ = [
    "FindCLIOptions",
    "SearchCLIOptions",
    "normalize_cli_values",
]
