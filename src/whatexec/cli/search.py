# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``whatexec search``: inventory every executable under a directory or drive."""

from __future__ import annotations

import typer

from ..cancellation import CancellationToken
from ..config import build_engine
from ..resolution.models import ScanResult
from ._options import (
    DEPTH_OPTION,
    DIRECTORY_ARGUMENT,
    EMOJI_OPTION,
    LIMIT_OPTION,
    TIMEOUT_OPTION,
    VERBOSE_OPTION,
    SearchCLIOptions,
)
from ._services import build_progress_reporter, emit_interruptions, emit_issues, load_cli_config
from .shared import CLIError, CLILogger, build_cli_logger


def search_command(
    directory: DIRECTORY_ARGUMENT = None,
    limit: LIMIT_OPTION = None,
    depth: DEPTH_OPTION = None,
    timeout: TIMEOUT_OPTION = None,
    verbose: VERBOSE_OPTION = False,
    emoji: EMOJI_OPTION = True,
) -> None:
    """List every executable beneath DIRECTORY, best-ranked first."""

    options = SearchCLIOptions(
        directory=directory,
        limit=limit,
        depth=depth,
        timeout=timeout,
        verbose=verbose,
        emoji=emoji,
    )
    logger = build_cli_logger(emoji=options.emoji, verbose=options.verbose)
    try:
        result = run_search(options, logger=logger)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    for executable in result.executables:
        logger.executable(executable)
    emit_issues(result.issues, logger)
    emit_interruptions(cancelled=result.cancelled, aborted=result.aborted, logger=logger)
    if result.executables:
        logger.ok(f"Found {len(result.executables)} executable(s)")
    else:
        logger.warn("No executables found")
    raise typer.Exit(code=0)


def run_search(options: SearchCLIOptions, *, logger: CLILogger) -> ScanResult:
    """Run the executable inventory described by ``options``.

    Raises:
        CLIError: If the directory does not exist or the configuration is invalid.
    """

    if options.directory is not None and not options.directory.is_dir():
        raise CLIError(f"Not a directory: {options.directory}", exit_code=2)
    config = load_cli_config(depth=options.depth)
    engine = build_engine(config)
    if options.directory is None:
        logger.info("Searching every eligible drive")
    return engine.searcher.scan(
        None if options.directory is None else [options.directory],
        depth=config.search.search_depth,
        limit=options.limit,
        cancel=CancellationToken(timeout=options.timeout),
        on_found=build_progress_reporter(logger),
    )


def register(app: typer.Typer) -> None:
    """Register the ``search`` command on ``app``."""

    app.command("search", help="List every executable under a directory or drive.")(search_command)


__all__ = ["register", "run_search", "search_command"]
