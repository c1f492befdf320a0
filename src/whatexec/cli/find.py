# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``whatexec find``: locate executables via PATH with a filesystem fallback."""

from __future__ import annotations

import typer

from ..cancellation import CancellationToken
from ..config import build_engine
from ..errors import ExecutableNotFoundError
from ..resolution.models import ResolutionReport
from ._options import (
    ALL_OPTION,
    CACHE_LIFETIME_OPTION,
    CACHE_OPTION,
    DEPTH_OPTION,
    EMOJI_OPTION,
    INTERACTIVE_OPTION,
    LIMIT_OPTION,
    NAMES_ARGUMENT,
    ROOT_OPTION,
    STRICT_OPTION,
    TIMEOUT_OPTION,
    VERBOSE_OPTION,
    FindCLIOptions,
    normalize_cli_values,
)
from ._services import (
    apply_cache_options,
    build_access_prompt,
    build_progress_reporter,
    emit_report,
    load_cli_config,
)
from .shared import CLIError, CLILogger, build_cli_logger


def find_command(
    names: NAMES_ARGUMENT,
    all_instances: ALL_OPTION = False,
    limit: LIMIT_OPTION = None,
    strict: STRICT_OPTION = False,
    depth: DEPTH_OPTION = None,
    timeout: TIMEOUT_OPTION = None,
    root: ROOT_OPTION = None,
    interactive: INTERACTIVE_OPTION = False,
    verbose: VERBOSE_OPTION = False,
    cache: CACHE_OPTION = True,
    cache_lifetime: CACHE_LIFETIME_OPTION = None,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Locate one or more executables and print their absolute paths."""

    options = FindCLIOptions(
        names=normalize_cli_values(names),
        all_instances=all_instances,
        limit=limit,
        strict=strict,
        depth=depth,
        timeout=timeout,
        roots=tuple(root) if root else None,
        interactive=interactive,
        verbose=verbose,
        use_cache=cache,
        cache_lifetime=cache_lifetime,
        emoji=emoji,
    )
    logger = build_cli_logger(emoji=options.emoji, verbose=options.verbose)
    try:
        report = run_find(options, logger=logger)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    emit_report(report, logger)
    if report.unresolved and options.strict:
        logger.fail(str(ExecutableNotFoundError(report.unresolved)))
    raise typer.Exit(code=0 if report.complete else 1)


def run_find(options: FindCLIOptions, *, logger: CLILogger) -> ResolutionReport:
    """Build an engine from the layered configuration and run the lookup.

    Raises:
        CLIError: If no names were supplied or the configuration is invalid.
    """

    if not options.names:
        raise CLIError("At least one executable name is required", exit_code=2)
    config = apply_cache_options(load_cli_config(depth=options.depth), options)
    engine = build_engine(
        config,
        on_access_denied=build_access_prompt(logger) if options.interactive else None,
    )
    cancel = CancellationToken(timeout=options.timeout)
    on_found = build_progress_reporter(logger)
    search_depth = config.search.search_depth
    if options.all_instances:
        return engine.find_all_instances_many(
            options.names,
            limit=options.limit,
            search_depth=search_depth,
            roots=options.roots,
            cancel=cancel,
            on_found=on_found,
        )
    return engine.resolve(
        options.names,
        limit=options.limit,
        search_depth=search_depth,
        roots=options.roots,
        cancel=cancel,
        on_found=on_found,
    )


def register(app: typer.Typer) -> None:
    """Register the ``find`` command on ``app``."""

    app.command("find", help="Locate executables by name.")(find_command)


__all__ = ["find_command", "register", "run_find"]
