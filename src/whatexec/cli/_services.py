# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers shared by the CLI commands: configuration, prompts and rendering."""

from __future__ import annotations

from collections.abc import Callable

import typer

from ..config import WhatExecConfig, load_config
from ..errors import ConfigError
from ..resolution.models import ResolutionReport, ResolvedExecutable, SearchDecision, SearchIssue
from ._options import FindCLIOptions
from .shared import CLIError, CLILogger

SECONDS_PER_MINUTE = 60.0


def load_cli_config(*, depth: int | None = None) -> WhatExecConfig:
    """Load the layered configuration, converting failures to :class:`CLIError`."""

    try:
        config = load_config()
    except ConfigError as exc:
        raise CLIError(str(exc)) from exc
    if depth is not None:
        config.search.search_depth = depth
    return config


def apply_cache_options(config: WhatExecConfig, options: FindCLIOptions) -> WhatExecConfig:
    """Apply ``--no-cache`` and ``--cache-lifetime`` to ``config``."""

    if not options.use_cache:
        config.cache.enabled = False
    if options.cache_lifetime is not None:
        ttl = options.cache_lifetime * SECONDS_PER_MINUTE
        config.cache.directories_ttl = ttl
        config.cache.extensions_ttl = ttl
    return config


def build_access_prompt(logger: CLILogger) -> Callable[[SearchIssue], SearchDecision]:
    """Return a handler asking the user whether to continue after a permission error."""

    def _prompt(issue: SearchIssue) -> SearchDecision:
        logger.warn(f"Permission denied while searching {issue.path}: {issue.message}")
        if typer.confirm("Continue searching for the remaining executables?", default=True):
            return SearchDecision.CONTINUE
        return SearchDecision.ABORT

    return _prompt


def build_progress_reporter(logger: CLILogger) -> Callable[[ResolvedExecutable], None]:
    """Return an ``on_found`` callback reporting each confirmed executable in verbose mode."""

    def _report(executable: ResolvedExecutable) -> None:
        logger.event("found", name=executable.query, source=executable.source, path=executable.path)

    return _report


def emit_issues(report_issues: tuple[SearchIssue, ...], logger: CLILogger) -> None:
    """Surface skipped directories and files in verbose mode."""

    logger.skipped(report_issues)


def emit_report(report: ResolutionReport, logger: CLILogger) -> None:
    """Print resolved paths per name and warn about the names not found."""

    for name, outcome in report.results.items():
        if not outcome.resolved:
            logger.warn(f"Could not locate '{name}'")
            continue
        for executable in outcome.executables:
            logger.executable(executable)
    emit_issues(report.issues, logger)
    emit_interruptions(cancelled=report.cancelled, aborted=report.aborted, logger=logger)


def emit_interruptions(*, cancelled: bool, aborted: bool, logger: CLILogger) -> None:
    """Warn when a search stopped early."""

    if aborted:
        logger.warn("Search aborted; results are incomplete")
    elif cancelled:
        logger.warn("Search timed out; results may be incomplete")


__all__ = [
    "apply_cache_options",
    "build_access_prompt",
    "build_progress_reporter",
    "emit_interruptions",
    "emit_issues",
    "emit_report",
    "load_cli_config",
]
