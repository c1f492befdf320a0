# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (output routing, errors)."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Final

from rich.console import Console
from rich.text import Text

from ..console import OutputStream, detect_tty, get_console_manager
from ..logging import fail as core_fail
from ..logging import info as core_info
from ..logging import ok as core_ok
from ..logging import section as core_section
from ..logging import warn as core_warn
from ..resolution.models import ResolvedExecutable, SearchIssue

FIELD_STYLES: Final[dict[str, str]] = {
    "name": "whatexec.query",
    "path": "whatexec.path",
    "kind": "whatexec.issue",
    "reason": "whatexec.issue",
}


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Route CLI output: resolved paths to stdout, everything else to stderr.

    Attributes:
        results: Console receiving one absolute path per line.
        diagnostics: Console receiving status messages and verbose events.
        use_emoji: Prefix status messages with emoji.
        use_color: Colourise status messages.
        verbose: Emit progress events and skipped entries.
    """

    results: Console
    diagnostics: Console
    use_emoji: bool
    use_color: bool = False
    verbose: bool = False

    def fail(self, message: str) -> None:
        core_fail(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def warn(self, message: str) -> None:
        core_warn(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def ok(self, message: str) -> None:
        core_ok(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def info(self, message: str) -> None:
        core_info(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def executable(self, executable: ResolvedExecutable) -> None:
        """Print the absolute path of ``executable`` on stdout."""

        self.results.print(Text(str(executable.path), style="whatexec.path"))

    def event(self, event: str, **fields: object) -> None:
        """Print ``[event] key=value ...`` to stderr when verbose output is on.

        ``name``, ``path``, ``kind`` and ``reason`` values get their own
        styles; values containing whitespace are quoted.
        """

        if not self.verbose:
            return
        text = Text(f"[{event}]", style="whatexec.event")
        for key, value in fields.items():
            rendered = _render_value(value)
            text.append(" ")
            text.append(key, style="whatexec.field")
            text.append("=", style="whatexec.field")
            text.append(rendered, style=_value_style(key, value))
        self.diagnostics.print(text)

    def skipped(self, issues: Iterable[SearchIssue]) -> None:
        """List entries skipped during a walk under a header, in verbose mode."""

        pending = list(issues)
        if not self.verbose or not pending:
            return
        noun = "entry" if len(pending) == 1 else "entries"
        core_section(f"Skipped {len(pending)} unreadable {noun}", use_color=self.use_color)
        for issue in pending:
            self.event("skipped", kind=issue.kind.value, path=issue.path, reason=issue.message)


def _render_value(value: object) -> str:
    rendered = str(value.value) if isinstance(value, Enum) else str(value)
    if any(char.isspace() for char in rendered):
        return f'"{rendered}"'
    return rendered


def _value_style(key: str, value: object) -> str:
    if key == "source":
        return f"whatexec.source.{_render_value(value)}"
    return FIELD_STYLES.get(key, "whatexec.value")


def build_cli_logger(*, emoji: bool, verbose: bool = False, color: bool | None = None) -> CLILogger:
    """Return a ``CLILogger`` bound to the shared results and diagnostics consoles.

    Args:
        emoji: Whether status messages may include emoji glyphs.
        verbose: Whether progress events and skipped entries are shown.
        color: Colour preference, detected from stderr when ``None``.

    Returns:
        CLILogger: Logger writing paths to stdout and diagnostics to stderr.
    """

    use_color = detect_tty(OutputStream.DIAGNOSTICS) if color is None else color
    manager = get_console_manager()
    return CLILogger(
        results=manager.results(color=use_color),
        diagnostics=manager.diagnostics(color=use_color, emoji=emoji),
        use_emoji=emoji,
        use_color=use_color,
        verbose=verbose,
    )


__all__ = ["CLIError", "CLILogger", "build_cli_logger"]
