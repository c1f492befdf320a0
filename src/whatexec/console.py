# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich consoles: resolved paths go to stdout, diagnostics to stderr."""

from __future__ import annotations

import sys
from enum import StrEnum
from typing import Final, Literal

from rich.console import Console
from rich.theme import Theme

from .cache.in_memory import memoize

WHATEXEC_THEME: Final[Theme] = Theme(
    {
        "whatexec.path": "bold green",
        "whatexec.query": "bold magenta",
        "whatexec.source.path": "cyan",
        "whatexec.source.filesystem": "yellow",
        "whatexec.issue": "red",
        "whatexec.event": "bold cyan",
        "whatexec.field": "dim",
        "whatexec.value": "bold",
    },
)


class OutputStream(StrEnum):
    """Destination of console output."""

    RESULTS = "results"
    DIAGNOSTICS = "diagnostics"


def detect_tty(stream: OutputStream = OutputStream.RESULTS) -> bool:
    """Return ``True`` when the file behind ``stream`` is a terminal."""

    handle = sys.stderr if stream is OutputStream.DIAGNOSTICS else sys.stdout
    try:
        return handle.isatty()
    except (AttributeError, ValueError):
        return False


class RichConsoleManager:
    """Hand out themed consoles per output stream and presentation flags."""

    def __init__(self) -> None:
        self._cache: dict[tuple[OutputStream, bool, bool, bool], Console] = {}

    def get(self, stream: OutputStream, *, color: bool, emoji: bool) -> Console:
        """Return the console writing to ``stream``.

        Args:
            stream: Results (stdout) or diagnostics (stderr).
            color: ``True`` when ANSI colour output should be enabled.
            emoji: ``True`` when Rich should render emoji glyphs.

        Returns:
            Console: Cached or newly constructed console for the combination.
        """

        tty = detect_tty(stream)
        key = (stream, color, emoji, tty)
        if key not in self._cache:
            color_system: Literal["auto"] | None = "auto" if color and tty else None
            self._cache[key] = Console(
                stderr=stream is OutputStream.DIAGNOSTICS,
                theme=WHATEXEC_THEME,
                color_system=color_system,
                force_terminal=tty,
                no_color=not (color and tty),
                emoji=emoji,
                soft_wrap=True,
                highlight=False,
            )
        return self._cache[key]

    def results(self, *, color: bool) -> Console:
        """Return the stdout console used for resolved paths."""

        return self.get(OutputStream.RESULTS, color=color, emoji=False)

    def diagnostics(self, *, color: bool, emoji: bool) -> Console:
        """Return the stderr console used for messages and progress."""

        return self.get(OutputStream.DIAGNOSTICS, color=color, emoji=emoji)


@memoize(maxsize=1)
def get_console_manager() -> RichConsoleManager:
    """Return the process-wide :class:`RichConsoleManager`."""

    return RichConsoleManager()


__all__ = ["OutputStream", "RichConsoleManager", "WHATEXEC_THEME", "detect_tty", "get_console_manager"]
