# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Host platform identification used to pick PATH and binary-format rules."""

from __future__ import annotations

import sys
from enum import StrEnum
from typing import Final


class HostPlatform(StrEnum):
    """Enumerate the operating-system families with distinct resolution rules."""

    WINDOWS = "windows"
    MACOS = "macos"
    IOS = "ios"
    LINUX = "linux"
    FREEBSD = "freebsd"
    BROWSER = "browser"
    TVOS = "tvos"
    OTHER = "other"

    @classmethod
    def detect(cls, platform_id: str | None = None) -> HostPlatform:
        """Return the platform family for ``platform_id`` (defaults to ``sys.platform``).

        Args:
            platform_id: Raw ``sys.platform`` style identifier to classify.

        Returns:
            HostPlatform: Platform family governing detection and PATH parsing.
        """

        raw = (platform_id if platform_id is not None else sys.platform).lower()
        for prefix, member in _PLATFORM_PREFIXES:
            if raw.startswith(prefix):
                return member
        return cls.OTHER

    @property
    def is_windows(self) -> bool:
        """Return ``True`` for Windows hosts."""

        return self is HostPlatform.WINDOWS

    @property
    def path_separator(self) -> str:
        """Return the separator used between PATH entries."""

        return ";" if self is HostPlatform.WINDOWS else ":"

    @property
    def case_insensitive_names(self) -> bool:
        """Return ``True`` when file names compare case-insensitively."""

        return self is HostPlatform.WINDOWS


_PLATFORM_PREFIXES: Final[tuple[tuple[str, HostPlatform], ...]] = (
    ("win32", HostPlatform.WINDOWS),
    ("cygwin", HostPlatform.WINDOWS),
    ("darwin", HostPlatform.MACOS),
    ("ios", HostPlatform.IOS),
    ("tvos", HostPlatform.TVOS),
    ("watchos", HostPlatform.TVOS),
    ("linux", HostPlatform.LINUX),
    ("android", HostPlatform.LINUX),
    ("freebsd", HostPlatform.FREEBSD),
    ("emscripten", HostPlatform.BROWSER),
    ("wasi", HostPlatform.BROWSER),
)


def is_64bit_process() -> bool:
    """Return ``True`` when the running interpreter is a 64-bit process."""

    return sys.maxsize > 2**32


__all__ = ["HostPlatform", "is_64bit_process"]
