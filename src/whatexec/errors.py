# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the resolution engine and the CLI."""

from __future__ import annotations

from collections.abc import Iterable


class WhatExecError(RuntimeError):
    """Base class for errors raised by :mod:`whatexec`."""


class ConfigError(WhatExecError):
    """Raised when configuration input is invalid."""


class PlatformNotSupportedError(WhatExecError):
    """Raised when the host cannot meaningfully answer "is this executable"."""

    def __init__(self, platform_name: str) -> None:
        """Initialise the error for the offending host platform.

        Args:
            platform_name: Identifier of the unsupported host platform.
        """

        super().__init__(f"Executable detection is not supported on '{platform_name}'")
        self.platform_name = platform_name


class ExecutableNotFoundError(WhatExecError):
    """Raised by "must resolve all" wrappers naming every unresolved input."""

    def __init__(self, names: Iterable[str]) -> None:
        """Initialise the error with the names that could not be resolved.

        Args:
            names: Executable names that were not found anywhere searched.
        """

        self.names: tuple[str, ...] = tuple(names)
        joined = ", ".join(repr(name) for name in self.names)
        super().__init__(f"Could not locate executable(s): {joined}")


__all__ = [
    "ConfigError",
    "ExecutableNotFoundError",
    "PlatformNotSupportedError",
    "WhatExecError",
]
