# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parse the PATH and PATHEXT environment variables into normalised entries."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from ..platform import HostPlatform

LOGGER = logging.getLogger(__name__)

PATH_VARIABLE: Final[str] = "PATH"
PATHEXT_VARIABLE: Final[str] = "PATHEXT"
DEFAULT_WINDOWS_EXTENSIONS: Final[tuple[str, ...]] = (".COM", ".EXE", ".BAT", ".CMD")

_POSIX_VAR_PATTERN = re.compile(r"\$(\w+)|\$\{([^}]+)\}")
_WINDOWS_VAR_PATTERN = re.compile(r"%([^%]+)%")


@runtime_checkable
class PathEnvironment(Protocol):
    """Source of PATH directories and executable extensions."""

    def directories(self) -> list[str] | None:
        """Return PATH directories in order, ``None`` when PATH is unset."""

        raise NotImplementedError

    def extensions(self) -> list[str]:
        """Return the executable suffixes tried for extension-less names."""

        raise NotImplementedError


class PathEnvironmentReader(PathEnvironment):
    """Read PATH/PATHEXT from an environment mapping on every call.

    The reader holds no state of its own; wrap it in
    :class:`whatexec.cache.path_environment.CachedPathEnvironment` to avoid
    re-reading the environment for every resolution.
    """

    def __init__(
        self,
        *,
        platform: HostPlatform | None = None,
        environ: Mapping[str, str] | None = None,
        home: str | None = None,
    ) -> None:
        """Create a reader bound to a host platform and environment.

        Args:
            platform: Platform whose separator and extension rules apply.
            environ: Environment mapping, defaults to :data:`os.environ`.
            home: User profile directory substituted for ``~`` and ``$HOME``.
        """

        self.platform = platform or HostPlatform.detect()
        self._environ = environ if environ is not None else os.environ
        self._home = home

    @property
    def separator(self) -> str:
        """Return the character separating PATH entries on this platform."""

        return self.platform.path_separator

    def directories(self) -> list[str] | None:
        """Return normalised PATH directories, or ``None`` when PATH is unset.

        Returns:
            list[str] | None: Ordered directory entries with blanks removed.
        """

        raw = self._lookup(PATH_VARIABLE)
        if raw is None:
            LOGGER.debug("PATH variable is not set")
            return None
        entries: list[str] = []
        for entry in raw.split(self.separator):
            if not entry.strip():
                continue
            normalised = self._normalise_directory(entry)
            if normalised:
                entries.append(normalised)
        return entries

    def extensions(self) -> list[str]:
        """Return executable suffixes for the host platform.

        Returns:
            list[str]: ``[""]`` on non-Windows hosts, otherwise the de-duplicated
            PATHEXT entries each starting with ``.``.
        """

        if not self.platform.is_windows:
            return [""]
        raw = self._lookup(PATHEXT_VARIABLE)
        if raw is None:
            return list(DEFAULT_WINDOWS_EXTENSIONS)
        seen: set[str] = set()
        extensions: list[str] = []
        for entry in raw.split(self.separator):
            token = entry.strip().strip('"')
            if not token:
                continue
            if not token.startswith("."):
                token = f".{token}"
            folded = token.casefold()
            if folded in seen:
                continue
            seen.add(folded)
            extensions.append(token)
        return extensions

    def _lookup(self, name: str) -> str | None:
        """Return an environment value, matching names case-insensitively on Windows."""

        value = self._environ.get(name)
        if value is not None or not self.platform.is_windows:
            return value
        folded = name.casefold()
        for key, candidate in self._environ.items():
            if key.casefold() == folded:
                return candidate
        return None

    def _normalise_directory(self, entry: str) -> str:
        """Return ``entry`` trimmed, unquoted and with home/env tokens expanded."""

        value = entry.strip()
        value = self._expand_variables(value)
        value = value.strip('"')
        home = self._home_directory()
        if value.startswith("~"):
            value = f"{home}{value[1:]}"
        return _strip_trailing_separators(value)

    def _expand_variables(self, value: str) -> str:
        """Expand ``$VAR``/``${VAR}`` tokens and, on Windows, ``%VAR%`` tokens."""

        def _replace(match: re.Match[str]) -> str:
            key = next((group for group in match.groups() if group), None)
            if key is None:
                return match.group(0)
            if _is_home_variable(key, self.platform):
                return self._home_directory()
            replacement = self._lookup(key)
            return match.group(0) if replacement is None else replacement

        expanded = _POSIX_VAR_PATTERN.sub(_replace, value)
        if self.platform.is_windows:
            expanded = _WINDOWS_VAR_PATTERN.sub(_replace, expanded)
        return expanded

    def _home_directory(self) -> str:
        if self._home is not None:
            return self._home
        profile_var = "USERPROFILE" if self.platform.is_windows else "HOME"
        return self._lookup(profile_var) or str(Path.home())


def _is_home_variable(key: str, platform: HostPlatform) -> bool:
    """Return ``True`` for ``HOME``; variable names only ignore case on Windows."""

    return (key.upper() if platform.is_windows else key) == "HOME"


def _strip_trailing_separators(value: str) -> str:
    """Remove trailing ``/`` and ``\\`` while keeping a bare root intact."""

    stripped = value.rstrip("/\\")
    if not stripped and value:
        return value[0]
    if stripped.endswith(":") and len(stripped) == 2 and len(value) > 2:
        return value[:3]
    return stripped


__all__ = [
    "DEFAULT_WINDOWS_EXTENSIONS",
    "PATHEXT_VARIABLE",
    "PATH_VARIABLE",
    "PathEnvironment",
    "PathEnvironmentReader",
]
