# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Decide whether a file is a native executable for the host platform."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from ..cancellation import CancellationToken
from ..errors import PlatformNotSupportedError
from ..platform import HostPlatform, is_64bit_process
from .magic import (
    ELF_MAGIC,
    MACHO_32_MAGIC,
    MACHO_64_MAGIC,
    MACHO_FAT_MAGIC,
    MZ_MAGIC,
    PE_MAGIC,
    SHEBANG_MAGIC,
    byte_swapped,
    matches_any,
)

LOGGER = logging.getLogger(__name__)

WINDOWS_NATIVE_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {
        ".exe",
        ".msi",
        ".appx",
        ".com",
        ".sys",
        ".drv",
        ".mui",
        ".ocx",
        ".ax",
        ".msstyles",
        ".scr",
        ".cpl",
        ".acm",
        ".efi",
        ".dll",
        ".tsp",
    },
)

_UNSUPPORTED_PLATFORMS: Final[frozenset[HostPlatform]] = frozenset({HostPlatform.BROWSER, HostPlatform.TVOS})


@runtime_checkable
class ExecutableDetector(Protocol):
    """Answer whether a file is executable on the current host."""

    def is_executable(self, path: Path, cancel: CancellationToken | None = None) -> bool:
        """Return ``True`` when ``path`` is a native executable."""

        raise NotImplementedError


class ExecutableFileDetector(ExecutableDetector):
    """Validate executables by permission bits plus binary magic numbers.

    No per-file result is cached: every call re-reads the file metadata and
    header, so revoking permissions or truncating a file is observed on the
    next call.
    """

    def __init__(
        self,
        platform: HostPlatform | None = None,
        *,
        is_64bit: bool | None = None,
        accept_scripts: bool = False,
    ) -> None:
        """Create a detector for ``platform``.

        Args:
            platform: Host platform, detected when omitted.
            is_64bit: Process bitness selecting the Mach-O magic on macOS.
            accept_scripts: Also accept ``#!`` scripts on POSIX hosts.

        Raises:
            PlatformNotSupportedError: On browser and tvOS hosts.
        """

        self.platform = platform or HostPlatform.detect()
        if self.platform in _UNSUPPORTED_PLATFORMS:
            raise PlatformNotSupportedError(self.platform.value)
        self.is_64bit = is_64bit_process() if is_64bit is None else is_64bit
        self.accept_scripts = accept_scripts

    def is_executable(self, path: Path, cancel: CancellationToken | None = None) -> bool:
        """Return ``True`` when ``path`` is executable on the host platform.

        Args:
            path: File to inspect.
            cancel: Optional token; a cancelled token short-circuits to ``False``.

        Returns:
            bool: ``True`` when permission and format checks pass.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
            OSError: If the header cannot be read (except Windows ``.exe`` files,
                which fall back to the extension and permission checks).
        """

        if not path.exists():
            raise FileNotFoundError(f"No such file: '{path}'")
        if cancel is not None and cancel.cancelled:
            return False
        if path.is_dir():
            return False
        match self.platform:
            case HostPlatform.WINDOWS:
                return self._is_windows_executable(path)
            case HostPlatform.MACOS:
                return has_execute_permission(path, self.platform) and self._matches_posix(path, self._macho_magics())
            case HostPlatform.IOS:
                return matches_any(path, (MACHO_64_MAGIC, byte_swapped(MACHO_64_MAGIC)))
            case HostPlatform.LINUX | HostPlatform.FREEBSD:
                return has_execute_permission(path, self.platform) and self._matches_posix(path, (ELF_MAGIC,))
            case _:
                return has_execute_permission(path, self.platform)

    async def is_executable_async(self, path: Path, cancel: CancellationToken | None = None) -> bool:
        """Asynchronous variant of :meth:`is_executable` run in a worker thread."""

        return await asyncio.to_thread(self.is_executable, path, cancel)

    def _is_windows_executable(self, path: Path) -> bool:
        extension = path.suffix.lower()
        if extension not in WINDOWS_NATIVE_EXTENSIONS or not has_execute_permission(path, self.platform):
            return False
        if extension != ".exe":
            return True
        try:
            return matches_any(path, (PE_MAGIC, MZ_MAGIC))
        except OSError as exc:
            LOGGER.debug("Magic number read failed for %s, trusting extension: %s", path, exc)
            return True

    def _macho_magics(self) -> tuple[bytes, ...]:
        magic = MACHO_64_MAGIC if self.is_64bit else MACHO_32_MAGIC
        return (magic, byte_swapped(magic), MACHO_FAT_MAGIC)

    def _matches_posix(self, path: Path, magics: tuple[bytes, ...]) -> bool:
        if self.accept_scripts:
            magics = (*magics, SHEBANG_MAGIC)
        return matches_any(path, magics)


def has_execute_permission(path: Path, platform: HostPlatform) -> bool:
    """Return ``True`` when the current user may execute ``path``.

    Windows has no execute bit; any regular file is considered runnable there.
    """

    if platform.is_windows:
        return path.is_file()
    return path.is_file() and os.access(path, os.X_OK)


__all__ = [
    "ExecutableDetector",
    "ExecutableFileDetector",
    "WINDOWS_NATIVE_EXTENSIONS",
    "has_execute_permission",
]
