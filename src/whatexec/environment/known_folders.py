# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Well-known install and user folders consulted when ranking candidates."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from ..platform import HostPlatform


@dataclass(frozen=True, slots=True)
class KnownFolders:
    """Special folders of the host, grouped by ranking tier.

    Attributes:
        programs: The canonical user "Programs" folders.
        windows: The Windows directory (Windows only).
        application_data: Per-user and machine-wide application-data folders.
        system: The OS "System" folders.
        admin_tools: The administrative-tools folders (Windows only).
        desktop: The user's Desktop folders.
    """

    programs: tuple[Path, ...] = ()
    windows: tuple[Path, ...] = ()
    application_data: tuple[Path, ...] = ()
    system: tuple[Path, ...] = ()
    admin_tools: tuple[Path, ...] = ()
    desktop: tuple[Path, ...] = ()

    @classmethod
    def for_host(
        cls,
        platform: HostPlatform | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> KnownFolders:
        """Return the special folders for ``platform`` derived from ``environ``.

        Args:
            platform: Host platform, detected when omitted.
            environ: Environment mapping, defaults to :data:`os.environ`.

        Returns:
            KnownFolders: Folder sets with unset locations left empty.
        """

        host = platform or HostPlatform.detect()
        env = environ if environ is not None else os.environ
        if host.is_windows:
            return _windows_folders(env)
        if host in {HostPlatform.MACOS, HostPlatform.IOS}:
            return _macos_folders(env)
        return _posix_folders(env)


def _paths(*values: str | Path | None) -> tuple[Path, ...]:
    """Return non-empty ``values`` as paths, preserving order."""

    return tuple(Path(value) for value in values if value)


def _joined(base: str | None, *parts: str) -> Path | None:
    return Path(base, *parts) if base else None


def _home(env: Mapping[str, str]) -> str:
    return env.get("HOME") or str(Path.home())


def _windows_folders(env: Mapping[str, str]) -> KnownFolders:
    folded = {key.upper(): value for key, value in env.items()}
    app_data = folded.get("APPDATA")
    system_root = folded.get("SYSTEMROOT") or folded.get("WINDIR")
    profile = folded.get("USERPROFILE")
    start_menu = _joined(app_data, "Microsoft", "Windows", "Start Menu", "Programs")
    return KnownFolders(
        programs=_paths(start_menu),
        windows=_paths(system_root),
        application_data=_paths(app_data, folded.get("LOCALAPPDATA"), folded.get("PROGRAMDATA")),
        system=_paths(_joined(system_root, "System32")),
        admin_tools=_paths(_joined(str(start_menu) if start_menu else None, "Administrative Tools")),
        desktop=_paths(_joined(profile, "Desktop")),
    )


def _macos_folders(env: Mapping[str, str]) -> KnownFolders:
    home = _home(env)
    return KnownFolders(
        programs=_paths("/Applications", Path(home, "Applications")),
        application_data=_paths(Path(home, "Library", "Application Support"), "/Library/Application Support"),
        system=_paths("/System", "/usr/bin", "/usr/sbin", "/bin", "/sbin"),
        desktop=_paths(Path(home, "Desktop")),
    )


def _posix_folders(env: Mapping[str, str]) -> KnownFolders:
    home = _home(env)
    config_home = env.get("XDG_CONFIG_HOME") or str(Path(home, ".config"))
    data_home = env.get("XDG_DATA_HOME") or str(Path(home, ".local", "share"))
    desktop = env.get("XDG_DESKTOP_DIR") or str(Path(home, "Desktop"))
    return KnownFolders(
        application_data=_paths(config_home, data_home, "/usr/share"),
        system=_paths("/usr", "/bin", "/sbin", "/lib"),
        desktop=_paths(desktop),
    )


def is_under(path: Path, folders: Iterable[Path], *, case_insensitive: bool = False) -> bool:
    """Return ``True`` when ``path`` lies inside any of ``folders``.

    Args:
        path: Candidate file or directory.
        folders: Folders to test as ancestors of ``path``.
        case_insensitive: Compare path components without regard to case.

    Returns:
        bool: ``True`` when a folder is an ancestor of (or equal to) ``path``.
    """

    parts = _comparable_parts(path, case_insensitive)
    for folder in folders:
        folder_parts = _comparable_parts(folder, case_insensitive)
        if folder_parts and parts[: len(folder_parts)] == folder_parts:
            return True
    return False


def _comparable_parts(path: Path, case_insensitive: bool) -> tuple[str, ...]:
    raw = path.as_posix().replace("\\", "/")
    parts = tuple(part for part in raw.split("/") if part)
    if raw.startswith("/"):
        parts = ("/", *parts)
    if case_insensitive:
        return tuple(part.casefold() for part in parts)
    return parts


__all__ = ["KnownFolders", "is_under"]
