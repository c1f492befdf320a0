# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Logical drive enumeration for the filesystem fallback search."""

from __future__ import annotations

import ctypes
import logging
from collections.abc import Iterable
from pathlib import Path, PurePath
from typing import Final, Protocol, runtime_checkable

import psutil

from ..platform import HostPlatform

LOGGER = logging.getLogger(__name__)

DEFAULT_EXCLUDED_MOUNT_PREFIXES: Final[tuple[str, ...]] = ("/sys", "/run", "/proc", "/tmp")

NETWORK_FILESYSTEMS: Final[frozenset[str]] = frozenset(
    {
        "nfs",
        "nfs4",
        "cifs",
        "smbfs",
        "smb3",
        "afpfs",
        "sshfs",
        "fuse.sshfs",
        "9p",
        "davfs",
        "ncpfs",
        "webdav",
    },
)
RAM_FILESYSTEMS: Final[frozenset[str]] = frozenset({"tmpfs", "ramfs", "devtmpfs"})

_DRIVE_REMOTE: Final[int] = 4
_DRIVE_RAMDISK: Final[int] = 6


@runtime_checkable
class DriveDetector(Protocol):
    """Enumerate the root directories of searchable logical drives."""

    def drives(self) -> list[Path]:
        """Return drive roots eligible for a filesystem search."""

        raise NotImplementedError


class PsutilDriveDetector(DriveDetector):
    """Discover fixed and removable drives through :mod:`psutil`.

    Network shares, RAM disks, mounts that report no capacity, malformed
    single-character names and well-known pseudo-filesystems are skipped.
    """

    def __init__(
        self,
        platform: HostPlatform | None = None,
        *,
        excluded_prefixes: Iterable[str] = DEFAULT_EXCLUDED_MOUNT_PREFIXES,
    ) -> None:
        self.platform = platform or HostPlatform.detect()
        self.excluded_prefixes = tuple(PurePath(prefix) for prefix in excluded_prefixes)

    def drives(self) -> list[Path]:
        """Return the mount points of ready, local drives in enumeration order."""

        roots: list[Path] = []
        for partition in psutil.disk_partitions(all=False):
            mountpoint = partition.mountpoint
            if not self._is_eligible(mountpoint, partition.fstype, partition.opts):
                continue
            root = Path(mountpoint)
            if root not in roots:
                roots.append(root)
        return roots

    def _is_eligible(self, mountpoint: str, fstype: str, opts: str) -> bool:
        if is_malformed_drive_name(mountpoint):
            LOGGER.debug("Skipping malformed drive name %r", mountpoint)
            return False
        if is_excluded_mount(mountpoint, self.excluded_prefixes):
            LOGGER.debug("Skipping pseudo-filesystem %s", mountpoint)
            return False
        if self._is_network_or_ram(mountpoint, fstype, opts):
            LOGGER.debug("Skipping network or RAM drive %s (%s)", mountpoint, fstype)
            return False
        return has_capacity(mountpoint)

    def _is_network_or_ram(self, mountpoint: str, fstype: str, opts: str) -> bool:
        if self.platform.is_windows:
            return _windows_drive_type(mountpoint) in {_DRIVE_REMOTE, _DRIVE_RAMDISK}
        option_set = {option.strip() for option in opts.split(",")}
        kind = fstype.lower()
        return kind in NETWORK_FILESYSTEMS or kind in RAM_FILESYSTEMS or "remote" in option_set


def is_malformed_drive_name(mountpoint: str) -> bool:
    """Return ``True`` for bare single-character names such as ``"C"``."""

    return len(mountpoint) == 1 and mountpoint.isalnum()


def is_excluded_mount(mountpoint: str, prefixes: Iterable[PurePath]) -> bool:
    """Return ``True`` when ``mountpoint`` equals or lies beneath an excluded prefix."""

    path = PurePath(mountpoint)
    return any(path == prefix or prefix in path.parents for prefix in prefixes)


def has_capacity(mountpoint: str) -> bool:
    """Return ``True`` when the drive is ready and reports non-zero total and free space."""

    try:
        usage = psutil.disk_usage(mountpoint)
    except OSError as exc:
        LOGGER.debug("Drive %s is not ready: %s", mountpoint, exc)
        return False
    return usage.total > 0 and usage.free > 0


def _windows_drive_type(mountpoint: str) -> int:
    kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)  # type: ignore[attr-defined]
    return int(kernel32.GetDriveTypeW(ctypes.c_wchar_p(mountpoint)))


__all__ = [
    "DEFAULT_EXCLUDED_MOUNT_PREFIXES",
    "DriveDetector",
    "NETWORK_FILESYSTEMS",
    "PsutilDriveDetector",
    "RAM_FILESYSTEMS",
    "has_capacity",
    "is_excluded_mount",
    "is_malformed_drive_name",
]
