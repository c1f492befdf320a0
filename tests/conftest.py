# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import os
import stat
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from whatexec.detection.executable import ExecutableFileDetector
from whatexec.platform import HostPlatform

ELF_HEADER = b"\x7fELF\x02\x01\x01\x00" + b"\x00" * 56
MZ_HEADER = b"MZ\x90\x00\x03\x00\x00\x00" + b"\x00" * 56
MACHO_64_HEADER = b"\xfe\xed\xfa\xcf" + b"\x00" * 28
TEXT_CONTENT = b"plain text, not a program\n"

WriteBinary = Callable[..., Path]


def write_binary(path: Path, content: bytes = ELF_HEADER, *, executable: bool = True) -> Path:
    """Write ``content`` to ``path`` (creating parents) and set its mode."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    mode = stat.S_IRUSR | stat.S_IWUSR | stat.S_IRGRP | stat.S_IROTH
    if executable:
        mode |= stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH
    path.chmod(mode)
    return path


class FakeDriveDetector:
    """Drive detector returning a fixed list of roots."""

    def __init__(self, roots: Sequence[Path]) -> None:
        self.roots = list(roots)
        self.calls = 0

    def drives(self) -> list[Path]:
        self.calls += 1
        return list(self.roots)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Return a scratch directory on a filesystem that honours execute bits."""

    marker = write_binary(tmp_path / ".exec-check")
    if not os.access(marker, os.X_OK):
        pytest.skip("temporary directory is mounted noexec")
    marker.unlink()
    return tmp_path


@pytest.fixture
def linux_detector() -> ExecutableFileDetector:
    """Return a detector applying the Linux (ELF) rules."""

    return ExecutableFileDetector(HostPlatform.LINUX)


@pytest.fixture
def make_binary() -> WriteBinary:
    """Return the :func:`write_binary` helper."""

    return write_binary


@pytest.fixture
def fake_drives() -> Callable[[Sequence[Path]], FakeDriveDetector]:
    """Return a factory building drive detectors over fixed roots."""

    return FakeDriveDetector
