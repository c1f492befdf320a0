# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Order matched files by how trustworthy their containing directory is."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Final

from ..environment.known_folders import KnownFolders, is_under
from ..platform import HostPlatform

PROGRAMS_SCORE: Final[int] = 0
WINDOWS_SCORE: Final[int] = 1
APPLICATION_DATA_SCORE: Final[int] = 2
ADMIN_TOOLS_SCORE: Final[int] = 3
DESKTOP_SCORE: Final[int] = 4
DEFAULT_SCORE: Final[int] = 10


class CandidateRanker:
    """Assign priority scores (lower is preferred) and stable-sort by them."""

    def __init__(self, folders: KnownFolders | None = None, *, platform: HostPlatform | None = None) -> None:
        """Create a ranker for the host's special folders.

        Args:
            folders: Special folders to rank against, derived from the host when omitted.
            platform: Host platform controlling the Windows-only rules.
        """

        self.platform = platform or HostPlatform.detect()
        self.folders = folders if folders is not None else KnownFolders.for_host(self.platform)

    def score(self, path: Path) -> int:
        """Return the priority score of ``path``; the first matching rule wins.

        Args:
            path: Matched file whose directory decides the score.

        Returns:
            int: ``0`` for Programs up to ``10`` for unknown locations.
        """

        directory = path.parent
        windows = self.platform.is_windows
        folders = self.folders

        def under(candidates: tuple[Path, ...]) -> bool:
            return is_under(directory, candidates, case_insensitive=windows)

        if under(folders.programs):
            return PROGRAMS_SCORE
        if windows and under(folders.windows):
            return WINDOWS_SCORE
        if under(folders.application_data) or (not windows and under(folders.system)):
            return APPLICATION_DATA_SCORE
        if windows and under(folders.admin_tools):
            return ADMIN_TOOLS_SCORE
        if under(folders.desktop):
            return DESKTOP_SCORE
        return DEFAULT_SCORE

    @property
    def best_score(self) -> int:
        """Return the lowest score any file can receive on this host.

        Tiers whose folder set is empty, or which do not apply to the host
        platform, cannot be reached and are skipped.
        """

        windows = self.platform.is_windows
        folders = self.folders
        tiers = (
            (PROGRAMS_SCORE, bool(folders.programs)),
            (WINDOWS_SCORE, windows and bool(folders.windows)),
            (APPLICATION_DATA_SCORE, bool(folders.application_data) or (not windows and bool(folders.system))),
            (ADMIN_TOOLS_SCORE, windows and bool(folders.admin_tools)),
            (DESKTOP_SCORE, bool(folders.desktop)),
        )
        return next((score for score, reachable in tiers if reachable), DEFAULT_SCORE)

    def rank(self, files: Iterable[Path]) -> list[Path]:
        """Return ``files`` stable-sorted ascending by priority score."""

        return sorted(files, key=self.score)


__all__ = [
    "ADMIN_TOOLS_SCORE",
    "APPLICATION_DATA_SCORE",
    "CandidateRanker",
    "DEFAULT_SCORE",
    "DESKTOP_SCORE",
    "PROGRAMS_SCORE",
    "WINDOWS_SCORE",
]
