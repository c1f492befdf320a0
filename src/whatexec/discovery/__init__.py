# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem discovery helpers: drives, tolerant walks and ranking."""

from __future__ import annotations

from .drives import DEFAULT_EXCLUDED_MOUNT_PREFIXES, DriveDetector, PsutilDriveDetector
from .ranking import DEFAULT_SCORE, PROGRAMS_SCORE, CandidateRanker
from .walker import NameMatcher, iter_files, search_patterns

__all__ = [
    "CandidateRanker",
    "DEFAULT_EXCLUDED_MOUNT_PREFIXES",
    "DEFAULT_SCORE",
    "DriveDetector",
    "NameMatcher",
    "PROGRAMS_SCORE",
    "PsutilDriveDetector",
    "iter_files",
    "search_patterns",
]
