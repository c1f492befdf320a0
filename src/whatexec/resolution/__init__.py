# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""PATH resolution, filesystem fallback and the batch engine."""

from __future__ import annotations

from .engine import AccessDeniedHandler, ResolutionEngine
from .filesystem import DEFAULT_PRUNED_DIRECTORIES, FilesystemSearcher
from .models import (
    FilesystemSearchResult,
    IssueKind,
    NameResolution,
    ResolutionReport,
    ResolutionSource,
    ResolutionStatus,
    ResolvedExecutable,
    ScanResult,
    SearchDecision,
    SearchIssue,
    SearchMode,
)
from .path_resolver import PathResolver

__all__ = [
    "AccessDeniedHandler",
    "DEFAULT_PRUNED_DIRECTORIES",
    "FilesystemSearchResult",
    "FilesystemSearcher",
    "IssueKind",
    "NameResolution",
    "PathResolver",
    "ResolutionEngine",
    "ResolutionReport",
    "ResolutionSource",
    "ResolutionStatus",
    "ResolvedExecutable",
    "ScanResult",
    "SearchDecision",
    "SearchIssue",
    "SearchMode",
]
