# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Value objects produced by a single resolution call."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path


class SearchMode(StrEnum):
    """Select between the best single match and every instance."""

    FIRST = "first"
    ALL = "all"


class ResolutionSource(StrEnum):
    """Where a match was found."""

    PATH = "path"
    FILESYSTEM = "filesystem"


class ResolutionStatus(StrEnum):
    """Final per-name outcome of a batch."""

    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


class IssueKind(StrEnum):
    """Classify per-entry failures recovered during a walk."""

    PERMISSION_DENIED = "permission-denied"
    IO_ERROR = "io-error"


class SearchDecision(StrEnum):
    """Answer given by an interactive caller after a permission problem."""

    CONTINUE = "continue"
    ABORT = "abort"


@dataclass(frozen=True, slots=True)
class Candidate:
    """An unvalidated filesystem match for a requested name."""

    path: Path
    root_index: int = 0
    order: int = 0

    @property
    def name(self) -> str:
        """Return the file name of the candidate."""

        return self.path.name

    @property
    def directory(self) -> Path:
        """Return the containing directory."""

        return self.path.parent

    @property
    def exists(self) -> bool:
        """Return ``True`` when the candidate is still present on disk."""

        return self.path.exists()


@dataclass(frozen=True, slots=True)
class ResolvedExecutable:
    """A query paired with an absolute path that passed validation."""

    query: str
    path: Path
    source: ResolutionSource
    priority: int = 0

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True, slots=True)
class SearchIssue:
    """A directory or file skipped because it could not be read."""

    path: Path
    kind: IssueKind
    message: str
    names: tuple[str, ...] = ()

    @classmethod
    def from_error(cls, path: Path, error: OSError, names: tuple[str, ...] = ()) -> SearchIssue:
        """Return an issue classifying ``error`` raised for ``path``."""

        kind = IssueKind.PERMISSION_DENIED if isinstance(error, PermissionError) else IssueKind.IO_ERROR
        return cls(path=path, kind=kind, message=error.strerror or str(error), names=names)


FoundCallback = Callable[[ResolvedExecutable], None]
IssueCallback = Callable[[SearchIssue], SearchDecision]


@dataclass(frozen=True, slots=True)
class NameResolution:
    """Per-name outcome of a batch resolution."""

    name: str
    status: ResolutionStatus
    executables: tuple[ResolvedExecutable, ...] = ()
    source: ResolutionSource | None = None

    @property
    def resolved(self) -> bool:
        """Return ``True`` when at least one executable was found."""

        return self.status is ResolutionStatus.RESOLVED

    @property
    def best(self) -> ResolvedExecutable | None:
        """Return the top-ranked executable, if any."""

        return self.executables[0] if self.executables else None


@dataclass(frozen=True, slots=True)
class FilesystemSearchResult:
    """Outcome of a filesystem walk over one or more roots."""

    matches: Mapping[str, tuple[ResolvedExecutable, ...]]
    issues: tuple[SearchIssue, ...] = ()
    cancelled: bool = False
    aborted: bool = False


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Ranked inventory of every executable found beneath the scanned roots."""

    executables: tuple[ResolvedExecutable, ...] = ()
    issues: tuple[SearchIssue, ...] = ()
    cancelled: bool = False
    aborted: bool = False


@dataclass(frozen=True, slots=True)
class ResolutionReport:
    """Batch result mapping every requested name to its outcome.

    Attributes:
        results: Outcome per requested name, in request order.
        issues: Entries skipped during filesystem fallback.
        cancelled: ``True`` when the caller's token fired before completion.
        aborted: ``True`` when an interactive caller chose to abort.
    """

    results: Mapping[str, NameResolution] = field(default_factory=dict)
    issues: tuple[SearchIssue, ...] = ()
    cancelled: bool = False
    aborted: bool = False

    @property
    def resolved(self) -> dict[str, tuple[ResolvedExecutable, ...]]:
        """Return resolved names mapped to their ranked executables."""

        return {name: outcome.executables for name, outcome in self.results.items() if outcome.resolved}

    @property
    def unresolved(self) -> tuple[str, ...]:
        """Return names that were not found anywhere searched."""

        return tuple(name for name, outcome in self.results.items() if not outcome.resolved)

    @property
    def complete(self) -> bool:
        """Return ``True`` when every requested name resolved."""

        return not self.unresolved

    def first(self) -> dict[str, ResolvedExecutable]:
        """Return the best executable per resolved name."""

        return {name: executables[0] for name, executables in self.resolved.items()}


__all__ = [
    "Candidate",
    "FilesystemSearchResult",
    "FoundCallback",
    "IssueCallback",
    "IssueKind",
    "NameResolution",
    "ResolutionReport",
    "ResolutionSource",
    "ResolutionStatus",
    "ResolvedExecutable",
    "ScanResult",
    "SearchDecision",
    "SearchIssue",
    "SearchMode",
]
