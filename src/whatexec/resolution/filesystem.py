# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Concurrent, ranked search of every eligible drive for executables."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock
from typing import Final

from ..cancellation import CancellationToken
from ..detection.executable import ExecutableDetector
from ..discovery.drives import DriveDetector
from ..discovery.ranking import CandidateRanker
from ..discovery.walker import NameMatcher, WalkErrorHandler, iter_files
from ..platform import HostPlatform
from .models import (
    Candidate,
    FilesystemSearchResult,
    FoundCallback,
    IssueCallback,
    ResolutionSource,
    ResolvedExecutable,
    ScanResult,
    SearchDecision,
    SearchIssue,
    SearchMode,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_PRUNED_DIRECTORIES: Final[tuple[str, ...]] = ("/proc", "/sys", "/dev", "/run")


@dataclass(frozen=True, slots=True)
class _Match:
    """A validated candidate together with its ranking key."""

    name: str
    candidate: Candidate
    score: int

    @property
    def sort_key(self) -> tuple[int, int, int]:
        return (self.score, self.candidate.root_index, self.candidate.order)


@dataclass(slots=True)
class _SearchState:
    """Call-scoped coordination shared by the per-root workers."""

    token: CancellationToken
    on_found: FoundCallback | None
    on_issue: IssueCallback | None
    settled: dict[str, int] = field(default_factory=dict)
    issues: list[SearchIssue] = field(default_factory=list)
    aborted: bool = False
    lock: Lock = field(default_factory=Lock)

    def settle(self, name: str, root_index: int) -> None:
        with self.lock:
            current = self.settled.get(name)
            if current is None or root_index < current:
                self.settled[name] = root_index

    def is_settled(self, name: str, root_index: int) -> bool:
        with self.lock:
            current = self.settled.get(name)
        return current is not None and current <= root_index

    def emit(self, executable: ResolvedExecutable) -> None:
        if self.on_found is None:
            return
        with self.lock:
            self.on_found(executable)

    def report(self, issue: SearchIssue) -> None:
        LOGGER.debug("Skipped %s (%s): %s", issue.path, issue.kind.value, issue.message)
        with self.lock:
            self.issues.append(issue)
            if self.on_issue is None or self.aborted:
                return
            decision = self.on_issue(issue)
            if decision is SearchDecision.ABORT:
                LOGGER.debug("Search aborted after issue on %s", issue.path)
                self.aborted = True
                self.token.cancel()


class FilesystemSearcher:
    """Walk every eligible drive concurrently and rank what is found.

    Each root is walked by its own worker. In "first match" mode a root stops
    considering a name once a match with the best score reachable on this host
    (see :attr:`CandidateRanker.best_score`) has been confirmed on the same or an
    earlier root, which keeps the winner independent of thread timing: the
    final answer is always the minimum of
    ``(score, root index, walk order)`` over the validated candidates.
    """

    def __init__(
        self,
        detector: ExecutableDetector,
        drive_detector: DriveDetector,
        ranker: CandidateRanker,
        *,
        max_workers: int | None = None,
        follow_symlinks: bool = False,
        pruned_directories: Iterable[str | Path] = DEFAULT_PRUNED_DIRECTORIES,
        platform: HostPlatform | None = None,
    ) -> None:
        """Create a searcher.

        Args:
            detector: Validator applied to every matching file.
            drive_detector: Source of drive roots when no explicit roots are given.
            ranker: Priority scorer for validated matches.
            max_workers: Thread pool size, the executor default when ``None``.
            follow_symlinks: Descend into symlinked directories.
            pruned_directories: Directories never descended into.
            platform: Host platform controlling name comparison.
        """

        self.detector = detector
        self.drive_detector = drive_detector
        self.ranker = ranker
        self.max_workers = max_workers
        self.follow_symlinks = follow_symlinks
        self.pruned_directories = tuple(Path(entry) for entry in pruned_directories)
        self.platform = platform or HostPlatform.detect()

    def search(
        self,
        names: Iterable[str],
        *,
        mode: SearchMode = SearchMode.FIRST,
        search_depth: int | None = None,
        roots: Iterable[Path] | None = None,
        cancel: CancellationToken | None = None,
        on_found: FoundCallback | None = None,
        on_issue: IssueCallback | None = None,
    ) -> FilesystemSearchResult:
        """Search the filesystem for ``names``.

        Args:
            names: Executable file names to look for.
            mode: ``FIRST`` keeps the best match per name, ``ALL`` keeps every match.
            search_depth: Maximum directory depth below each root.
            roots: Directories searched instead of the detected drives.
            cancel: Caller token; partial results are returned once it fires.
            on_found: Called (serialised) for every validated executable.
            on_issue: Called (serialised) for every skipped entry; returning
                :attr:`SearchDecision.ABORT` stops the whole search.

        Returns:
            FilesystemSearchResult: Ranked matches per found name plus skipped entries.
        """

        requested = list(dict.fromkeys(names))
        if not requested:
            return FilesystemSearchResult(matches={})
        search_roots = self._roots(roots)
        state = _SearchState(
            token=cancel.linked() if cancel is not None else CancellationToken(),
            on_found=on_found,
            on_issue=on_issue,
        )
        matches: list[_Match] = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(self._search_root, index, root, requested, mode, search_depth, state)
                for index, root in enumerate(search_roots)
            ]
            for future in as_completed(futures):
                matches.extend(future.result())
        ranked = self._merge(matches, mode)
        return FilesystemSearchResult(
            matches={name: ranked[name] for name in requested if name in ranked},
            issues=tuple(state.issues),
            cancelled=cancel is not None and cancel.cancelled,
            aborted=state.aborted,
        )

    def locate(
        self,
        names: Iterable[str],
        search_depth: int | None = None,
        *,
        roots: Iterable[Path] | None = None,
        cancel: CancellationToken | None = None,
    ) -> dict[str, list[ResolvedExecutable]]:
        """Return every ranked instance of each found name."""

        result = self.search(names, mode=SearchMode.ALL, search_depth=search_depth, roots=roots, cancel=cancel)
        return {name: list(found) for name, found in result.matches.items()}

    def locate_first(
        self,
        names: Iterable[str],
        search_depth: int | None = None,
        *,
        roots: Iterable[Path] | None = None,
        cancel: CancellationToken | None = None,
    ) -> dict[str, ResolvedExecutable]:
        """Return the best-ranked instance of each found name."""

        result = self.search(names, mode=SearchMode.FIRST, search_depth=search_depth, roots=roots, cancel=cancel)
        return {name: found[0] for name, found in result.matches.items()}

    def scan(
        self,
        roots: Iterable[Path] | None = None,
        *,
        depth: int | None = None,
        limit: int | None = None,
        cancel: CancellationToken | None = None,
        on_found: FoundCallback | None = None,
        on_issue: IssueCallback | None = None,
    ) -> ScanResult:
        """Inventory every executable beneath ``roots`` (or every eligible drive).

        Each root contributes at most ``limit`` executables in walk order; the
        merged inventory is ranked and truncated to ``limit``.
        """

        search_roots = self._roots(roots)
        state = _SearchState(
            token=cancel.linked() if cancel is not None else CancellationToken(),
            on_found=on_found,
            on_issue=on_issue,
        )
        matches: list[_Match] = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(self._scan_root, index, root, depth, limit, state)
                for index, root in enumerate(search_roots)
            ]
            for future in as_completed(futures):
                matches.extend(future.result())
        executables = _dedupe(sorted(matches, key=lambda match: match.sort_key))
        if limit is not None:
            executables = executables[:limit]
        return ScanResult(
            executables=tuple(executables),
            issues=tuple(state.issues),
            cancelled=cancel is not None and cancel.cancelled,
            aborted=state.aborted,
        )

    async def search_async(
        self,
        names: Iterable[str],
        *,
        mode: SearchMode = SearchMode.FIRST,
        search_depth: int | None = None,
        roots: Iterable[Path] | None = None,
        cancel: CancellationToken | None = None,
        on_found: FoundCallback | None = None,
        on_issue: IssueCallback | None = None,
    ) -> FilesystemSearchResult:
        """Asynchronous variant of :meth:`search`."""

        return await asyncio.to_thread(
            self.search,
            list(names),
            mode=mode,
            search_depth=search_depth,
            roots=None if roots is None else list(roots),
            cancel=cancel,
            on_found=on_found,
            on_issue=on_issue,
        )

    async def locate_async(
        self,
        names: Iterable[str],
        search_depth: int | None = None,
        *,
        roots: Iterable[Path] | None = None,
        cancel: CancellationToken | None = None,
    ) -> dict[str, list[ResolvedExecutable]]:
        """Asynchronous variant of :meth:`locate`."""

        return await asyncio.to_thread(self.locate, list(names), search_depth, roots=roots, cancel=cancel)

    async def locate_first_async(
        self,
        names: Iterable[str],
        search_depth: int | None = None,
        *,
        roots: Iterable[Path] | None = None,
        cancel: CancellationToken | None = None,
    ) -> dict[str, ResolvedExecutable]:
        """Asynchronous variant of :meth:`locate_first`."""

        return await asyncio.to_thread(self.locate_first, list(names), search_depth, roots=roots, cancel=cancel)

    async def scan_async(
        self,
        roots: Iterable[Path] | None = None,
        *,
        depth: int | None = None,
        limit: int | None = None,
        cancel: CancellationToken | None = None,
        on_found: FoundCallback | None = None,
        on_issue: IssueCallback | None = None,
    ) -> ScanResult:
        """Asynchronous variant of :meth:`scan`."""

        return await asyncio.to_thread(
            self.scan,
            None if roots is None else list(roots),
            depth=depth,
            limit=limit,
            cancel=cancel,
            on_found=on_found,
            on_issue=on_issue,
        )

    def _roots(self, roots: Iterable[Path] | None) -> list[Path]:
        if roots is not None:
            return [Path(root).absolute() for root in roots]
        detected = self.drive_detector.drives()
        LOGGER.debug("Searching %d drive(s): %s", len(detected), ", ".join(str(root) for root in detected))
        return detected

    def _search_root(
        self,
        root_index: int,
        root: Path,
        names: Sequence[str],
        mode: SearchMode,
        search_depth: int | None,
        state: _SearchState,
    ) -> list[_Match]:
        matchers = [NameMatcher(name, case_insensitive=self.platform.case_insensitive_names) for name in names]
        found: list[_Match] = []
        first_only = mode is SearchMode.FIRST
        best_score = self.ranker.best_score

        def _on_error(error: OSError) -> None:
            state.report(SearchIssue.from_error(_error_path(error, root), error, tuple(names)))

        for order, path in enumerate(self._walk(root, search_depth, state, _on_error)):
            if state.token.cancelled:
                break
            active = [matcher for matcher in matchers if not (first_only and state.is_settled(matcher.name, root_index))]
            if not active:
                break
            for matcher in active:
                if not matcher.matches(path.name):
                    continue
                match = self._validate(matcher.name, Candidate(path, root_index, order), state)
                if match is None:
                    continue
                found.append(match)
                if first_only and match.score <= best_score:
                    state.settle(matcher.name, root_index)
        return found

    def _scan_root(
        self,
        root_index: int,
        root: Path,
        depth: int | None,
        limit: int | None,
        state: _SearchState,
    ) -> list[_Match]:
        found: list[_Match] = []

        def _on_error(error: OSError) -> None:
            state.report(SearchIssue.from_error(_error_path(error, root), error))

        for order, path in enumerate(self._walk(root, depth, state, _on_error)):
            if state.token.cancelled or (limit is not None and len(found) >= limit):
                break
            match = self._validate(path.name, Candidate(path, root_index, order), state)
            if match is not None:
                found.append(match)
        return found

    def _walk(self, root: Path, depth: int | None, state: _SearchState, on_error: WalkErrorHandler) -> Iterable[Path]:
        return iter_files(
            root,
            depth=depth,
            follow_symlinks=self.follow_symlinks,
            pruned=self.pruned_directories,
            cancel=state.token,
            on_error=on_error,
        )

    def _validate(self, name: str, candidate: Candidate, state: _SearchState) -> _Match | None:
        try:
            if not self.detector.is_executable(candidate.path, state.token):
                return None
        except FileNotFoundError:
            return None
        except OSError as exc:
            state.report(SearchIssue.from_error(candidate.path, exc, (name,)))
            return None
        score = self.ranker.score(candidate.path)
        executable = ResolvedExecutable(
            query=name,
            path=candidate.path,
            source=ResolutionSource.FILESYSTEM,
            priority=score,
        )
        state.emit(executable)
        return _Match(name=name, candidate=candidate, score=score)

    def _merge(self, matches: Iterable[_Match], mode: SearchMode) -> dict[str, tuple[ResolvedExecutable, ...]]:
        grouped: dict[str, list[_Match]] = {}
        for match in matches:
            grouped.setdefault(match.name, []).append(match)
        merged: dict[str, tuple[ResolvedExecutable, ...]] = {}
        for name, group in grouped.items():
            ranked = _dedupe(sorted(group, key=lambda match: match.sort_key))
            merged[name] = tuple(ranked[:1]) if mode is SearchMode.FIRST else tuple(ranked)
        return merged


def _dedupe(matches: Iterable[_Match]) -> list[ResolvedExecutable]:
    seen: set[Path] = set()
    executables: list[ResolvedExecutable] = []
    for match in matches:
        path = match.candidate.path
        if path in seen:
            continue
        seen.add(path)
        executables.append(
            ResolvedExecutable(
                query=match.name,
                path=path,
                source=ResolutionSource.FILESYSTEM,
                priority=match.score,
            ),
        )
    return executables


def _error_path(error: OSError, fallback: Path) -> Path:
    return Path(error.filename) if error.filename else fallback


__all__ = ["DEFAULT_PRUNED_DIRECTORIES", "FilesystemSearcher"]
