# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Batch resolution: PATH lookup first, filesystem fallback for the rest."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path

from ..cancellation import CancellationToken
from ..errors import ExecutableNotFoundError
from .filesystem import FilesystemSearcher
from .models import (
    FilesystemSearchResult,
    FoundCallback,
    IssueCallback,
    IssueKind,
    NameResolution,
    ResolutionReport,
    ResolutionSource,
    ResolutionStatus,
    ResolvedExecutable,
    SearchDecision,
    SearchIssue,
    SearchMode,
)
from .path_resolver import PathResolver

LOGGER = logging.getLogger(__name__)

AccessDeniedHandler = Callable[[SearchIssue], SearchDecision]


class ResolutionEngine:
    """Resolve batches of names through PATH and then the filesystem.

    A batch moves through ``PATH lookup -> filesystem fallback -> merge``.
    Names found on PATH are never searched for again; names missing from both
    stages are reported as unresolved rather than raised, except by
    :meth:`resolve_all_or_raise`.
    """

    def __init__(
        self,
        path_resolver: PathResolver,
        searcher: FilesystemSearcher,
        *,
        on_access_denied: AccessDeniedHandler | None = None,
    ) -> None:
        """Create an engine from its two resolution stages.

        Args:
            path_resolver: PATH stage.
            searcher: Filesystem fallback stage.
            on_access_denied: Interactive continue/abort decision for
                permission-denied walk entries; the walk always continues
                when omitted.
        """

        self.path_resolver = path_resolver
        self.searcher = searcher
        self.on_access_denied = on_access_denied

    def resolve(
        self,
        names: Iterable[str],
        *,
        mode: SearchMode = SearchMode.FIRST,
        limit: int | None = None,
        search_depth: int | None = None,
        roots: Iterable[Path] | None = None,
        cancel: CancellationToken | None = None,
        on_found: FoundCallback | None = None,
    ) -> ResolutionReport:
        """Resolve ``names`` and report the outcome for every one of them.

        Args:
            names: Executable names, file names or paths.
            mode: ``FIRST`` for the best match, ``ALL`` for every filesystem instance.
            limit: Maximum executables reported per name.
            search_depth: Maximum directory depth of the filesystem fallback.
            roots: Directories searched instead of every eligible drive.
            cancel: Token; a cancelled batch returns what was already validated.
            on_found: Progress callback fired per confirmed executable.

        Returns:
            ResolutionReport: Outcome per requested name plus skipped entries.
        """

        requested = list(dict.fromkeys(names))
        path_hits = self.path_resolver.try_resolve(requested, cancel, on_found=on_found)
        # Paths are checked once, directly; only bare names reach the filesystem fallback.
        remaining = [
            name for name in requested if name not in path_hits and not self.path_resolver.is_path_like(name)
        ]
        LOGGER.debug("PATH resolved %d of %d name(s)", len(path_hits), len(requested))

        fallback = FilesystemSearchResult(matches={})
        if remaining and not _is_cancelled(cancel):
            fallback = self.searcher.search(
                remaining,
                mode=mode,
                search_depth=search_depth,
                roots=roots,
                cancel=cancel,
                on_found=on_found,
                on_issue=self._issue_handler(),
            )
        return _merge(requested, path_hits, fallback, limit, cancelled=_is_cancelled(cancel))

    def resolve_all_or_raise(
        self,
        names: Iterable[str],
        *,
        search_depth: int | None = None,
        roots: Iterable[Path] | None = None,
        cancel: CancellationToken | None = None,
    ) -> dict[str, ResolvedExecutable]:
        """Return the best executable per name or raise naming every missing one.

        Raises:
            ExecutableNotFoundError: If any name is unresolved.
        """

        report = self.resolve(names, search_depth=search_depth, roots=roots, cancel=cancel)
        if report.unresolved:
            raise ExecutableNotFoundError(report.unresolved)
        return report.first()

    def find(
        self,
        name: str,
        *,
        search_depth: int | None = None,
        cancel: CancellationToken | None = None,
    ) -> ResolvedExecutable | None:
        """Return the best executable for a single name, or ``None``."""

        outcome = self.resolve([name], search_depth=search_depth, cancel=cancel).results[name]
        return outcome.best

    def find_many(
        self,
        names: Iterable[str],
        *,
        search_depth: int | None = None,
        cancel: CancellationToken | None = None,
        on_found: FoundCallback | None = None,
    ) -> ResolutionReport:
        """Return the best executable for each of ``names``."""

        return self.resolve(names, search_depth=search_depth, cancel=cancel, on_found=on_found)

    def find_all_instances(
        self,
        name: str,
        *,
        limit: int | None = None,
        search_depth: int | None = None,
        cancel: CancellationToken | None = None,
    ) -> list[ResolvedExecutable]:
        """Return every ranked instance of ``name`` on the eligible drives."""

        report = self.find_all_instances_many([name], limit=limit, search_depth=search_depth, cancel=cancel)
        return list(report.results[name].executables)

    def find_all_instances_many(
        self,
        names: Iterable[str],
        *,
        limit: int | None = None,
        search_depth: int | None = None,
        roots: Iterable[Path] | None = None,
        cancel: CancellationToken | None = None,
        on_found: FoundCallback | None = None,
    ) -> ResolutionReport:
        """Return every ranked instance of each name on the eligible drives.

        Bare names skip the PATH stage entirely: PATH yields at most one match
        per name, whereas this use case enumerates every copy on disk. Names
        given as paths are still validated directly.
        """

        requested = list(dict.fromkeys(names))
        direct = [name for name in requested if self.path_resolver.is_path_like(name)]
        direct_hits = self.path_resolver.try_resolve(direct, cancel, on_found=on_found) if direct else {}
        bare = [name for name in requested if name not in direct]
        fallback = FilesystemSearchResult(matches={})
        if bare and not _is_cancelled(cancel):
            fallback = self.searcher.search(
                bare,
                mode=SearchMode.ALL,
                search_depth=search_depth,
                roots=roots,
                cancel=cancel,
                on_found=on_found,
                on_issue=self._issue_handler(),
            )
        return _merge(requested, direct_hits, fallback, limit, cancelled=_is_cancelled(cancel))

    async def resolve_async(
        self,
        names: Iterable[str],
        *,
        mode: SearchMode = SearchMode.FIRST,
        limit: int | None = None,
        search_depth: int | None = None,
        roots: Iterable[Path] | None = None,
        cancel: CancellationToken | None = None,
        on_found: FoundCallback | None = None,
    ) -> ResolutionReport:
        """Asynchronous variant of :meth:`resolve`."""

        return await asyncio.to_thread(
            self.resolve,
            list(names),
            mode=mode,
            limit=limit,
            search_depth=search_depth,
            roots=None if roots is None else list(roots),
            cancel=cancel,
            on_found=on_found,
        )

    async def resolve_all_or_raise_async(
        self,
        names: Iterable[str],
        *,
        search_depth: int | None = None,
        cancel: CancellationToken | None = None,
    ) -> dict[str, ResolvedExecutable]:
        """Asynchronous variant of :meth:`resolve_all_or_raise`."""

        return await asyncio.to_thread(self.resolve_all_or_raise, list(names), search_depth=search_depth, cancel=cancel)

    async def find_async(
        self,
        name: str,
        *,
        search_depth: int | None = None,
        cancel: CancellationToken | None = None,
    ) -> ResolvedExecutable | None:
        """Asynchronous variant of :meth:`find`."""

        return await asyncio.to_thread(self.find, name, search_depth=search_depth, cancel=cancel)

    async def find_many_async(
        self,
        names: Iterable[str],
        *,
        search_depth: int | None = None,
        cancel: CancellationToken | None = None,
    ) -> ResolutionReport:
        """Asynchronous variant of :meth:`find_many`."""

        return await asyncio.to_thread(self.find_many, list(names), search_depth=search_depth, cancel=cancel)

    async def find_all_instances_async(
        self,
        name: str,
        *,
        limit: int | None = None,
        search_depth: int | None = None,
        cancel: CancellationToken | None = None,
    ) -> list[ResolvedExecutable]:
        """Asynchronous variant of :meth:`find_all_instances`."""

        return await asyncio.to_thread(
            self.find_all_instances,
            name,
            limit=limit,
            search_depth=search_depth,
            cancel=cancel,
        )

    async def find_all_instances_many_async(
        self,
        names: Iterable[str],
        *,
        limit: int | None = None,
        search_depth: int | None = None,
        cancel: CancellationToken | None = None,
    ) -> ResolutionReport:
        """Asynchronous variant of :meth:`find_all_instances_many`."""

        return await asyncio.to_thread(
            self.find_all_instances_many,
            list(names),
            limit=limit,
            search_depth=search_depth,
            cancel=cancel,
        )

    def _issue_handler(self) -> IssueCallback | None:
        handler = self.on_access_denied
        if handler is None:
            return None

        def _on_issue(issue: SearchIssue) -> SearchDecision:
            if issue.kind is not IssueKind.PERMISSION_DENIED:
                return SearchDecision.CONTINUE
            return handler(issue)

        return _on_issue


def _merge(
    requested: list[str],
    direct: Mapping[str, ResolvedExecutable],
    fallback: FilesystemSearchResult,
    limit: int | None,
    *,
    cancelled: bool,
) -> ResolutionReport:
    results: dict[str, NameResolution] = {}
    for name in requested:
        if name in direct:
            results[name] = NameResolution(
                name=name,
                status=ResolutionStatus.RESOLVED,
                executables=(direct[name],),
                source=direct[name].source,
            )
            continue
        found = fallback.matches.get(name, ())
        if limit is not None:
            found = found[:limit]
        if found:
            results[name] = NameResolution(
                name=name,
                status=ResolutionStatus.RESOLVED,
                executables=tuple(found),
                source=ResolutionSource.FILESYSTEM,
            )
        else:
            results[name] = NameResolution(name=name, status=ResolutionStatus.UNRESOLVED)
    return ResolutionReport(
        results=results,
        issues=fallback.issues,
        cancelled=cancelled or fallback.cancelled,
        aborted=fallback.aborted,
    )


def _is_cancelled(cancel: CancellationToken | None) -> bool:
    return cancel is not None and cancel.cancelled


__all__ = ["AccessDeniedHandler", "ResolutionEngine"]
