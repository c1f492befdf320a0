# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Directory walks that skip unreadable subtrees instead of failing."""

from __future__ import annotations

import fnmatch
import logging
import os
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path, PurePath

from ..cancellation import CancellationToken

LOGGER = logging.getLogger(__name__)

WalkErrorHandler = Callable[[OSError], None]


def search_patterns(name: str) -> tuple[str, ...]:
    """Return the glob patterns used to pre-filter files for ``name``.

    The bare file name is always included; a name carrying an extension also
    contributes ``*<ext>`` so that case variants reach the exact comparison.
    """

    suffix = PurePath(name).suffix
    if suffix:
        return (name, f"*{suffix}")
    return (name,)


@dataclass(frozen=True, slots=True)
class NameMatcher:
    """Match directory entries against a requested executable name."""

    name: str
    case_insensitive: bool = False

    @property
    def patterns(self) -> tuple[str, ...]:
        """Return the pre-filter patterns for this name."""

        return search_patterns(self._fold(self.name))

    def matches(self, filename: str) -> bool:
        """Return ``True`` when ``filename`` is exactly the requested name."""

        folded = self._fold(filename)
        if not any(fnmatch.fnmatchcase(folded, pattern) for pattern in self.patterns):
            return False
        return folded == self._fold(self.name)

    def _fold(self, value: str) -> str:
        return value.casefold() if self.case_insensitive else value


def iter_files(
    root: Path,
    *,
    depth: int | None = None,
    follow_symlinks: bool = False,
    pruned: Iterable[Path] = (),
    cancel: CancellationToken | None = None,
    on_error: WalkErrorHandler | None = None,
) -> Iterator[Path]:
    """Yield files beneath ``root`` in a deterministic, sorted order.

    Args:
        root: Directory to walk.
        depth: Maximum number of directory levels below ``root`` to descend;
            ``None`` walks the whole tree and ``0`` lists ``root`` only.
        follow_symlinks: Descend into directories reached through symlinks.
        pruned: Directories never descended into (pseudo-filesystems).
        cancel: Token polled once per directory.
        on_error: Receives each :class:`OSError` raised while listing a
            directory; the walk continues with the next entry.

    Yields:
        Path: Files found beneath ``root``.
    """

    pruned_set = frozenset(Path(entry) for entry in pruned)

    def _report(error: OSError) -> None:
        LOGGER.debug("Skipping unreadable directory %s: %s", error.filename, error.strerror or error)
        if on_error is not None:
            on_error(error)

    root_depth = len(root.parts)
    for dirpath, dirnames, filenames in os.walk(root, topdown=True, onerror=_report, followlinks=follow_symlinks):
        if cancel is not None and cancel.cancelled:
            return
        current = Path(dirpath)
        if depth is not None and len(current.parts) - root_depth >= depth:
            dirnames[:] = []
        else:
            dirnames[:] = sorted(name for name in dirnames if current / name not in pruned_set)
        for filename in sorted(filenames):
            yield current / filename


__all__ = ["NameMatcher", "WalkErrorHandler", "iter_files", "search_patterns"]
