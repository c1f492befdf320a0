# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve executable names against the PATH directories in order."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Iterable, Sequence
from pathlib import Path, PurePath

from ..cancellation import CancellationToken
from ..detection.executable import ExecutableDetector
from ..environment.path_variable import PathEnvironment
from ..errors import ExecutableNotFoundError
from ..platform import HostPlatform
from .models import FoundCallback, ResolutionSource, ResolvedExecutable

LOGGER = logging.getLogger(__name__)


class PathResolver:
    """Shell-style "first match wins" lookup over PATH.

    Directory order is authoritative: every extension is tried inside a PATH
    directory before the next directory is considered. Names that are rooted
    or contain a directory separator bypass PATH and are validated directly.
    """

    def __init__(
        self,
        environment: PathEnvironment,
        detector: ExecutableDetector,
        *,
        platform: HostPlatform | None = None,
    ) -> None:
        """Create a resolver.

        Args:
            environment: Source of PATH directories and extensions (usually cached).
            detector: Validator applied to every candidate path.
            platform: Host platform controlling extension handling.
        """

        self.environment = environment
        self.detector = detector
        self.platform = platform or HostPlatform.detect()

    def try_resolve(
        self,
        names: Iterable[str],
        cancel: CancellationToken | None = None,
        *,
        on_found: FoundCallback | None = None,
    ) -> dict[str, ResolvedExecutable]:
        """Resolve each name, omitting names that were not found.

        Args:
            names: Executable names, file names or paths to resolve.
            cancel: Token checked between names and candidates.
            on_found: Callback fired for every confirmed executable.

        Returns:
            dict[str, ResolvedExecutable]: Found names mapped to their executable.
        """

        resolved: dict[str, ResolvedExecutable] = {}
        directories: list[str] | None = None
        directories_loaded = False
        for name in _unique(names):
            if cancel is not None and cancel.cancelled:
                LOGGER.debug("PATH resolution cancelled before %r", name)
                break
            if self.is_path_like(name):
                match = self._resolve_direct(name, cancel)
            else:
                if not directories_loaded:
                    directories = self.environment.directories()
                    directories_loaded = True
                    if directories is None:
                        LOGGER.debug("PATH is not set; skipping PATH lookup")
                if directories is None:
                    continue
                match = self._resolve_on_path(name, directories, cancel)
            if match is None:
                continue
            resolved[name] = match
            if on_found is not None:
                on_found(match)
        return resolved

    def resolve(self, names: Iterable[str], cancel: CancellationToken | None = None) -> dict[str, ResolvedExecutable]:
        """Resolve every name or raise listing all that are missing.

        Raises:
            ExecutableNotFoundError: If at least one name was not found.
        """

        requested = _unique(names)
        resolved = self.try_resolve(requested, cancel)
        missing = [name for name in requested if name not in resolved]
        if missing:
            raise ExecutableNotFoundError(missing)
        return resolved

    def try_resolve_one(self, name: str, cancel: CancellationToken | None = None) -> ResolvedExecutable | None:
        """Return the executable for ``name`` or ``None``."""

        return self.try_resolve([name], cancel).get(name)

    def resolve_one(self, name: str, cancel: CancellationToken | None = None) -> ResolvedExecutable:
        """Return the executable for ``name`` or raise :class:`ExecutableNotFoundError`."""

        return self.resolve([name], cancel)[name]

    async def try_resolve_async(
        self,
        names: Iterable[str],
        cancel: CancellationToken | None = None,
    ) -> dict[str, ResolvedExecutable]:
        """Asynchronous variant of :meth:`try_resolve`."""

        return await asyncio.to_thread(self.try_resolve, list(names), cancel)

    async def resolve_async(
        self,
        names: Iterable[str],
        cancel: CancellationToken | None = None,
    ) -> dict[str, ResolvedExecutable]:
        """Asynchronous variant of :meth:`resolve`."""

        return await asyncio.to_thread(self.resolve, list(names), cancel)

    def candidate_extensions(self, name: str) -> list[str]:
        """Return the suffixes appended to ``name`` within each PATH directory."""

        if self.platform.is_windows and not PurePath(name).suffix:
            return self.environment.extensions()
        return [""]

    def _resolve_on_path(
        self,
        name: str,
        directories: Sequence[str],
        cancel: CancellationToken | None,
    ) -> ResolvedExecutable | None:
        extensions = self.candidate_extensions(name)
        for directory in directories:
            for extension in extensions:
                if cancel is not None and cancel.cancelled:
                    return None
                candidate = Path(directory) / f"{name}{extension}"
                if self._validate(candidate, cancel):
                    return _resolved(name, candidate)
        return None

    def _resolve_direct(self, name: str, cancel: CancellationToken | None) -> ResolvedExecutable | None:
        candidate = Path(os.path.expanduser(name))
        if self._validate(candidate, cancel):
            return _resolved(name, candidate)
        return None

    def _validate(self, candidate: Path, cancel: CancellationToken | None) -> bool:
        try:
            if not candidate.exists():
                return False
            return self.detector.is_executable(candidate, cancel)
        except FileNotFoundError:
            return False
        except OSError as exc:
            LOGGER.debug("Unable to inspect %s: %s", candidate, exc)
            return False

    def is_path_like(self, name: str) -> bool:
        """Return ``True`` when ``name`` is rooted or contains a directory separator."""

        if "/" in name or os.sep in name or name.startswith("~"):
            return True
        if self.platform.is_windows and ("\\" in name or ":" in name):
            return True
        return PurePath(name).is_absolute()


def _resolved(name: str, candidate: Path) -> ResolvedExecutable:
    return ResolvedExecutable(query=name, path=Path(os.path.abspath(candidate)), source=ResolutionSource.PATH)


def _unique(names: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(names))


__all__ = ["PathResolver"]
