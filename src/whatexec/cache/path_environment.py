# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""PATH environment source backed by the TTL cache."""

from __future__ import annotations

import logging
from typing import Final, cast

from ..environment.path_variable import PathEnvironment
from .in_memory import TtlCache

LOGGER = logging.getLogger(__name__)

DIRECTORIES_KEY: Final[str] = "path-directories"
EXTENSIONS_KEY: Final[str] = "path-extensions"
DEFAULT_DIRECTORIES_TTL: Final[float] = 5 * 60.0
DEFAULT_EXTENSIONS_TTL: Final[float] = 10 * 60.0


class CachedPathEnvironment(PathEnvironment):
    """Serve PATH directories and extensions from two independently expiring slots.

    A miss invokes the wrapped reader synchronously and stores the result
    before returning it. An unset PATH (``None``) is cached like any other
    value so repeated lookups inside the TTL window never touch the
    environment.
    """

    def __init__(
        self,
        reader: PathEnvironment,
        *,
        cache: TtlCache | None = None,
        directories_ttl: float = DEFAULT_DIRECTORIES_TTL,
        extensions_ttl: float = DEFAULT_EXTENSIONS_TTL,
    ) -> None:
        """Wrap ``reader`` with TTL caching.

        Args:
            reader: Uncached PATH environment source.
            cache: Shared cache instance; a private one is created when omitted.
            directories_ttl: Lifetime in seconds of the directory-list slot.
            extensions_ttl: Lifetime in seconds of the extension-list slot.
        """

        self._reader = reader
        self.cache = cache if cache is not None else TtlCache()
        self.directories_ttl = directories_ttl
        self.extensions_ttl = extensions_ttl

    def directories(self) -> list[str] | None:
        """Return cached PATH directories, recomputing after expiry."""

        record = self.cache.get_record(DIRECTORIES_KEY)
        if record is None:
            LOGGER.debug("PATH directory cache miss")
            fresh = self._reader.directories()
            record = self.cache.set(DIRECTORIES_KEY, None if fresh is None else tuple(fresh), self.directories_ttl)
        value = cast(tuple[str, ...] | None, record.value)
        return None if value is None else list(value)

    def extensions(self) -> list[str]:
        """Return cached executable extensions, recomputing after expiry."""

        extensions = self.cache.get_or_compute(EXTENSIONS_KEY, self._read_extensions, self.extensions_ttl)
        return list(extensions)

    def _read_extensions(self) -> tuple[str, ...]:
        LOGGER.debug("PATH extension cache miss")
        return tuple(self._reader.extensions())

    def invalidate(self) -> None:
        """Drop both cached slots so the next call re-reads the environment."""

        self.cache.delete(DIRECTORIES_KEY)
        self.cache.delete(EXTENSIONS_KEY)


__all__ = [
    "CachedPathEnvironment",
    "DEFAULT_DIRECTORIES_TTL",
    "DEFAULT_EXTENSIONS_TTL",
    "DIRECTORIES_KEY",
    "EXTENSIONS_KEY",
]
