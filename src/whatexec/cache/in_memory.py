# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""In-memory caching primitives shared across the project.

:class:`TtlCache` holds the expensive-to-recompute PATH artefacts behind
per-entry expirations; :func:`memoize` backs process-wide singletons such as
the console manager.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from functools import partial, update_wrapper
from threading import Lock, RLock
from typing import Final, Generic, ParamSpec, TypeVar, cast

P = ParamSpec("P")
R = TypeVar("R")
ValueT = TypeVar("ValueT")


@dataclass(frozen=True, slots=True)
class CacheRecord(Generic[ValueT]):
    """A single cached artefact.

    Attributes:
        value: Cached payload, which may itself be ``None``.
        inserted_at: Clock reading when the record was stored.
        ttl: Lifetime in seconds.
    """

    value: ValueT
    inserted_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        """Return ``True`` once ``now - inserted_at`` exceeds the TTL."""

        return now - self.inserted_at > self.ttl


class TtlCache:
    """Thread-safe key/value cache whose entries expire independently.

    Expired entries are never returned; they are overwritten by the next
    :meth:`set` for the same key. Concurrent writers race with last-writer-wins
    semantics.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialise an empty cache.

        Args:
            clock: Monotonic clock used to stamp and expire records.
        """

        self._clock = clock
        self._store: dict[Hashable, CacheRecord[object]] = {}
        self._lock = RLock()

    def get_record(self, key: Hashable) -> CacheRecord[object] | None:
        """Return the live record stored under ``key``.

        Args:
            key: Cache slot identifier.

        Returns:
            CacheRecord | None: The record, or ``None`` when missing or expired.
        """

        now = self._clock()
        with self._lock:
            record = self._store.get(key)
        if record is None or record.is_expired(now):
            return None
        return record

    def get(self, key: Hashable) -> object | None:
        """Return the cached value for ``key`` when it has not expired."""

        record = self.get_record(key)
        return None if record is None else record.value

    def set(self, key: Hashable, value: object, ttl: float) -> CacheRecord[object]:
        """Store ``value`` under ``key`` for ``ttl`` seconds.

        Args:
            key: Cache slot identifier.
            value: Value to store.
            ttl: Lifetime in seconds, must be positive.

        Returns:
            CacheRecord: The freshly stored record.

        Raises:
            ValueError: If ``ttl`` is not positive.
        """

        if ttl <= 0:
            raise ValueError("ttl must be positive")
        record: CacheRecord[object] = CacheRecord(value=value, inserted_at=self._clock(), ttl=ttl)
        with self._lock:
            self._store[key] = record
        return record

    def get_or_compute(self, key: Hashable, compute: Callable[[], ValueT], ttl: float) -> ValueT:
        """Return the cached value for ``key`` or compute and store it synchronously.

        Args:
            key: Cache slot identifier.
            compute: Callable producing the value on a miss.
            ttl: Lifetime applied to a freshly computed value.

        Returns:
            ValueT: Cached or newly computed value.
        """

        record = self.get_record(key)
        if record is not None:
            return cast(ValueT, record.value)
        value = compute()
        self.set(key, value, ttl)
        return value

    def delete(self, key: Hashable) -> None:
        """Remove the cached value stored for ``key``."""

        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        """Remove all cached values."""

        with self._lock:
            self._store.clear()


class _MemoizedCallable(Generic[P, R]):
    """Implement an optional-size LRU cache for callables."""

    def __init__(self, func: Callable[P, R], maxsize: int | None) -> None:
        self._func = func
        self._maxsize = maxsize
        self._store: OrderedDict[Hashable, R] = OrderedDict()
        self._lock = Lock()
        update_wrapper(self, func)

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> R:
        cache_key: Hashable = (args, tuple(sorted(kwargs.items())))
        with self._lock:
            if cache_key in self._store:
                self._store.move_to_end(cache_key)
                return self._store[cache_key]
        result = self._func(*args, **kwargs)
        with self._lock:
            self._store[cache_key] = result
            if self._maxsize is not None and len(self._store) > self._maxsize:
                self._store.popitem(last=False)
        return result

    def cache_clear(self) -> None:
        """Reset cached entries."""

        with self._lock:
            self._store.clear()


def memoize(maxsize: int | None = None) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Return a decorator implementing an optional-size LRU cache.

    Args:
        maxsize: Maximum number of entries to retain. ``None`` disables the cap.

    Returns:
        Callable[[Callable[P, R]], Callable[P, R]]: Decorator preserving ``cache_clear``.
    """

    decorator = partial(_apply_memoize, maxsize=maxsize)
    return cast(Callable[[Callable[P, R]], Callable[P, R]], decorator)


def _apply_memoize(func: Callable[P, R], *, maxsize: int | None) -> Callable[P, R]:
    return cast(Callable[P, R], _MemoizedCallable(func, maxsize))


__all__: Final = ["CacheRecord", "TtlCache", "memoize"]
