# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Cooperative cancellation shared by every long-running operation."""

from __future__ import annotations

import time
from collections.abc import Callable
from threading import Event


class CancellationToken:
    """Signal cancellation explicitly or once an optional deadline passes.

    Tokens are passed down into directory walks and file reads; workers poll
    :attr:`cancelled` between entries. A cancelled search is not a failure: it
    returns whatever was already validated.
    """

    def __init__(
        self,
        *,
        timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Create a token, optionally expiring ``timeout`` seconds from now.

        Args:
            timeout: Seconds until the token cancels itself, ``None`` for no deadline.
            clock: Monotonic clock used to evaluate the deadline.
        """

        self._event = Event()
        self._clock = clock
        self._deadline = None if timeout is None else clock() + timeout

    @classmethod
    def none(cls) -> CancellationToken:
        """Return a token that only cancels when :meth:`cancel` is called."""

        return cls()

    def cancel(self) -> None:
        """Request cancellation of every operation observing this token."""

        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Return ``True`` once cancellation was requested or the deadline passed."""

        if self._event.is_set():
            return True
        if self._deadline is not None and self._clock() >= self._deadline:
            self._event.set()
            return True
        return False

    def linked(self) -> CancellationToken:
        """Return a child token cancelled whenever this token is cancelled."""

        return _LinkedCancellationToken(self)


class _LinkedCancellationToken(CancellationToken):
    """Token that also observes a parent token."""

    def __init__(self, parent: CancellationToken) -> None:
        super().__init__()
        self._parent = parent

    @property
    def cancelled(self) -> bool:
        return self._parent.cancelled or super().cancelled


__all__ = ["CancellationToken"]
