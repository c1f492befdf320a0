# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""In-memory caches for PATH data and process-wide singletons."""

from __future__ import annotations

from .in_memory import CacheRecord, TtlCache, memoize
from .path_environment import DEFAULT_DIRECTORIES_TTL, DEFAULT_EXTENSIONS_TTL, CachedPathEnvironment

__all__ = [
    "CacheRecord",
    "CachedPathEnvironment",
    "DEFAULT_DIRECTORIES_TTL",
    "DEFAULT_EXTENSIONS_TTL",
    "TtlCache",
    "memoize",
]
