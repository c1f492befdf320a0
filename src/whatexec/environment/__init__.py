# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Environment readers for PATH data and well-known folders."""

from __future__ import annotations

from .known_folders import KnownFolders, is_under
from .path_variable import PathEnvironment, PathEnvironmentReader

__all__ = ["KnownFolders", "PathEnvironment", "PathEnvironmentReader", "is_under"]
