# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Binary-format executable detection."""

from __future__ import annotations

from .executable import (
    WINDOWS_NATIVE_EXTENSIONS,
    ExecutableDetector,
    ExecutableFileDetector,
    has_execute_permission,
)

__all__ = [
    "ExecutableDetector",
    "ExecutableFileDetector",
    "WINDOWS_NATIVE_EXTENSIONS",
    "has_execute_permission",
]
