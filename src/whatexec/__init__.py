# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate executables via PATH with a ranked full-filesystem fallback."""

from __future__ import annotations

from importlib import metadata

from .cancellation import CancellationToken
from .config import WhatExecConfig, build_engine, load_config
from .errors import ConfigError, ExecutableNotFoundError, PlatformNotSupportedError, WhatExecError
from .resolution.engine import ResolutionEngine
from .resolution.models import ResolutionReport, ResolvedExecutable, SearchMode

__all__ = [
    "CancellationToken",
    "ConfigError",
    "ExecutableNotFoundError",
    "PlatformNotSupportedError",
    "ResolutionEngine",
    "ResolutionReport",
    "ResolvedExecutable",
    "SearchMode",
    "WhatExecConfig",
    "WhatExecError",
    "__version__",
    "build_engine",
    "load_config",
]

try:
    __version__ = metadata.version("whatexec")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
