# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models, layered loading and the engine composition root."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .cache.in_memory import TtlCache
from .cache.path_environment import DEFAULT_DIRECTORIES_TTL, DEFAULT_EXTENSIONS_TTL, CachedPathEnvironment
from .detection.executable import ExecutableFileDetector
from .discovery.drives import DEFAULT_EXCLUDED_MOUNT_PREFIXES, DriveDetector, PsutilDriveDetector
from .discovery.ranking import CandidateRanker
from .environment.known_folders import KnownFolders
from .environment.path_variable import PathEnvironment, PathEnvironmentReader
from .errors import ConfigError
from .platform import HostPlatform
from .resolution.engine import AccessDeniedHandler, ResolutionEngine
from .resolution.filesystem import DEFAULT_PRUNED_DIRECTORIES, FilesystemSearcher
from .resolution.path_resolver import PathResolver

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
CONFIG_FILENAME: Final[str] = "whatexec.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "whatexec"
ENV_PREFIX: Final[str] = "WHATEXEC_"

_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


class CacheConfig(BaseModel):
    """Lifetimes of the cached PATH directory and extension lists."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    enabled: bool = True
    directories_ttl: float = Field(default=DEFAULT_DIRECTORIES_TTL, gt=0)
    extensions_ttl: float = Field(default=DEFAULT_EXTENSIONS_TTL, gt=0)


class SearchConfig(BaseModel):
    """Filesystem fallback behaviour."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    max_workers: int | None = Field(default=None, ge=1)
    search_depth: int | None = Field(default=None, ge=0)
    follow_symlinks: bool = False
    excluded_mount_prefixes: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDED_MOUNT_PREFIXES))
    pruned_directories: list[str] = Field(default_factory=lambda: list(DEFAULT_PRUNED_DIRECTORIES))


class DetectionConfig(BaseModel):
    """Executable detection options."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    accept_scripts: bool = False


class WhatExecConfig(BaseModel):
    """Top-level configuration."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    cache: CacheConfig = Field(default_factory=CacheConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)


def load_config(root: Path | None = None, env: Mapping[str, str] | None = None) -> WhatExecConfig:
    """Load configuration layered from defaults, TOML files and the environment.

    Precedence, lowest first: built-in defaults, ``[tool.whatexec]`` in
    ``pyproject.toml``, ``whatexec.toml``, then ``WHATEXEC_*`` variables.

    Args:
        root: Directory holding the configuration files, the working directory by default.
        env: Environment mapping, :data:`os.environ` by default.

    Returns:
        WhatExecConfig: Validated configuration.

    Raises:
        ConfigError: If a file cannot be parsed or a value is invalid.
    """

    base = root if root is not None else Path.cwd()
    environ = env if env is not None else os.environ
    merged: dict[str, Any] = {}
    merged = _deep_merge(merged, _load_pyproject(base / PYPROJECT_FILENAME))
    merged = _deep_merge(merged, _load_toml(base / CONFIG_FILENAME))
    merged = _deep_merge(merged, _env_overrides(environ))
    try:
        return WhatExecConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def build_engine(
    config: WhatExecConfig | None = None,
    *,
    platform: HostPlatform | None = None,
    environ: Mapping[str, str] | None = None,
    known_folders: KnownFolders | None = None,
    drive_detector: DriveDetector | None = None,
    cache: TtlCache | None = None,
    on_access_denied: AccessDeniedHandler | None = None,
) -> ResolutionEngine:
    """Wire a :class:`ResolutionEngine` from ``config``.

    Args:
        config: Configuration, defaults when omitted.
        platform: Host platform, detected when omitted.
        environ: Environment used for PATH and special folders.
        known_folders: Ranking folders, derived from the host when omitted.
        drive_detector: Drive enumerator, psutil-backed when omitted.
        cache: Shared TTL cache for the PATH environment.
        on_access_denied: Interactive continue/abort handler.

    Returns:
        ResolutionEngine: Ready-to-use engine.
    """

    settings = config or WhatExecConfig()
    host = platform or HostPlatform.detect()
    environment: PathEnvironment = PathEnvironmentReader(platform=host, environ=environ)
    if settings.cache.enabled:
        environment = CachedPathEnvironment(
            environment,
            cache=cache,
            directories_ttl=settings.cache.directories_ttl,
            extensions_ttl=settings.cache.extensions_ttl,
        )
    detector = ExecutableFileDetector(host, accept_scripts=settings.detection.accept_scripts)
    folders = known_folders if known_folders is not None else KnownFolders.for_host(host, environ)
    drives = drive_detector or PsutilDriveDetector(host, excluded_prefixes=settings.search.excluded_mount_prefixes)
    searcher = FilesystemSearcher(
        detector,
        drives,
        CandidateRanker(folders, platform=host),
        max_workers=settings.search.max_workers,
        follow_symlinks=settings.search.follow_symlinks,
        pruned_directories=settings.search.pruned_directories,
        platform=host,
    )
    return ResolutionEngine(PathResolver(environment, detector, platform=host), searcher, on_access_denied=on_access_denied)


def _load_toml(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Unable to parse {path}: {exc}") from exc
    return dict(data)


def _load_pyproject(path: Path) -> dict[str, Any]:
    tool_section = _load_toml(path).get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return {}
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    if not isinstance(section, Mapping):
        return {}
    return dict(section)


def _env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if (raw := env.get(f"{ENV_PREFIX}CACHE")) is not None:
        _set(overrides, ("cache", "enabled"), _parse_bool(raw, f"{ENV_PREFIX}CACHE"))
    if (raw := env.get(f"{ENV_PREFIX}DIRECTORIES_TTL")) is not None:
        _set(overrides, ("cache", "directories_ttl"), raw)
    if (raw := env.get(f"{ENV_PREFIX}EXTENSIONS_TTL")) is not None:
        _set(overrides, ("cache", "extensions_ttl"), raw)
    if (raw := env.get(f"{ENV_PREFIX}MAX_WORKERS")) is not None:
        _set(overrides, ("search", "max_workers"), raw)
    if (raw := env.get(f"{ENV_PREFIX}SEARCH_DEPTH")) is not None:
        _set(overrides, ("search", "search_depth"), raw)
    return overrides


def _parse_bool(raw: str, name: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _set(target: MutableMapping[str, Any], keys: tuple[str, str], value: Any) -> None:
    section, key = keys
    target.setdefault(section, {})[key] = value


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


__all__ = [
    "CONFIG_FILENAME",
    "CacheConfig",
    "DetectionConfig",
    "SearchConfig",
    "WhatExecConfig",
    "build_engine",
    "load_config",
]
