# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for layered configuration loading and engine wiring."""

from __future__ import annotations

from pathlib import Path

import pytest

from whatexec.cache.in_memory import TtlCache
from whatexec.cache.path_environment import DEFAULT_DIRECTORIES_TTL, CachedPathEnvironment
from whatexec.config import WhatExecConfig, build_engine, load_config
from whatexec.discovery.drives import DEFAULT_EXCLUDED_MOUNT_PREFIXES
from whatexec.environment.path_variable import PathEnvironmentReader
from whatexec.errors import ConfigError
from whatexec.platform import HostPlatform
from whatexec.resolution.filesystem import DEFAULT_PRUNED_DIRECTORIES


def test_defaults_without_files_or_environment(tmp_path: Path) -> None:
    config = load_config(tmp_path, env={})

    assert config.cache.enabled is True
    assert config.cache.directories_ttl == DEFAULT_DIRECTORIES_TTL
    assert config.search.max_workers is None
    assert config.search.search_depth is None
    assert config.search.excluded_mount_prefixes == list(DEFAULT_EXCLUDED_MOUNT_PREFIXES)
    assert config.search.pruned_directories == list(DEFAULT_PRUNED_DIRECTORIES)
    assert config.detection.accept_scripts is False


def test_pyproject_section_is_loaded(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "demo"\n\n[tool.whatexec.search]\nmax_workers = 4\nsearch_depth = 6\n',
        encoding="utf-8",
    )

    config = load_config(tmp_path, env={})

    assert config.search.max_workers == 4
    assert config.search.search_depth == 6


def test_whatexec_toml_overrides_pyproject(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.whatexec.search]\nmax_workers = 4\n", encoding="utf-8")
    (tmp_path / "whatexec.toml").write_text(
        "[search]\nmax_workers = 2\n\n[detection]\naccept_scripts = true\n",
        encoding="utf-8",
    )

    config = load_config(tmp_path, env={})

    assert config.search.max_workers == 2
    assert config.detection.accept_scripts is True


def test_environment_overrides_files(tmp_path: Path) -> None:
    (tmp_path / "whatexec.toml").write_text("[cache]\ndirectories_ttl = 60\n", encoding="utf-8")
    env = {
        "WHATEXEC_CACHE": "off",
        "WHATEXEC_DIRECTORIES_TTL": "5",
        "WHATEXEC_EXTENSIONS_TTL": "7.5",
        "WHATEXEC_MAX_WORKERS": "3",
        "WHATEXEC_SEARCH_DEPTH": "2",
    }

    config = load_config(tmp_path, env=env)

    assert config.cache.enabled is False
    assert config.cache.directories_ttl == 5
    assert config.cache.extensions_ttl == 7.5
    assert config.search.max_workers == 3
    assert config.search.search_depth == 2


@pytest.mark.parametrize(
    ("env", "fragment"),
    [
        ({"WHATEXEC_CACHE": "maybe"}, "WHATEXEC_CACHE"),
        ({"WHATEXEC_DIRECTORIES_TTL": "0"}, "Invalid configuration"),
        ({"WHATEXEC_MAX_WORKERS": "none"}, "Invalid configuration"),
    ],
)
def test_invalid_environment_values_raise_config_error(tmp_path: Path, env: dict[str, str], fragment: str) -> None:
    with pytest.raises(ConfigError, match=fragment):
        load_config(tmp_path, env=env)


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    (tmp_path / "whatexec.toml").write_text("[search]\nunknown = 1\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path, env={})


def test_malformed_toml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / "whatexec.toml").write_text("[search\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Unable to parse"):
        load_config(tmp_path, env={})


def test_build_engine_wraps_path_environment_in_cache() -> None:
    cache = TtlCache()

    engine = build_engine(platform=HostPlatform.LINUX, environ={"PATH": "/usr/bin"}, cache=cache)

    environment = engine.path_resolver.environment
    assert isinstance(environment, CachedPathEnvironment)
    assert environment.directories() == ["/usr/bin"]


def test_build_engine_without_cache_reads_environment_directly() -> None:
    config = WhatExecConfig()
    config.cache.enabled = False
    config.search.max_workers = 2

    engine = build_engine(config, platform=HostPlatform.LINUX, environ={"PATH": "/usr/bin"})

    assert isinstance(engine.path_resolver.environment, PathEnvironmentReader)
    assert engine.searcher.max_workers == 2
