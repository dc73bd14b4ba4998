"""Shared fixtures for layercheck tests."""

from __future__ import annotations

import tomllib
from typing import TYPE_CHECKING

import pytest

from rules.config import CheckConfig

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

HEXAGONAL_TOML = """
[[layers.layer]]
name = "Domain"
globs = ["src/domain/*"]

[[layers.layer]]
name = "Application"
globs = ["src/application/*"]

[[layers.layer]]
name = "Infrastructure"
globs = ["src/infrastructure/*"]

[[layers.rules]]
from = "Domain"
to = ["Domain"]

[[layers.rules]]
from = "Application"
to = ["Application", "Domain"]

[[layers.rules]]
from = "Infrastructure"
to = ["Infrastructure", "Application", "Domain"]
"""


def _write_files(root: Path, files: dict[str, str]) -> Path:
    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def write_files() -> Callable[[Path, dict[str, str]], Path]:
    """Write ``{relative_path: content}`` under a root and return the root."""
    return _write_files


@pytest.fixture
def hexagonal_config() -> CheckConfig:
    return CheckConfig.model_validate(tomllib.loads(HEXAGONAL_TOML))


@pytest.fixture
def hexagonal_toml() -> str:
    return HEXAGONAL_TOML
