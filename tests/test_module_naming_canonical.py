from __future__ import annotations

from pathlib import Path

import pytest

from resolve.specifiers import build_module_index
from utils import normalize_rel, path_to_module


def test_path_to_module_strips_source_root() -> None:
    assert path_to_module("src/shop/__init__.py", "src") == "shop"
    assert path_to_module("src/shop/domain/order.py", "src") == "shop.domain.order"
    assert path_to_module("src/shop/domain/order.py", "./src/") == "shop.domain.order"


def test_path_to_module_without_source_root() -> None:
    assert path_to_module("pkg/module.py") == "pkg.module"
    assert path_to_module("pkg/__init__.py", ".") == "pkg"
    assert path_to_module(Path("nested/feature/tool.py")) == "nested.feature.tool"


def test_path_to_module_rejects_unusable_paths() -> None:
    with pytest.raises(ValueError, match="non-empty"):
        path_to_module("__init__.py")

    with pytest.raises(ValueError, match="non-empty"):
        path_to_module("src/__init__.py", "src")

    with pytest.raises(ValueError, match="non-empty"):
        path_to_module("my-scripts/run.py")

    with pytest.raises(ValueError, match="not under source root"):
        path_to_module("lib/shop.py", "src")


def test_normalize_rel() -> None:
    assert normalize_rel("./src//shop/") == "src/shop"
    assert normalize_rel("src\\shop\\a.py") == "src/shop/a.py"


def test_module_index_prefers_first_source_root() -> None:
    index = build_module_index(
        ["src/shop/a.py", "shop/a.py", "src/other.py", "web/app.ts"],
        ["src", "."],
    )

    assert index == {
        "shop.a": "src/shop/a.py",
        "other": "src/other.py",
    }
