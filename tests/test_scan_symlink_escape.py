from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from scan.files import _build_gitignore_matcher, find_source_files

if TYPE_CHECKING:
    from pathlib import Path

posix_only = pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)


def _relative(root: Path, **kwargs) -> list[str]:
    kwargs.setdefault("extensions", [".py"])
    return [path.relative_to(root).as_posix() for path in find_source_files(root, **kwargs)]


@posix_only
def test_symlinked_dirs_and_files_are_not_followed(tmp_path: Path, write_files) -> None:
    repo_root = write_files(tmp_path / "repo", {"pkg/module.py": ""})
    outside = write_files(tmp_path / "outside", {"leak.py": "", "single.py": ""})
    (repo_root / "linked").symlink_to(outside, target_is_directory=True)
    (repo_root / "pkg" / "alias.py").symlink_to(outside / "single.py")

    assert _relative(repo_root) == ["pkg/module.py"]


@posix_only
def test_nested_gitignore_ignores_symlinked_gitignore(tmp_path: Path, write_files) -> None:
    repo_root = write_files(tmp_path / "repo", {"pkg/module.py": "", ".gitignore": "*.bin\n"})
    outside = write_files(tmp_path / "outside", {"hostile/.gitignore": "module.py\n"})
    (repo_root / "pkg" / ".gitignore").symlink_to(outside / "hostile" / ".gitignore")

    matcher = _build_gitignore_matcher(repo_root, nested_gitignore=True)

    assert matcher is not None
    assert not matcher(str(repo_root / "pkg" / "module.py"))
    assert _relative(repo_root, nested_gitignore=True) == ["pkg/module.py"]


def test_nested_gitignore_only_when_enabled(tmp_path: Path, write_files) -> None:
    repo_root = write_files(
        tmp_path / "repo",
        {"pkg/keep.py": "", "pkg/generated.py": "", "pkg/.gitignore": "generated.py\n"},
    )

    assert _relative(repo_root) == ["pkg/generated.py", "pkg/keep.py"]
    assert _relative(repo_root, nested_gitignore=True) == ["pkg/keep.py"]


def test_skipped_dirs_are_pruned(tmp_path: Path, write_files) -> None:
    repo_root = write_files(
        tmp_path / "repo",
        {
            "app.js": "",
            "node_modules/react/index.js": "",
            ".venv/lib/site.py": "",
            "pkg/__pycache__/mod.py": "",
        },
    )

    assert _relative(repo_root, extensions=[".js", ".py"]) == ["app.js"]


def test_extension_include_and_exclude_filters(tmp_path: Path, write_files) -> None:
    repo_root = write_files(
        tmp_path / "repo",
        {"src/a.py": "", "src/b.ts": "", "src/c.md": "", "src/gen/d.py": "", "docs/e.py": ""},
    )

    assert _relative(
        repo_root,
        extensions=[".py", ".ts"],
        include_patterns=["src/*"],
        exclude_patterns=["src/gen/*"],
    ) == ["src/a.py", "src/b.ts"]
