"""Source file discovery for layercheck."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterator

logger = logging.getLogger(__name__)

SKIPPED_DIRS = frozenset({".git", ".hg", ".venv", "venv", "__pycache__", "node_modules"})


@dataclass(frozen=True)
class _PathFilter:
    """Include/exclude globs applied to root-relative POSIX paths."""

    include: tuple[str, ...]
    exclude: tuple[str, ...]

    def accepts(self, rel: str) -> bool:
        if self.include and not any(fnmatch(rel, pat) for pat in self.include):
            return False
        return not any(fnmatch(rel, pat) for pat in self.exclude)


def _resolves_inside(path: Path, root: Path) -> bool:
    try:
        return path.resolve().is_relative_to(root)
    except OSError:
        return False


def _gitignore_files(root: Path) -> list[Path]:
    """Real (non-symlinked) .gitignore files under ``root``, shallowest first."""
    found = [
        path
        for path in root.rglob(".gitignore")
        if path.is_file()
        and not path.is_symlink()
        and not SKIPPED_DIRS.intersection(path.relative_to(root).parts)
    ]
    return sorted(found, key=lambda p: (len(p.relative_to(root).parts), p.as_posix()))


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> Callable[[str], bool] | None:
    """Return a predicate over absolute path strings, or None if nothing is ignored."""
    if nested_gitignore:
        sources = _gitignore_files(root)
    else:
        top = root / ".gitignore"
        sources = [top] if top.is_file() and not top.is_symlink() else []

    if not sources:
        return None
    if not nested_gitignore:
        return cast("Callable[[str], bool]", parse_gitignore(sources[0]))

    matchers = [parse_gitignore(path) for path in sources]

    def matches(path_str: str) -> bool:
        # A nested matcher raises ValueError for paths outside its own directory.
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                continue
        return False

    return matches


def _walk(root: Path, ignored: Callable[[str], bool] | None) -> Iterator[Path]:
    """Yield regular files under ``root`` without following symlinks."""
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        dirnames[:] = [
            name
            for name in dirnames
            if name not in SKIPPED_DIRS
            and not (current / name).is_symlink()
            and not (ignored is not None and ignored(str(current / name)))
        ]
        for name in filenames:
            path = current / name
            if path.is_symlink() or not path.is_file():
                continue
            yield path


def find_source_files(
    directory: Path,
    *,
    extensions: Collection[str],
    include_patterns: Collection[str] | None = None,
    exclude_patterns: Collection[str] | None = None,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Find all source files in a directory, respecting .gitignore.

    Args:
        directory: Directory to search
        extensions: File suffixes to collect (e.g. ``{".py", ".ts"}``)
        include_patterns: Optional fnmatch patterns; when given, a file
            must match at least one
        exclude_patterns: Optional fnmatch patterns; a file matching any
            of them is dropped
        nested_gitignore: Compose every .gitignore under ``directory``
            instead of only the root one

    Yields:
        Paths sorted by their root-relative POSIX form, so discovery order
        never depends on the filesystem.
    """
    root = directory.resolve()
    ignored = _build_gitignore_matcher(root, nested_gitignore=nested_gitignore)
    path_filter = _PathFilter(
        include=tuple(include_patterns or ()),
        exclude=tuple(exclude_patterns or ()),
    )
    suffixes = frozenset(extensions)

    matched: dict[str, Path] = {}
    for path in _walk(root, ignored):
        if path.suffix not in suffixes or not _resolves_inside(path, root):
            continue
        rel = path.relative_to(root).as_posix()
        if ignored is not None and ignored(str(path)):
            continue
        if path_filter.accepts(rel):
            matched[rel] = directory / rel

    logger.debug("Discovered %d source files under %s", len(matched), directory)
    for rel in sorted(matched):
        yield matched[rel]


__all__ = ["SKIPPED_DIRS", "find_source_files"]
