"""Shared path helpers for layercheck."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from errors import AnalysisTimeoutError


def normalize_rel(path: str | Path | PurePosixPath) -> str:
    """Return a POSIX, root-relative path string without ``./`` prefixes."""
    path_str = path.as_posix() if isinstance(path, (Path, PurePosixPath)) else str(path)
    parts = [part for part in path_str.replace("\\", "/").split("/") if part and part != "."]
    return "/".join(parts)


def path_to_module(file_path: str | Path, source_root: str = "") -> str:
    """Convert a Python file path to a dotted module name.

    Args:
        file_path: Root-relative file path (e.g., "src/shop/domain/order.py")
        source_root: Directory prefix to strip first (e.g., "src"); "" or "."
            means the project root itself.

    Returns:
        Module name (e.g., "shop.domain.order")

    Raises:
        ValueError: If the path lies outside ``source_root`` or yields an
            empty module name.

    Examples:
        >>> path_to_module("src/shop/domain/order.py", "src")
        'shop.domain.order'
        >>> path_to_module("shop/__init__.py")
        'shop'
    """
    parts = normalize_rel(file_path).split("/")
    root_parts = [part for part in normalize_rel(source_root).split("/") if part]

    if root_parts:
        if parts[: len(root_parts)] != root_parts:
            msg = f"{file_path} is not under source root {source_root!r}"
            raise ValueError(msg)
        parts = parts[len(root_parts) :]

    if parts and parts[-1].endswith(".py"):
        parts[-1] = parts[-1][:-3]

    if parts and parts[-1] == "__init__":
        parts = parts[:-1]

    if not parts or not all(part.isidentifier() for part in parts):
        msg = f"{file_path} does not map to a non-empty importable module name"
        raise ValueError(msg)

    return ".".join(parts)


@dataclass(frozen=True)
class Deadline:
    """Wall-clock budget shared by every stage of one run."""

    timeout: float | None = None
    started: float = field(default_factory=time.monotonic)

    def remaining(self) -> float | None:
        if self.timeout is None:
            return None
        return max(0.0, self.timeout - (time.monotonic() - self.started))

    def check(self, stage: str) -> None:
        """Raise AnalysisTimeoutError if the budget is spent."""
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise AnalysisTimeoutError(self.timeout or 0.0, stage)
