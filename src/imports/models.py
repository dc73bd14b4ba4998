"""Raw import references, before resolution."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ImportRef:
    """One syntactic import found in a source file.

    ``level`` is the number of leading dots of a Python relative import and
    0 for everything else. ``names`` holds the imported names of a Python
    ``from`` import; it is empty for plain imports and JavaScript.
    """

    line: int
    module: str
    names: tuple[str, ...] = ()
    level: int = 0
    language: str = "python"

    @property
    def specifier(self) -> str:
        return "." * self.level + self.module


__all__ = ["ImportRef"]
