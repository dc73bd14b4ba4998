"""AST-based import extraction for Python sources."""

from __future__ import annotations

import ast

from imports.models import ImportRef


def _process_import_node(node: ast.Import, refs: list[ImportRef]) -> None:
    """Process a standard import node (import x)."""
    for name in node.names:
        refs.append(ImportRef(line=node.lineno, module=name.name))


def _process_import_from_node(node: ast.ImportFrom, refs: list[ImportRef]) -> None:
    """Process a from-import node (from x import y)."""
    names = tuple(alias.name for alias in node.names if alias.name != "*")
    refs.append(
        ImportRef(
            line=node.lineno,
            module=node.module or "",
            names=names,
            level=node.level,
        )
    )


def extract_python_imports(source: str, filename: str = "<unknown>") -> list[ImportRef]:
    """Extract import statements from Python source.

    Imports nested in functions, ``if TYPE_CHECKING`` blocks and ``try``
    bodies are included: all of them name a module the file depends on.

    Raises:
        SyntaxError: If the source cannot be parsed.
    """
    tree = ast.parse(source, filename)
    refs: list[ImportRef] = []

    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            _process_import_node(node, refs)
        elif isinstance(node, ast.ImportFrom):
            _process_import_from_node(node, refs)

    refs.sort(key=lambda ref: (ref.line, ref.specifier, ref.names))
    return refs


__all__ = ["extract_python_imports"]
