"""Module resolution: files and import specifiers to graph edges."""

from resolve.resolver import FileImports, analyze_file, build_module_graph, validate_root
from resolve.specifiers import (
    ProjectIndex,
    Resolution,
    build_module_index,
    resolve_js_ref,
    resolve_python_ref,
)

__all__ = [
    "FileImports",
    "ProjectIndex",
    "Resolution",
    "analyze_file",
    "build_module_graph",
    "build_module_index",
    "resolve_js_ref",
    "resolve_python_ref",
    "validate_root",
]
