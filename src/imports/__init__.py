"""Import extraction for supported source languages."""

from imports.javascript import extract_js_imports
from imports.models import ImportRef
from imports.python import extract_python_imports

PYTHON_EXTENSIONS = frozenset({".py"})

__all__ = [
    "PYTHON_EXTENSIONS",
    "ImportRef",
    "extract_js_imports",
    "extract_python_imports",
]
