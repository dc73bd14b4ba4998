"""Regex-based import extraction for JavaScript and TypeScript sources."""

from __future__ import annotations

import re

from imports.models import ImportRef

JS_IMPORT_RE = re.compile(
    r"""
    (?:
      \bimport\s+(?:type\s+)?(?:[\w*\s{},$]*\s+from\s+)? |
      \bexport\s+(?:type\s+)?(?:[\w*\s{},$]*\s+from\s+) |
      \brequire\s*\(\s* |
      \bimport\s*\(\s*
    )
    ['"](?P<specifier>[^'"\n]+)['"]
    """,
    re.VERBOSE,
)

_STRING_OR_COMMENT_RE = re.compile(
    r"""
    (?P<string>
      '(?:\\.|[^'\\\n])*' |
      "(?:\\.|[^"\\\n])*" |
      `(?:\\.|[^`\\])*`
    ) |
    (?P<comment>
      /\*.*?(?:\*/|\Z) |
      //[^\n]*
    )
    """,
    re.VERBOSE | re.DOTALL,
)


def _blank_comments(text: str) -> str:
    """Replace comments with spaces, keeping offsets and line numbers.

    String and template literals are matched first and left intact, so a
    ``/*`` or ``//`` inside a string never starts a comment.
    """

    def _blank(match: re.Match[str]) -> str:
        if match.group("string") is not None:
            return match.group(0)
        return "".join("\n" if ch == "\n" else " " for ch in match.group(0))

    return _STRING_OR_COMMENT_RE.sub(_blank, text)


def _line_number(text: str, idx: int) -> int:
    return text.count("\n", 0, idx) + 1


def extract_js_imports(text: str) -> list[ImportRef]:
    """Extract static ``import``/``export from``/``require``/``import()`` specifiers."""
    code = _blank_comments(text)
    refs: list[ImportRef] = []
    for match in JS_IMPORT_RE.finditer(code):
        specifier = match.group("specifier").strip()
        if not specifier:
            continue
        refs.append(
            ImportRef(
                line=_line_number(code, match.start()),
                module=specifier,
                language="javascript",
            )
        )
    return refs


__all__ = ["JS_IMPORT_RE", "extract_js_imports"]
