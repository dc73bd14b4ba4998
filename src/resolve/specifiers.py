"""Resolution of import specifiers to project files."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from imports import PYTHON_EXTENSIONS
from utils import path_to_module

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from imports import ImportRef

ResolutionStatus = Literal["internal", "external", "broken"]


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one specifier.

    ``target`` is the project file for ``internal`` results and the
    attempted root-relative path (or None when it escaped the root) for
    ``broken`` ones.
    """

    specifier: str
    line: int
    status: ResolutionStatus
    target: str | None = None


@dataclass(frozen=True)
class ProjectIndex:
    """Everything resolution needs to know about the discovered files."""

    root: Path
    files: frozenset[str]
    modules: Mapping[str, str]
    js_extensions: tuple[str, ...]
    aliases: Mapping[str, str]

    @classmethod
    def build(
        cls,
        root: Path,
        files: Iterable[str],
        *,
        source_roots: Iterable[str],
        extensions: Iterable[str],
        aliases: Mapping[str, str],
    ) -> ProjectIndex:
        file_set = frozenset(files)
        return cls(
            root=root,
            files=file_set,
            modules=build_module_index(sorted(file_set), source_roots),
            js_extensions=tuple(e for e in extensions if e not in PYTHON_EXTENSIONS),
            aliases=dict(aliases),
        )

    def find(self, candidates: Iterable[str]) -> tuple[ResolutionStatus, str] | None:
        """Return the first candidate that exists.

        Scanned files are ``internal``; files that exist but were filtered out
        of the scan are ``external`` so they never show up as broken.
        """
        for candidate in candidates:
            if candidate in self.files:
                return "internal", candidate
            if (self.root / candidate).is_file():
                return "external", candidate
        return None


def build_module_index(files: Iterable[str], source_roots: Iterable[str]) -> dict[str, str]:
    """Map dotted Python module names to files, first source root wins."""
    roots = list(source_roots)
    module_to_file: dict[str, str] = {}
    for rel in files:
        if posixpath.splitext(rel)[1] not in PYTHON_EXTENSIONS:
            continue
        for source_root in roots:
            try:
                module = path_to_module(rel, source_root)
            except ValueError:
                continue
            module_to_file.setdefault(module, rel)
            break
    return module_to_file


def _python_candidates(parts: list[str]) -> list[str]:
    if not parts:
        return []
    stem = "/".join(parts)
    return [f"{stem}.py", f"{stem}/__init__.py"]


def _resolve_module_name(modules: Mapping[str, str], module: str) -> str | None:
    """Longest dotted prefix of ``module`` that is a project module."""
    current = module.strip(".")
    while current:
        hit = modules.get(current)
        if hit is not None:
            return hit
        if "." not in current:
            break
        current = current.rsplit(".", 1)[0]
    return None


def _resolve_python_absolute(index: ProjectIndex, ref: ImportRef) -> list[Resolution]:
    results: list[Resolution] = []
    leftover = not ref.names

    for name in ref.names:
        specifier = f"{ref.module}.{name}"
        target = index.modules.get(specifier)
        if target is not None:
            results.append(Resolution(specifier, ref.line, "internal", target))
        else:
            leftover = True

    if leftover:
        target = _resolve_module_name(index.modules, ref.module)
        if target is None:
            results.append(Resolution(ref.module, ref.line, "external"))
        else:
            results.append(Resolution(ref.module, ref.line, "internal", target))

    return results


def _resolve_python_relative(
    index: ProjectIndex, from_rel: str, ref: ImportRef
) -> list[Resolution]:
    dots = "." * ref.level
    base_parts = from_rel.split("/")[:-1]
    climb = ref.level - 1
    if climb > len(base_parts):
        return [Resolution(ref.specifier, ref.line, "broken")]
    package = base_parts[: len(base_parts) - climb]
    module_parts = ref.module.split(".") if ref.module else []
    target_parts = package + module_parts

    results: list[Resolution] = []
    leftover: list[str] = []
    for name in ref.names:
        specifier = f"{ref.specifier}.{name}" if ref.module else f"{dots}{name}"
        hit = index.find(_python_candidates([*target_parts, name]))
        if hit is None:
            leftover.append(name)
        else:
            results.append(Resolution(specifier, ref.line, *hit))

    if not ref.names or leftover:
        if module_parts:
            hit = index.find(_python_candidates(target_parts))
        else:
            hit = index.find(["/".join([*target_parts, "__init__.py"])])
        if hit is not None:
            results.append(Resolution(ref.specifier, ref.line, *hit))
        elif module_parts or not leftover:
            candidate = "/".join(target_parts) or None
            results.append(Resolution(ref.specifier, ref.line, "broken", candidate))
        else:
            for name in leftover:
                results.append(
                    Resolution(
                        f"{dots}{name}",
                        ref.line,
                        "broken",
                        "/".join([*target_parts, name]),
                    )
                )

    return results


def resolve_python_ref(index: ProjectIndex, from_rel: str, ref: ImportRef) -> list[Resolution]:
    """Resolve a Python import to zero or more resolutions.

    ``from pkg import a, b`` can point at submodules ``pkg/a.py`` and
    ``pkg/b.py`` as well as ``pkg`` itself, so one statement may yield
    several resolutions with distinct specifiers.
    """
    if ref.level == 0:
        return _resolve_python_absolute(index, ref)
    return _resolve_python_relative(index, from_rel, ref)


def _apply_alias(specifier: str, aliases: Mapping[str, str]) -> str | None:
    best_key: str | None = None
    for key in aliases:
        if specifier.startswith(key) and (best_key is None or len(key) > len(best_key)):
            best_key = key
    if best_key is None:
        return None
    prefix = aliases[best_key].strip("/")
    rest = specifier[len(best_key) :].lstrip("/")
    return f"{prefix}/{rest}" if prefix and rest else prefix or rest


def _is_relative(specifier: str) -> bool:
    return specifier in {".", ".."} or specifier.startswith(("./", "../"))


def resolve_js_ref(index: ProjectIndex, from_rel: str, ref: ImportRef) -> list[Resolution]:
    """Resolve a JavaScript/TypeScript specifier.

    Order: exact path, each configured extension appended, then
    ``<dir>/index<ext>``. Bare package names are external.
    """
    specifier = ref.module
    aliased = _apply_alias(specifier, index.aliases)
    if aliased is not None:
        joined = aliased
    elif _is_relative(specifier):
        joined = posixpath.join(posixpath.dirname(from_rel), specifier)
    else:
        return [Resolution(specifier, ref.line, "external")]

    normalized = posixpath.normpath(joined) if joined else "."
    if normalized == ".." or normalized.startswith("../") or normalized.startswith("/"):
        return [Resolution(specifier, ref.line, "broken")]
    if normalized == ".":
        normalized = ""

    candidates: list[str] = []
    if normalized:
        candidates.append(normalized)
        candidates.extend(f"{normalized}{ext}" for ext in index.js_extensions)
    prefix = f"{normalized}/" if normalized else ""
    candidates.extend(f"{prefix}index{ext}" for ext in index.js_extensions)

    hit = index.find(candidates)
    if hit is None:
        return [Resolution(specifier, ref.line, "broken", normalized or None)]
    return [Resolution(specifier, ref.line, *hit)]


__all__ = [
    "ProjectIndex",
    "Resolution",
    "build_module_index",
    "resolve_js_ref",
    "resolve_python_ref",
]
