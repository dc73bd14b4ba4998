"""Module graph construction: discovery, parsing and resolution."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import TYPE_CHECKING

from errors import AnalysisTimeoutError, InvalidRootError
from graph.models import BrokenImport, Edge, ModuleGraph, ModuleNode
from imports import PYTHON_EXTENSIONS, extract_js_imports, extract_python_imports
from resolve.specifiers import ProjectIndex, resolve_js_ref, resolve_python_ref
from scan.files import find_source_files
from utils import Deadline

if TYPE_CHECKING:
    from pathlib import Path

    from imports import ImportRef
    from resolve.specifiers import Resolution
    from rules.config import CheckConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileImports:
    """Parse and resolution result for one file; written once by one worker."""

    path: str
    specifiers: tuple[str, ...] = ()
    resolutions: tuple[Resolution, ...] = ()


def validate_root(root: Path) -> None:
    if not root.exists():
        raise InvalidRootError(root, "does not exist")
    if not root.is_dir():
        raise InvalidRootError(root, "not a directory")


def _read_refs(index: ProjectIndex, rel: str) -> list[ImportRef]:
    path = index.root / rel
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        logger.warning("Skipping %s: not valid UTF-8", rel)
        return []
    except OSError as exc:
        logger.warning("Skipping %s: %s", rel, exc)
        return []

    if path.suffix in PYTHON_EXTENSIONS:
        try:
            return extract_python_imports(text, rel)
        except SyntaxError as exc:
            logger.warning("Skipping imports of %s: syntax error at line %s", rel, exc.lineno)
            return []
    return extract_js_imports(text)


def analyze_file(index: ProjectIndex, rel: str) -> FileImports:
    """Extract the imports of ``rel`` and resolve them against ``index``."""
    refs = _read_refs(index, rel)
    specifiers = tuple(dict.fromkeys(ref.specifier for ref in refs))
    resolutions: list[Resolution] = []
    for ref in refs:
        if ref.language == "python":
            resolutions.extend(resolve_python_ref(index, rel, ref))
        else:
            resolutions.extend(resolve_js_ref(index, rel, ref))
    return FileImports(path=rel, specifiers=specifiers, resolutions=tuple(resolutions))


def _parse_all(
    index: ProjectIndex,
    files: list[str],
    *,
    workers: int | None,
    deadline: Deadline,
) -> dict[str, FileImports]:
    executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="layercheck")
    try:
        futures = {executor.submit(analyze_file, index, rel): rel for rel in files}
        done, pending = wait(futures, timeout=deadline.remaining())
        if pending:
            raise AnalysisTimeoutError(deadline.timeout or 0.0, "parse")
        return {futures[future]: future.result() for future in done}
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def _build_graph(files: list[str], results: dict[str, FileImports]) -> ModuleGraph:
    position = {path: i for i, path in enumerate(files)}
    nodes: list[ModuleNode] = []
    edges: dict[tuple[int, int, str], Edge] = {}

    for i, path in enumerate(files):
        result = results[path]
        ignored: set[str] = set()
        broken: set[BrokenImport] = set()
        for resolution in result.resolutions:
            if resolution.status == "external":
                ignored.add(resolution.specifier)
            elif resolution.status == "broken":
                broken.add(
                    BrokenImport(
                        specifier=resolution.specifier,
                        line=resolution.line,
                        candidate=resolution.target,
                    )
                )
            elif resolution.target is not None and resolution.target != path:
                key = (i, position[resolution.target], resolution.specifier)
                current = edges.get(key)
                if current is None or resolution.line < current.line:
                    edges[key] = Edge(*key, line=resolution.line)

        nodes.append(
            ModuleNode(
                path=path,
                specifiers=result.specifiers,
                ignored=tuple(sorted(ignored)),
                broken_imports=tuple(sorted(broken)),
            )
        )

    return ModuleGraph(nodes=tuple(nodes), edges=tuple(sorted(edges.values())))


def build_module_graph(
    root: Path,
    config: CheckConfig,
    *,
    deadline: Deadline | None = None,
) -> ModuleGraph:
    """Discover source files under ``root`` and build their import graph.

    File discovery completes before any file is parsed; each file is then
    parsed and resolved independently on a thread pool.

    Raises:
        InvalidRootError: If ``root`` is missing or not a directory.
        AnalysisTimeoutError: If ``deadline`` expires.
    """
    validate_root(root)
    deadline = deadline or Deadline(config.timeout)

    files = [
        path.relative_to(root).as_posix()
        for path in find_source_files(
            root,
            extensions=config.extensions,
            include_patterns=config.include,
            exclude_patterns=config.exclude,
            nested_gitignore=config.nested_gitignore,
        )
    ]
    deadline.check("discover")

    index = ProjectIndex.build(
        root,
        files,
        source_roots=config.source_roots,
        extensions=config.extensions,
        aliases=config.aliases,
    )
    results = _parse_all(index, files, workers=config.workers, deadline=deadline)
    deadline.check("parse")

    graph = _build_graph(files, results)
    logger.info(
        "Resolved %d files, %d internal edges", len(graph.nodes), len(graph.edges)
    )
    return graph


__all__ = ["FileImports", "analyze_file", "build_module_graph", "validate_root"]
