"""Index-based module graph for one analysis run.

Nodes live in a tuple (the arena) sorted by path; edges refer to nodes by
their index, so the structure holds no object references between nodes.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from functools import cached_property
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True, order=True)
class BrokenImport:
    """A relative or aliased specifier that resolved to no file.

    Recorded on the importing node and reported with reason code
    ``BrokenImportError``; it never aborts the run.
    """

    specifier: str
    line: int
    candidate: str | None = None


@dataclass(frozen=True)
class ModuleNode:
    """One discovered source file; every node exists on disk."""

    path: str
    specifiers: tuple[str, ...] = ()
    ignored: tuple[str, ...] = ()
    broken_imports: tuple[BrokenImport, ...] = ()
    layer: str | None = None


@dataclass(frozen=True, order=True)
class Edge:
    source: int
    target: int
    specifier: str
    line: int = field(default=0, compare=False)


@dataclass(frozen=True)
class CycleFinding:
    """Files forming one minimal import cycle, starting at the smallest path.

    The last file imports the first.
    """

    paths: tuple[str, ...]


@dataclass(frozen=True)
class ModuleGraph:
    nodes: tuple[ModuleNode, ...]
    edges: tuple[Edge, ...]

    @cached_property
    def index(self) -> dict[str, int]:
        return {node.path: i for i, node in enumerate(self.nodes)}

    @cached_property
    def adjacency(self) -> tuple[tuple[int, ...], ...]:
        """Sorted, de-duplicated successor lists per node index."""
        successors: list[set[int]] = [set() for _ in self.nodes]
        for edge in self.edges:
            successors[edge.source].add(edge.target)
        return tuple(tuple(sorted(targets)) for targets in successors)

    def path_of(self, index: int) -> str:
        return self.nodes[index].path

    def with_layers(self, layers: Sequence[str]) -> ModuleGraph:
        """Return a copy whose nodes carry the given layer tags."""
        if len(layers) != len(self.nodes):
            msg = "layer tags must cover every node"
            raise ValueError(msg)
        nodes = tuple(
            replace(node, layer=layer) for node, layer in zip(self.nodes, layers)
        )
        return ModuleGraph(nodes=nodes, edges=self.edges)


__all__ = ["BrokenImport", "CycleFinding", "Edge", "ModuleGraph", "ModuleNode"]
