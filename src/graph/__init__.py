"""Module graph model and algorithms."""

from graph.algos import (
    cycle_findings,
    find_cycles,
    shortest_path,
    strongly_connected_components,
)
from graph.models import BrokenImport, CycleFinding, Edge, ModuleGraph, ModuleNode

__all__ = [
    "BrokenImport",
    "CycleFinding",
    "Edge",
    "ModuleGraph",
    "ModuleNode",
    "cycle_findings",
    "find_cycles",
    "shortest_path",
    "strongly_connected_components",
]
