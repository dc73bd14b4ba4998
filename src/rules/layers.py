"""Layer classification."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import TYPE_CHECKING

from rules.config import UNCLASSIFIED

if TYPE_CHECKING:
    from graph.models import ModuleGraph
    from rules.config import LayersConfig


def classify_layer(path: str, layers_config: LayersConfig) -> str:
    """Classify a root-relative file path into an architectural layer.

    Uses first-match-wins semantics: the first layer definition whose
    glob patterns match the path determines the layer. Later, more specific
    definitions never override an earlier broad one, so put narrow globs
    first. Paths matching nothing are ``Unclassified``.
    """
    for layer_def in layers_config.layer:
        for glob_pattern in layer_def.globs:
            if fnmatch(path, glob_pattern):
                return layer_def.name
    return UNCLASSIFIED


def classify_graph(graph: ModuleGraph, layers_config: LayersConfig) -> ModuleGraph:
    """Return ``graph`` with every node tagged with exactly one layer."""
    return graph.with_layers(
        [classify_layer(node.path, layers_config) for node in graph.nodes]
    )


__all__ = ["classify_graph", "classify_layer"]
