"""Evaluation of classified import edges against the allowed-dependency matrix."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from rules.config import UNCLASSIFIED, ReasonCode

if TYPE_CHECKING:
    from collections.abc import Mapping

    from graph.models import ModuleGraph
    from rules.config import LayersConfig, UnclassifiedBehavior


@dataclass(frozen=True)
class PolicyMatrix:
    """Layer -> layers it may depend on. Every layer, plus Unclassified, is a key."""

    allowed: Mapping[str, frozenset[str]]

    @classmethod
    def from_config(cls, layers_config: LayersConfig) -> PolicyMatrix:
        allowed: dict[str, frozenset[str]] = {
            layer.name: frozenset() for layer in layers_config.layer
        }
        allowed[UNCLASSIFIED] = frozenset()
        for rule in layers_config.rules:
            allowed[rule.from_layer] = frozenset(rule.to)
        return cls(allowed=MappingProxyType(allowed))

    def permits(self, source_layer: str, target_layer: str) -> bool:
        return target_layer in self.allowed.get(source_layer, frozenset())


@dataclass(frozen=True)
class Violation:
    """A finding produced by the policy engine.

    ``target_path`` and ``specifier`` are None for per-file
    ``UnclassifiedModule`` findings, which are not tied to an edge.
    """

    reason: ReasonCode
    source_path: str
    target_path: str | None
    specifier: str | None
    source_layer: str
    target_layer: str | None


def _unclassified_files(graph: ModuleGraph) -> set[Violation]:
    return {
        Violation(
            reason=ReasonCode.UNCLASSIFIED_MODULE,
            source_path=node.path,
            target_path=None,
            specifier=None,
            source_layer=UNCLASSIFIED,
            target_layer=None,
        )
        for node in graph.nodes
        if node.layer == UNCLASSIFIED
    }


def evaluate_policy(
    graph: ModuleGraph,
    matrix: PolicyMatrix,
    unclassified: UnclassifiedBehavior = "deny",
) -> frozenset[Violation]:
    """Return every violation in a classified graph.

    - Both ends classified: violation iff the target layer is not in the
      source layer's allowed set (``LayerBoundaryViolation``).
    - ``deny``: each unclassified file is one ``UnclassifiedModule``
      finding; its edges are not judged again.
    - ``allow``: edges touching unclassified files are judged by the
      matrix and failures are ``UnclassifiedModule``.
    - ``ignore``: edges touching unclassified files are skipped.

    The result is a set, so evaluation order cannot change it.
    """
    violations: set[Violation] = set()
    if unclassified == "deny":
        violations |= _unclassified_files(graph)

    for edge in graph.edges:
        source = graph.nodes[edge.source]
        target = graph.nodes[edge.target]
        source_layer = source.layer or UNCLASSIFIED
        target_layer = target.layer or UNCLASSIFIED
        touches_unclassified = UNCLASSIFIED in (source_layer, target_layer)

        if touches_unclassified and unclassified != "allow":
            continue
        if matrix.permits(source_layer, target_layer):
            continue

        violations.add(
            Violation(
                reason=(
                    ReasonCode.UNCLASSIFIED_MODULE
                    if touches_unclassified
                    else ReasonCode.LAYER_BOUNDARY
                ),
                source_path=source.path,
                target_path=target.path,
                specifier=edge.specifier,
                source_layer=source_layer,
                target_layer=target_layer,
            )
        )

    return frozenset(violations)


__all__ = ["PolicyMatrix", "Violation", "evaluate_policy"]
