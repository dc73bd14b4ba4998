"""One analysis run: resolve, classify, evaluate, detect cycles, report."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from graph.algos import cycle_findings
from report.reporter import build_report
from resolve.resolver import build_module_graph
from rules.layers import classify_graph
from rules.policy import PolicyMatrix, evaluate_policy
from utils import Deadline

if TYPE_CHECKING:
    from pathlib import Path

    from graph.models import CycleFinding, ModuleGraph
    from report.models import Report
    from rules.config import CheckConfig
    from rules.policy import Violation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    graph: ModuleGraph
    violations: frozenset[Violation]
    cycles: tuple[CycleFinding, ...]
    report: Report

    @property
    def passed(self) -> bool:
        return self.report.passed


def run_analysis(root: Path, config: CheckConfig) -> AnalysisResult:
    """Analyze the project at ``root`` from scratch.

    Nothing is cached between runs; ``config`` is only read.

    Raises:
        InvalidRootError: If ``root`` is not a directory.
        AnalysisTimeoutError: If ``config.timeout`` expires; no partial
            result is returned.
    """
    deadline = Deadline(config.timeout)

    graph = build_module_graph(root, config, deadline=deadline)
    graph = classify_graph(graph, config.layers)

    matrix = PolicyMatrix.from_config(config.layers)
    violations = evaluate_policy(graph, matrix, config.layers.unclassified)
    deadline.check("policy")

    cycles = cycle_findings(graph)
    deadline.check("cycles")

    report = build_report(graph, violations, cycles, config.report)
    logger.info(
        "Verdict %s: %d violations, %d cycles",
        report.summary.verdict,
        report.summary.violation_count,
        report.summary.cycle_count,
    )
    return AnalysisResult(graph=graph, violations=violations, cycles=cycles, report=report)


__all__ = ["AnalysisResult", "run_analysis"]
