"""Aggregation of findings into a sorted report with a verdict."""

from __future__ import annotations

from typing import TYPE_CHECKING

from report.models import Report, ReportRecord, ReportSummary
from rules.config import ReasonCode

if TYPE_CHECKING:
    from collections.abc import Iterable

    from graph.models import CycleFinding, ModuleGraph
    from report.models import Severity
    from rules.config import ReportConfig
    from rules.policy import Violation


def _violation_message(violation: Violation) -> str:
    if violation.reason == ReasonCode.LAYER_BOUNDARY:
        return (
            f"{violation.source_layer} must not depend on {violation.target_layer}. "
            "Depend on a port owned by an allowed layer, or invert the dependency."
        )
    if violation.target_path is None:
        return (
            "File matches no layer rule. Add a layer glob that covers it, "
            "or exclude it from the scan."
        )
    return (
        f"Dependency {violation.source_layer} -> {violation.target_layer} involves "
        "a file that matches no layer rule and is not permitted by the policy."
    )


def _cycle_message(finding: CycleFinding) -> str:
    chain = " -> ".join((*finding.paths, finding.paths[0]))
    return (
        f"Import cycle of {len(finding.paths)} file(s): {chain}. "
        "Extract the shared code into a module both sides can depend on."
    )


class _RecordBuilder:
    def __init__(self, report_config: ReportConfig) -> None:
        self.blocking = report_config.blocking
        self.rank = {code: i for i, code in enumerate(report_config.severity_order)}
        self.records: dict[tuple[ReasonCode, str, str | None], ReportRecord] = {}

    def severity(self, reason: ReasonCode) -> Severity:
        return "error" if reason in self.blocking else "warning"

    def add(self, record: ReportRecord, key_extra: str | None = None) -> None:
        """Keep one record per (reason, source, target), smallest specifier wins."""
        key = (record.reason_code, record.source_path, key_extra or record.target_path)
        current = self.records.get(key)
        if current is None or (record.specifier or "") < (current.specifier or ""):
            self.records[key] = record

    def sorted_records(self) -> tuple[ReportRecord, ...]:
        return tuple(
            sorted(
                self.records.values(),
                key=lambda r: (
                    self.rank[r.reason_code],
                    r.source_path,
                    r.target_path or "",
                    r.specifier or "",
                    r.cycle,
                ),
            )
        )


def _broken_records(graph: ModuleGraph, builder: _RecordBuilder) -> None:
    reason = ReasonCode.BROKEN_IMPORT
    for node in graph.nodes:
        for broken in node.broken_imports:
            builder.add(
                ReportRecord(
                    severity=builder.severity(reason),
                    reason_code=reason,
                    source_path=node.path,
                    target_path=broken.candidate,
                    specifier=broken.specifier,
                    source_layer=node.layer,
                    message=(
                        f"Import {broken.specifier!r} (line {broken.line}) does not "
                        "resolve to a project file. Fix the path or remove the import."
                    ),
                ),
                key_extra=f"{broken.candidate}\0{broken.specifier}",
            )


def build_report(
    graph: ModuleGraph,
    violations: Iterable[Violation],
    cycles: Iterable[CycleFinding],
    report_config: ReportConfig,
) -> Report:
    """Merge broken imports, policy violations and cycles into one report.

    Records are ordered by severity rank, then source path, then target
    path, so identical input always produces an identical report.
    """
    builder = _RecordBuilder(report_config)

    _broken_records(graph, builder)

    for violation in violations:
        builder.add(
            ReportRecord(
                severity=builder.severity(violation.reason),
                reason_code=violation.reason,
                source_path=violation.source_path,
                target_path=violation.target_path,
                specifier=violation.specifier,
                source_layer=violation.source_layer,
                target_layer=violation.target_layer,
                message=_violation_message(violation),
            )
        )

    reason = ReasonCode.CYCLE
    for finding in cycles:
        builder.add(
            ReportRecord(
                severity=builder.severity(reason),
                reason_code=reason,
                source_path=finding.paths[0],
                target_path=finding.paths[1 % len(finding.paths)],
                message=_cycle_message(finding),
                cycle=finding.paths,
            ),
            key_extra="\0".join(finding.paths),
        )

    records = builder.sorted_records()
    cycle_count = sum(1 for r in records if r.reason_code == ReasonCode.CYCLE)
    verdict = "fail" if any(r.reason_code in builder.blocking for r in records) else "pass"

    summary = ReportSummary(
        total_files=len(graph.nodes),
        total_edges=len(graph.edges),
        violation_count=len(records) - cycle_count,
        cycle_count=cycle_count,
        broken_import_count=sum(
            1 for r in records if r.reason_code == ReasonCode.BROKEN_IMPORT
        ),
        ignored_import_count=sum(len(node.ignored) for node in graph.nodes),
        verdict=verdict,
    )
    return Report(records=records, summary=summary)


__all__ = ["build_report"]
