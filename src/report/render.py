"""Report rendering for the console and for machines."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson

if TYPE_CHECKING:
    from report.models import Report, ReportRecord


def render_structured(report: Report) -> bytes:
    """Serialize ``report`` as deterministic JSON (sorted keys, 2-space indent)."""
    payload = report.model_dump(mode="json", by_alias=True)
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    return orjson.dumps(payload, option=opts) + b"\n"


def _format_record(record: ReportRecord) -> str:
    where = record.source_path
    if record.cycle:
        where = " -> ".join((*record.cycle, record.cycle[0]))
    elif record.target_path is not None:
        where = f"{record.source_path} -> {record.target_path}"

    details: list[str] = []
    if record.source_layer and record.target_layer:
        details.append(f"{record.source_layer} -> {record.target_layer}")
    if record.specifier is not None:
        details.append(f"import {record.specifier!r}")
    suffix = f" [{'; '.join(details)}]" if details else ""

    return (
        f"{record.severity.upper():<7} {record.reason_code.value}: {where}{suffix}\n"
        f"        {record.message}"
    )


def render_text(report: Report) -> str:
    lines = [_format_record(record) for record in report.records]
    summary = report.summary
    lines.append(
        f"{summary.verdict.upper()}: {summary.total_files} files, "
        f"{summary.total_edges} edges, {summary.violation_count} violations, "
        f"{summary.cycle_count} cycles "
        f"({summary.broken_import_count} broken imports, "
        f"{summary.ignored_import_count} external imports ignored)"
    )
    return "\n".join(lines) + "\n"


__all__ = ["render_structured", "render_text"]
