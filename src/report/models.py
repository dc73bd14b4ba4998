"""Report payload models.

Field names are serialized in camelCase and are a stable contract for
downstream tooling.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from rules.config import ReasonCode

# Schema version constant
SCHEMA_VERSION = 1

Severity = Literal["error", "warning"]
Verdict = Literal["pass", "fail"]


class _Payload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )


class ReportRecord(_Payload):
    """One finding in the report."""

    severity: Severity
    reason_code: ReasonCode
    source_path: str
    target_path: str | None = None
    specifier: str | None = None
    source_layer: str | None = None
    target_layer: str | None = None
    message: str
    cycle: tuple[str, ...] = Field(default=())


class ReportSummary(_Payload):
    """Totals for one run."""

    total_files: int
    total_edges: int
    violation_count: int
    cycle_count: int
    broken_import_count: int
    ignored_import_count: int
    verdict: Verdict


class Report(_Payload):
    schema_version: int = Field(default=SCHEMA_VERSION)
    records: tuple[ReportRecord, ...] = Field(default=())
    summary: ReportSummary

    @property
    def passed(self) -> bool:
        return self.summary.verdict == "pass"


__all__ = ["SCHEMA_VERSION", "Report", "ReportRecord", "ReportSummary", "Severity", "Verdict"]
