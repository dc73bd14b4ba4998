"""Determinism verification for stored layercheck reports."""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from analysis import run_analysis
from report.render import render_structured

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import CheckConfig


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    diff: tuple[str, ...] = field(default_factory=tuple)


def verify_report(*, root: Path, config: CheckConfig, report_path: Path) -> DeterminismResult:
    """Verify that a stored structured report matches a fresh run.

    Re-runs the analysis and compares the structured payload byte-for-byte
    against ``report_path``.

    Returns:
        DeterminismResult with ok status and a unified diff of the stored
        and regenerated payloads when they differ.

    Raises:
        FileNotFoundError: If report_path does not exist.
        IsADirectoryError: If report_path is a directory.
    """
    if not report_path.exists():
        msg = f"Report file does not exist: {report_path}"
        raise FileNotFoundError(msg)
    if report_path.is_dir():
        msg = f"Report path is a directory: {report_path}"
        raise IsADirectoryError(msg)

    stored = report_path.read_bytes()
    regenerated = render_structured(run_analysis(root, config).report)
    if stored == regenerated:
        return DeterminismResult(ok=True)

    diff = difflib.unified_diff(
        stored.decode("utf-8", errors="replace").splitlines(),
        regenerated.decode("utf-8").splitlines(),
        fromfile=str(report_path),
        tofile="regenerated",
        lineterm="",
    )
    return DeterminismResult(ok=False, diff=tuple(diff))


__all__ = ["DeterminismResult", "verify_report"]
