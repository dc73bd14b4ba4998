"""End-to-end analysis runs on small hexagonal projects."""

from __future__ import annotations

from typing import TYPE_CHECKING

from analysis import run_analysis
from report.render import render_structured
from rules.config import ReasonCode

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import CheckConfig


def _codes(result) -> list[ReasonCode]:
    return [record.reason_code for record in result.report.records]


def test_domain_importing_infrastructure_fails(
    tmp_path: Path, write_files, hexagonal_config: CheckConfig
) -> None:
    root = write_files(
        tmp_path,
        {
            "src/domain/a.py": "from ..infrastructure import b\n",
            "src/infrastructure/b.py": "",
        },
    )

    result = run_analysis(root, hexagonal_config)

    assert _codes(result) == [ReasonCode.LAYER_BOUNDARY]
    record = result.report.records[0]
    assert record.source_path == "src/domain/a.py"
    assert record.target_path == "src/infrastructure/b.py"
    assert record.source_layer == "Domain"
    assert record.target_layer == "Infrastructure"
    assert record.severity == "error"
    assert not result.passed


def test_infrastructure_depending_inward_passes(
    tmp_path: Path, write_files, hexagonal_config: CheckConfig
) -> None:
    root = write_files(
        tmp_path,
        {
            "src/domain/order.py": "",
            "src/application/service.py": "from ..domain import order\n",
            "src/infrastructure/repo.py": (
                "from ..domain import order\nfrom ..application import service\n"
            ),
        },
    )

    result = run_analysis(root, hexagonal_config)

    assert result.report.records == ()
    assert result.report.summary.total_edges == 3
    assert result.passed


def test_unclassified_file_reported_once(
    tmp_path: Path, write_files, hexagonal_config: CheckConfig
) -> None:
    root = write_files(
        tmp_path,
        {
            "src/domain/order.py": "",
            "scripts/seed.py": "import os\n",
            "scripts/other.py": "from . import seed\n",
            "src/application/uses_script.py": "import scripts.seed\n",
        },
    )

    result = run_analysis(root, hexagonal_config)

    unclassified = [
        r for r in result.report.records if r.reason_code == ReasonCode.UNCLASSIFIED_MODULE
    ]
    assert sorted(r.source_path for r in unclassified) == [
        "scripts/other.py",
        "scripts/seed.py",
    ]
    assert all(r.target_path is None for r in unclassified)
    assert not result.passed


def test_unclassified_ignore_mode_passes(
    tmp_path: Path, write_files, hexagonal_config: CheckConfig
) -> None:
    root = write_files(tmp_path, {"scripts/seed.py": "", "src/domain/a.py": ""})
    layers = hexagonal_config.layers.model_copy(update={"unclassified": "ignore"})
    config = hexagonal_config.model_copy(update={"layers": layers})

    result = run_analysis(root, config)

    assert result.report.records == ()
    assert result.passed


def test_cycle_is_advisory(
    tmp_path: Path, write_files, hexagonal_config: CheckConfig
) -> None:
    root = write_files(
        tmp_path,
        {
            "src/domain/a.py": "from . import b\n",
            "src/domain/b.py": "from . import c\n",
            "src/domain/c.py": "from . import a\n",
        },
    )

    result = run_analysis(root, hexagonal_config)

    assert _codes(result) == [ReasonCode.CYCLE]
    record = result.report.records[0]
    assert record.cycle == ("src/domain/a.py", "src/domain/b.py", "src/domain/c.py")
    assert record.severity == "warning"
    assert result.report.summary.cycle_count == 1
    assert result.passed


def test_broken_import_fails_without_crashing(
    tmp_path: Path, write_files, hexagonal_config: CheckConfig
) -> None:
    root = write_files(
        tmp_path,
        {"src/domain/a.py": "from .missing import x\n"},
    )

    result = run_analysis(root, hexagonal_config)

    assert _codes(result) == [ReasonCode.BROKEN_IMPORT]
    record = result.report.records[0]
    assert record.specifier == ".missing"
    assert record.target_path == "src/domain/missing"
    assert result.report.summary.broken_import_count == 1
    assert not result.passed


def test_broken_import_passes_when_not_blocking(
    tmp_path: Path, write_files, hexagonal_config: CheckConfig
) -> None:
    root = write_files(tmp_path, {"src/domain/a.py": "from .missing import x\n"})
    report_config = hexagonal_config.report.model_copy(
        update={"blocking": frozenset({ReasonCode.LAYER_BOUNDARY})}
    )
    config = hexagonal_config.model_copy(update={"report": report_config})

    result = run_analysis(root, config)

    assert _codes(result) == [ReasonCode.BROKEN_IMPORT]
    assert result.report.records[0].severity == "warning"
    assert result.passed


def test_repeated_runs_are_byte_identical(
    tmp_path: Path, write_files, hexagonal_config: CheckConfig
) -> None:
    root = write_files(
        tmp_path,
        {
            "src/domain/a.py": "from ..infrastructure import db\nfrom . import b\n",
            "src/domain/b.py": "from . import a\nfrom .gone import thing\n",
            "src/infrastructure/db.py": "import sqlalchemy\n",
            "src/application/service.py": "from ..infrastructure import db\n",
            "misc/tool.py": "",
        },
    )

    first = render_structured(run_analysis(root, hexagonal_config).report)
    second = render_structured(run_analysis(root, hexagonal_config).report)

    assert first == second
