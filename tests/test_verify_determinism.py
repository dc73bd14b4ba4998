from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from analysis import run_analysis
from report.render import render_structured
from verify.verify import DeterminismResult, verify_report

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import CheckConfig


def _write_minimal_repo(root: Path, write_files) -> Path:
    return write_files(
        root,
        {
            "src/domain/order.py": "",
            "src/infrastructure/repo.py": "from ..domain import order\n",
        },
    )


def test_verify_report_requires_report_file(
    tmp_path: Path, write_files, hexagonal_config: CheckConfig
) -> None:
    repo_root = _write_minimal_repo(tmp_path / "repo", write_files)

    with pytest.raises(FileNotFoundError, match="Report file does not exist"):
        verify_report(
            root=repo_root, config=hexagonal_config, report_path=tmp_path / "missing.json"
        )

    with pytest.raises(IsADirectoryError):
        verify_report(root=repo_root, config=hexagonal_config, report_path=tmp_path)


def test_verify_report_matches_fresh_run(
    tmp_path: Path, write_files, hexagonal_config: CheckConfig
) -> None:
    repo_root = _write_minimal_repo(tmp_path / "repo", write_files)
    report_path = tmp_path / "report.json"
    report_path.write_bytes(
        render_structured(run_analysis(repo_root, hexagonal_config).report)
    )

    result = verify_report(root=repo_root, config=hexagonal_config, report_path=report_path)

    assert result == DeterminismResult(ok=True)


def test_verify_report_returns_diff_on_mismatch(
    tmp_path: Path, write_files, hexagonal_config: CheckConfig
) -> None:
    repo_root = _write_minimal_repo(tmp_path / "repo", write_files)
    report_path = tmp_path / "report.json"
    report_path.write_bytes(
        render_structured(run_analysis(repo_root, hexagonal_config).report)
    )
    (repo_root / "src" / "domain" / "extra.py").write_text("", encoding="utf-8")

    result = verify_report(root=repo_root, config=hexagonal_config, report_path=report_path)

    assert result.ok is False
    assert result.diff[0] == f"--- {report_path}"
    assert '-    "totalFiles": 2,' in result.diff
    assert '+    "totalFiles": 3,' in result.diff
