"""Report determinism verification."""

from verify.verify import DeterminismResult, verify_report

__all__ = ["DeterminismResult", "verify_report"]
