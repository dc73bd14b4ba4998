"""Error taxonomy for layercheck."""

from __future__ import annotations


class LayerCheckError(Exception):
    """Base exception for all layercheck errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigurationError(LayerCheckError):
    """Raised when layer rules or the policy matrix cannot be used."""


class InvalidRootError(LayerCheckError):
    """Raised when the project root is missing or not a directory."""

    def __init__(self, root: object, reason: str) -> None:
        super().__init__(f"Invalid project root: {root}", details={"reason": reason})
        self.root = root
        self.reason = reason


class AnalysisTimeoutError(LayerCheckError):
    """Raised when a run exceeds its wall-clock budget."""

    def __init__(self, timeout: float, stage: str) -> None:
        super().__init__(
            f"Analysis exceeded {timeout:g}s timeout; partial results unavailable",
            details={"stage": stage},
        )
        self.timeout = timeout
        self.stage = stage


__all__ = [
    "AnalysisTimeoutError",
    "ConfigurationError",
    "InvalidRootError",
    "LayerCheckError",
]
