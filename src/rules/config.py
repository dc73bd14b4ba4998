"""Configuration models and loading for layercheck."""

from __future__ import annotations

import tomllib
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from errors import ConfigurationError

CONFIG_FILENAME = "layercheck.toml"

UNCLASSIFIED = "Unclassified"

UnclassifiedBehavior = Literal["deny", "allow", "ignore"]

DEFAULT_EXTENSIONS = [".py", ".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"]


class ReasonCode(str, Enum):
    """Finding categories, in default severity order (highest first)."""

    BROKEN_IMPORT = "BrokenImportError"
    LAYER_BOUNDARY = "LayerBoundaryViolation"
    UNCLASSIFIED_MODULE = "UnclassifiedModule"
    CYCLE = "CycleFinding"


DEFAULT_SEVERITY_ORDER = list(ReasonCode)
DEFAULT_BLOCKING = [
    ReasonCode.BROKEN_IMPORT,
    ReasonCode.LAYER_BOUNDARY,
    ReasonCode.UNCLASSIFIED_MODULE,
]


class _Strict(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)


class LayerDef(_Strict):
    """Definition of a single architectural layer."""

    name: str = Field(description="Layer name (e.g., 'Domain')")
    globs: tuple[str, ...] = Field(
        description="fnmatch patterns for root-relative paths in this layer"
    )


class LayerRule(_Strict):
    """Allowed dependencies from one layer to others."""

    from_layer: str = Field(alias="from", description="Source layer name")
    to: tuple[str, ...] = Field(
        default=(),
        description="Layer names this layer may depend on",
    )


def _default_layers() -> tuple[LayerDef, ...]:
    return (
        LayerDef(name="Domain", globs=("domain/*", "*/domain/*")),
        LayerDef(name="Application", globs=("application/*", "*/application/*")),
        LayerDef(
            name="Infrastructure",
            globs=("infrastructure/*", "*/infrastructure/*"),
        ),
    )


def _default_rules() -> tuple[LayerRule, ...]:
    return (
        LayerRule(from_layer="Domain", to=("Domain",)),
        LayerRule(from_layer="Application", to=("Application", "Domain")),
        LayerRule(
            from_layer="Infrastructure",
            to=("Infrastructure", "Application", "Domain"),
        ),
    )


class LayersConfig(_Strict):
    """Layer classification rules and the allowed-dependency matrix."""

    layer: tuple[LayerDef, ...] = Field(
        default_factory=_default_layers,
        description="Layer definitions (first match wins)",
    )
    rules: tuple[LayerRule, ...] = Field(
        default_factory=_default_rules,
        description="Allowed dependency rules between layers (built-in rules only "
        "when the layers are built-in too)",
    )
    unclassified: UnclassifiedBehavior = Field(
        default="deny",
        description="Behavior for files not matching any layer glob",
    )

    @model_validator(mode="before")
    @classmethod
    def _rules_follow_layers(cls, data: Any) -> Any:
        # Built-in rules only describe the built-in layers.
        if isinstance(data, dict) and "layer" in data and "rules" not in data:
            return {**data, "rules": ()}
        return data

    @model_validator(mode="after")
    def _check_references(self) -> LayersConfig:
        names: list[str] = [layer.name for layer in self.layer]
        seen: set[str] = set()
        for name in names:
            if name == UNCLASSIFIED:
                msg = f"'{UNCLASSIFIED}' is reserved and cannot be defined as a layer"
                raise ValueError(msg)
            if name in seen:
                msg = f"Duplicate layer name '{name}'"
                raise ValueError(msg)
            seen.add(name)

        known = seen | {UNCLASSIFIED}
        sources: set[str] = set()
        for rule in self.rules:
            if rule.from_layer in sources:
                msg = f"Duplicate rule for layer '{rule.from_layer}'"
                raise ValueError(msg)
            sources.add(rule.from_layer)
            for name in (rule.from_layer, *rule.to):
                if name not in known:
                    msg = f"Rule for '{rule.from_layer}' references unknown layer '{name}'"
                    raise ValueError(msg)
        return self


class ReportConfig(_Strict):
    """Report ordering and gating."""

    severity_order: tuple[ReasonCode, ...] = Field(
        default=tuple(DEFAULT_SEVERITY_ORDER),
        description="Reason codes from most to least severe",
    )
    blocking: frozenset[ReasonCode] = Field(
        default=frozenset(DEFAULT_BLOCKING),
        description="Reason codes that make the verdict fail",
    )

    @model_validator(mode="after")
    def _check_order(self) -> ReportConfig:
        if sorted(self.severity_order) != sorted(ReasonCode):
            msg = "severity_order must list every reason code exactly once"
            raise ValueError(msg)
        return self


class CheckConfig(_Strict):
    """Top-level configuration for one analysis run."""

    include: tuple[str, ...] = Field(
        default=(),
        description="Glob patterns for files to include (empty = all sources)",
    )
    exclude: tuple[str, ...] = Field(
        default=(),
        description="Glob patterns for files to exclude",
    )
    extensions: tuple[str, ...] = Field(
        default=tuple(DEFAULT_EXTENSIONS),
        description="Source file extensions to scan, also the resolution order",
    )
    source_roots: tuple[str, ...] = Field(
        default=("src", "."),
        description="Directories that absolute Python imports are rooted at",
    )
    aliases: dict[str, str] = Field(
        default_factory=dict,
        description="Import specifier prefix -> root-relative directory",
    )
    nested_gitignore: bool = Field(
        default=False,
        description="Compose nested .gitignore files (default: root only)",
    )
    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Wall-clock limit for one run, in seconds",
    )
    workers: int | None = Field(
        default=None,
        ge=1,
        description="Threads used to parse files (default: executor default)",
    )
    layers: LayersConfig = Field(default_factory=LayersConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    @model_validator(mode="after")
    def _check_extensions(self) -> CheckConfig:
        for ext in self.extensions:
            if not ext.startswith("."):
                msg = f"Extension '{ext}' must start with '.'"
                raise ValueError(msg)
        return self


def load_config(root: Path, config_path: Path | None = None) -> CheckConfig:
    """Load configuration from ``config_path`` or ``<root>/layercheck.toml``.

    A missing default file yields the built-in configuration; a missing
    explicit file is an error.
    """
    if config_path is None:
        config_path = root / CONFIG_FILENAME
        if not config_path.is_file():
            return CheckConfig()
    elif not config_path.is_file():
        msg = f"Config file not found: {config_path}"
        raise ConfigurationError(msg)

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigurationError(msg) from e
    except OSError as e:
        msg = f"Cannot read {config_path}: {e}"
        raise ConfigurationError(msg) from e

    try:
        return CheckConfig.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigurationError(msg) from e


__all__ = [
    "CONFIG_FILENAME",
    "UNCLASSIFIED",
    "CheckConfig",
    "LayerDef",
    "LayerRule",
    "LayersConfig",
    "ReasonCode",
    "ReportConfig",
    "load_config",
]
