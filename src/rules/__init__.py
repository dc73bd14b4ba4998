"""Layer rules, classification and policy evaluation."""

from rules.config import (
    CONFIG_FILENAME,
    UNCLASSIFIED,
    CheckConfig,
    LayerDef,
    LayerRule,
    LayersConfig,
    ReasonCode,
    ReportConfig,
    load_config,
)
from rules.layers import classify_graph, classify_layer
from rules.policy import PolicyMatrix, Violation, evaluate_policy

__all__ = [
    "CONFIG_FILENAME",
    "UNCLASSIFIED",
    "CheckConfig",
    "LayerDef",
    "LayerRule",
    "LayersConfig",
    "PolicyMatrix",
    "ReasonCode",
    "ReportConfig",
    "Violation",
    "classify_graph",
    "classify_layer",
    "evaluate_policy",
    "load_config",
]
