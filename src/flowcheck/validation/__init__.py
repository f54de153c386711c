"""Validation layer for chatflow graphs.

Structural rules check cardinality, connectivity and cycles over the whole
graph; the node_config rule runs one registered check per node kind. The
framework aggregates both into a single verdict.
"""

from .cycles import find_cycle, has_circular_dependency
from .framework import (
    ValidationFramework,
    ValidationIssue,
    ValidationResult,
    ValidationRule,
    ValidationStatus,
    validate_chatflow,
)
from .rules import (
    CircularDependencyRule,
    ConditionBranchesRule,
    ConnectivityRule,
    EndInputRule,
    EndPresenceRule,
    TriggerCardinalityRule,
    TriggerOutputRule,
)
from .semantic import NodeConfigRule, register_kind_check, registered_kinds

__all__ = [
    "ValidationFramework",
    "ValidationIssue",
    "ValidationResult",
    "ValidationRule",
    "ValidationStatus",
    "validate_chatflow",
    "find_cycle",
    "has_circular_dependency",
    "TriggerCardinalityRule",
    "EndPresenceRule",
    "ConnectivityRule",
    "TriggerOutputRule",
    "EndInputRule",
    "ConditionBranchesRule",
    "CircularDependencyRule",
    "NodeConfigRule",
    "register_kind_check",
    "registered_kinds"
]
