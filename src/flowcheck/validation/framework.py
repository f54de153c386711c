"""Core validation framework for chatflow graphs.

Rules are pluggable and run in a fixed order; their findings are collected
into a single ValidationResult whose error and warning order follows the rule
order. Every finding is data: a rule never aborts validation.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from ..config import FlowcheckConfig, create_default_config
from ..graph.models import ChatflowGraph
from ..models.chatflow import ChatflowEdge, ChatflowNode

logger = logging.getLogger(__name__)

EMPTY_FLOW_MESSAGE = "Flow must have at least one node"


class ValidationStatus(str, Enum):
    """Overall status of a run; also the severity of a single issue."""
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass
class ValidationIssue:
    """A single finding produced by a rule."""
    rule: str
    severity: ValidationStatus
    message: str
    node_id: str | None = None
    path: str | None = None

    def __str__(self) -> str:
        location = ""
        if self.node_id:
            location += f" at node {self.node_id}"
        if self.path:
            location += f" at {self.path}"
        return f"[{self.severity.value.upper()}] {self.rule}: {self.message}{location}"


@dataclass
class ValidationResult:
    """Results of a validation run."""
    status: ValidationStatus = ValidationStatus.PASS
    issues: list[ValidationIssue] = field(default_factory=list)
    counters: dict[str, int] = field(default_factory=dict)

    @property
    def errors(self) -> list[str]:
        """Error messages in the order they were found."""
        return [issue.message for issue in self.issues if issue.severity == ValidationStatus.FAIL]

    @property
    def warnings(self) -> list[str]:
        """Warning messages in the order they were found."""
        return [issue.message for issue in self.issues if issue.severity == ValidationStatus.WARN]

    @property
    def valid(self) -> bool:
        """Valid means no errors; warnings never block."""
        return self.status != ValidationStatus.FAIL

    @property
    def exit_code(self) -> int:
        """Exit code for CI: 0 = pass/warn, 1 = fail."""
        return 0 if self.valid else 1

    def add_issue(self, rule: str, severity: ValidationStatus, message: str,
                  node_id: str | None = None, path: str | None = None) -> None:
        """Add a validation issue."""
        self.issues.append(ValidationIssue(rule, severity, message, node_id, path))

        # fail > warn > pass
        if severity == ValidationStatus.FAIL:
            self.status = ValidationStatus.FAIL
        elif severity == ValidationStatus.WARN and self.status == ValidationStatus.PASS:
            self.status = ValidationStatus.WARN

    def add_error(self, rule: str, message: str, node_id: str | None = None, path: str | None = None) -> None:
        self.add_issue(rule, ValidationStatus.FAIL, message, node_id, path)

    def add_warning(self, rule: str, message: str, node_id: str | None = None, path: str | None = None) -> None:
        self.add_issue(rule, ValidationStatus.WARN, message, node_id, path)

    def increment_counter(self, name: str, value: int = 1) -> None:
        """Increment a counter."""
        self.counters[name] = self.counters.get(name, 0) + value

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "valid": self.valid,
            "status": self.status.value,
            "exit_code": self.exit_code,
            "errors": self.errors,
            "warnings": self.warnings,
            "counters": self.counters,
            "issues": [
                {
                    "rule": issue.rule,
                    "severity": issue.severity.value,
                    "message": issue.message,
                    "node_id": issue.node_id,
                    "path": issue.path
                }
                for issue in self.issues
            ]
        }


class ValidationRule(ABC):
    """Base class for chatflow validation rules."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Rule name for identification."""
        pass

    @abstractmethod
    def validate(self, graph: ChatflowGraph, config: FlowcheckConfig, result: ValidationResult) -> None:
        """Execute validation rule.

        Args:
            graph: Graph under validation (read only)
            config: flowcheck configuration
            result: Validation result to update with issues/counters
        """
        pass


class ValidationFramework:
    """Runs the rule set over a chatflow and aggregates the findings."""

    def __init__(self, config: FlowcheckConfig | None = None):
        self.config = config or create_default_config()
        self.rules: list[ValidationRule] = []

    def add_rule(self, rule: ValidationRule) -> None:
        """Add a validation rule."""
        self.rules.append(rule)

    def validate(self, nodes: Iterable[ChatflowNode], edges: Iterable[ChatflowEdge]) -> ValidationResult:
        """Validate a chatflow given as nodes and edges.

        Args:
            nodes: Nodes in editor order
            edges: Edges in editor order

        Returns:
            ValidationResult with status, issues, and counters
        """
        nodes = tuple(nodes)
        edges = tuple(edges)
        result = ValidationResult()

        if not nodes:
            result.add_error("non_empty", EMPTY_FLOW_MESSAGE)
            return result

        graph = ChatflowGraph.build(nodes, edges)
        result.increment_counter("nodes", len(graph.nodes))
        result.increment_counter("edges", len(graph.edges))

        logger.debug(f"Running {len(self.rules)} rules over {len(nodes)} nodes and {len(edges)} edges")

        for rule in self.rules:
            logger.debug(f"Executing rule: {rule.name}")
            try:
                rule.validate(graph, self.config, result)
            except Exception as e:
                logger.error(f"Rule {rule.name} failed with error: {e}")
                result.add_error(rule.name, f"Rule execution failed: {e}")

        logger.info(
            f"Validation completed with status: {result.status.value} "
            f"({len(result.errors)} errors, {len(result.warnings)} warnings)"
        )

        return result

    def validate_graph(self, graph: ChatflowGraph) -> ValidationResult:
        """Validate an already built graph."""
        return self.validate(graph.nodes, graph.edges)

    def create_default_rules(self) -> None:
        """Install the default rules in reporting order."""
        from .rules import (
            CircularDependencyRule,
            ConditionBranchesRule,
            ConnectivityRule,
            EndInputRule,
            EndPresenceRule,
            TriggerCardinalityRule,
            TriggerOutputRule,
        )
        from .semantic import NodeConfigRule

        self.add_rule(TriggerCardinalityRule())
        self.add_rule(EndPresenceRule())
        self.add_rule(ConnectivityRule())
        self.add_rule(TriggerOutputRule())
        self.add_rule(EndInputRule())
        self.add_rule(ConditionBranchesRule())
        self.add_rule(CircularDependencyRule())
        self.add_rule(NodeConfigRule())


def validate_chatflow(nodes: Iterable[ChatflowNode], edges: Iterable[ChatflowEdge],
                      config: FlowcheckConfig | None = None) -> ValidationResult:
    """Validate a chatflow with the default rule set."""
    framework = ValidationFramework(config)
    framework.create_default_rules()
    return framework.validate(nodes, edges)
