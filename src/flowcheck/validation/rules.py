"""Structural validation rules for chatflow graphs.

Each rule checks one cardinality or connectivity invariant of the graph,
independent of how individual nodes are configured.
"""

import logging

from ..config import FlowcheckConfig
from ..graph.models import ChatflowGraph
from ..models.chatflow import NodeKind
from .cycles import has_circular_dependency
from .framework import ValidationResult, ValidationRule

logger = logging.getLogger(__name__)


class TriggerCardinalityRule(ValidationRule):
    """A flow has exactly one trigger."""

    @property
    def name(self) -> str:
        return "trigger_cardinality"

    def validate(self, graph: ChatflowGraph, config: FlowcheckConfig, result: ValidationResult) -> None:
        triggers = graph.nodes_of_kind(NodeKind.TRIGGER)
        result.increment_counter("triggers", len(triggers))

        if not triggers:
            result.add_error(self.name, "Flow must have a trigger node")
        elif len(triggers) > 1:
            result.add_error(self.name, "Flow can only have one trigger node")


class EndPresenceRule(ValidationRule):
    """A flow has at least one end node."""

    @property
    def name(self) -> str:
        return "end_presence"

    def validate(self, graph: ChatflowGraph, config: FlowcheckConfig, result: ValidationResult) -> None:
        ends = graph.nodes_of_kind(NodeKind.END)
        result.increment_counter("ends", len(ends))

        if not ends:
            result.add_error(self.name, "Flow must have at least one end node")


class ConnectivityRule(ValidationRule):
    """Every node except the trigger is touched by at least one edge."""

    @property
    def name(self) -> str:
        return "connectivity"

    def validate(self, graph: ChatflowGraph, config: FlowcheckConfig, result: ValidationResult) -> None:
        if len(graph.nodes) <= 1:
            return

        connected = graph.connected_ids()
        orphans = [
            node for node in graph.nodes
            if node.id not in connected and node.kind != NodeKind.TRIGGER.value
        ]
        result.increment_counter("orphans", len(orphans))

        if orphans:
            labels = ", ".join(node.display_name for node in orphans)
            result.add_error(self.name, f"{len(orphans)} disconnected node(s): {labels}")


class TriggerOutputRule(ValidationRule):
    """The trigger leads somewhere once the flow has other nodes."""

    @property
    def name(self) -> str:
        return "trigger_output"

    def validate(self, graph: ChatflowGraph, config: FlowcheckConfig, result: ValidationResult) -> None:
        triggers = graph.nodes_of_kind(NodeKind.TRIGGER)
        # Zero or several triggers are already reported by trigger_cardinality
        if len(triggers) != 1 or len(graph.nodes) <= 1:
            return

        trigger = triggers[0]
        if not graph.outgoing(trigger.id):
            result.add_error(self.name, "Trigger node must connect to another node", node_id=trigger.id)


class EndInputRule(ValidationRule):
    """Every end node is reachable through at least one incoming edge."""

    @property
    def name(self) -> str:
        return "end_input"

    def validate(self, graph: ChatflowGraph, config: FlowcheckConfig, result: ValidationResult) -> None:
        if len(graph.nodes) <= 1:
            return

        for node in graph.nodes_of_kind(NodeKind.END):
            if not graph.incoming(node.id):
                result.add_error(self.name, f'End node "{node.display_name}" is not connected', node_id=node.id)


class ConditionBranchesRule(ValidationRule):
    """Condition nodes branch into a true path and a false path."""

    @property
    def name(self) -> str:
        return "condition_branches"

    def validate(self, graph: ChatflowGraph, config: FlowcheckConfig, result: ValidationResult) -> None:
        for node in graph.nodes_of_kind(NodeKind.CONDITION):
            result.increment_counter("conditions")
            outputs = len(graph.outgoing(node.id))
            label = node.display_name

            if outputs == 0:
                result.add_error(self.name, f'Condition "{label}" has no outputs', node_id=node.id)
            elif outputs == 1:
                result.add_warning(
                    self.name,
                    f'Condition "{label}" should have 2 outputs (true/false paths)',
                    node_id=node.id
                )
            elif outputs > 2:
                result.add_error(self.name, f'Condition "{label}" has too many outputs (max 2)', node_id=node.id)


class CircularDependencyRule(ValidationRule):
    """Following the flow from its trigger never loops back onto itself."""

    @property
    def name(self) -> str:
        return "circular_dependency"

    def validate(self, graph: ChatflowGraph, config: FlowcheckConfig, result: ValidationResult) -> None:
        if has_circular_dependency(graph):
            result.add_error(self.name, "Flow contains circular dependency (infinite loop)")
