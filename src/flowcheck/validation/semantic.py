"""Per-kind configuration checks for chatflow nodes.

Each node kind registers one check that inspects the node's own configuration.
Kinds without a registered check pass through untouched, so new kinds can be
added without changing the structural rules.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..config import FlowcheckConfig
from ..graph.models import ChatflowGraph
from ..models.chatflow import (
    CONFIG_MODELS,
    ChatflowNode,
    ConditionConfig,
    DelayConfig,
    GuestFormConfig,
    KindConfig,
    NodeKind,
    SendTemplateConfig,
    TriggerConfig,
    UpdateGuestConfig,
    WaitReplyConfig,
)
from .framework import ValidationResult, ValidationRule

logger = logging.getLogger(__name__)


@dataclass
class NodeReport:
    """Collects findings for one node into the shared result."""
    rule: str
    node: ChatflowNode
    result: ValidationResult

    @property
    def label(self) -> str:
        return self.node.display_name

    def error(self, message: str) -> None:
        self.result.add_error(self.rule, message, node_id=self.node.id)

    def warning(self, message: str) -> None:
        self.result.add_warning(self.rule, message, node_id=self.node.id)


# Checks for kinds outside CONFIG_MODELS receive the raw config mapping
KindCheck = Callable[[Any, ChatflowGraph, NodeReport], None]

_KIND_CHECKS: dict[str, KindCheck] = {}


def register_kind_check(kind: NodeKind | str) -> Callable[[KindCheck], KindCheck]:
    """Register the configuration check for a node kind."""
    value = kind.value if isinstance(kind, NodeKind) else kind

    def decorator(func: KindCheck) -> KindCheck:
        _KIND_CHECKS[value] = func
        return func

    return decorator


def get_kind_check(kind: str) -> KindCheck | None:
    return _KIND_CHECKS.get(kind)


def registered_kinds() -> list[str]:
    """Kinds that have a configuration check, in registration order."""
    return list(_KIND_CHECKS)


def _blank(value) -> bool:
    return value is None or value == ""


def _typed_config(node: ChatflowNode) -> KindConfig | Any:
    model = CONFIG_MODELS.get(node.kind)
    if model is None:
        return node.config
    if isinstance(node.config, model):
        return node.config
    return model.model_validate(node.config or {})


@register_kind_check(NodeKind.TRIGGER)
def check_trigger(config: TriggerConfig, graph: ChatflowGraph, report: NodeReport) -> None:
    if config.type == "keyword" and _blank(config.keyword):
        report.error(f'Trigger "{report.label}" needs a keyword')


@register_kind_check(NodeKind.WAIT_REPLY)
def check_wait_reply(config: WaitReplyConfig, graph: ChatflowGraph, report: NodeReport) -> None:
    if config.timeout is not None and config.timeout < 0:
        report.error(f'Wait Reply "{report.label}" has invalid timeout value')


@register_kind_check(NodeKind.CONDITION)
def check_condition(config: ConditionConfig, graph: ChatflowGraph, report: NodeReport) -> None:
    if _blank(config.variable):
        report.error(f'Condition "{report.label}" needs a variable to check')
    if _blank(config.value):
        report.error(f'Condition "{report.label}" needs a value to compare')


@register_kind_check(NodeKind.DELAY)
def check_delay(config: DelayConfig, graph: ChatflowGraph, report: NodeReport) -> None:
    if config.duration is None or config.duration <= 0:
        report.error(f'Delay "{report.label}" needs a valid duration')


@register_kind_check(NodeKind.SEND_TEMPLATE)
def check_send_template(config: SendTemplateConfig, graph: ChatflowGraph, report: NodeReport) -> None:
    if _blank(config.template_id):
        report.error(f'Send Template "{report.label}" has no template selected')


@register_kind_check(NodeKind.GUEST_FORM)
def check_guest_form(config: GuestFormConfig, graph: ChatflowGraph, report: NodeReport) -> None:
    label = report.label

    if not config.questions:
        report.error(f'Guest Form "{label}" needs at least one question')
    else:
        for number, question in enumerate(config.questions, start=1):
            if _blank(question.variable_name):
                report.error(f'Guest Form "{label}" question {number} needs a variable name')
            if _blank(question.question):
                report.error(f'Guest Form "{label}" question {number} needs question text')
            if question.type == "choice" and not question.options:
                report.error(f'Guest Form "{label}" question {number} (choice type) needs options')

    # Incomplete confirmation settings are advisory only
    if config.enable_confirmation:
        if _blank(config.confirmation_message):
            report.warning(f'Guest Form "{label}" has confirmation enabled but no message')
        if not config.confirm_yes_keywords:
            report.warning(f'Guest Form "{label}" has no "Yes" keywords configured')
        if not config.confirm_no_keywords:
            report.warning(f'Guest Form "{label}" has no "No" keywords configured')

    on_max_retry = config.on_max_retry
    if on_max_retry is None:
        return

    if on_max_retry.action == "jump_to_node" and _blank(on_max_retry.jump_to_node_id):
        report.error(f'Guest Form "{label}" has jump action but no target node selected')

    # The only place a reference to another node id is checked for existence
    if not _blank(on_max_retry.jump_to_node_id) and not graph.has_node(on_max_retry.jump_to_node_id):
        report.error(f'Guest Form "{label}" references a non-existent jump target node')


@register_kind_check(NodeKind.UPDATE_GUEST)
def check_update_guest(config: UpdateGuestConfig, graph: ChatflowGraph, report: NodeReport) -> None:
    label = report.label
    action = config.action

    if action in ("add_tag", "remove_tag") and _blank(config.tag_name):
        report.error(f'Update Guest "{label}" needs a tag name')
    elif action == "update_rsvp" and _blank(config.rsvp_status):
        report.error(f'Update Guest "{label}" needs an RSVP status')
    elif action == "update_field" and _blank(config.field_name):
        report.error(f'Update Guest "{label}" needs a field name')
    elif action == "map_from_variables":
        if not config.variable_mappings:
            report.error(f'Update Guest "{label}" needs at least one variable mapping')
            return
        for number, mapping in enumerate(config.variable_mappings, start=1):
            if _blank(mapping.source_variable):
                report.error(f'Update Guest "{label}" mapping {number} needs a source variable')
            if _blank(mapping.target_field):
                report.error(f'Update Guest "{label}" mapping {number} needs a target field')


class NodeConfigRule(ValidationRule):
    """Run the registered configuration check of every node, in node order."""

    @property
    def name(self) -> str:
        return "node_config"

    def validate(self, graph: ChatflowGraph, config: FlowcheckConfig, result: ValidationResult) -> None:
        for node in graph.nodes:
            check = get_kind_check(node.kind)
            if check is None:
                continue

            result.increment_counter("nodes_checked")
            report = NodeReport(self.name, node, result)
            check(_typed_config(node), graph, report)
