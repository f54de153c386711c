"""Pydantic data models for chatflow and WhatsApp Flow documents."""

from flowcheck.models.chatflow import (
    CONFIG_MODELS,
    Chatflow,
    ChatflowEdge,
    ChatflowLoadError,
    ChatflowNode,
    ChatflowStatus,
    ConditionConfig,
    DelayConfig,
    FormQuestion,
    GuestFormConfig,
    KindConfig,
    NodeConfig,
    NodeKind,
    OnMaxRetry,
    SendTemplateConfig,
    TriggerConfig,
    UpdateGuestConfig,
    VariableMapping,
    WaitReplyConfig,
)
from flowcheck.models.whatsapp_flow import FlowJSON, FlowScreen, Layout

__all__ = [
    "CONFIG_MODELS",
    "Chatflow",
    "ChatflowEdge",
    "ChatflowLoadError",
    "ChatflowNode",
    "ChatflowStatus",
    "ConditionConfig",
    "DelayConfig",
    "FormQuestion",
    "GuestFormConfig",
    "KindConfig",
    "NodeConfig",
    "NodeKind",
    "OnMaxRetry",
    "SendTemplateConfig",
    "TriggerConfig",
    "UpdateGuestConfig",
    "VariableMapping",
    "WaitReplyConfig",
    "FlowJSON",
    "FlowScreen",
    "Layout",
]
