"""Models for chatflow documents: nodes, edges and per-kind configuration."""

import json
import math
from enum import Enum
from pathlib import Path
from typing import Any, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)


class NodeKind(str, Enum):
    """Node kinds the editor produces."""
    TRIGGER = "trigger"
    SEND_TEMPLATE = "send_template"
    WAIT_REPLY = "wait_reply"
    CONDITION = "condition"
    DELAY = "delay"
    GUEST_FORM = "guest_form"
    UPDATE_GUEST = "update_guest"
    END = "end"


class ChatflowStatus(str, Enum):
    """Chatflow lifecycle states."""
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    ARCHIVED = "archived"


class ChatflowLoadError(ValueError):
    """Raised when a chatflow document cannot be read or does not fit the model."""


def _number_or_none(value: Any) -> Any:
    """Blank or non-numeric values count as missing."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


_FLAG_STRINGS = {"true", "false", "yes", "no", "on", "off", "1", "0"}


def _flag_or_none(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return value
    if isinstance(value, str) and value.strip().lower() in _FLAG_STRINGS:
        return value.strip().lower()
    return None


class KindConfig(BaseModel):
    """Base for per-kind node configuration.

    Every field is optional: the editor saves partially filled nodes and the
    validator reports what is missing instead of rejecting the document.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class TriggerConfig(KindConfig):
    type: str | None = None  # keyword | welcome | manual
    keyword: str | None = None
    description: str | None = None


class SendTemplateConfig(KindConfig):
    template_id: str | None = Field(alias="templateId", default=None)
    template_name: str | None = Field(alias="templateName", default=None)
    variables: dict[str, str] | None = None


class WaitReplyConfig(KindConfig):
    timeout: float | None = None  # seconds
    timeout_action: str | None = Field(alias="timeoutAction", default=None)
    save_as: str | None = Field(alias="saveAs", default=None)
    expected_values: list[str] | None = Field(alias="expectedValues", default=None)
    retry_message: str | None = Field(alias="retryMessage", default=None)
    max_retries: int | None = Field(alias="maxRetries", default=None)
    case_sensitive: bool | None = Field(alias="caseSensitive", default=None)
    fallback_action: str | None = Field(alias="fallbackAction", default=None)
    fallback_message: str | None = Field(alias="fallbackMessage", default=None)

    @field_validator("timeout", mode="before")
    @classmethod
    def parse_timeout(cls, v: Any) -> Any:
        return _number_or_none(v)


class ConditionConfig(KindConfig):
    variable: str | None = None
    operator: str | None = None  # equals | contains | matches | not_equals
    value: str | int | float | bool | None = None
    case_sensitive: bool | None = Field(alias="caseSensitive", default=None)


class DelayConfig(KindConfig):
    duration: float | None = None
    unit: str | None = None  # seconds | minutes | hours | days

    @field_validator("duration", mode="before")
    @classmethod
    def parse_duration(cls, v: Any) -> Any:
        return _number_or_none(v)


class FormQuestion(BaseModel):
    """A single question asked by a guest form node."""
    id: str | None = None
    question: str | None = None
    type: str | None = None  # text | number | choice
    variable_name: str | None = Field(alias="variableName", default=None)
    required: bool | None = None
    min: float | None = None
    max: float | None = None
    options: list[str] | None = None
    prompt_message: str | None = Field(alias="promptMessage", default=None)
    error_message: str | None = Field(alias="errorMessage", default=None)

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class OnMaxRetry(BaseModel):
    """What a guest form does once every retry is exhausted."""
    send_cs_message: bool | None = Field(alias="sendCSMessage", default=None)
    cs_message: str | None = Field(alias="csMessage", default=None)
    action: str | None = None  # end | jump_to_node
    jump_to_node_id: str | None = Field(alias="jumpToNodeId", default=None)

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class GuestFormConfig(KindConfig):
    questions: list[FormQuestion] | None = None
    enable_confirmation: bool | None = Field(alias="enableConfirmation", default=None)
    confirmation_message: str | None = Field(alias="confirmationMessage", default=None)
    confirm_yes_keywords: list[str] | None = Field(alias="confirmYesKeywords", default=None)
    confirm_no_keywords: list[str] | None = Field(alias="confirmNoKeywords", default=None)
    max_question_retries: int | None = Field(alias="maxQuestionRetries", default=None)
    max_confirm_retries: int | None = Field(alias="maxConfirmRetries", default=None)
    on_max_retry: OnMaxRetry | None = Field(alias="onMaxRetry", default=None)

    @field_validator("enable_confirmation", mode="before")
    @classmethod
    def parse_enable_confirmation(cls, v: Any) -> Any:
        return _flag_or_none(v)


class VariableMapping(BaseModel):
    """Maps a collected variable onto a guest field."""
    source_variable: str | None = Field(alias="sourceVariable", default=None)
    target_field: str | None = Field(alias="targetField", default=None)
    custom_field_name: str | None = Field(alias="customFieldName", default=None)

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class UpdateGuestConfig(KindConfig):
    action: str | None = None
    variable_mappings: list[VariableMapping] | None = Field(alias="variableMappings", default=None)
    tag_name: str | None = Field(alias="tagName", default=None)
    rsvp_status: str | None = Field(alias="rsvpStatus", default=None)
    field_name: str | None = Field(alias="fieldName", default=None)
    field_value: str | None = Field(alias="fieldValue", default=None)


NodeConfig = Union[
    TriggerConfig,
    SendTemplateConfig,
    WaitReplyConfig,
    ConditionConfig,
    DelayConfig,
    GuestFormConfig,
    UpdateGuestConfig,
]

# Keyed by the wire value of the kind; kinds without an entry keep a raw mapping.
CONFIG_MODELS: dict[str, type[KindConfig]] = {
    NodeKind.TRIGGER.value: TriggerConfig,
    NodeKind.SEND_TEMPLATE.value: SendTemplateConfig,
    NodeKind.WAIT_REPLY.value: WaitReplyConfig,
    NodeKind.CONDITION.value: ConditionConfig,
    NodeKind.DELAY.value: DelayConfig,
    NodeKind.GUEST_FORM.value: GuestFormConfig,
    NodeKind.UPDATE_GUEST.value: UpdateGuestConfig,
}


class ChatflowNode(BaseModel):
    """One step of a chatflow.

    Accepts both the flat form (``label``/``config`` at the top level) and the
    canvas form where both live under ``data``.
    """
    id: str
    kind: str = Field(alias="type")
    label: str = ""
    config: Any = Field(default=None, validate_default=True)  # NodeConfig for known kinds, raw mapping otherwise
    position: dict[str, float] | None = None

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def flatten_canvas_data(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            data = dict(data)
            payload = data.pop("data")
            data.setdefault("label", payload.get("label") or "")
            data.setdefault("config", payload.get("config"))
        return data

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v: Any) -> Any:
        if isinstance(v, Enum):
            return v.value
        return v

    @field_validator("config", mode="before")
    @classmethod
    def parse_kind_config(cls, v: Any, info: ValidationInfo) -> Any:
        model = CONFIG_MODELS.get(info.data.get("kind"))
        if model is None:
            return v
        if v is None:
            return model()
        if isinstance(v, model):
            return v
        if isinstance(v, BaseModel):
            v = v.model_dump(by_alias=True, exclude_none=True)
        return model.model_validate(v)

    @property
    def display_name(self) -> str:
        """Label for messages, falling back to the id."""
        return self.label or self.id


class ChatflowEdge(BaseModel):
    """Directed transition between two nodes."""
    id: str | None = None
    source: str
    target: str
    source_handle: str | None = Field(alias="sourceHandle", default=None)  # true/false, confirmed/max_retry
    target_handle: str | None = Field(alias="targetHandle", default=None)
    label: str | None = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Chatflow(BaseModel):
    """A saved chatflow document."""
    id: str | None = None
    name: str = "Untitled chatflow"
    description: str | None = None
    status: ChatflowStatus = ChatflowStatus.DRAFT
    nodes: list[ChatflowNode] = Field(default_factory=list)
    edges: list[ChatflowEdge] = Field(default_factory=list)
    variables: list[str] = Field(default_factory=list)
    project_id: str | None = Field(alias="projectId", default=None)

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, extra="allow")

    @classmethod
    def load(cls, path: Path) -> "Chatflow":
        """Load a chatflow document from a JSON file.

        Raises:
            ChatflowLoadError: If the file is missing, not JSON, or not a chatflow
        """
        path = Path(path)
        if not path.exists():
            raise ChatflowLoadError(f"Chatflow file not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ChatflowLoadError(f"Invalid JSON in {path}: {e}")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Any) -> "Chatflow":
        """Build a chatflow from decoded JSON."""
        if not isinstance(data, dict):
            raise ChatflowLoadError("Chatflow document must be a JSON object")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ChatflowLoadError(f"Invalid chatflow document: {e}")
