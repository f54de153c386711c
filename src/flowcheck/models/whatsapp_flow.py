"""Models for WhatsApp Flow JSON documents (Meta WhatsApp Flows API)."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Layout(BaseModel):
    """Screen layout; components stay as raw mappings keyed by ``type``."""
    type: str = "SingleColumnLayout"
    children: list[dict[str, Any]] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")


class FlowScreen(BaseModel):
    """One screen of a WhatsApp Flow."""
    id: str
    title: str | None = None
    terminal: bool | None = None
    success: bool | None = None
    refresh_on_back: bool | None = None
    data: dict[str, Any] | None = None
    layout: Layout

    model_config = ConfigDict(extra="allow")


class FlowJSON(BaseModel):
    """Top-level Flow JSON document."""
    version: str
    screens: list[FlowScreen] = Field(default_factory=list)
    data_api_version: str | None = None
    routing_model: dict[str, list[str]] | None = None

    model_config = ConfigDict(extra="allow")
