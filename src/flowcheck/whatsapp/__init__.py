"""WhatsApp Flow JSON validation."""

from .validation import (
    get_unreachable_screens,
    is_screen_reachable,
    validate_component,
    validate_flow_json,
    validate_navigation,
    validate_screen,
)

__all__ = [
    "validate_flow_json",
    "validate_screen",
    "validate_component",
    "validate_navigation",
    "is_screen_reachable",
    "get_unreachable_screens",
]
