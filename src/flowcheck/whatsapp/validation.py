"""Validation of WhatsApp Flow JSON documents.

Checks the document the way Meta's Flow builder would reject it: missing
version or screens, malformed screen ids, empty layouts, incomplete
components and navigation to screens that do not exist. Every finding carries
a path into the document, e.g. ``screens[1].layout.children[0].text``.
"""

import logging
import re
from collections import deque
from typing import Any

from pydantic import BaseModel

from ..validation.framework import ValidationIssue, ValidationResult, ValidationStatus

logger = logging.getLogger(__name__)

SCREEN_ID_PATTERN = re.compile(r"^[A-Z][A-Z0-9_]*$")

TEXT_LIMITS = {
    "TextHeading": 80,
    "TextSubheading": 80,
    "TextBody": 4096,
    "TextCaption": 409,
}

NAMED_INPUTS = ("TextInput", "TextArea")
OPTION_INPUTS = ("RadioButtonsGroup", "CheckboxGroup", "Dropdown")
DATE_INPUTS = ("DatePicker", "CalendarPicker")


def _error(rule: str, message: str, path: str) -> ValidationIssue:
    return ValidationIssue(rule, ValidationStatus.FAIL, message, path=path)


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _items(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _screen_id(screen: Any) -> str | None:
    screen_id = _mapping(screen).get("id")
    return screen_id if isinstance(screen_id, str) else None


def _nested_path(prefix: str, path: str | None) -> str:
    return f"{prefix}.{path}" if path else prefix


def validate_flow_json(flow: dict[str, Any] | BaseModel) -> ValidationResult:
    """Validate a complete Flow JSON document.

    Args:
        flow: Decoded Flow JSON, or a FlowJSON model

    Returns:
        ValidationResult; issues carry their document path
    """
    if isinstance(flow, BaseModel):
        flow = flow.model_dump(exclude_none=True)

    result = ValidationResult()

    if not flow.get("version"):
        result.add_error("flow_version", "Flow version is required", path="version")

    screens = _items(flow.get("screens"))
    if not screens:
        result.add_error("screens", "At least one screen is required", path="screens")
        return result

    result.increment_counter("screens", len(screens))

    for index, screen in enumerate(screens):
        for issue in validate_screen(screen, screens):
            result.add_error(issue.rule, issue.message, path=_nested_path(f"screens[{index}]", issue.path))

    screen_ids = [_screen_id(screen) for screen in screens if _screen_id(screen) is not None]
    duplicates = [sid for i, sid in enumerate(screen_ids) if sid in screen_ids[:i]]
    if duplicates:
        result.add_error("screens", f"Duplicate screen IDs found: {', '.join(map(str, duplicates))}", path="screens")

    if not any(_mapping(screen).get("terminal") for screen in screens):
        result.add_warning("screens", "Flow should have at least one terminal screen", path="screens")

    for issue in validate_navigation(screens):
        result.add_error(issue.rule, issue.message, path=issue.path)

    logger.debug(f"Flow JSON validated: {len(result.errors)} errors, {len(result.warnings)} warnings")
    return result


def validate_screen(screen: dict[str, Any], all_screens: list[dict[str, Any]]) -> list[ValidationIssue]:
    """Validate a single screen; paths are relative to the screen."""
    issues: list[ValidationIssue] = []

    if not isinstance(screen, dict):
        issues.append(_error("screen", "Screen must be an object", ""))
        return issues

    screen_id = screen.get("id")
    if not screen_id:
        issues.append(_error("screen", "Screen ID is required", "id"))
    elif not SCREEN_ID_PATTERN.match(str(screen_id)):
        issues.append(_error(
            "screen",
            "Screen ID should be uppercase with underscores (e.g., WELCOME_SCREEN)",
            "id"
        ))

    layout = screen.get("layout")
    if not layout:
        issues.append(_error("screen", "Screen layout is required", "layout"))
    elif not isinstance(layout, dict):
        issues.append(_error("screen", "Screen layout must be an object", "layout"))
    else:
        children = _items(layout.get("children"))
        if not children:
            issues.append(_error("screen", "Screen must have at least one component", "layout.children"))
        for index, component in enumerate(children):
            for issue in validate_component(component, screen):
                issues.append(_error(issue.rule, issue.message, _nested_path(f"layout.children[{index}]", issue.path)))

    if screen.get("terminal") and screen.get("success") is None:
        issues.append(_error("screen", "Terminal screens should have success flag set", "success"))

    return issues


def validate_component(component: dict[str, Any], screen: dict[str, Any]) -> list[ValidationIssue]:
    """Validate one component; types without rules pass through."""
    issues: list[ValidationIssue] = []

    if not isinstance(component, dict):
        issues.append(_error("component", "Component must be an object", ""))
        return issues

    component_type = component.get("type")

    if not component_type or not isinstance(component_type, str):
        issues.append(_error("component", "Component type is required", "type"))
        return issues

    if component_type in TEXT_LIMITS:
        text = component.get("text")
        if not isinstance(text, str) or not text.strip():
            issues.append(_error("component", f"{component_type} text cannot be empty", "text"))
        limit = TEXT_LIMITS[component_type]
        if isinstance(text, str) and len(text) > limit:
            issues.append(_error(
                "component",
                f"{component_type} exceeds maximum length of {limit} characters",
                "text"
            ))

    elif component_type in NAMED_INPUTS:
        name = component.get("name")
        if not name:
            issues.append(_error("component", f"{component_type} must have a name", "name"))
        if not component.get("label"):
            issues.append(_error("component", f"{component_type} must have a label", "label"))
        data = _mapping(screen.get("data"))
        if isinstance(name, str) and name and data and not data.get(name):
            issues.append(_error("component", f'Field "{name}" not found in screen data', "name"))

    elif component_type in OPTION_INPUTS:
        if not component.get("name"):
            issues.append(_error("component", f"{component_type} must have a name", "name"))
        if not component.get("data-source"):
            issues.append(_error("component", f"{component_type} must have at least one option", "data-source"))

    elif component_type == "Footer":
        if not component.get("label"):
            issues.append(_error("component", "Footer button must have a label", "label"))
        if not component.get("on-click-action"):
            issues.append(_error("component", "Footer button must have an action", "on-click-action"))

    elif component_type in DATE_INPUTS:
        if not component.get("name"):
            issues.append(_error("component", f"{component_type} must have a name", "name"))
        if not component.get("label"):
            issues.append(_error("component", f"{component_type} must have a label", "label"))

    return issues


def _navigate_target(component: dict[str, Any]) -> str | None:
    """Screen a Footer navigates to, if it navigates at all."""
    if not isinstance(component, dict) or component.get("type") != "Footer":
        return None
    action = component.get("on-click-action")
    if not isinstance(action, dict) or action.get("name") != "navigate":
        return None
    next_screen = action.get("next")
    if not isinstance(next_screen, dict):
        return None
    name = next_screen.get("name")
    return name if isinstance(name, str) and name else None


def validate_navigation(screens: list[dict[str, Any]]) -> list[ValidationIssue]:
    """Check that every navigate action points at an existing screen."""
    issues: list[ValidationIssue] = []
    screen_ids = {_screen_id(screen) for screen in screens} - {None}

    for screen_index, screen in enumerate(screens):
        children = _items(_mapping(_mapping(screen).get("layout")).get("children"))
        for component_index, component in enumerate(children):
            target = _navigate_target(component)
            if target and target not in screen_ids:
                issues.append(_error(
                    "navigation",
                    f'Navigation target "{target}" does not exist',
                    f"screens[{screen_index}].layout.children[{component_index}].on-click-action"
                ))

    return issues


def is_screen_reachable(target_screen_id: str, screens: list[dict[str, Any]],
                        start_screen_id: str | None = None) -> bool:
    """Check whether a screen can be reached by following navigate actions.

    The search starts from ``start_screen_id`` or, if not given, the first screen.
    """
    if not screens:
        return False

    by_id = {}
    for screen in screens:
        if _screen_id(screen) is not None:
            by_id.setdefault(_screen_id(screen), screen)

    first_id = start_screen_id if start_screen_id is not None else _screen_id(screens[0])
    if first_id not in by_id:
        return False

    visited = set()
    queue = deque([first_id])

    while queue:
        current_id = queue.popleft()
        if current_id in visited:
            continue
        visited.add(current_id)

        if current_id == target_screen_id:
            return True

        current = by_id.get(current_id)
        if current is None:
            continue

        for component in _items(_mapping(current.get("layout")).get("children")):
            target = _navigate_target(component)
            if target:
                queue.append(target)

    return False


def get_unreachable_screens(screens: list[dict[str, Any]]) -> list[str]:
    """Ids of screens that cannot be reached from the first screen."""
    if not screens:
        return []

    return [
        _screen_id(screen)
        for screen in screens[1:]
        if _screen_id(screen) is not None and not is_screen_reachable(_screen_id(screen), screens)
    ]
