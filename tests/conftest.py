"""Shared fixtures for flowcheck tests."""

import pytest

from flowcheck.config import FlowcheckConfig
from flowcheck.models.chatflow import ChatflowEdge, ChatflowNode


def _make_node(node_id: str, kind: str, label: str | None = None, config: dict | None = None) -> ChatflowNode:
    return ChatflowNode(id=node_id, kind=kind, label=label if label is not None else node_id, config=config)


def _make_edge(source: str, target: str) -> ChatflowEdge:
    return ChatflowEdge(id=f"{source}-{target}", source=source, target=target)


@pytest.fixture
def node():
    """Factory for chatflow nodes: node(id, kind, label=None, config=None)."""
    return _make_node


@pytest.fixture
def edge():
    """Factory for chatflow edges: edge(source, target)."""
    return _make_edge


@pytest.fixture
def sample_config():
    """Default configuration for testing."""
    return FlowcheckConfig()


@pytest.fixture
def simple_flow():
    """Smallest valid flow: trigger -> end."""
    nodes = [
        _make_node("t1", "trigger", "Start", {"type": "manual"}),
        _make_node("e1", "end", "Finish"),
    ]
    edges = [_make_edge("t1", "e1")]
    return nodes, edges


@pytest.fixture
def rsvp_chatflow_document():
    """Canvas-form chatflow document as saved by the editor."""
    return {
        "id": "cf_001",
        "name": "RSVP follow-up",
        "status": "draft",
        "projectId": "proj_42",
        "variables": ["nama", "jumlah"],
        "nodes": [
            {
                "id": "t1",
                "type": "trigger",
                "position": {"x": 0, "y": 0},
                "data": {"label": "Keyword RSVP", "config": {"type": "keyword", "keyword": "rsvp"}},
            },
            {
                "id": "s1",
                "type": "send_template",
                "position": {"x": 0, "y": 100},
                "data": {
                    "label": "Send invitation",
                    "config": {"templateId": "tpl_1", "templateName": "invitation"},
                },
            },
            {
                "id": "w1",
                "type": "wait_reply",
                "position": {"x": 0, "y": 200},
                "data": {"label": "Wait answer", "config": {"timeout": 3600, "saveAs": "lastReply"}},
            },
            {
                "id": "c1",
                "type": "condition",
                "position": {"x": 0, "y": 300},
                "data": {
                    "label": "Said yes?",
                    "config": {"variable": "lastReply", "operator": "equals", "value": "ya"},
                },
            },
            {
                "id": "u1",
                "type": "update_guest",
                "position": {"x": -100, "y": 400},
                "data": {"label": "Mark attending", "config": {"action": "update_rsvp", "rsvpStatus": "attending"}},
            },
            {
                "id": "e1",
                "type": "end",
                "position": {"x": 0, "y": 500},
                "data": {"label": "Done", "config": None},
            },
        ],
        "edges": [
            {"id": "t1-s1", "source": "t1", "target": "s1"},
            {"id": "s1-w1", "source": "s1", "target": "w1"},
            {"id": "w1-c1", "source": "w1", "target": "c1"},
            {"id": "c1-u1", "source": "c1", "target": "u1", "sourceHandle": "true"},
            {"id": "c1-e1", "source": "c1", "target": "e1", "sourceHandle": "false"},
            {"id": "u1-e1", "source": "u1", "target": "e1"},
        ],
    }


@pytest.fixture
def flow_json_document():
    """Two-screen WhatsApp Flow that navigates to a terminal screen."""
    return {
        "version": "3.1",
        "screens": [
            {
                "id": "WELCOME",
                "title": "Welcome",
                "data": {"nama": {"type": "string", "__example__": "Budi"}},
                "layout": {
                    "type": "SingleColumnLayout",
                    "children": [
                        {"type": "TextHeading", "text": "Konfirmasi kehadiran"},
                        {"type": "TextInput", "name": "nama", "label": "Nama lengkap"},
                        {
                            "type": "Footer",
                            "label": "Lanjut",
                            "on-click-action": {"name": "navigate", "next": {"type": "screen", "name": "DONE"}},
                        },
                    ],
                },
            },
            {
                "id": "DONE",
                "terminal": True,
                "success": True,
                "layout": {
                    "type": "SingleColumnLayout",
                    "children": [
                        {"type": "TextBody", "text": "Terima kasih!"},
                        {"type": "Footer", "label": "Selesai", "on-click-action": {"name": "complete"}},
                    ],
                },
            },
        ],
    }
