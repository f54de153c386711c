"""Tests for the chatflow graph view."""

import pytest

from flowcheck.graph import ChatflowGraph
from flowcheck.models.chatflow import Chatflow, NodeKind


@pytest.fixture
def branching_graph(node, edge):
    return ChatflowGraph.build(
        [node("t1", "trigger"), node("c1", "condition"), node("e1", "end"), node("e2", "end")],
        [edge("t1", "c1"), edge("c1", "e2"), edge("c1", "e1"), edge("c1", "ghost")]
    )


class TestChatflowGraph:
    """Test ChatflowGraph lookups."""

    def test_outgoing_keeps_edge_order(self, branching_graph):
        targets = [edge.target for edge in branching_graph.outgoing("c1")]

        assert targets == ["e2", "e1", "ghost"]

    def test_incoming(self, branching_graph):
        assert [edge.source for edge in branching_graph.incoming("c1")] == ["t1"]
        assert branching_graph.incoming("t1") == []

    def test_unknown_ids_are_empty(self, branching_graph):
        assert branching_graph.outgoing("ghost") == []
        assert branching_graph.get_node("ghost") is None
        assert branching_graph.has_node("ghost") is False

    def test_connected_ids_include_dangling_targets(self, branching_graph):
        assert branching_graph.connected_ids() == {"t1", "c1", "e1", "e2", "ghost"}

    def test_nodes_of_kind(self, branching_graph):
        ends = branching_graph.nodes_of_kind(NodeKind.END)

        assert [node.id for node in ends] == ["e1", "e2"]
        assert branching_graph.nodes_of_kind("end") == ends
        assert branching_graph.nodes_of_kind("webhook") == []

    def test_entry_node(self, branching_graph, node):
        assert branching_graph.entry_node().id == "t1"
        assert ChatflowGraph.build([node("e1", "end")], []).entry_node() is None

    def test_first_duplicate_id_wins(self, node):
        graph = ChatflowGraph.build([node("a", "delay", "First"), node("a", "delay", "Second")], [])

        assert graph.get_node("a").label == "First"
        assert len(graph.nodes) == 2
        assert graph.node_ids == {"a"}

    def test_outgoing_returns_a_copy(self, branching_graph):
        branching_graph.outgoing("c1").clear()

        assert len(branching_graph.outgoing("c1")) == 3

    def test_is_empty(self):
        assert ChatflowGraph().is_empty is True

    def test_from_chatflow(self, rsvp_chatflow_document):
        graph = ChatflowGraph.from_chatflow(Chatflow.from_dict(rsvp_chatflow_document))

        assert graph.entry_node().id == "t1"
        assert [edge.source_handle for edge in graph.outgoing("c1")] == ["true", "false"]
