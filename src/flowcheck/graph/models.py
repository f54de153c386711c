"""Indexed, read-only view over a chatflow's nodes and edges."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from ..models.chatflow import Chatflow, ChatflowEdge, ChatflowNode, NodeKind


@dataclass(frozen=True)
class ChatflowGraph:
    """Chatflow graph as the validator reads it.

    Nodes and edges keep the order the editor supplied them in, which is the
    order findings are reported in. Edges may reference node ids that do not
    exist; lookups for those ids simply come back empty.
    """
    nodes: tuple[ChatflowNode, ...] = ()
    edges: tuple[ChatflowEdge, ...] = ()
    _by_id: dict[str, ChatflowNode] = field(default_factory=dict, init=False, repr=False, compare=False)
    _outgoing: dict[str, list[ChatflowEdge]] = field(default_factory=dict, init=False, repr=False, compare=False)
    _incoming: dict[str, list[ChatflowEdge]] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for node in self.nodes:
            self._by_id.setdefault(node.id, node)

        for edge in self.edges:
            self._outgoing.setdefault(edge.source, []).append(edge)
            self._incoming.setdefault(edge.target, []).append(edge)

    @classmethod
    def build(cls, nodes: Iterable[ChatflowNode], edges: Iterable[ChatflowEdge]) -> "ChatflowGraph":
        return cls(nodes=tuple(nodes), edges=tuple(edges))

    @classmethod
    def from_chatflow(cls, chatflow: Chatflow) -> "ChatflowGraph":
        return cls.build(chatflow.nodes, chatflow.edges)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    @property
    def node_ids(self) -> set[str]:
        return set(self._by_id)

    def get_node(self, node_id: str) -> ChatflowNode | None:
        return self._by_id.get(node_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._by_id

    def nodes_of_kind(self, kind: NodeKind | str) -> list[ChatflowNode]:
        """Nodes of one kind, in graph order."""
        value = kind.value if isinstance(kind, NodeKind) else kind
        return [node for node in self.nodes if node.kind == value]

    def outgoing(self, node_id: str) -> list[ChatflowEdge]:
        """Edges leaving a node, in the order they were given."""
        return list(self._outgoing.get(node_id, ()))

    def incoming(self, node_id: str) -> list[ChatflowEdge]:
        return list(self._incoming.get(node_id, ()))

    def connected_ids(self) -> set[str]:
        """Ids appearing as either endpoint of any edge."""
        connected = set()
        for edge in self.edges:
            connected.add(edge.source)
            connected.add(edge.target)
        return connected

    def entry_node(self) -> ChatflowNode | None:
        """The first trigger node, where execution starts."""
        triggers = self.nodes_of_kind(NodeKind.TRIGGER)
        return triggers[0] if triggers else None
