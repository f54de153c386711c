"""Cycle detection for chatflow graphs.

Only cycles on the active path from the trigger count: a node reached twice
through different branches is fine, a node that leads back to one of its own
ancestors is an infinite loop.
"""

import logging
from collections.abc import Iterator

from ..graph.models import ChatflowGraph
from ..models.chatflow import ChatflowEdge

logger = logging.getLogger(__name__)


def find_cycle(graph: ChatflowGraph, start_id: str | None = None) -> list[str] | None:
    """Find the first cycle reachable from the entry node.

    Depth-first with an explicit stack. Edges are followed in their given
    order and the search stops at the first edge that points back onto the
    active path.

    Args:
        graph: Graph to search
        start_id: Node to start from (default: the trigger)

    Returns:
        Node ids forming the cycle, first id repeated at the end, or None
    """
    if start_id is None:
        entry = graph.entry_node()
        if entry is None:
            return None
        start_id = entry.id

    visited = {start_id}
    on_stack = {start_id}
    path = [start_id]
    stack: list[tuple[str, Iterator[ChatflowEdge]]] = [(start_id, iter(graph.outgoing(start_id)))]

    while stack:
        node_id, pending = stack[-1]
        for edge in pending:
            target = edge.target
            if target in on_stack:
                return path[path.index(target):] + [target]
            if target in visited:
                continue
            visited.add(target)
            on_stack.add(target)
            path.append(target)
            stack.append((target, iter(graph.outgoing(target))))
            break
        else:
            stack.pop()
            path.pop()
            on_stack.discard(node_id)

    return None


def has_circular_dependency(graph: ChatflowGraph) -> bool:
    """True when the flow can loop forever starting from its trigger."""
    cycle = find_cycle(graph)
    if cycle is not None:
        logger.debug(f"Cycle found: {' -> '.join(cycle)}")
        return True
    return False
