"""Propagation of root beliefs across links."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spanning_tree.core.topology import Topology
    from spanning_tree.core.types import NodeId


def run_calc(topology: Topology, node_id: NodeId, recursive: bool = True) -> bool:
    """Broadcast a node's belief to its direct neighbors.

    Each neighbor is offered the sender's root at the sender's cost plus the
    link cost. In recursive mode every neighbor that accepted is broadcast
    from in turn, once the current sweep has finished: the cascade runs
    breadth-first off an explicit worklist, in link insertion order.

    Returns False, without touching anything, when node_id is not in the
    topology.
    """
    if topology.get_node(node_id) is None:
        return False

    worklist: deque[NodeId] = deque([node_id])
    while worklist:
        current_id = worklist.popleft()
        current = topology.get_node(current_id)
        if current is None:
            continue

        # Snapshot before any neighbor is touched
        root_id, root_cost = current.root_id, current.root_cost

        accepted: list[NodeId] = []
        for link in topology.find_links_of(current_id):
            neighbor_id = link.other_end(current_id)
            if neighbor_id is None:
                continue
            neighbor = topology.get_node(neighbor_id)
            if neighbor is None:
                continue
            if neighbor.receive_suggestion(root_id, current_id, root_cost + link.cost):
                accepted.append(neighbor_id)

        if recursive:
            worklist.extend(accepted)

    return True
