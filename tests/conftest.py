"""Shared pytest fixtures for spanning tree tests."""

from collections.abc import Callable

import pytest

from spanning_tree.core.link import Link
from spanning_tree.core.node import Node
from spanning_tree.core.simulator import Simulator
from spanning_tree.core.topology import Topology
from spanning_tree.core.types import NodeId


def _make_topology(node_ids: list[int], links: list[tuple[int, int, int]]) -> Topology:
    """Fixed-id topology from bare ids and (a, b, cost) triples."""
    topology = Topology()
    for node_id in node_ids:
        topology.add_node(Node(NodeId(node_id), name=f"Node {node_id}"))
    for a, b, cost in links:
        topology.add_link(Link((NodeId(a), NodeId(b)), cost))
    return topology


@pytest.fixture
def topology() -> Topology:
    """Create an empty fixed-id topology."""
    return Topology()


@pytest.fixture
def make_topology() -> Callable[[list[int], list[tuple[int, int, int]]], Topology]:
    """Builder for small fixed-id topologies."""
    return _make_topology


@pytest.fixture
def six_node_topology() -> Topology:
    """Connected six-node topology with a cheap detour around an expensive link."""
    return _make_topology(
        [5, 3, 9, 1, 7, 4],
        [
            (5, 3, 2),
            (3, 9, 4),
            (9, 1, 1),
            (1, 7, 3),
            (7, 4, 2),
            (4, 5, 6),
            (5, 9, 20),
        ],
    )


@pytest.fixture
def simulator(six_node_topology: Topology) -> Simulator:
    """Create a simulator over the six-node topology with default seed."""
    return Simulator(six_node_topology, seed=42)
