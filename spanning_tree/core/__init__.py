"""Core protocol: topology store, node beliefs, propagation and the convergence driver."""

from spanning_tree.core.link import Link
from spanning_tree.core.node import Belief, Node
from spanning_tree.core.propagation import run_calc
from spanning_tree.core.search import SearchResult, bfs_search_node, dfs_search_node
from spanning_tree.core.simulator import SelectionSource, Simulator
from spanning_tree.core.topology import IdentityMode, Topology, build_topology
from spanning_tree.core.types import UNASSIGNED, Cost, NodeId

__all__ = [
    "UNASSIGNED",
    "Belief",
    "Cost",
    "IdentityMode",
    "Link",
    "Node",
    "NodeId",
    "SearchResult",
    "SelectionSource",
    "Simulator",
    "Topology",
    "bfs_search_node",
    "build_topology",
    "dfs_search_node",
    "run_calc",
]
