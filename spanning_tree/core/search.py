"""Path search between two nodes of a topology."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import networkx as nx

from spanning_tree.core.link import Link

if TYPE_CHECKING:
    from spanning_tree.core.topology import Topology
    from spanning_tree.core.types import Cost, NodeId


@dataclass
class SearchResult:
    """A path as a chain of links, starting with a zero-cost link from the start node to itself."""

    links: list[Link] = field(default_factory=list)
    cost: Cost = 0

    @property
    def hops(self) -> int:
        return len(self.links) - 1


type PredecessorSearch = Callable[[nx.Graph, NodeId], dict[NodeId, NodeId]]


def bfs_search_node(
    topology: Topology,
    start_node_id: NodeId,
    search_node_id: NodeId,
) -> SearchResult | None:
    """Fewest-hop path, ties broken by link insertion order."""
    return _search(topology, start_node_id, search_node_id, nx.bfs_predecessors)


def dfs_search_node(
    topology: Topology,
    start_node_id: NodeId,
    search_node_id: NodeId,
) -> SearchResult | None:
    """Path through the depth-first search tree rooted at the start node."""
    return _search(topology, start_node_id, search_node_id, nx.dfs_predecessors)


def _search(
    topology: Topology,
    start_node_id: NodeId,
    search_node_id: NodeId,
    predecessors_of: PredecessorSearch,
) -> SearchResult | None:
    if start_node_id == search_node_id:
        return SearchResult(links=[Link((start_node_id, search_node_id), 0)], cost=0)

    if start_node_id not in topology or search_node_id not in topology:
        return None

    predecessors = dict(predecessors_of(topology.to_graph(), start_node_id))
    if search_node_id not in predecessors:
        return None

    path: list[Link] = []
    current = search_node_id
    while current != start_node_id:
        previous = predecessors[current]
        link = topology.find_link(previous, current)
        if link is None:
            return None
        path.append(link)
        current = previous
    path.reverse()

    links = [Link((start_node_id, start_node_id), 0), *path]
    return SearchResult(links=links, cost=sum(link.cost for link in links))
