"""Topology store and network topology generation."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from enum import Enum, auto
from itertools import pairwise
from typing import TYPE_CHECKING

import networkx as nx

from spanning_tree.core.link import Link
from spanning_tree.core.node import Node
from spanning_tree.core.types import NodeId

if TYPE_CHECKING:
    from random import Random

    from spanning_tree.config import SimulationConfig

logger = logging.getLogger(__name__)


type Edge = tuple[NodeId, NodeId]
type InterconnectionPolicy = Callable[[list[NodeId], int, Random], list[Edge]]


class IdentityMode(Enum):
    FIXED = auto()  # Ids supplied by the caller, duplicate ids ignored
    BY_NAME = auto()  # Ids assigned sequentially, duplicate names resolve to the existing id


class Topology:
    """Owns every node and link of a simulated network.

    Nodes live in an id-keyed registry; all belief mutation goes through the
    Node objects handed out by get_node(). Links are kept in insertion order,
    and at most one link is stored per unordered pair of ids.
    """

    def __init__(self, mode: IdentityMode = IdentityMode.FIXED) -> None:
        self._mode = mode
        self._nodes: dict[NodeId, Node] = {}
        self._names: dict[str, NodeId] = {}
        self._links: list[Link] = []
        self._link_index: dict[frozenset[NodeId], Link] = {}
        self._incident: dict[NodeId, list[Link]] = {}
        self._root_id: NodeId | None = None

    @property
    def mode(self) -> IdentityMode:
        return self._mode

    @property
    def root_id(self) -> NodeId | None:
        """Lowest id inserted so far. Bookkeeping only, nodes hold their own belief."""
        return self._root_id

    @property
    def nodes(self) -> list[Node]:
        return list(self._nodes.values())

    @property
    def node_ids(self) -> list[NodeId]:
        return list(self._nodes.keys())

    @property
    def links(self) -> list[Link]:
        return list(self._links)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    def add_node(self, node: Node) -> NodeId:
        """Insert a node unless one with the same identity exists. Returns the resolved id."""
        if self._mode is IdentityMode.BY_NAME:
            existing = self._names.get(node.name)
            if existing is not None:
                return existing
            node.bind(NodeId(len(self._nodes)))
            self._names[node.name] = node.id
        elif node.id in self._nodes:
            return node.id

        self._nodes[node.id] = node
        if self._root_id is None or node.id < self._root_id:
            self._root_id = node.id
        return node.id

    def get_node(self, node_id: NodeId) -> Node | None:
        return self._nodes.get(node_id)

    def add_link(self, link: Link) -> None:
        """Insert a link unless its unordered pair is already connected."""
        if link.key in self._link_index:
            return
        self._links.append(link)
        self._link_index[link.key] = link
        for member in link.key:
            self._incident.setdefault(member, []).append(link)

    def find_link(self, a: NodeId, b: NodeId) -> Link | None:
        return self._link_index.get(frozenset((a, b)))

    def find_links_of(self, node_id: NodeId) -> list[Link]:
        """All links touching node_id, in insertion order and stored orientation."""
        return list(self._incident.get(node_id, ()))

    def neighbors_of(self, node_id: NodeId) -> list[NodeId]:
        neighbors = []
        for link in self._incident.get(node_id, ()):
            other = link.other_end(node_id)
            if other is not None:
                neighbors.append(other)
        return neighbors

    def reset_beliefs(self) -> None:
        for node in self._nodes.values():
            node.reset()

    def to_graph(self) -> nx.Graph:
        """Graph of the registered nodes; self-links and loose ends are dropped."""
        graph = nx.Graph()
        for node in self._nodes.values():
            graph.add_node(node.id, name=node.name)
        for link in self._links:
            a, b = link.members
            if link.is_self_link or a not in self._nodes or b not in self._nodes:
                continue
            graph.add_edge(a, b, cost=link.cost)
        return graph

    @classmethod
    def from_graph(
        cls,
        graph: nx.Graph,
        weight: str = "cost",
        default_cost: int = 1,
    ) -> Topology:
        """Build a fixed-id topology from a graph with integer node labels."""
        topology = cls(IdentityMode.FIXED)
        for label, data in graph.nodes(data=True):
            topology.add_node(Node(NodeId(label), name=str(data.get("name", label))))
        for a, b, data in graph.edges(data=True):
            topology.add_link(Link((NodeId(a), NodeId(b)), data.get(weight, default_cost)))
        return topology


def build_topology(config: SimulationConfig, rng: Random) -> Topology:
    """Build a topology with randomly drawn node ids, edges and link costs."""
    id_space = config.id_space if config.id_space is not None else config.node_count * 4
    if id_space < config.node_count:
        raise ValueError(f"id_space={id_space} cannot hold {config.node_count} nodes")

    topology = Topology(IdentityMode.FIXED)
    node_ids = [NodeId(i) for i in rng.sample(range(id_space), config.node_count)]
    for i, node_id in enumerate(node_ids):
        topology.add_node(Node(node_id, name=f"node-{i:04d}"))

    edges = config.interconnection_policy(node_ids, config.mesh_degree, rng)
    if config.ensure_connected:
        edges = _stitch_components(node_ids, edges)

    for a, b in edges:
        cost = rng.randint(config.min_link_cost, config.max_link_cost)
        topology.add_link(Link((a, b), cost))

    return topology


def _stitch_components(node_ids: list[NodeId], edges: list[Edge]) -> list[Edge]:
    """Chain disconnected components together with one extra edge each."""
    graph = nx.Graph()
    graph.add_nodes_from(node_ids)
    graph.add_edges_from(edges)

    components = sorted(nx.connected_components(graph), key=min)
    if len(components) <= 1:
        return edges

    logger.debug("Stitching %d disconnected components", len(components))
    stitched = list(edges)
    for left, right in pairwise(components):
        stitched.append((min(left), min(right)))
    return stitched


def _relabel(graph: nx.Graph, node_ids: list[NodeId]) -> list[Edge]:
    return [_normalize_edge(node_ids[u], node_ids[v]) for u, v in graph.edges()]


def random_policy(node_ids: list[NodeId], mesh_degree: int, rng: Random) -> list[Edge]:
    """Each node picks mesh_degree random peers."""
    n = len(node_ids)

    if (n * mesh_degree) % 2 == 0 and mesh_degree < n:
        try:
            G = nx.random_regular_graph(mesh_degree, n, seed=rng.randint(0, 2**32 - 1))
            return _relabel(G, node_ids)
        except nx.NetworkXError:
            pass

    edges: set[Edge] = set()
    for i, node_id in enumerate(node_ids):
        candidates = [j for j in range(n) if j != i]
        targets = rng.sample(candidates, min(mesh_degree, len(candidates)))
        for j in targets:
            edges.add(_normalize_edge(node_id, node_ids[j]))

    return sorted(edges)


def small_world_policy(node_ids: list[NodeId], mesh_degree: int, rng: Random) -> list[Edge]:
    """Ring lattice with mesh_degree neighbors, a fifth of the edges rewired."""
    n = len(node_ids)
    k = max(2, mesh_degree)
    if n < 3:
        return line_policy(node_ids, mesh_degree, rng)
    if k >= n:
        return complete_policy(node_ids, mesh_degree, rng)

    try:
        G = nx.connected_watts_strogatz_graph(n, k, 0.2, seed=rng.randint(0, 2**32 - 1))
    except nx.NetworkXError:
        return random_policy(node_ids, mesh_degree, rng)
    return _relabel(G, node_ids)


def ring_policy(node_ids: list[NodeId], mesh_degree: int, rng: Random) -> list[Edge]:
    """Every node linked to the next one in insertion order, wrapping around."""
    if len(node_ids) < 3:
        return line_policy(node_ids, mesh_degree, rng)
    return _relabel(nx.cycle_graph(len(node_ids)), node_ids)


def line_policy(node_ids: list[NodeId], mesh_degree: int, rng: Random) -> list[Edge]:
    return _relabel(nx.path_graph(len(node_ids)), node_ids)


def star_policy(node_ids: list[NodeId], mesh_degree: int, rng: Random) -> list[Edge]:
    """The first inserted node is the hub."""
    if not node_ids:
        return []
    return _relabel(nx.star_graph(len(node_ids) - 1), node_ids)


def complete_policy(node_ids: list[NodeId], mesh_degree: int, rng: Random) -> list[Edge]:
    return _relabel(nx.complete_graph(len(node_ids)), node_ids)


def _normalize_edge(a: NodeId, b: NodeId) -> Edge:
    """Normalize edge to avoid duplicates (smaller ID first)."""
    return (a, b) if a < b else (b, a)


# Standard interconnection policies
RANDOM = random_policy
SMALL_WORLD = small_world_policy
RING = ring_policy
LINE = line_policy
STAR = star_policy
COMPLETE = complete_policy

POLICIES: dict[str, InterconnectionPolicy] = {
    "random": RANDOM,
    "small_world": SMALL_WORLD,
    "ring": RING,
    "line": LINE,
    "star": STAR,
    "complete": COMPLETE,
}


def policy_name(policy: InterconnectionPolicy) -> str:
    for name, candidate in POLICIES.items():
        if candidate is policy:
            return name
    return getattr(policy, "__name__", "custom")
