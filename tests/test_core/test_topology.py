"""Tests for the topology store and topology generation."""

from random import Random

import networkx as nx
import pytest

from spanning_tree.config import SimulationConfig
from spanning_tree.core.link import Link
from spanning_tree.core.node import Node
from spanning_tree.core.topology import (
    COMPLETE,
    LINE,
    RANDOM,
    RING,
    SMALL_WORLD,
    STAR,
    IdentityMode,
    Topology,
    build_topology,
)
from spanning_tree.core.types import NodeId


def link(a: int, b: int, cost: int) -> Link:
    return Link((NodeId(a), NodeId(b)), cost)


class TestLinks:
    def test_add_link(self, topology: Topology) -> None:
        topology.add_link(link(1, 2, 5))
        topology.add_link(link(2, 5, 8))

        assert len(topology.links) == 2
        assert topology.links[0].members[1] == 2

    def test_add_duplicate_link_is_ignored(self, topology: Topology) -> None:
        topology.add_link(link(1, 2, 5))
        topology.add_link(link(2, 1, 9))
        topology.add_link(link(1, 2, 5))

        assert len(topology.links) == 1
        assert topology.links[0].cost == 5

    def test_find_link(self, topology: Topology) -> None:
        topology.add_link(link(1, 2, 5))
        topology.add_link(link(2, 5, 8))

        found = topology.find_link(NodeId(2), NodeId(1))

        assert found is not None
        assert found.cost == 5
        assert topology.find_link(NodeId(7), NodeId(9)) is None

    def test_find_link_is_symmetric(self, topology: Topology) -> None:
        topology.add_link(link(3, 8, 2))

        assert topology.find_link(NodeId(3), NodeId(8)) is topology.find_link(NodeId(8), NodeId(3))

    def test_find_links_of(self, topology: Topology) -> None:
        topology.add_node(Node(NodeId(1), name="Node 1"))
        topology.add_node(Node(NodeId(2), name="Node 2"))
        link1 = link(1, 1, 1)
        link2 = link(1, 2, 1)
        link3 = link(1, 3, 1)
        link4 = link(2, 2, 1)
        for item in (link1, link2, link3, link4):
            topology.add_link(item)

        links = topology.find_links_of(NodeId(1))

        assert links == [link1, link2, link3]

    def test_find_links_of_preserves_orientation(self, topology: Topology) -> None:
        topology.add_link(link(4, 1, 2))

        (found,) = topology.find_links_of(NodeId(1))

        assert found.members == (4, 1)

    def test_neighbors_of_skips_self_links(self, topology: Topology) -> None:
        topology.add_link(link(1, 1, 1))
        topology.add_link(link(1, 2, 1))
        topology.add_link(link(3, 1, 1))

        assert topology.neighbors_of(NodeId(1)) == [2, 3]


class TestFixedIdNodes:
    def test_add_node(self, topology: Topology) -> None:
        node = Node(NodeId(1), name="Node1")

        assert topology.add_node(node) == 1
        assert topology.get_node(NodeId(1)) is node

    def test_add_node_already_existing(self, topology: Topology) -> None:
        node = Node(NodeId(1), name="Node1")
        topology.add_node(node)
        topology.add_node(Node(NodeId(1), name="Other"))

        assert len(topology) == 1
        assert topology.get_node(NodeId(1)) is node

    def test_get_missing_node(self, topology: Topology) -> None:
        topology.add_node(Node(NodeId(1), name="Node1"))

        assert topology.get_node(NodeId(2)) is None
        assert NodeId(2) not in topology

    def test_root_id_tracks_minimum(self, topology: Topology) -> None:
        assert topology.root_id is None

        for node_id in (5, 3, 8):
            topology.add_node(Node(NodeId(node_id)))

        assert topology.root_id == 3

    def test_node_ids_keep_insertion_order(self, topology: Topology) -> None:
        for node_id in (5, 3, 8):
            topology.add_node(Node(NodeId(node_id)))

        assert topology.node_ids == [5, 3, 8]


class TestNameAssignedNodes:
    def test_ids_assigned_sequentially(self) -> None:
        topology = Topology(IdentityMode.BY_NAME)

        assert topology.add_node(Node.named("A")) == 0
        assert topology.add_node(Node.named("B")) == 1
        assert topology.get_node(NodeId(0)).name == "A"  # type: ignore[union-attr]

    def test_duplicate_name_resolves_to_existing_id(self) -> None:
        topology = Topology(IdentityMode.BY_NAME)
        first = topology.add_node(Node.named("Node1"))
        second = topology.add_node(Node.named("Node1"))

        assert first == second
        assert len(topology) == 1

    def test_assigned_node_is_its_own_root(self) -> None:
        topology = Topology(IdentityMode.BY_NAME)
        topology.add_node(Node.named("A"))
        node_id = topology.add_node(Node.named("B"))

        node = topology.get_node(node_id)

        assert node is not None
        assert node.root_id == node_id == 1


class TestGraphInterop:
    def test_to_graph_drops_self_links_and_loose_ends(self, topology: Topology) -> None:
        topology.add_node(Node(NodeId(1)))
        topology.add_node(Node(NodeId(2)))
        topology.add_link(link(1, 2, 4))
        topology.add_link(link(1, 1, 1))
        topology.add_link(link(2, 9, 1))

        graph = topology.to_graph()

        assert set(graph.nodes) == {1, 2}
        assert list(graph.edges(data="cost")) == [(1, 2, 4)]

    def test_from_graph(self) -> None:
        graph = nx.Graph()
        graph.add_edge(1, 2, cost=3)
        graph.add_edge(2, 3)

        topology = Topology.from_graph(graph)

        assert topology.node_ids == [1, 2, 3]
        assert topology.find_link(NodeId(2), NodeId(1)).cost == 3  # type: ignore[union-attr]
        assert topology.find_link(NodeId(3), NodeId(2)).cost == 1  # type: ignore[union-attr]

    def test_reset_beliefs(self, topology: Topology) -> None:
        node = Node(NodeId(4))
        topology.add_node(node)
        node.receive_suggestion(NodeId(1), NodeId(2), 3)

        topology.reset_beliefs()

        assert node.root_id == 4
        assert node.msg_count == 0


class TestBuildTopology:
    def test_generates_correct_node_count(self) -> None:
        config = SimulationConfig(node_count=30, mesh_degree=3)

        topology = build_topology(config, Random(42))

        assert len(topology) == 30

    def test_ids_drawn_from_id_space(self) -> None:
        config = SimulationConfig(node_count=20, id_space=25)

        topology = build_topology(config, Random(42))

        assert all(0 <= node_id < 25 for node_id in topology.node_ids)
        assert len(set(topology.node_ids)) == 20

    def test_id_space_too_small_raises(self) -> None:
        config = SimulationConfig(node_count=20, id_space=10)

        with pytest.raises(ValueError, match="id_space"):
            build_topology(config, Random(42))

    def test_link_costs_within_range(self) -> None:
        config = SimulationConfig(node_count=30, min_link_cost=2, max_link_cost=4)

        topology = build_topology(config, Random(42))

        assert all(2 <= item.cost <= 4 for item in topology.links)

    def test_deterministic_with_same_seed(self) -> None:
        config = SimulationConfig(node_count=25, mesh_degree=4)

        first = build_topology(config, Random(7))
        second = build_topology(config, Random(7))

        assert first.node_ids == second.node_ids
        assert first.links == second.links

    def test_handles_empty_graph(self) -> None:
        config = SimulationConfig(node_count=0)

        topology = build_topology(config, Random(42))

        assert len(topology) == 0
        assert topology.links == []

    @pytest.mark.parametrize("policy", [RANDOM, SMALL_WORLD, RING, LINE, STAR, COMPLETE])
    def test_policies_produce_connected_graphs(self, policy) -> None:  # noqa: ANN001
        config = SimulationConfig(node_count=24, mesh_degree=4, interconnection_policy=policy)

        topology = build_topology(config, Random(42))

        assert nx.is_connected(topology.to_graph())

    @pytest.mark.parametrize("policy", [RANDOM, SMALL_WORLD, RING, LINE, STAR, COMPLETE])
    def test_no_self_loops(self, policy) -> None:  # noqa: ANN001
        config = SimulationConfig(node_count=12, mesh_degree=3, interconnection_policy=policy)

        topology = build_topology(config, Random(42))

        assert not any(item.is_self_link for item in topology.links)

    def test_disconnected_components_are_stitched(self) -> None:
        def two_islands(node_ids, mesh_degree, rng):  # noqa: ANN001, ANN202
            return [(node_ids[0], node_ids[1]), (node_ids[2], node_ids[3])]

        config = SimulationConfig(node_count=4, interconnection_policy=two_islands)

        topology = build_topology(config, Random(42))

        assert len(topology.links) == 3
        assert nx.is_connected(topology.to_graph())

    def test_stitching_can_be_disabled(self) -> None:
        def two_islands(node_ids, mesh_degree, rng):  # noqa: ANN001, ANN202
            return [(node_ids[0], node_ids[1]), (node_ids[2], node_ids[3])]

        config = SimulationConfig(
            node_count=4, interconnection_policy=two_islands, ensure_connected=False
        )

        topology = build_topology(config, Random(42))

        assert nx.number_connected_components(topology.to_graph()) == 2
