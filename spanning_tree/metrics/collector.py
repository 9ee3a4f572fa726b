"""Metrics collection for convergence analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from statistics import median
from typing import TYPE_CHECKING

import networkx as nx

from spanning_tree.metrics.results import ConvergenceSnapshot, SimulationResults

if TYPE_CHECKING:
    from spanning_tree.core.simulator import Simulator
    from spanning_tree.core.topology import Topology
    from spanning_tree.core.types import Cost, NodeId


@dataclass
class MetricsCollector:
    """Compares node beliefs against the reference spanning tree.

    The reference is computed with networkx from the topology itself: the
    expected root of a node is the lowest id in its connected component, and
    the expected cost is the Dijkstra distance to that root.
    """

    simulator: Simulator
    snapshots: list[ConvergenceSnapshot] = field(default_factory=list)

    @property
    def topology(self) -> Topology:
        return self.simulator.topology

    def expected_roots(self) -> dict[NodeId, NodeId]:
        roots: dict[NodeId, NodeId] = {}
        for component in nx.connected_components(self.topology.to_graph()):
            root = min(component)
            for node_id in component:
                roots[node_id] = root
        return roots

    def expected_root_costs(self) -> dict[NodeId, Cost]:
        graph = self.topology.to_graph()
        costs: dict[NodeId, Cost] = {}
        for component in nx.connected_components(graph):
            lengths = nx.single_source_dijkstra_path_length(graph, min(component), weight="cost")
            costs.update(lengths)
        return costs

    def nodes_agreeing(self) -> int:
        roots = self.expected_roots()
        return sum(1 for node in self.topology if node.root_id == roots[node.id])

    def nodes_at_optimal_cost(self) -> int:
        roots = self.expected_roots()
        costs = self.expected_root_costs()
        return sum(
            1
            for node in self.topology
            if node.root_id == roots[node.id] and node.root_cost == costs[node.id]
        )

    def is_stable(self) -> bool:
        """True when no propagation anywhere could change a belief."""
        topology = self.topology
        for link in topology.links:
            if link.is_self_link:
                continue
            a = topology.get_node(link.members[0])
            b = topology.get_node(link.members[1])
            if a is None or b is None:
                continue
            if a.prefers(b.root_id, b.root_cost + link.cost):
                return False
            if b.prefers(a.root_id, a.root_cost + link.cost):
                return False
        return True

    def record_batch(self) -> None:
        counts = [node.msg_count for node in self.topology]
        self.snapshots.append(
            ConvergenceSnapshot(
                batch=self.simulator.batches_run,
                rounds=self.simulator.rounds_run,
                nodes_agreeing=self.nodes_agreeing(),
                min_msg_count=min(counts, default=0),
            )
        )

    def finalize(self) -> SimulationResults:
        topology = self.topology
        node_count = len(topology)
        counts = [node.msg_count for node in topology]
        graph = topology.to_graph()

        if node_count:
            agreement = self.nodes_agreeing() / node_count
            optimal = self.nodes_at_optimal_cost() / node_count
        else:
            agreement = 1.0
            optimal = 1.0

        return SimulationResults(
            node_count=node_count,
            link_count=len(topology.links),
            component_count=nx.number_connected_components(graph) if node_count else 0,
            rounds_run=self.simulator.rounds_run,
            batches_run=self.simulator.batches_run,
            total_messages=sum(counts),
            min_msg_count=min(counts, default=0),
            median_msg_count=float(median(counts)) if counts else 0.0,
            max_msg_count=max(counts, default=0),
            root_agreement_rate=agreement,
            optimal_cost_rate=optimal,
            stable=self.is_stable(),
            convergence_timeseries=list(self.snapshots),
        )
