"""Simulation results and snapshot data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ConvergenceSnapshot:
    """Network state after one batch of rounds."""

    batch: int
    rounds: int
    nodes_agreeing: int  # Nodes already holding their component's lowest id as root
    min_msg_count: int


@dataclass
class SimulationResults:
    """Derived metrics computed after simulation completes."""

    # Topology
    node_count: int
    link_count: int
    component_count: int

    # Driver effort
    rounds_run: int
    batches_run: int

    # Suggestions received per node
    total_messages: int
    min_msg_count: int
    median_msg_count: float
    max_msg_count: int

    # Outcome
    root_agreement_rate: float  # Fraction of nodes with the expected root
    optimal_cost_rate: float  # Fraction with expected root at shortest-path cost
    stable: bool  # No node would accept any neighbor's suggestion

    convergence_timeseries: list[ConvergenceSnapshot] = field(default_factory=list)

    @property
    def converged(self) -> bool:
        return self.stable and self.root_agreement_rate == 1.0

    def to_dict(self) -> dict[str, object]:
        return {
            "node_count": self.node_count,
            "link_count": self.link_count,
            "component_count": self.component_count,
            "rounds_run": self.rounds_run,
            "batches_run": self.batches_run,
            "total_messages": self.total_messages,
            "min_msg_count": self.min_msg_count,
            "median_msg_count": self.median_msg_count,
            "max_msg_count": self.max_msg_count,
            "root_agreement_rate": self.root_agreement_rate,
            "optimal_cost_rate": self.optimal_cost_rate,
            "stable": self.stable,
            "converged": self.converged,
        }
