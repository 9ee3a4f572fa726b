"""Baseline root election scenario."""

from __future__ import annotations

from spanning_tree.config import SimulationConfig
from spanning_tree.core.simulator import Simulator


def build_simulation(config: SimulationConfig | None = None) -> Simulator:
    """Build a simulator over a generated topology without running it."""
    return Simulator.build(config)


def run_baseline_scenario(config: SimulationConfig | None = None) -> Simulator:
    """Build a topology and drive it with the config's convergence parameters."""
    if config is None:
        config = SimulationConfig()

    sim = build_simulation(config)
    sim.run()

    return sim
