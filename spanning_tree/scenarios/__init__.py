"""Simulation scenario runners."""

from .baseline import build_simulation, run_baseline_scenario

__all__ = [
    "build_simulation",
    "run_baseline_scenario",
]
