"""Metrics collection and analysis."""

from spanning_tree.metrics.collector import MetricsCollector
from spanning_tree.metrics.results import ConvergenceSnapshot, SimulationResults

__all__ = [
    "ConvergenceSnapshot",
    "MetricsCollector",
    "SimulationResults",
]
