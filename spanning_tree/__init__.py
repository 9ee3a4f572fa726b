"""Simulator for spanning-tree root election by neighbor gossip."""

from spanning_tree.config import SimulationConfig
from spanning_tree.core.topology import (
    COMPLETE,
    LINE,
    RANDOM,
    RING,
    SMALL_WORLD,
    STAR,
    InterconnectionPolicy,
)

__all__ = [
    "COMPLETE",
    "LINE",
    "RANDOM",
    "RING",
    "SMALL_WORLD",
    "STAR",
    "InterconnectionPolicy",
    "SimulationConfig",
]
