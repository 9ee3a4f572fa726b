"""Simulation configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

    from spanning_tree.core.topology import InterconnectionPolicy


@dataclass(frozen=True)
class SimulationConfig:
    """Configuration for a root election run."""

    # Network topology
    node_count: int = 16
    id_space: int | None = None  # ids are drawn from range(id_space); defaults to 4 * node_count
    interconnection_policy: InterconnectionPolicy = None  # type: ignore[assignment]
    mesh_degree: int = 3
    min_link_cost: int = 1
    max_link_cost: int = 10
    ensure_connected: bool = True

    # Convergence driver
    min_iterations: int = 10  # rounds per batch
    min_hops: int = 100  # every node must receive more suggestions than this
    recursive: bool = True
    max_batches: int | None = None  # None keeps the driver unbounded

    seed: int = 42

    def __post_init__(self) -> None:
        if self.interconnection_policy is None:
            from spanning_tree.core.topology import RANDOM

            object.__setattr__(self, "interconnection_policy", RANDOM)

    @classmethod
    def from_toml(cls, path: Path) -> SimulationConfig:
        """Load a config from [topology] and [convergence] tables.

        The policy is given by name under topology.policy (random,
        small_world, ring, line, star or complete).
        """
        import tomllib

        from spanning_tree.core.topology import POLICIES

        with path.open("rb") as f:
            data = tomllib.load(f)

        kwargs: dict[str, Any] = {}
        topology = dict(data.get("topology", {}))
        policy_name = topology.pop("policy", None)
        if policy_name is not None:
            if policy_name not in POLICIES:
                raise ValueError(f"Unknown interconnection policy: {policy_name}")
            kwargs["interconnection_policy"] = POLICIES[policy_name]
        kwargs.update(topology)
        kwargs.update(data.get("convergence", {}))
        if "seed" in data:
            kwargs["seed"] = data["seed"]

        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

        return cls(**kwargs)
