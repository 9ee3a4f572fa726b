from __future__ import annotations

from typing import TYPE_CHECKING

import coolname.impl

from spanning_tree.config import SimulationConfig
from spanning_tree.core.topology import (
    COMPLETE,
    LINE,
    RANDOM,
    RING,
    SMALL_WORLD,
    STAR,
    policy_name,
)

if TYPE_CHECKING:
    from random import Random

    from spanning_tree.core.topology import InterconnectionPolicy
    from spanning_tree.fuzzer.config import ParameterRanges

INTERCONNECTION_POLICIES: list[InterconnectionPolicy] = [
    RANDOM,
    SMALL_WORLD,
    RING,
    LINE,
    STAR,
    COMPLETE,
]


def generate_run_id(rng: Random) -> str:
    coolname.impl.replace_random(rng)
    words = coolname.impl.generate(3)
    return "-".join(words)


def generate_simulation_config(
    rng: Random,
    ranges: ParameterRanges,
    max_batches: int | None,
) -> SimulationConfig:
    node_count = rng.randint(*ranges.node_count)
    min_link_cost = rng.randint(*ranges.min_link_cost)
    max_link_cost = max(min_link_cost, rng.randint(*ranges.max_link_cost))

    return SimulationConfig(
        node_count=node_count,
        id_space=node_count * rng.randint(*ranges.id_space_factor),
        interconnection_policy=rng.choice(INTERCONNECTION_POLICIES),
        mesh_degree=rng.randint(*ranges.mesh_degree),
        min_link_cost=min_link_cost,
        max_link_cost=max_link_cost,
        ensure_connected=True,
        min_iterations=rng.randint(*ranges.min_iterations),
        min_hops=rng.randint(*ranges.min_hops),
        recursive=rng.random() < ranges.recursive_probability,
        max_batches=max_batches,
        seed=rng.randint(0, 2**31 - 1),
    )


def validate_config(config: SimulationConfig) -> tuple[bool, list[str]]:
    errors: list[str] = []

    if config.node_count < 0:
        errors.append(f"node_count ({config.node_count}) must be non-negative")

    if config.id_space is not None and config.id_space < config.node_count:
        errors.append(f"id_space ({config.id_space}) must be >= node_count ({config.node_count})")

    if config.mesh_degree < 1:
        errors.append(f"mesh_degree ({config.mesh_degree}) must be positive")

    if config.node_count > 0 and config.mesh_degree >= config.node_count:
        errors.append(
            f"mesh_degree ({config.mesh_degree}) must be < node_count ({config.node_count})"
        )

    if config.min_link_cost < 0:
        errors.append(f"min_link_cost ({config.min_link_cost}) must be non-negative")

    if config.max_link_cost < config.min_link_cost:
        errors.append(
            f"max_link_cost ({config.max_link_cost}) must be >= "
            f"min_link_cost ({config.min_link_cost})"
        )

    if config.min_iterations < 1 and config.min_hops > 0:
        errors.append(f"min_iterations ({config.min_iterations}) must be positive")

    if not config.ensure_connected and config.max_batches is None:
        errors.append("max_batches is required when the topology may be disconnected")

    return (len(errors) == 0, errors)


def config_to_dict(config: SimulationConfig) -> dict[str, object]:
    return {
        "node_count": config.node_count,
        "id_space": config.id_space,
        "interconnection_policy": policy_name(config.interconnection_policy),
        "mesh_degree": config.mesh_degree,
        "min_link_cost": config.min_link_cost,
        "max_link_cost": config.max_link_cost,
        "ensure_connected": config.ensure_connected,
        "min_iterations": config.min_iterations,
        "min_hops": config.min_hops,
        "recursive": config.recursive,
        "max_batches": config.max_batches,
        "seed": config.seed,
    }
