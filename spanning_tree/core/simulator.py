"""Randomized convergence driver."""

from __future__ import annotations

import logging
from random import Random
from typing import TYPE_CHECKING, Protocol

from spanning_tree.core.propagation import run_calc

if TYPE_CHECKING:
    from spanning_tree.config import SimulationConfig
    from spanning_tree.core.topology import Topology
    from spanning_tree.core.types import NodeId
    from spanning_tree.metrics.collector import MetricsCollector
    from spanning_tree.metrics.results import SimulationResults

logger = logging.getLogger(__name__)


class SelectionSource(Protocol):
    """Anything that can pick an index uniformly, e.g. random.Random."""

    def randrange(self, stop: int, /) -> int: ...


class Simulator:
    """Single-threaded driver that perturbs random nodes until the network is informed.

    Every round picks one node uniformly at random and runs a propagation
    from it to completion before the next pick. All randomness comes from a
    single selection source, seeded for reproducibility unless one is
    injected.
    """

    def __init__(
        self,
        topology: Topology,
        seed: int = 42,
        rng: SelectionSource | None = None,
    ) -> None:
        self._topology = topology
        self._rng: SelectionSource = rng if rng is not None else Random(seed)
        self._rounds_run: int = 0
        self._batches_run: int = 0
        self._selections: list[NodeId] = []

        self._config: SimulationConfig | None = None
        self._metrics: MetricsCollector | None = None

    @property
    def topology(self) -> Topology:
        return self._topology

    @property
    def rng(self) -> SelectionSource:
        return self._rng

    @property
    def rounds_run(self) -> int:
        return self._rounds_run

    @property
    def batches_run(self) -> int:
        return self._batches_run

    @property
    def selections(self) -> list[NodeId]:
        """Node picked in each round, in order."""
        return list(self._selections)

    @property
    def config(self) -> SimulationConfig:
        if self._config is None:
            raise RuntimeError("Simulator not configured with config")
        return self._config

    @property
    def metrics(self) -> MetricsCollector:
        if self._metrics is None:
            raise RuntimeError("Simulator not configured with metrics")
        return self._metrics

    def attach_metrics(self, metrics: MetricsCollector) -> None:
        self._metrics = metrics

    def finalize_metrics(self) -> SimulationResults:
        return self.metrics.finalize()

    def step(self, recursive: bool = True) -> NodeId | None:
        """Run one round. Returns the selected node, or None for an empty topology."""
        node_ids = self._topology.node_ids
        if not node_ids:
            return None

        node_id = node_ids[self._rng.randrange(len(node_ids))]
        run_calc(self._topology, node_id, recursive)
        self._selections.append(node_id)
        self._rounds_run += 1
        return node_id

    def all_informed(self, min_hops: int) -> bool:
        return all(node.msg_count > min_hops for node in self._topology)

    def simulate(
        self,
        min_iterations: int,
        min_hops: int,
        recursive: bool = True,
        max_batches: int | None = None,
    ) -> bool:
        """Run batches of min_iterations rounds until every node has heard enough.

        With min_hops == 0 exactly one batch runs. Otherwise batches repeat
        until every node's msg_count exceeds min_hops. Nodes that can never
        receive that many suggestions (an isolated node, say) keep the loop
        going forever unless max_batches caps it.

        Returns whether the message threshold was met; always True for an
        empty topology, where nothing runs.
        """
        if len(self._topology) == 0:
            return True

        if min_iterations < 0:
            raise ValueError(f"min_iterations must be non-negative, got {min_iterations}")
        if min_hops < 0:
            raise ValueError(f"min_hops must be non-negative, got {min_hops}")
        if min_iterations == 0 and min_hops > 0:
            raise ValueError("min_iterations must be positive when min_hops is set")
        if max_batches is not None and max_batches < 1:
            raise ValueError(f"max_batches must be at least 1, got {max_batches}")

        batches = 0
        while True:
            for _ in range(min_iterations):
                self.step(recursive)
            batches += 1
            self._batches_run += 1

            if self._metrics is not None:
                self._metrics.record_batch()

            if min_hops == 0 or self.all_informed(min_hops):
                logger.debug(
                    "Converged after %d batches (%d rounds total)", batches, self._rounds_run
                )
                return True

            if max_batches is not None and batches >= max_batches:
                logger.warning(
                    "Stopped after %d batches with nodes still at or below %d messages",
                    batches,
                    min_hops,
                )
                return False

    def run(self) -> bool:
        """Simulate with the convergence parameters of the configured build."""
        config = self.config
        return self.simulate(
            config.min_iterations,
            config.min_hops,
            recursive=config.recursive,
            max_batches=config.max_batches,
        )

    @classmethod
    def build(cls, config: SimulationConfig | None = None) -> Simulator:
        """Build a simulator over a freshly generated topology.

        The topology and node selection share one seeded RNG, so the same
        config always yields the same graph and the same trace.
        """
        from spanning_tree.config import SimulationConfig
        from spanning_tree.core.topology import build_topology
        from spanning_tree.metrics.collector import MetricsCollector

        if config is None:
            config = SimulationConfig()

        rng = Random(config.seed)
        topology = build_topology(config, rng)

        simulator = cls(topology, rng=rng)
        simulator._config = config
        simulator._metrics = MetricsCollector(simulator=simulator)

        logger.info(
            "Built topology with %d nodes and %d links (seed=%d)",
            len(topology),
            len(topology.links),
            config.seed,
        )
        return simulator
