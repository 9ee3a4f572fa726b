from __future__ import annotations

from typing import TYPE_CHECKING

from spanning_tree.scenarios.baseline import run_baseline_scenario

if TYPE_CHECKING:
    from spanning_tree.config import SimulationConfig
    from spanning_tree.fuzzer.config import AnomalyThresholds
    from spanning_tree.metrics.results import SimulationResults


def execute_baseline(
    config: SimulationConfig,
) -> tuple[SimulationResults | None, Exception | None]:
    try:
        sim = run_baseline_scenario(config=config)
        results = sim.finalize_metrics()
        return (results, None)
    except Exception as e:
        return (None, e)


type Anomaly = tuple[str, str]  # (marker, message)


def detect_anomalies(
    metrics: SimulationResults,
    thresholds: AnomalyThresholds,
    min_hops: int | None = None,
) -> list[Anomaly]:
    anomalies: list[Anomaly] = []

    if metrics.root_agreement_rate < thresholds.min_root_agreement_rate:
        anomalies.append((
            "root_disagreement",
            f"root_agreement_rate={metrics.root_agreement_rate:.3f} "
            f"< {thresholds.min_root_agreement_rate}",
        ))

    if metrics.optimal_cost_rate < thresholds.min_optimal_cost_rate:
        anomalies.append((
            "suboptimal_cost",
            f"optimal_cost_rate={metrics.optimal_cost_rate:.3f} "
            f"< {thresholds.min_optimal_cost_rate}",
        ))

    if thresholds.require_stable and not metrics.stable:
        anomalies.append((
            "unstable",
            "a further propagation would still change a belief",
        ))

    if min_hops is not None and min_hops > 0 and metrics.min_msg_count <= min_hops:
        anomalies.append((
            "budget_exhausted",
            f"min_msg_count={metrics.min_msg_count} <= min_hops={min_hops} "
            f"after {metrics.batches_run} batches",
        ))

    return anomalies


def determine_status(anomalies: list[Anomaly], error: Exception | None) -> str:
    if error is not None:
        return "error"
    if anomalies:
        markers = ",".join(marker for marker, _ in anomalies)
        return f"ATTENTION({markers})"
    return "success"
