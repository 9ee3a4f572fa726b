from __future__ import annotations

import json
import logging
import time
from datetime import UTC, datetime
from random import Random
from typing import TYPE_CHECKING

from spanning_tree.fuzzer.executor import (
    Anomaly,
    detect_anomalies,
    determine_status,
    execute_baseline,
)
from spanning_tree.fuzzer.generator import (
    config_to_dict,
    generate_run_id,
    generate_simulation_config,
    validate_config,
)

if TYPE_CHECKING:
    from pathlib import Path

    from spanning_tree.fuzzer.config import FuzzerConfig

logger = logging.getLogger(__name__)


def append_summary(path: Path, summary: dict[str, object]) -> None:
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(summary) + "\n")


def write_trace(
    output_dir: Path,
    run_id: str,
    config: dict[str, object],
    metrics: dict[str, object],
    seed: int,
) -> None:
    trace_dir = output_dir / run_id
    trace_dir.mkdir(parents=True, exist_ok=True)

    config_with_seed = {**config, "run_seed": seed}
    (trace_dir / "config.json").write_text(json.dumps(config_with_seed, indent=2), encoding="utf-8")

    (trace_dir / "metrics.json").write_text(json.dumps(metrics, indent=2), encoding="utf-8")


def _run_once(run_seed: int, config: FuzzerConfig) -> dict[str, object] | None:
    """Generate, execute and summarize one run. Returns None for an invalid config."""
    run_rng = Random(run_seed)

    run_id = generate_run_id(run_rng)
    sim_config = generate_simulation_config(
        run_rng,
        config.parameter_ranges,
        config.max_batches,
    )

    is_valid, validation_errors = validate_config(sim_config)
    if not is_valid:
        logger.debug("[%s] seed=%d skipped: %s", run_id, run_seed, "; ".join(validation_errors))
        return None

    start_time = datetime.now(UTC)
    wall_start = time.monotonic()

    results, error = execute_baseline(sim_config)

    wall_clock = time.monotonic() - wall_start
    end_time = datetime.now(UTC)

    anomalies: list[Anomaly] = []
    metrics_dict: dict[str, object] = {}
    if results is not None:
        anomalies = detect_anomalies(results, config.anomaly_thresholds, sim_config.min_hops)
        metrics_dict = results.to_dict()

    status = determine_status(anomalies, error)

    summary: dict[str, object] = {
        "run_id": run_id,
        "seed": run_seed,
        "scenario": "BASELINE",
        "status": status,
        "anomalies": [msg for _, msg in anomalies],
        "metrics": metrics_dict,
        "config": config_to_dict(sim_config),
        "wall_clock_seconds": round(wall_clock, 2),
        "timestamp_start": start_time.isoformat(),
        "timestamp_end": end_time.isoformat(),
    }

    if error is not None:
        summary["error"] = str(error)
        logger.error("[%s] seed=%d failed: %s", run_id, run_seed, error)
    else:
        logger.info("[%s] BASELINE seed=%d ... %s (%.1fs)", run_id, run_seed, status, wall_clock)

    return summary


def _record(summary: dict[str, object], config: FuzzerConfig) -> None:
    config.output_dir.mkdir(parents=True, exist_ok=True)
    append_summary(config.output_dir / config.overview_file, summary)

    status = str(summary["status"])
    should_trace = not config.trace_on_anomaly_only or status != "success"
    if should_trace:
        write_trace(
            config.output_dir,
            str(summary["run_id"]),
            summary["config"],  # type: ignore[arg-type]
            summary["metrics"],  # type: ignore[arg-type]
            int(summary["seed"]),  # type: ignore[call-overload]
        )


def run_fuzzer(config: FuzzerConfig) -> int:
    """Execute randomized runs until max_runs valid runs are recorded. Returns the run count."""
    rng = Random(config.master_seed) if config.master_seed is not None else Random()

    run_count = 0
    while run_count < config.max_runs:
        run_seed = rng.randint(0, 2**31 - 1)
        summary = _run_once(run_seed, config)
        if summary is None:
            continue

        _record(summary, config)
        run_count += 1

    return run_count


def replay_run(seed: int, config: FuzzerConfig) -> dict[str, object] | None:
    """Re-execute the run generated from seed and record it marked as a replay."""
    summary = _run_once(seed, config)
    if summary is None:
        logger.warning("seed=%d generates an invalid config, nothing replayed", seed)
        return None

    summary["replay"] = True
    _record(summary, config)
    return summary
