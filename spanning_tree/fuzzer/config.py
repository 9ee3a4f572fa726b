from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

type IntRange = tuple[int, int]
type FloatRange = tuple[float, float]

DEFAULT_MAX_BATCHES = 1000


@dataclass(frozen=True)
class ParameterRanges:
    node_count: IntRange = (4, 64)
    id_space_factor: IntRange = (1, 8)  # id_space = node_count * factor
    mesh_degree: IntRange = (2, 6)

    min_link_cost: IntRange = (0, 1)
    max_link_cost: IntRange = (1, 20)

    min_iterations: IntRange = (1, 20)
    min_hops: IntRange = (5, 50)
    recursive_probability: float = 0.75


@dataclass(frozen=True)
class AnomalyThresholds:
    min_root_agreement_rate: float = 1.0
    min_optimal_cost_rate: float = 1.0
    require_stable: bool = True


@dataclass
class FuzzerConfig:
    output_dir: Path
    max_runs: int = 100
    max_batches: int = DEFAULT_MAX_BATCHES  # caps each run; the driver itself is unbounded
    parameter_ranges: ParameterRanges = field(default_factory=ParameterRanges)
    anomaly_thresholds: AnomalyThresholds = field(default_factory=AnomalyThresholds)
    overview_file: str = "runs.ndjson"
    trace_on_anomaly_only: bool = True
    master_seed: int | None = None

    @classmethod
    def from_toml(cls, path: Path) -> FuzzerConfig:
        import tomllib

        with path.open("rb") as f:
            data = tomllib.load(f)

        execution = data.get("execution", {})
        output = data.get("output", {})
        ranges_data = data.get("ranges", {})
        thresholds_data = data.get("thresholds", {})

        ranges_kwargs: dict[str, IntRange | float] = {}
        for section in ["topology", "convergence"]:
            section_data = ranges_data.get(section, {})
            for key, value in section_data.items():
                if isinstance(value, dict) and "min" in value and "max" in value:
                    ranges_kwargs[key] = (value["min"], value["max"])
                else:
                    ranges_kwargs[key] = value

        parameter_ranges = ParameterRanges(**ranges_kwargs) if ranges_kwargs else ParameterRanges()

        thresholds_kwargs = {}
        for key, value in thresholds_data.items():
            thresholds_kwargs[key] = value

        anomaly_thresholds = (
            AnomalyThresholds(**thresholds_kwargs) if thresholds_kwargs else AnomalyThresholds()
        )

        from pathlib import Path as PathClass

        return cls(
            output_dir=PathClass(output.get("dir", "fuzzer_output")),
            max_runs=execution.get("max_runs", 100),
            max_batches=execution.get("max_batches", DEFAULT_MAX_BATCHES),
            parameter_ranges=parameter_ranges,
            anomaly_thresholds=anomaly_thresholds,
            overview_file=output.get("overview_file", "runs.ndjson"),
            trace_on_anomaly_only=execution.get("trace_on_anomaly_only", True),
            master_seed=execution.get("master_seed"),
        )
