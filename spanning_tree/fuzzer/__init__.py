from spanning_tree.fuzzer.config import (
    AnomalyThresholds,
    FloatRange,
    FuzzerConfig,
    IntRange,
    ParameterRanges,
)

__all__ = [
    "AnomalyThresholds",
    "FloatRange",
    "FuzzerConfig",
    "IntRange",
    "ParameterRanges",
]
