"""Pipeline — evaluation seeds через стадии и reduction к минимуму."""

from almanac.pipeline.evaluator import (
    EvaluationResult,
    PipelineEvaluator,
    SeedOutcome,
    seed_minimum,
    solve,
    trace_seed,
)

__all__ = [
    "EvaluationResult",
    "PipelineEvaluator",
    "SeedOutcome",
    "seed_minimum",
    "solve",
    "trace_seed",
]
