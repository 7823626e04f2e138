"""Pipeline Evaluator — seeds → pipeline → минимальный location.

Каждый seed (Point или Interval) проходит через все стадии по порядку.
Interval на каждой стадии может распасться на несколько частей (fragments);
минимум цепочки — наименьший lower_bound среди финальных fragments, т.к.
внутри каждой части отображение монотонно (slope = 1).

Параллелизм:
- Seeds независимы: evaluation каждого — чистая функция от read-only таблиц
- Fan-out через concurrent.futures (thread или process pool)
- Reduction — коммутативный и ассоциативный минимум, порядок не важен
"""

import concurrent.futures
from dataclasses import dataclass
from functools import partial
from typing import NamedTuple, Optional, Sequence

from almanac.config import EvaluatorConfig, ExecutorKind
from almanac.core.domain.almanac_model import Almanac, Pipeline
from almanac.core.domain.mapping import MappingTable
from almanac.core.domain.seeds import Seed
from almanac.core.errors import NoMinimumError
from almanac.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# SINGLE SEED CHAIN
# =============================================================================


class SeedOutcome(NamedTuple):
    """Результат цепочки одного seed."""

    minimum: Optional[int]  # None если цепочка не дала кандидатов
    fragment_count: int


def trace_seed(stages: Sequence[MappingTable], seed: Seed) -> list[Seed]:
    """
    Прогон одного seed через все стадии.

    Args:
        stages: Таблицы в порядке evaluation
        seed: Point или Interval

    Returns:
        Финальные fragments (для Point — ровно один)
    """
    fragments: list[Seed] = [seed] if not seed.is_empty else []
    for stage in stages:
        fragments = [out for fragment in fragments for out in stage.get_destination(fragment)]
    return fragments


def seed_minimum(stages: Sequence[MappingTable], seed: Seed) -> Optional[int]:
    """Минимальное значение, достижимое из seed (None для пустого интервала)."""
    return _evaluate_seed(stages, seed).minimum


def _evaluate_seed(stages: Sequence[MappingTable], seed: Seed) -> SeedOutcome:
    # Module-level: должна пиклиться для ProcessPoolExecutor
    fragments = trace_seed(stages, seed)
    if not fragments:
        return SeedOutcome(minimum=None, fragment_count=0)
    return SeedOutcome(
        minimum=min(fragment.lower_bound for fragment in fragments),
        fragment_count=len(fragments),
    )


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class EvaluationResult:
    """Результат evaluation всех seeds."""

    minimum: int
    seed_count: int
    fragment_count: int
    workers: Optional[int]

    # Детали
    details: str


# =============================================================================
# EVALUATOR
# =============================================================================


class PipelineEvaluator:
    """Map-reduce evaluation seeds через pipeline.

    Порядок:
    1. Map: каждый seed независимо → SeedOutcome (последовательно или в пуле)
    2. Reduce: минимум по всем SeedOutcome.minimum (None пропускаются)
    3. Нет ни одного кандидата → NoMinimumError
    """

    def __init__(self, pipeline: Pipeline, config: Optional[EvaluatorConfig] = None):
        """
        Args:
            pipeline: Pipeline таблиц (read-only)
            config: Конфигурация fan-out (default: EvaluatorConfig())
        """
        self.pipeline = pipeline
        self.config = config or EvaluatorConfig()

    def _map_sequential(self, seeds: Sequence[Seed]) -> list[SeedOutcome]:
        outcomes = []
        for seed in seeds:
            logger.debug("seed_evaluation_started", seed=seed.model_dump())
            outcomes.append(_evaluate_seed(self.pipeline.stages, seed))
        return outcomes

    def _map_parallel(self, seeds: Sequence[Seed]) -> list[SeedOutcome]:
        if self.config.executor == ExecutorKind.PROCESS:
            pool_cls = concurrent.futures.ProcessPoolExecutor
        else:
            pool_cls = concurrent.futures.ThreadPoolExecutor

        task = partial(_evaluate_seed, self.pipeline.stages)
        outcomes = []
        with pool_cls(max_workers=self.config.max_workers) as ex:
            futures = []
            for seed in seeds:
                logger.debug("seed_evaluation_started", seed=seed.model_dump())
                futures.append(ex.submit(task, seed))
            for fut in concurrent.futures.as_completed(futures):
                outcomes.append(fut.result())
        return outcomes

    def _use_pool(self, seed_count: int) -> bool:
        if not self.config.parallel or seed_count < 2:
            return False
        return self.config.max_workers is None or self.config.max_workers > 1

    def evaluate(self, seeds: Sequence[Seed]) -> EvaluationResult:
        """Evaluation всех seeds и reduction к глобальному минимуму.

        Args:
            seeds: Point или Interval seeds (варианты можно смешивать)

        Returns:
            EvaluationResult с минимальным location

        Raises:
            NoMinimumError: Если нет ни одного кандидата (пустой набор seeds)
        """
        seeds = list(seeds)
        use_pool = self._use_pool(len(seeds))

        if use_pool:
            outcomes = self._map_parallel(seeds)
        else:
            outcomes = self._map_sequential(seeds)

        candidates = [o.minimum for o in outcomes if o.minimum is not None]
        if not candidates:
            raise NoMinimumError(len(seeds))

        fragment_count = sum(o.fragment_count for o in outcomes)
        # None: размер пула по умолчанию concurrent.futures
        workers = self.config.max_workers if use_pool else 1
        minimum = min(candidates)

        logger.info(
            "pipeline_evaluated",
            seeds=len(seeds),
            stages=len(self.pipeline),
            fragments=fragment_count,
            parallel=use_pool,
            minimum=minimum,
        )

        mode_note = f"{self.config.executor.value} pool" if use_pool else "sequential"
        return EvaluationResult(
            minimum=minimum,
            seed_count=len(seeds),
            fragment_count=fragment_count,
            workers=workers,
            details=f"{len(seeds)} seed(s) through {len(self.pipeline)} stage(s), {mode_note}",
        )


def solve(almanac: Almanac, config: Optional[EvaluatorConfig] = None) -> int:
    """Минимальный location для распарсенного almanac."""
    return PipelineEvaluator(almanac.pipeline, config).evaluate(almanac.seeds).minimum
