"""
Almanac — Распарсенный almanac: seeds + pipeline таблиц

Pipeline — упорядоченная последовательность MappingTable. Доменный порядок
стадий задан константой STAGE_LABELS, а не отдельными полями, поэтому
длина pipeline описывается данными (toy pipelines в тестах).
"""

from typing import Final

from pydantic import BaseModel, Field, field_validator

from almanac.core.domain.mapping import MappingTable
from almanac.core.domain.seeds import Interval, Point, Seed, SeedMode


# =============================================================================
# STAGES
# =============================================================================

# Фиксированный доменный порядок стадий
STAGE_LABELS: Final[tuple[str, ...]] = (
    "seed-to-soil",
    "soil-to-fertilizer",
    "fertilizer-to-water",
    "water-to-light",
    "light-to-temperature",
    "temperature-to-humidity",
    "humidity-to-location",
)


# =============================================================================
# PIPELINE
# =============================================================================


class Pipeline(BaseModel):
    """
    Упорядоченная последовательность таблиц отображения.

    Immutable модель (frozen=True). Порядок стадий значим.
    """

    stages: tuple[MappingTable, ...] = Field(default=(), description="Таблицы в порядке evaluation")

    model_config = {"frozen": True}

    def __len__(self) -> int:
        return len(self.stages)

    def rule_count(self) -> int:
        """Суммарное число правил во всех стадиях."""
        return sum(stage.rule_count() for stage in self.stages)

    def labels(self) -> list[str]:
        return [stage.label for stage in self.stages]


# =============================================================================
# ALMANAC
# =============================================================================


class Almanac(BaseModel):
    """
    Seed set + pipeline.

    seeds — без дубликатов, в порядке первого появления во входе.
    Вариант seed должен соответствовать mode.
    """

    mode: SeedMode = Field(..., description="Режим интерпретации seeds (points/intervals)")
    seeds: tuple[Seed, ...] = Field(default=(), description="Seeds без дубликатов")
    pipeline: Pipeline = Field(..., description="Pipeline таблиц отображения")

    model_config = {"frozen": True}

    @field_validator("seeds")
    @classmethod
    def validate_seed_variant(cls, v: tuple[Seed, ...], info) -> tuple[Seed, ...]:
        """
        Проверка соответствия варианта seed режиму.

        POINTS → только Point, INTERVALS → только Interval.
        """
        if "mode" not in info.data:
            return v

        expected = Point if info.data["mode"] == SeedMode.POINTS else Interval
        for seed in v:
            if not isinstance(seed, expected):
                raise ValueError(
                    f"{info.data['mode'].value} almanac cannot hold {type(seed).__name__} seeds"
                )
        return v
