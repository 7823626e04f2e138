"""
Seeds — Входные значения pipeline

Два режима (SeedMode):
- POINTS: дискретные целые значения (Point)
- INTERVALS: полуоткрытые интервалы [start, end) (Interval)

Point и Interval образуют tagged variant, с которым работает единый
engine (MappingTable.get_destination). Оба варианта immutable и hashable.
"""

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class SeedMode(str, Enum):
    """Режим интерпретации строки seeds"""

    POINTS = "points"
    INTERVALS = "intervals"


# =============================================================================
# SEED VARIANTS
# =============================================================================


class Point(BaseModel):
    """Дискретное значение seed (mode A)."""

    kind: Literal["point"] = "point"
    value: int = Field(..., ge=0, description="Значение")

    model_config = {"frozen": True}

    @property
    def lower_bound(self) -> int:
        return self.value

    @property
    def is_empty(self) -> bool:
        return False


class Interval(BaseModel):
    """
    Полуоткрытый интервал значений [start, end) (mode B).

    Пустой интервал (end == start) допустим как значение, но не даёт
    ни одного кандидата при evaluation.
    """

    kind: Literal["interval"] = "interval"
    start: int = Field(..., ge=0, description="Начало интервала (включительно)")
    end: int = Field(..., ge=0, description="Конец интервала (исключительно)")

    model_config = {"frozen": True}

    @field_validator("end")
    @classmethod
    def validate_end_not_before_start(cls, v: int, info) -> int:
        """Проверка, что end >= start"""
        if "start" in info.data:
            start = info.data["start"]
            if v < start:
                raise ValueError(f"end {v} must be >= start {start}")
        return v

    @classmethod
    def from_length(cls, start: int, length: int) -> "Interval":
        """Интервал [start, start + length)."""
        return cls(start=start, end=start + length)

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def lower_bound(self) -> int:
        return self.start

    @property
    def is_empty(self) -> bool:
        return self.end == self.start


Seed = Union[Point, Interval]
