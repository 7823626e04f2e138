"""Run configuration — параметры одного batch-запуска.

Не general-purpose система конфигурации: только значения по умолчанию
для CLI и fan-out evaluator. Переменные окружения не читаются.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final, Optional

from almanac.core.domain.seeds import SeedMode


# Входной файл по умолчанию (относительно текущей директории)
DEFAULT_INPUT_PATH: Final[Path] = Path("input.txt")

DEFAULT_LOG_LEVEL: Final[str] = "INFO"


class ExecutorKind(str, Enum):
    """Тип пула для параллельного evaluation seeds"""

    THREAD = "thread"
    PROCESS = "process"


@dataclass(frozen=True)
class EvaluatorConfig:
    """Конфигурация PipelineEvaluator.

    parallel=False или единственный seed → последовательное evaluation.
    max_workers=None → значение по умолчанию concurrent.futures.
    """

    parallel: bool = True
    max_workers: Optional[int] = None
    executor: ExecutorKind = ExecutorKind.THREAD

    def __post_init__(self):
        if self.max_workers is not None and self.max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")


@dataclass(frozen=True)
class RunConfig:
    """Конфигурация CLI запуска."""

    input_path: Path = DEFAULT_INPUT_PATH
    mode: SeedMode = SeedMode.POINTS
    log_level: str = DEFAULT_LOG_LEVEL
    evaluator: EvaluatorConfig = field(default_factory=EvaluatorConfig)
