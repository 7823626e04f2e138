"""Runner — один batch-запуск: файл almanac → минимальный location."""

from typing import Optional, Sequence

from almanac.config import RunConfig
from almanac.core.domain.almanac_model import STAGE_LABELS
from almanac.parser.almanac_parser import AlmanacSource, load_almanac, parse_almanac
from almanac.pipeline.evaluator import EvaluationResult, PipelineEvaluator


def run_source(
    source: AlmanacSource,
    config: Optional[RunConfig] = None,
    stage_labels: Sequence[str] = STAGE_LABELS,
) -> EvaluationResult:
    """Evaluation almanac из текста или text stream (без файловой системы)."""
    config = config or RunConfig()
    almanac = parse_almanac(source, mode=config.mode, stage_labels=stage_labels)
    return PipelineEvaluator(almanac.pipeline, config.evaluator).evaluate(almanac.seeds)


def run(config: Optional[RunConfig] = None) -> EvaluationResult:
    """Evaluation almanac из config.input_path.

    Raises:
        IoError, ParseError, InvalidRuleError, NoMinimumError
    """
    config = config or RunConfig()
    almanac = load_almanac(config.input_path, mode=config.mode)
    return PipelineEvaluator(almanac.pipeline, config.evaluator).evaluate(almanac.seeds)
