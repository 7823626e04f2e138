"""
Almanac Parser — текст almanac → Almanac

Формат:
    seeds: <int> <int> ...

    <label>:
    <dest> <src> <len>
    ...

    <label>:
    ...

Правила:
- Первая строка обязана начинаться с "seeds: "
- POINTS: каждое число — отдельный Point, дубликаты схлопываются
- INTERVALS: числа группируются парами (start, length) → [start, start + length)
- Секции разделены пустыми строками, каждая начинается с label (оканчивается ':')
- Правило — ровно три неотрицательных целых (destination_start, source_start, length)
- Число секций должно совпадать с числом стадий (len(stage_labels))

Парсер не открывает файлы: источник (str или text stream) передаётся
вызывающим кодом. load_almanac — тонкая обёртка для файлов.
"""

import re
from pathlib import Path
from typing import Final, Iterator, Sequence, TextIO, Union

from almanac.core.domain.almanac_model import STAGE_LABELS, Almanac, Pipeline
from almanac.core.domain.mapping import MappingRule, MappingTable, find_overlaps
from almanac.core.domain.seeds import Interval, Point, Seed, SeedMode
from almanac.core.errors import InvalidRuleError, IoError, ParseError
from almanac.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

SEEDS_PREFIX: Final[str] = "seeds: "

LABEL_SUFFIX: Final[str] = ":"

RULE_FIELD_COUNT: Final[int] = 3

# Только ASCII цифры: int() принимает также '+', '_' и unicode цифры
_NUMBER_RE: Final[re.Pattern] = re.compile(r"[0-9]+", re.ASCII)


AlmanacSource = Union[str, TextIO]


# =============================================================================
# HELPERS
# =============================================================================


def _numbered_lines(source: AlmanacSource) -> Iterator[tuple[int, str]]:
    """(1-based номер, строка без перевода строки)."""
    lines = source.splitlines() if isinstance(source, str) else source
    for line_no, line in enumerate(lines, start=1):
        yield line_no, line.rstrip("\r\n")


def _parse_numbers(text: str, line_no: int) -> list[int]:
    """
    Разбор последовательности целых, разделённых пробелами.

    Raises:
        ParseError: Если токен не является неотрицательным целым
    """
    numbers = []
    for token in text.split():
        if not _NUMBER_RE.fullmatch(token):
            raise ParseError("a non-negative integer", repr(token), line_no)
        numbers.append(int(token))
    return numbers


def _parse_seeds(line: str, line_no: int, mode: SeedMode) -> tuple[Seed, ...]:
    if not line.startswith(SEEDS_PREFIX):
        raise ParseError(f"header starting with {SEEDS_PREFIX!r}", repr(line), line_no)

    numbers = _parse_numbers(line[len(SEEDS_PREFIX):], line_no)

    seeds: list[Seed]
    if mode == SeedMode.POINTS:
        seeds = [Point(value=n) for n in numbers]
    else:
        if len(numbers) % 2 != 0:
            raise ParseError(
                "an even number of seed values (start, length pairs)",
                f"{len(numbers)} values",
                line_no,
            )
        seeds = [
            Interval.from_length(start, length)
            for start, length in zip(numbers[0::2], numbers[1::2])
        ]

    # Set семантика, порядок первого появления
    return tuple(dict.fromkeys(seeds))


def _parse_rule(line: str, line_no: int) -> MappingRule:
    fields = _parse_numbers(line, line_no)
    if len(fields) != RULE_FIELD_COUNT:
        raise ParseError(
            f"{RULE_FIELD_COUNT} integers (destination source length)",
            f"{len(fields)} in {line.strip()!r}",
            line_no,
        )

    destination_start, source_start, length = fields
    if length <= 0:
        raise InvalidRuleError(length, line_no)

    return MappingRule(
        source_start=source_start,
        destination_start=destination_start,
        length=length,
    )


def _split_sections(lines: Iterator[tuple[int, str]]) -> list[list[tuple[int, str]]]:
    """Группы непустых строк, разделённые одной или несколькими пустыми строками."""
    sections: list[list[tuple[int, str]]] = []
    current: list[tuple[int, str]] = []
    for line_no, line in lines:
        if line.strip():
            current.append((line_no, line))
        elif current:
            sections.append(current)
            current = []
    if current:
        sections.append(current)
    return sections


def _parse_section(section: list[tuple[int, str]]) -> MappingTable:
    label_no, label_line = section[0]
    label = label_line.strip()
    if not label.endswith(LABEL_SUFFIX):
        raise ParseError(f"section label ending with {LABEL_SUFFIX!r}", repr(label), label_no)

    rules = [_parse_rule(line, line_no) for line_no, line in section[1:]]
    table = MappingTable.from_rules(rules, label=label[: -len(LABEL_SUFFIX)].strip())

    # Таблица разрешает пересечения сама (first match), здесь только диагностика
    for covering, covered in find_overlaps(rules):
        logger.warning(
            "overlapping_rules",
            table=table.label,
            line=label_no,
            covering_source_start=covering.source_start,
            covered_source_start=covered.source_start,
        )

    return table


# =============================================================================
# PUBLIC API
# =============================================================================


def parse_almanac(
    source: AlmanacSource,
    mode: SeedMode = SeedMode.POINTS,
    stage_labels: Sequence[str] = STAGE_LABELS,
) -> Almanac:
    """
    Разбор almanac из текста или text stream.

    Args:
        source: Полный текст almanac или открытый text stream
        mode: Интерпретация строки seeds (POINTS/INTERVALS)
        stage_labels: Ожидаемые стадии pipeline; определяет число секций

    Returns:
        Almanac с seeds и pipeline из len(stage_labels) таблиц

    Raises:
        ParseError: Некорректный заголовок, список seeds, label, правило
            или число секций
        InvalidRuleError: Правило с length == 0
    """
    lines = _numbered_lines(source)

    first = next(lines, None)
    if first is None:
        raise ParseError(f"header starting with {SEEDS_PREFIX!r}", "empty input", 1)
    seeds = _parse_seeds(first[1], first[0], mode)

    tables = [_parse_section(section) for section in _split_sections(lines)]
    if len(tables) != len(stage_labels):
        raise ParseError(f"{len(stage_labels)} map sections", f"{len(tables)}")

    for stage, table in zip(stage_labels, tables):
        logger.debug("stage_parsed", stage=stage, label=table.label, rules=table.rule_count())

    pipeline = Pipeline(stages=tuple(tables))

    logger.info(
        "almanac_parsed",
        mode=mode.value,
        seeds=len(seeds),
        stages=len(pipeline),
        rules=pipeline.rule_count(),
    )

    return Almanac(mode=mode, seeds=seeds, pipeline=pipeline)


def load_almanac(
    path: Union[str, Path],
    mode: SeedMode = SeedMode.POINTS,
    stage_labels: Sequence[str] = STAGE_LABELS,
) -> Almanac:
    """
    Чтение и разбор almanac из файла.

    Raises:
        IoError: Файл отсутствует или не читается (OSError в __cause__)
        ParseError, InvalidRuleError: см. parse_almanac
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return parse_almanac(f, mode=mode, stage_labels=stage_labels)
    except (OSError, UnicodeDecodeError) as exc:
        raise IoError(str(path), str(exc)) from exc
