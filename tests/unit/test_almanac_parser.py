"""
Тесты для Almanac Parser

Проверяет:
1. Разбор seeds в режимах POINTS и INTERVALS
2. Разбор секций и правил, метки секций
3. ParseError / InvalidRuleError на некорректном входе
4. Идемпотентность разбора
5. Источники: str, text stream, файл (IoError)
6. Библиотечное использование не пишет в stdout
"""

import io
from pathlib import Path

import pytest

from almanac.core.domain import STAGE_LABELS, Interval, MappingRule, Point, SeedMode
from almanac.core.errors import InvalidRuleError, IoError, ParseError
from almanac.parser import load_almanac, parse_almanac

FIXTURE = Path(__file__).parent.parent / "fixtures" / "toy_almanac.txt"

TWO_STAGES = ("first", "second")


@pytest.fixture
def toy_text() -> str:
    return FIXTURE.read_text(encoding="utf-8")


def two_stage_text(seeds: str = "seeds: 1 2 3") -> str:
    return f"{seeds}\n\nfirst map:\n10 0 5\n\nsecond map:\n0 10 5\n"


# =============================================================================
# ТЕСТЫ: Seeds
# =============================================================================


class TestSeeds:
    """Разбор строки seeds."""

    def test_points(self, toy_text):
        almanac = parse_almanac(toy_text, SeedMode.POINTS)
        assert almanac.mode == SeedMode.POINTS
        assert almanac.seeds == (Point(value=79), Point(value=14), Point(value=55), Point(value=13))

    def test_intervals(self, toy_text):
        almanac = parse_almanac(toy_text, SeedMode.INTERVALS)
        assert almanac.mode == SeedMode.INTERVALS
        assert almanac.seeds == (Interval(start=79, end=93), Interval(start=55, end=68))

    def test_points_duplicates_collapsed(self):
        almanac = parse_almanac(two_stage_text("seeds: 5 3 5 5 3"), stage_labels=TWO_STAGES)
        assert almanac.seeds == (Point(value=5), Point(value=3))

    def test_interval_duplicates_collapsed(self):
        almanac = parse_almanac(
            two_stage_text("seeds: 1 2 1 2 1 3"), SeedMode.INTERVALS, stage_labels=TWO_STAGES
        )
        assert almanac.seeds == (Interval(start=1, end=3), Interval(start=1, end=4))

    def test_odd_interval_count(self):
        with pytest.raises(ParseError) as exc_info:
            parse_almanac(two_stage_text("seeds: 1 2 3"), SeedMode.INTERVALS, stage_labels=TWO_STAGES)
        assert exc_info.value.line_no == 1
        assert "even number" in str(exc_info.value)

    def test_empty_seed_list(self):
        almanac = parse_almanac(two_stage_text("seeds: "), stage_labels=TWO_STAGES)
        assert almanac.seeds == ()

    def test_extra_spaces_between_seeds(self):
        almanac = parse_almanac(two_stage_text("seeds: 4   9"), stage_labels=TWO_STAGES)
        assert almanac.seeds == (Point(value=4), Point(value=9))

    @pytest.mark.parametrize(
        "header",
        ["seed: 1 2", "Seeds: 1 2", "seeds:1 2", "1 2 3", "locations: 1"],
    )
    def test_bad_header(self, header):
        with pytest.raises(ParseError) as exc_info:
            parse_almanac(two_stage_text(header), stage_labels=TWO_STAGES)
        assert "seeds: " in exc_info.value.expected
        assert exc_info.value.line_no == 1

    @pytest.mark.parametrize("token", ["-1", "+4", "x", "1.5", "1_000"])
    def test_bad_seed_number(self, token):
        with pytest.raises(ParseError, match="non-negative integer"):
            parse_almanac(two_stage_text(f"seeds: 1 {token}"), stage_labels=TWO_STAGES)

    def test_empty_input(self):
        with pytest.raises(ParseError, match="empty input"):
            parse_almanac("")


# =============================================================================
# ТЕСТЫ: Sections
# =============================================================================


class TestSections:
    """Разбор секций с правилами."""

    def test_seven_stages(self, toy_text):
        almanac = parse_almanac(toy_text)
        assert len(almanac.pipeline) == len(STAGE_LABELS)
        assert almanac.pipeline.labels()[0] == "seed-to-soil map"
        assert almanac.pipeline.labels()[-1] == "humidity-to-location map"

    def test_rule_field_order(self, toy_text):
        """Файл: destination source length."""
        first = parse_almanac(toy_text).pipeline.stages[0]
        assert MappingRule(source_start=98, destination_start=50, length=2) in first.rules
        assert MappingRule(source_start=50, destination_start=52, length=48) in first.rules

    def test_rule_counts(self, toy_text):
        counts = [stage.rule_count() for stage in parse_almanac(toy_text).pipeline.stages]
        assert counts == [2, 3, 4, 2, 3, 2, 2]

    def test_section_without_rules(self):
        text = "seeds: 1\n\nfirst map:\n\nsecond map:\n0 10 5\n"
        almanac = parse_almanac(text, stage_labels=TWO_STAGES)
        assert almanac.pipeline.stages[0].rules == ()

    def test_multiple_blank_lines_and_crlf(self):
        text = "seeds: 1\r\n\r\n\r\nfirst map:\r\n10 0 5\r\n   \r\nsecond map:\r\n0 10 5\r\n\r\n"
        almanac = parse_almanac(text, stage_labels=TWO_STAGES)
        assert len(almanac.pipeline) == 2
        assert almanac.pipeline.stages[1].rules[0].destination_start == 0

    def test_too_few_sections(self, toy_text):
        truncated = toy_text.split("humidity-to-location map:")[0]
        with pytest.raises(ParseError) as exc_info:
            parse_almanac(truncated)
        assert exc_info.value.expected == "7 map sections"
        assert exc_info.value.found == "6"

    def test_too_many_sections(self):
        text = two_stage_text() + "\nthird map:\n1 2 3\n"
        with pytest.raises(ParseError, match="expected 2 map sections, found 3"):
            parse_almanac(text, stage_labels=TWO_STAGES)

    def test_missing_label(self):
        text = "seeds: 1\n\n10 0 5\n\nsecond map:\n0 10 5\n"
        with pytest.raises(ParseError) as exc_info:
            parse_almanac(text, stage_labels=TWO_STAGES)
        assert exc_info.value.line_no == 3
        assert "label" in exc_info.value.expected

    @pytest.mark.parametrize("line", ["1 2", "1 2 3 4", "a b c", "1 -2 3"])
    def test_malformed_rule(self, line):
        text = f"seeds: 1\n\nfirst map:\n{line}\n\nsecond map:\n0 10 5\n"
        with pytest.raises(ParseError) as exc_info:
            parse_almanac(text, stage_labels=TWO_STAGES)
        assert exc_info.value.line_no == 4

    def test_zero_length_rule(self):
        text = "seeds: 1\n\nfirst map:\n10 0 5\n20 30 0\n\nsecond map:\n0 10 5\n"
        with pytest.raises(InvalidRuleError) as exc_info:
            parse_almanac(text, stage_labels=TWO_STAGES)
        assert exc_info.value.length == 0
        assert exc_info.value.line_no == 5

    def test_overlapping_rules_resolved_first_match(self):
        """[0, 10) → +100 перекрывает начало [5, 15) → +195."""
        text = "seeds: 1\n\nfirst map:\n100 0 10\n200 5 10\n\nsecond map:\n"
        almanac = parse_almanac(text, stage_labels=TWO_STAGES)
        first = almanac.pipeline.stages[0]
        assert first.rules == (
            MappingRule(source_start=0, destination_start=100, length=10),
            MappingRule(source_start=10, destination_start=205, length=5),
        )
        assert first.destination_of(7) == 107
        assert first.destination_of(12) == 207

    def test_zero_stage_pipeline(self):
        almanac = parse_almanac("seeds: 3 4\n", stage_labels=())
        assert len(almanac.pipeline) == 0
        assert len(almanac.seeds) == 2


# =============================================================================
# ТЕСТЫ: Sources
# =============================================================================


class TestSources:
    """Источники входа и идемпотентность."""

    def test_idempotent(self, toy_text):
        assert parse_almanac(toy_text) == parse_almanac(toy_text)
        assert parse_almanac(toy_text, SeedMode.INTERVALS) == parse_almanac(
            toy_text, SeedMode.INTERVALS
        )

    def test_stream_source(self, toy_text):
        assert parse_almanac(io.StringIO(toy_text)) == parse_almanac(toy_text)

    def test_load_almanac(self, toy_text):
        assert load_almanac(FIXTURE) == parse_almanac(toy_text)
        assert load_almanac(str(FIXTURE), SeedMode.INTERVALS) == parse_almanac(
            toy_text, SeedMode.INTERVALS
        )

    def test_missing_file(self, tmp_path):
        missing = tmp_path / "missing.txt"
        with pytest.raises(IoError) as exc_info:
            load_almanac(missing)
        assert exc_info.value.path == str(missing)
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_directory_is_not_readable(self, tmp_path):
        with pytest.raises(IoError):
            load_almanac(tmp_path)

    def test_parse_error_from_file_is_not_io_error(self, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text("nonsense\n", encoding="utf-8")
        with pytest.raises(ParseError):
            load_almanac(path)

    def test_library_use_keeps_stdout_clean(self, toy_text, capsys):
        """Без configure_logging диагностика не попадает в stdout."""
        parse_almanac(toy_text)
        parse_almanac("seeds: 1\n\nfirst map:\n100 0 10\n200 5 10\n\nsecond map:\n", stage_labels=TWO_STAGES)
        assert capsys.readouterr().out == ""
