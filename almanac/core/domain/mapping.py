"""
Mapping — Правила и таблицы отображения диапазонов

MappingRule: (source_start, destination_start, length)
    [source_start, source_start + length) → [destination_start, destination_start + length)
    Биекция со сдвигом (offset-preserving), slope = 1.

MappingTable: набор MappingRule одной стадии pipeline.
    Значение вне всех правил отображается само в себя (identity default).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. length > 0 для каждого правила
2. Нижняя граница правила включительная, верхняя исключительная
3. Правила хранятся отсортированными по source_start и не пересекаются
   (пересечения разрешаются first match, lookup через bisect)
4. split_interval сохраняет суммарную длину и не пересекает части
5. Таблица read-only после построения (frozen=True)
"""

from bisect import bisect_right
from typing import Iterable

from pydantic import BaseModel, Field, field_validator

from almanac.core.domain.seeds import Interval, Point, Seed


# =============================================================================
# MAPPING RULE
# =============================================================================


class MappingRule(BaseModel):
    """
    Правило отображения полуоткрытого интервала со сдвигом.

    Immutable модель (frozen=True). В файле almanac правило записано как
    "destination_start source_start length".
    """

    source_start: int = Field(..., ge=0, description="Начало source интервала")
    destination_start: int = Field(..., ge=0, description="Начало destination интервала")
    length: int = Field(..., gt=0, description="Длина интервала (всегда положительная)")

    model_config = {"frozen": True}

    @property
    def source_end(self) -> int:
        """Исключительная верхняя граница source интервала."""
        return self.source_start + self.length

    @property
    def offset(self) -> int:
        """Сдвиг destination относительно source (может быть отрицательным)."""
        return self.destination_start - self.source_start

    def contains(self, value: int) -> bool:
        """
        Попадает ли value в [source_start, source_start + length).

        value == source_start + length НЕ покрывается правилом.
        """
        return self.source_start <= value < self.source_end

    def map_value(self, value: int) -> int:
        """
        Отображение value, покрытого правилом.

        Raises:
            ValueError: Если value вне source интервала
        """
        if not self.contains(value):
            raise ValueError(
                f"value {value} outside rule source [{self.source_start}, {self.source_end})"
            )
        return value + self.offset


# =============================================================================
# MAPPING TABLE
# =============================================================================


def _rule_start(rule: MappingRule) -> int:
    return rule.source_start


def find_overlaps(rules: Iterable[MappingRule]) -> list[tuple[MappingRule, MappingRule]]:
    """
    Пары пересекающихся правил (покрывающее правило, перекрытое правило).

    Перекрытое правило сравнивается с правилом, дальше всех уходящим вправо
    среди начинающихся раньше него (порядок source_start).
    """
    pairs = []
    reach = None
    for rule in sorted(rules, key=_rule_start):
        if reach is not None and rule.source_start < reach.source_end:
            pairs.append((reach, rule))
        if reach is None or rule.source_end > reach.source_end:
            reach = rule
    return pairs


def resolve_rules(rules: Iterable[MappingRule]) -> tuple[MappingRule, ...]:
    """
    Разбиение source домена на непересекающиеся правила.

    Политика first match в порядке source_start: значение, покрытое
    несколькими правилами, отображается правилом с наименьшим source_start
    (при равных source_start — первым во входе). Перекрытая часть
    более позднего правила отбрасывается, остаток сохраняет свой offset.
    Для непересекающихся правил результат — просто сортировка.
    """
    resolved: list[MappingRule] = []
    covered_end = 0
    for rule in sorted(rules, key=_rule_start):
        start = max(rule.source_start, covered_end)
        if start >= rule.source_end:
            # Полностью перекрыто более ранними правилами
            continue
        if start == rule.source_start:
            resolved.append(rule)
        else:
            resolved.append(
                MappingRule(
                    source_start=start,
                    destination_start=start + rule.offset,
                    length=rule.source_end - start,
                )
            )
        covered_end = max(covered_end, rule.source_end)
    return tuple(resolved)


class MappingTable(BaseModel):
    """
    Таблица отображения одной стадии pipeline.

    Правила при построении сортируются по source_start и разрешаются в
    непересекающееся разбиение (resolve_rules), поэтому порядок во входном
    файле не важен, а point lookup и split_interval всегда согласованы.
    Lookup работает за O(log n) через bisect, split_interval за
    O(log n + число частей).
    """

    label: str = Field("", description="Метка секции из файла (например, 'seed-to-soil map')")
    rules: tuple[MappingRule, ...] = Field(
        default=(), description="Непересекающиеся правила, по source_start"
    )

    model_config = {"frozen": True}

    @field_validator("rules")
    @classmethod
    def resolve_overlaps(cls, v: tuple[MappingRule, ...]) -> tuple[MappingRule, ...]:
        """Сортировка по source_start и разрешение пересечений (first match)."""
        return resolve_rules(v)

    @classmethod
    def from_rules(cls, rules: Iterable[MappingRule], label: str = "") -> "MappingTable":
        return cls(label=label, rules=tuple(rules))

    def _candidate_index(self, value: int) -> int:
        """Индекс последнего правила с source_start <= value (-1 если нет)."""
        return bisect_right(self.rules, value, key=_rule_start) - 1

    # -------------------------------------------------------------------------
    # Point lookup
    # -------------------------------------------------------------------------

    def destination_of(self, value: int) -> int:
        """
        Destination для одного значения.

        Args:
            value: Source значение

        Returns:
            destination_start + (value - source_start) если value покрыт
            правилом, иначе value (identity)
        """
        idx = self._candidate_index(value)
        if idx >= 0:
            rule = self.rules[idx]
            if rule.contains(value):
                return value + rule.offset
        return value

    # -------------------------------------------------------------------------
    # Interval splitting
    # -------------------------------------------------------------------------

    def split_interval(self, interval: Interval) -> list[Interval]:
        """
        Разбиение интервала по границам правил с отображением частей.

        Каждая часть лежит целиком в одном правиле (сдвигается на его offset)
        или в gap между правилами (остаётся без изменений). Части выдаются
        в порядке source. Сумма длин частей == interval.length.

        Args:
            interval: Source интервал [start, end)

        Returns:
            Список destination интервалов (пустой для пустого interval)
        """
        pieces: list[Interval] = []
        cursor = interval.start
        end = interval.end
        idx = max(self._candidate_index(cursor), 0)

        while cursor < end:
            if idx >= len(self.rules):
                # Правее последнего правила: identity до конца
                pieces.append(Interval(start=cursor, end=end))
                break

            rule = self.rules[idx]
            if cursor < rule.source_start:
                # Gap перед правилом
                piece_end = min(end, rule.source_start)
                pieces.append(Interval(start=cursor, end=piece_end))
                cursor = piece_end
                continue

            if cursor < rule.source_end:
                piece_end = min(end, rule.source_end)
                pieces.append(
                    Interval(start=cursor + rule.offset, end=piece_end + rule.offset)
                )
                cursor = piece_end

            idx += 1

        return pieces

    # -------------------------------------------------------------------------
    # Unified engine
    # -------------------------------------------------------------------------

    def get_destination(self, seed: Seed) -> list[Seed]:
        """
        Отображение seed любого варианта.

        Point → [Point]; Interval → части split_interval.

        Raises:
            TypeError: Если seed не Point и не Interval
        """
        if isinstance(seed, Point):
            return [Point(value=self.destination_of(seed.value))]
        if isinstance(seed, Interval):
            return self.split_interval(seed)
        raise TypeError(f"Unsupported seed type: {type(seed).__name__}")

    def rule_count(self) -> int:
        return len(self.rules)
