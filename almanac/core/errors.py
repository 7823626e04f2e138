"""
Errors — Таксономия ошибок almanac

Все ошибки фатальны на уровне batch-запуска:
- Нет partial-result режима
- Нет retry (парсинг детерминирован, повтор не изменит результат)
- Ошибка пробрасывается до CLI → non-zero exit status

ИЕРАРХИЯ:
    AlmanacError
    ├── IoError           — входной файл отсутствует или не читается
    ├── ParseError        — некорректная структура almanac
    ├── InvalidRuleError  — правило с length <= 0
    └── NoMinimumError    — evaluation не дал ни одного кандидата
"""

from typing import Optional


class AlmanacError(Exception):
    """Базовая ошибка almanac engine."""


class IoError(AlmanacError):
    """
    Входной файл отсутствует или не читается.

    Исходный OSError сохраняется в __cause__.
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read almanac '{path}': {reason}")


class ParseError(AlmanacError):
    """
    Некорректный almanac: заголовок, список seeds, правило или секции.

    Сообщение содержит ожидаемое и найденное значение, а также номер
    строки (1-based), если ошибка привязана к строке.
    """

    def __init__(self, expected: str, found: str, line_no: Optional[int] = None):
        self.expected = expected
        self.found = found
        self.line_no = line_no
        location = f"line {line_no}: " if line_no is not None else ""
        super().__init__(f"{location}expected {expected}, found {found}")


class InvalidRuleError(AlmanacError):
    """Правило отображения с неположительной длиной."""

    def __init__(self, length: int, line_no: Optional[int] = None):
        self.length = length
        self.line_no = line_no
        location = f"line {line_no}: " if line_no is not None else ""
        super().__init__(f"{location}mapping rule length must be positive, got {length}")


class NoMinimumError(AlmanacError):
    """
    Evaluation не произвёл ни одного кандидата.

    Возможно только при пустом наборе seeds (или только пустых интервалах).
    Никогда не заменяется значением по умолчанию.
    """

    def __init__(self, seed_count: int = 0):
        self.seed_count = seed_count
        super().__init__(f"no minimum found: {seed_count} seed(s) produced no candidate values")
