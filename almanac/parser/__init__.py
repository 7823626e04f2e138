"""Parser — разбор текстового almanac в Almanac."""

from almanac.parser.almanac_parser import (
    SEEDS_PREFIX,
    AlmanacSource,
    load_almanac,
    parse_almanac,
)

__all__ = [
    "SEEDS_PREFIX",
    "AlmanacSource",
    "load_almanac",
    "parse_almanac",
]
