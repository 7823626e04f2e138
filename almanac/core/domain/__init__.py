"""
Domain models and value objects.

Contains the immutable almanac entities: MappingRule, MappingTable,
Point/Interval seeds, Pipeline, Almanac.
"""

from almanac.core.domain.almanac_model import STAGE_LABELS, Almanac, Pipeline
from almanac.core.domain.mapping import MappingRule, MappingTable, find_overlaps, resolve_rules
from almanac.core.domain.seeds import Interval, Point, Seed, SeedMode

__all__ = [
    # Mapping
    "MappingRule",
    "MappingTable",
    "find_overlaps",
    "resolve_rules",
    # Seeds
    "Point",
    "Interval",
    "Seed",
    "SeedMode",
    # Almanac
    "STAGE_LABELS",
    "Pipeline",
    "Almanac",
]
