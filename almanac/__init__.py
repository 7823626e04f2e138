"""
Almanac — range-remapping engine.

Parses an almanac of piecewise-linear integer mapping tables and computes the
minimum location reachable from a set of seeds (points or intervals).
"""

__version__ = "0.1.0"
