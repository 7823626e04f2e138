"""
Test suite for the almanac range-remapping engine

Contains:
- tests/unit/      : Unit tests for individual modules and end-to-end runs
- tests/fixtures/  : Input almanacs
"""
