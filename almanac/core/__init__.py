"""
Core domain models, errors and invariants.

This module contains the foundational building blocks that are independent
of the input source and of the evaluation strategy.
"""
