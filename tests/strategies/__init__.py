"""Hypothesis strategies for caretwire property-based testing.

Usage:
    from tests.strategies import tagged_values, value_sequences
    from tests.strategies.values import reserved_text
"""

from .values import (
    RESERVED_CHARS,
    any_text,
    finite_floats,
    keys,
    reserved_text,
    scalars,
    tagged_values,
    value_sequences,
    values,
)

__all__ = [
    "RESERVED_CHARS",
    "any_text",
    "finite_floats",
    "keys",
    "reserved_text",
    "scalars",
    "tagged_values",
    "value_sequences",
    "values",
]
