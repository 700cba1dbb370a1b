"""
Utilities module for SpanWeaver.

This module provides sequence helpers shared across the k-mer index and
span finding layers:
- Base complement and reverse complement
- Quality-based read trimming
"""

from .sequence_utils import (
    VALID_BASES,
    complement,
    reverse_complement,
    is_valid_base,
    trim_length,
)

__all__ = [
    "VALID_BASES",
    "complement",
    "reverse_complement",
    "is_valid_base",
    "trim_length",
]
