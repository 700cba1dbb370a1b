"""
Alignment module for SpanWeaver.

Span finding for single reads and pair-level alignment of interleaved reads:
- span_finder.py - Seed, extend, score and filter the spans of one read
- pair_aligner.py - Pair validation and (optionally threaded) pair alignment
"""

from .span_finder import (
    ReadSpan,
    MismatchStats,
    span_for_hit,
    score_span,
    find_spans,
    SpanFinder,
)
from .pair_aligner import PairFormatError, PairAlignment, PairAligner

__all__ = [
    # Span finding
    "ReadSpan",
    "MismatchStats",
    "span_for_hit",
    "score_span",
    "find_spans",
    "SpanFinder",
    # Pairs
    "PairFormatError",
    "PairAlignment",
    "PairAligner",
]
