"""
SpanWeaver v0.1.0

Sequence utility functions for SpanWeaver.

Provides base complementing, reverse complementing and quality trimming
shared by the k-mer and alignment layers.
"""

from typing import Sequence, Union

import numpy as np


VALID_BASES = frozenset("ACGT")

# Unknown symbols complement to themselves
_COMPLEMENT_TABLE = str.maketrans("ACGTNacgtn", "TGCANtgcan")


def complement(sequence: str) -> str:
    """
    Complement each base of a DNA sequence without reversing it.

    Args:
        sequence: DNA sequence string

    Returns:
        Complemented sequence

    Example:
        >>> complement("ACGTN")
        'TGCAN'
    """
    return sequence.translate(_COMPLEMENT_TABLE)


def reverse_complement(sequence: str) -> str:
    """
    Generate reverse complement of DNA sequence.

    Args:
        sequence: DNA sequence string

    Returns:
        Reverse complement sequence

    Example:
        >>> reverse_complement("ATCG")
        'CGAT'
    """
    return complement(sequence)[::-1]


def is_valid_base(base: str) -> bool:
    """Return True for the four unambiguous bases."""
    return base in VALID_BASES


def trim_length(qualities: Union[np.ndarray, Sequence[int]], min_quality: int) -> int:
    """
    Length of the leading run of bases with quality >= min_quality.

    Args:
        qualities: Per-base Phred scores
        min_quality: Quality floor

    Returns:
        Index of the first base below the floor, or the full length

    Example:
        >>> trim_length([30, 30, 5, 30], 10)
        2
    """
    quals = np.asarray(qualities)
    below = np.flatnonzero(quals < min_quality)
    return int(below[0]) if below.size else int(quals.size)


__all__ = [
    'VALID_BASES',
    'complement',
    'reverse_complement',
    'is_valid_base',
    'trim_length',
]
