#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SpanWeaver v0.1.0

Canonicalizer: strand-independent representatives of packed k-mers.

Author: SpanWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from typing import Tuple


def reverse_complement_kmer(kmer: int, k: int) -> int:
    """
    Reverse complement of a packed k-mer.

    With A=0, C=1, G=2, T=3 the complement of a base code is ``3 - code``.

    Args:
        kmer: Packed k-mer
        k: K-mer size

    Returns:
        Packed reverse complement
    """
    rc = 0
    for _ in range(k):
        rc = (rc << 2) | (3 - (kmer & 3))
        kmer >>= 2
    return rc


def canonical_kmer(kmer: int, k: int) -> Tuple[int, bool]:
    """
    Canonical form of a packed k-mer.

    Returns the smaller of the k-mer and its reverse complement, plus whether
    the k-mer given was already the smaller one. A self-complementary k-mer
    is its own canonical form and reports True.

    Args:
        kmer: Packed k-mer
        k: K-mer size

    Returns:
        Tuple of (canonical k-mer, input is canonical)
    """
    rc = reverse_complement_kmer(kmer, k)
    if kmer <= rc:
        return kmer, True
    return rc, False


__all__ = ['reverse_complement_kmer', 'canonical_kmer']

# SpanWeaver v0.1.0
# Any usage is subject to this software's license.
