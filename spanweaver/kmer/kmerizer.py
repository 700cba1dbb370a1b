#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SpanWeaver v0.1.0

Kmerizer: lazy extraction of packed k-mers from a base sequence.

K-mers are packed two bits per base (A=0, C=1, G=2, T=3) with the first base
in the most significant position, so integer order matches lexicographic
order of the bases. Windows touching an unknown base (N or anything outside
ACGT) are skipped entirely.

Author: SpanWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from typing import Iterator, Tuple

# DNA encoding: A=0, C=1, G=2, T=3
BASE_ENCODING = {'A': 0, 'C': 1, 'G': 2, 'T': 3,
                 'a': 0, 'c': 1, 'g': 2, 't': 3}
BASE_DECODING = ['A', 'C', 'G', 'T']


def _check_k(k: int):
    if k < 1:
        raise ValueError(f"k-mer size must be >= 1, got {k}")


def kmer_mask(k: int) -> int:
    """Bit mask covering a packed k-mer of length k."""
    return (1 << (2 * k)) - 1


def encode_kmer(kmer: str) -> int:
    """
    Pack a k-mer string into an integer.

    Args:
        kmer: String of A/C/G/T

    Returns:
        Packed k-mer

    Raises:
        ValueError: If the string holds an unknown base
    """
    value = 0
    for base in kmer:
        code = BASE_ENCODING.get(base)
        if code is None:
            raise ValueError(f"Cannot encode base {base!r} in k-mer {kmer!r}")
        value = (value << 2) | code
    return value


def decode_kmer(value: int, k: int) -> str:
    """
    Unpack an integer k-mer back into its bases.

    Args:
        value: Packed k-mer
        k: K-mer size

    Returns:
        K-mer string of length k
    """
    _check_k(k)
    bases = []
    for _ in range(k):
        bases.append(BASE_DECODING[value & 3])
        value >>= 2
    return ''.join(reversed(bases))


class Kmerizer:
    """
    One-shot iterator over the valid k-mers of a sequence.

    Yields ``(offset, kmer)`` for every start offset in ``0..len-k`` whose
    window contains only A/C/G/T, left to right. A sequence shorter than k
    yields nothing. The rolling value is updated in O(1) per base.

    Example:
        >>> [(o, decode_kmer(km, 3)) for o, km in Kmerizer("ACNGTAC", 3)]
        [(3, 'GTA'), (4, 'TAC')]
    """

    def __init__(self, sequence: str, k: int):
        _check_k(k)
        self.sequence = sequence
        self.k = k
        self._mask = kmer_mask(k)
        self._position = 0
        self._value = 0
        self._valid_run = 0  # consecutive valid bases ending before _position

    def __iter__(self) -> 'Kmerizer':
        return self

    def __next__(self) -> Tuple[int, int]:
        sequence = self.sequence
        k = self.k
        while self._position < len(sequence):
            code = BASE_ENCODING.get(sequence[self._position])
            self._position += 1
            if code is None:
                self._valid_run = 0
                self._value = 0
                continue
            self._value = ((self._value << 2) | code) & self._mask
            self._valid_run += 1
            if self._valid_run >= k:
                return self._position - k, self._value
        raise StopIteration


def kmerize(sequence: str, k: int) -> Iterator[Tuple[int, int]]:
    """Convenience wrapper returning a fresh Kmerizer."""
    return Kmerizer(sequence, k)


__all__ = [
    'BASE_ENCODING',
    'BASE_DECODING',
    'kmer_mask',
    'encode_kmer',
    'decode_kmer',
    'Kmerizer',
    'kmerize',
]

# SpanWeaver v0.1.0
# Any usage is subject to this software's license.
