#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SpanWeaver v0.1.0

Span finder: expand exact k-mer hits between a read and the contigs into
ungapped alignment spans, score them by substitution mismatches, and keep
the ones whose quality-weighted mismatch sum stays under a ceiling.

Each k-mer of the read that is found in the index pins the read to a contig
diagonal (forward or reverse complement). The span is the maximal window on
that diagonal that fits inside both sequences. Only the high-quality prefix
of the read seeds hits, but spans are measured and scored against the whole
read, so a seed from the prefix can produce a span reaching past the trim
point.

Author: SpanWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Sequence, Tuple

import numpy as np

from ..io.io_core_module import Contig, FastqRead
from ..kmer.canonical import canonical_kmer
from ..kmer.kmer_index import ContigLocation, KmerIndex
from ..kmer.kmerizer import Kmerizer
from ..utils.sequence_utils import trim_length

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReadSpan:
    """
    Ungapped window aligning part of a read to part of a contig.

    Equality and hashing use the placement only (read start, contig start,
    length, contig id, strand); the read and contig lengths ride along for
    reporting. Spans sort by read start, then length.

    For reverse-complement spans ``contig_start`` is given on the contig's
    forward strand: read base ``read_start + i`` pairs with the complement of
    contig base ``contig_start + length - 1 - i``.
    """
    read_start: int
    contig_start: int
    length: int
    read_len: int = field(compare=False)
    contig_len: int = field(compare=False)
    contig_id: int
    is_rc: bool

    @property
    def read_end(self) -> int:
        return self.read_start + self.length

    @property
    def contig_end(self) -> int:
        return self.contig_start + self.length

    @property
    def strand(self) -> str:
        return '-' if self.is_rc else '+'

    def sort_key(self) -> Tuple[int, int, int, int, bool]:
        return (self.read_start, self.length, self.contig_id, self.contig_start, self.is_rc)

    def __lt__(self, other: 'ReadSpan') -> bool:
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        """
        Half-open read and contig windows, e.g. ``[0-4)/4 -> +0:[0-4)/7``.

        Both windows open with ``[``; the contig window is always given on the
        contig's forward strand.
        """
        return (f"[{self.read_start}-{self.read_end})/{self.read_len} -> "
                f"{self.strand}{self.contig_id}:[{self.contig_start}-{self.contig_end})/{self.contig_len}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "read_start": self.read_start,
            "read_end": self.read_end,
            "read_len": self.read_len,
            "contig_id": self.contig_id,
            "contig_start": self.contig_start,
            "contig_end": self.contig_end,
            "contig_len": self.contig_len,
            "strand": self.strand,
        }


@dataclass(frozen=True)
class MismatchStats:
    """Substitution count and summed read quality at the mismatching bases."""
    n_mismatches: int
    quality_sum: int

    def to_dict(self) -> Dict[str, int]:
        return {"n_mismatches": self.n_mismatches, "quality_sum": self.quality_sum}


# ---------------------------------------------------------------------------
# Span geometry and scoring
# ---------------------------------------------------------------------------

def span_for_hit(
    read_offset: int,
    read_len: int,
    read_is_canonical: bool,
    location: ContigLocation,
    contig_len: int,
    kmer_size: int
) -> Tuple[ReadSpan, int]:
    """
    Maximal span implied by one k-mer hit.

    Args:
        read_offset: Offset of the k-mer in the read
        read_len: Full (untrimmed) read length
        read_is_canonical: Whether the read's k-mer was the canonical form
        location: Where the canonical k-mer occurs in the contig
        contig_len: Length of that contig
        kmer_size: K-mer size

    Returns:
        Tuple of (span, start offset on the strand the read aligns to)
    """
    is_rc = read_is_canonical != location.is_canonical
    # On the reverse strand offsets count from the contig's other end
    contig_offset = contig_len - location.offset - kmer_size if is_rc else location.offset
    left = min(read_offset, contig_offset)
    read_start = read_offset - left
    strand_start = contig_offset - left
    length = left + min(read_len - read_offset, contig_len - contig_offset)
    contig_start = contig_len - strand_start - length if is_rc else strand_start
    span = ReadSpan(
        read_start=read_start,
        contig_start=contig_start,
        length=length,
        read_len=read_len,
        contig_len=contig_len,
        contig_id=location.contig_id,
        is_rc=is_rc,
    )
    return span, strand_start


def score_span(
    read_codes: np.ndarray,
    qualities: np.ndarray,
    contig: Contig,
    span: ReadSpan,
    strand_start: int
) -> MismatchStats:
    """
    Count mismatches over a span and sum the read qualities where they occur.

    Args:
        read_codes: Read bases as uint8
        qualities: Read Phred scores
        contig: Contig the span lies on
        span: Span to score
        strand_start: Span start on the strand the read aligns to

    Returns:
        MismatchStats for the span
    """
    read_window = read_codes[span.read_start:span.read_end]
    strand_codes = contig.rc_codes if span.is_rc else contig.codes
    contig_window = strand_codes[strand_start:strand_start + span.length]
    mismatches = read_window != contig_window
    quality_sum = qualities[span.read_start:span.read_end][mismatches].sum()
    return MismatchStats(int(np.count_nonzero(mismatches)), int(quality_sum))


# ---------------------------------------------------------------------------
# Span finding
# ---------------------------------------------------------------------------

def find_spans(
    read: FastqRead,
    kmer_size: int,
    min_quality: int,
    max_quality_sum: int,
    kmer_index: KmerIndex,
    contigs: Sequence[Contig]
) -> Dict[ReadSpan, MismatchStats]:
    """
    Find the contig spans supported by a read's k-mers.

    Args:
        read: Read to place
        kmer_size: K-mer size (must match the index)
        min_quality: Quality floor; k-mers are seeded only from the bases
                     before the first base below it
        max_quality_sum: Spans whose mismatch quality sum exceeds this are dropped
        kmer_index: Index built over ``contigs``
        contigs: Contig arena, ``contigs[contig_id]`` is the contig

    Returns:
        Dict of surviving span -> mismatch stats, in span order
    """
    if kmer_size != kmer_index.kmer_size:
        raise ValueError(
            f"k-mer size {kmer_size} does not match index k-mer size {kmer_index.kmer_size}"
        )

    read_len = read.length
    seed_len = trim_length(read.qualities, min_quality)
    read_codes = read.base_codes()
    qualities = read.qualities

    spans: Dict[ReadSpan, MismatchStats] = {}
    for read_offset, kmer in Kmerizer(read.sequence[:seed_len], kmer_size):
        canonical, read_is_canonical = canonical_kmer(kmer, kmer_size)
        for location in kmer_index.lookup(canonical):
            contig = contigs[location.contig_id]
            span, strand_start = span_for_hit(
                read_offset, read_len, read_is_canonical, location, contig.length, kmer_size
            )
            if span in spans:
                continue
            spans[span] = score_span(read_codes, qualities, contig, span, strand_start)

    accepted = {
        span: spans[span]
        for span in sorted(spans, key=ReadSpan.sort_key)
        if spans[span].quality_sum <= max_quality_sum
    }
    logger.debug(f"Read {read.name}: {len(spans)} candidate spans, {len(accepted)} accepted "
                 f"(seeded from {seed_len}/{read_len} bases)")
    return accepted


class SpanFinder:
    """
    Span finding with fixed run parameters over a shared index.

    Holds no per-read state, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        kmer_index: KmerIndex,
        contigs: Sequence[Contig],
        kmer_size: int = 31,
        min_quality: int = 10,
        max_quality_sum: int = 60
    ):
        """
        Initialize span finder.

        Args:
            kmer_index: Index built over ``contigs``
            contigs: Contig arena indexed by contig id
            kmer_size: K-mer size (default: 31)
            min_quality: Quality floor for seeding (default: 10)
            max_quality_sum: Mismatch quality-sum ceiling (default: 60)
        """
        if kmer_size != kmer_index.kmer_size:
            raise ValueError(
                f"k-mer size {kmer_size} does not match index k-mer size {kmer_index.kmer_size}"
            )
        self.kmer_index = kmer_index
        self.contigs = contigs
        self.kmer_size = kmer_size
        self.min_quality = min_quality
        self.max_quality_sum = max_quality_sum

    def find(self, read: FastqRead) -> Dict[ReadSpan, MismatchStats]:
        """Find the accepted spans of one read."""
        return find_spans(
            read,
            self.kmer_size,
            self.min_quality,
            self.max_quality_sum,
            self.kmer_index,
            self.contigs,
        )

    def __repr__(self) -> str:
        return (f"SpanFinder(k={self.kmer_size}, min_quality={self.min_quality}, "
                f"max_quality_sum={self.max_quality_sum})")


__all__ = [
    'ReadSpan',
    'MismatchStats',
    'span_for_hit',
    'score_span',
    'find_spans',
    'SpanFinder',
]

# SpanWeaver v0.1.0
# Any usage is subject to this software's license.
