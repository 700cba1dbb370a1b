#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SpanWeaver v0.1.0

Pair aligner: validate interleaved paired reads and run span finding on
both mates of every pair.

Author: SpanWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config.schema import AlignmentParameters
from ..io.io_core_module import Contig, FastqRead
from ..kmer.kmer_index import KmerIndex
from .span_finder import MismatchStats, ReadSpan, SpanFinder

logger = logging.getLogger(__name__)


class PairFormatError(Exception):
    """Raised when a read collection is not a valid interleaved pair list."""
    pass


@dataclass
class PairAlignment:
    """
    Accepted spans for both mates of one read pair.

    Attributes:
        pair_index: Position of the pair in the input (records 2i and 2i+1)
        name: Name shared by both mates
        mate1_spans: Accepted spans of the first mate, in span order
        mate2_spans: Accepted spans of the second mate, in span order
    """
    pair_index: int
    name: str
    mate1_spans: Dict[ReadSpan, MismatchStats]
    mate2_spans: Dict[ReadSpan, MismatchStats]

    @staticmethod
    def _format_spans(spans: Dict[ReadSpan, MismatchStats]) -> str:
        return "; ".join(str(span) for span in spans)

    def format_line(self) -> str:
        """One report line: mate 1 spans, a bar, mate 2 spans."""
        return f"{self._format_spans(self.mate1_spans)} | {self._format_spans(self.mate2_spans)}"

    def to_dict(self) -> Dict[str, Any]:
        def mate(spans):
            return [{**span.to_dict(), **stats.to_dict()} for span, stats in spans.items()]

        return {
            "pair_index": self.pair_index,
            "name": self.name,
            "mate1": mate(self.mate1_spans),
            "mate2": mate(self.mate2_spans),
        }


class PairAligner:
    """
    Align interleaved read pairs against an indexed contig set.

    The index and contigs are shared read-only between worker threads; each
    span finding call keeps its own state.
    """

    def __init__(
        self,
        kmer_index: KmerIndex,
        contigs: Sequence[Contig],
        parameters: Optional[AlignmentParameters] = None,
        num_threads: int = 1
    ):
        """
        Initialize pair aligner.

        Args:
            kmer_index: Index built over ``contigs``
            contigs: Contig arena indexed by contig id
            parameters: Span finding parameters (default: AlignmentParameters())
            num_threads: Worker threads for pair alignment (default: 1)
        """
        if num_threads < 1:
            raise ValueError(f"num_threads must be >= 1, got {num_threads}")
        self.parameters = parameters or AlignmentParameters()
        self.num_threads = num_threads
        self.span_finder = SpanFinder(
            kmer_index,
            contigs,
            kmer_size=self.parameters.kmer_size,
            min_quality=self.parameters.min_quality,
            max_quality_sum=self.parameters.max_quality_sum,
        )

    @staticmethod
    def validate_pairs(reads: Sequence[FastqRead]) -> int:
        """
        Check that reads form interleaved pairs with matching names.

        Args:
            reads: Reads in file order, mates adjacent

        Returns:
            Number of pairs

        Raises:
            PairFormatError: On an odd read count or a mate name mismatch
        """
        if len(reads) % 2 != 0:
            raise PairFormatError(
                f"Reads must have interleaved pairs -- but got an odd number of reads ({len(reads)})"
            )

        for i in range(0, len(reads), 2):
            first, second = reads[i], reads[i + 1]
            if first.name != second.name:
                raise PairFormatError(
                    f"Reads must have interleaved pairs -- but record {i} ('{first.name}') "
                    f"and record {i + 1} ('{second.name}') have different names"
                )

        return len(reads) // 2

    def align_pair(self, pair_index: int, mate1: FastqRead, mate2: FastqRead) -> PairAlignment:
        """Find spans for both mates of one pair."""
        return PairAlignment(
            pair_index=pair_index,
            name=mate1.name,
            mate1_spans=self.span_finder.find(mate1),
            mate2_spans=self.span_finder.find(mate2),
        )

    def _align_chunk(self, reads: Sequence[FastqRead], pair_indices: range) -> List[PairAlignment]:
        """Align a run of pairs (thread-safe)."""
        return [
            self.align_pair(p, reads[2 * p], reads[2 * p + 1])
            for p in pair_indices
        ]

    def align_pairs(self, reads: Sequence[FastqRead]) -> List[PairAlignment]:
        """
        Align every pair of an interleaved read list.

        All pairs are validated before any span finding starts.

        Args:
            reads: Interleaved reads (records 2i and 2i+1 are mates)

        Returns:
            PairAlignment per pair, in input order

        Raises:
            PairFormatError: If the reads are not valid interleaved pairs
        """
        num_pairs = self.validate_pairs(reads)
        logger.info(f"Aligning {num_pairs:,} read pairs with {self.num_threads} thread(s)")

        if self.num_threads == 1 or num_pairs < 2:
            results = self._align_chunk(reads, range(num_pairs))
        else:
            # Split pairs into chunks for parallel processing
            chunk_size = max(1, num_pairs // (self.num_threads * 4))
            chunks = [
                range(start, min(start + chunk_size, num_pairs))
                for start in range(0, num_pairs, chunk_size)
            ]

            collected: List[Tuple[int, List[PairAlignment]]] = []
            with ThreadPoolExecutor(max_workers=self.num_threads) as executor:
                future_to_chunk = {
                    executor.submit(self._align_chunk, reads, chunk): chunk
                    for chunk in chunks
                }
                for future in as_completed(future_to_chunk):
                    collected.append((future_to_chunk[future].start, future.result()))

            # Restore input order
            collected.sort(key=lambda item: item[0])
            results = [alignment for _, chunk_results in collected for alignment in chunk_results]

        placed = sum(1 for a in results if a.mate1_spans or a.mate2_spans)
        logger.info(f"Aligned {num_pairs:,} pairs ({placed:,} with at least one span)")
        return results

    def __repr__(self) -> str:
        return f"PairAligner({self.span_finder!r}, threads={self.num_threads})"


__all__ = [
    'PairFormatError',
    'PairAlignment',
    'PairAligner',
]

# SpanWeaver v0.1.0
# Any usage is subject to this software's license.
