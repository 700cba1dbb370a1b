#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SpanWeaver v0.1.0

KmerIndex: multimap from canonical k-mer to every contig location where it
occurs.

The index is built once from the final contig set and is read-only from then
on, so it can be shared by any number of span-finding workers without
locking. Locations refer to contigs by integer id; the contig sequences
themselves stay with the caller.

Author: SpanWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, Iterator, List, NamedTuple, Sequence, Tuple

from .canonical import canonical_kmer
from .kmerizer import Kmerizer

if TYPE_CHECKING:
    from ..io.io_core_module import Contig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

class ContigLocation(NamedTuple):
    """Where a canonical k-mer occurs: contig id, offset, and orientation."""
    contig_id: int
    offset: int
    is_canonical: bool    # True if the contig's own k-mer was the canonical form


@dataclass
class IndexStats:
    """Summary of a built index."""
    kmer_size: int
    num_contigs: int
    num_entries: int          # one per indexed k-mer occurrence
    distinct_kmers: int       # distinct canonical k-mers
    expected_entries: int     # sum of max(0, len - k + 1) over contigs
    max_occurrences: int      # largest location list for a single k-mer

    @property
    def skipped_windows(self) -> int:
        """Windows dropped because they contained an unknown base."""
        return self.expected_entries - self.num_entries

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kmer_size": self.kmer_size,
            "num_contigs": self.num_contigs,
            "num_entries": self.num_entries,
            "distinct_kmers": self.distinct_kmers,
            "expected_entries": self.expected_entries,
            "skipped_windows": self.skipped_windows,
            "max_occurrences": self.max_occurrences,
        }

    def summary(self) -> str:
        return (
            f"k={self.kmer_size}  contigs={self.num_contigs:,}  "
            f"entries={self.num_entries:,}  distinct={self.distinct_kmers:,}  "
            f"skipped={self.skipped_windows:,}  max_occ={self.max_occurrences:,}"
        )


# ---------------------------------------------------------------------------
# Build helpers
# ---------------------------------------------------------------------------

def expected_entries(contigs: Iterable['Contig'], k: int) -> int:
    """Number of k-mer windows across all contigs, ignoring unknown bases."""
    return sum(max(0, len(contig.sequence) - k + 1) for contig in contigs)


def _index_shard(contigs: Sequence['Contig'], k: int) -> Dict[int, List[ContigLocation]]:
    """Index a contiguous run of contigs into a private table."""
    table: Dict[int, List[ContigLocation]] = defaultdict(list)
    for contig in contigs:
        for offset, kmer in Kmerizer(contig.sequence, k):
            canonical, is_canonical = canonical_kmer(kmer, k)
            table[canonical].append(ContigLocation(contig.contig_id, offset, is_canonical))
    return table


def _split_shards(contigs: Sequence['Contig'], num_shards: int) -> List[Sequence['Contig']]:
    """Split contigs into at most num_shards contiguous, order-preserving runs."""
    shard_size = -(-len(contigs) // num_shards)
    return [contigs[i:i + shard_size] for i in range(0, len(contigs), shard_size)]


def _merge_shards(
    shards: List[Dict[int, List[ContigLocation]]]
) -> Dict[int, List[ContigLocation]]:
    """
    Merge per-shard tables in shard order.

    Shards hold contiguous contig runs, so appending shard by shard keeps each
    location list in (contig id, offset) order, identical to a sequential build.
    """
    merged: Dict[int, List[ContigLocation]] = shards[0] if shards else {}
    for shard in shards[1:]:
        for kmer, locations in shard.items():
            existing = merged.get(kmer)
            if existing is None:
                merged[kmer] = locations
            else:
                existing.extend(locations)
    return merged


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------

class KmerIndex:
    """
    Immutable-after-build map of canonical k-mer -> contig locations.

    Build with :meth:`build`; query with :meth:`lookup`, which returns the
    locations of one canonical k-mer in insertion order (contig id, then
    offset) or an empty iterator when the k-mer is absent.
    """

    def __init__(self, kmer_size: int, table: Dict[int, Tuple[ContigLocation, ...]],
                 num_contigs: int, expected: int):
        self.kmer_size = kmer_size
        self._table = table
        self._num_contigs = num_contigs
        self._expected = expected
        self._num_entries = sum(len(locations) for locations in table.values())

    @classmethod
    def build(cls, contigs: Iterable['Contig'], kmer_size: int,
              num_shards: int = 1) -> 'KmerIndex':
        """
        Index every valid k-mer window of every contig.

        Args:
            contigs: Contigs with ``contig_id`` and ``sequence`` attributes
            kmer_size: K-mer size
            num_shards: Number of contig shards indexed concurrently before
                        merging (1 = sequential build)

        Returns:
            Built KmerIndex
        """
        if kmer_size < 1:
            raise ValueError(f"k-mer size must be >= 1, got {kmer_size}")
        if num_shards < 1:
            raise ValueError(f"num_shards must be >= 1, got {num_shards}")

        contigs = list(contigs)
        capacity = expected_entries(contigs, kmer_size)
        logger.info(f"Building k-mer index (k={kmer_size}) over {len(contigs):,} contigs, "
                    f"up to {capacity:,} windows")

        if num_shards == 1 or len(contigs) < 2:
            table = _index_shard(contigs, kmer_size)
        else:
            shards = _split_shards(contigs, num_shards)
            logger.debug(f"Indexing {len(shards)} contig shards concurrently")
            with ThreadPoolExecutor(max_workers=len(shards)) as executor:
                partials = list(executor.map(lambda shard: _index_shard(shard, kmer_size), shards))
            table = _merge_shards(partials)

        frozen = {kmer: tuple(locations) for kmer, locations in table.items()}
        index = cls(kmer_size, frozen, len(contigs), capacity)
        logger.info(f"Indexed {index.num_entries:,} k-mer occurrences "
                    f"({len(index):,} distinct canonical k-mers)")
        return index

    def lookup(self, canonical: int) -> Iterator[ContigLocation]:
        """All locations of a canonical k-mer, in insertion order."""
        return iter(self._table.get(canonical, ()))

    def kmers(self) -> Iterator[int]:
        """Distinct canonical k-mers held by the index."""
        return iter(self._table)

    @property
    def num_entries(self) -> int:
        return self._num_entries

    @property
    def num_contigs(self) -> int:
        return self._num_contigs

    def stats(self) -> IndexStats:
        return IndexStats(
            kmer_size=self.kmer_size,
            num_contigs=self._num_contigs,
            num_entries=self._num_entries,
            distinct_kmers=len(self._table),
            expected_entries=self._expected,
            max_occurrences=max((len(locs) for locs in self._table.values()), default=0),
        )

    def __contains__(self, canonical: int) -> bool:
        return canonical in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return (f"KmerIndex(k={self.kmer_size}, contigs={self._num_contigs}, "
                f"entries={self._num_entries}, distinct={len(self._table)})")


__all__ = [
    'ContigLocation',
    'IndexStats',
    'KmerIndex',
    'expected_entries',
]

# SpanWeaver v0.1.0
# Any usage is subject to this software's license.
