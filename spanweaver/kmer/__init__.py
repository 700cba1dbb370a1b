"""
K-mer module for SpanWeaver.

Packed k-mer extraction, canonicalization, and the contig k-mer index:
- kmerizer.py - Lazy extraction of packed k-mers, skipping unknown bases
- canonical.py - Reverse complement and canonical form of packed k-mers
- kmer_index.py - Canonical k-mer -> contig location multimap
"""

from .kmerizer import (
    BASE_ENCODING,
    BASE_DECODING,
    kmer_mask,
    encode_kmer,
    decode_kmer,
    Kmerizer,
    kmerize,
)
from .canonical import reverse_complement_kmer, canonical_kmer
from .kmer_index import ContigLocation, IndexStats, KmerIndex, expected_entries

__all__ = [
    # Kmerizer
    "BASE_ENCODING",
    "BASE_DECODING",
    "kmer_mask",
    "encode_kmer",
    "decode_kmer",
    "Kmerizer",
    "kmerize",
    # Canonicalizer
    "reverse_complement_kmer",
    "canonical_kmer",
    # Index
    "ContigLocation",
    "IndexStats",
    "KmerIndex",
    "expected_entries",
]
