#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Core I/O module for SpanWeaver.

Consolidated module containing:
- Core record structures (FastqRead, Contig)
- Interleaved paired-end FASTQ input
- Contig FASTA input with assembly-order id assignment
- Pair report output (text lines or JSON)

Records are fully materialized in memory before span finding begins.
"""

# =============================================================================
# SECTION 1: IMPORTS AND DEPENDENCIES
# =============================================================================

import gzip
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, TextIO, Union

import numpy as np
from Bio import SeqIO

from ..utils.sequence_utils import reverse_complement

logger = logging.getLogger(__name__)


class ReadFormatError(Exception):
    """Raised when a read or contig record cannot be used."""
    pass


# =============================================================================
# SECTION 2: CORE RECORD STRUCTURES
# =============================================================================

@dataclass
class FastqRead:
    """
    Sequenced read with per-base qualities.

    Attributes:
        name: Read name shared by both mates of a pair
        sequence: Upper-case base sequence
        qualities: Phred quality score per base
        description: Full header line as read from the file
    """
    name: str
    sequence: str
    qualities: np.ndarray = field(compare=False)
    description: str = ''

    def __post_init__(self):
        self.sequence = self.sequence.upper()
        self.qualities = np.asarray(self.qualities, dtype=np.int32)
        if self.qualities.shape != (len(self.sequence),):
            raise ReadFormatError(
                f"Read {self.name}: {len(self.sequence)} bases but "
                f"{self.qualities.size} quality scores"
            )

    @property
    def length(self) -> int:
        return len(self.sequence)

    def base_codes(self) -> np.ndarray:
        """Bases as a uint8 array for vectorized comparison."""
        return np.frombuffer(self.sequence.encode('ascii'), dtype=np.uint8)

    def __len__(self) -> int:
        return self.length

    def __repr__(self) -> str:
        return f"FastqRead(name='{self.name}', length={self.length})"


@dataclass
class Contig:
    """
    Assembled contig.

    ``contig_id`` is the contig's position in assembly order and is the only
    handle the k-mer index keeps for it.
    """
    contig_id: int
    name: str
    sequence: str
    codes: np.ndarray = field(init=False, repr=False, compare=False)
    rc_codes: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self.sequence = self.sequence.upper()
        self.codes = np.frombuffer(self.sequence.encode('ascii'), dtype=np.uint8)
        # rc_codes[j] == complement(sequence[len - 1 - j])
        self.rc_codes = np.frombuffer(
            reverse_complement(self.sequence).encode('ascii'), dtype=np.uint8
        )

    @property
    def length(self) -> int:
        return len(self.sequence)

    def __len__(self) -> int:
        return self.length


# =============================================================================
# SECTION 3: FILE UTILITIES
# =============================================================================
# Helper functions for file handling with automatic gzip detection

def is_gzipped(filepath: Union[str, Path]) -> bool:
    """
    Check if file is gzip compressed.

    Args:
        filepath: Path to file

    Returns:
        True if file is gzipped
    """
    filepath = Path(filepath)
    return filepath.suffix in ('.gz', '.gzip')


def open_file(filepath: Union[str, Path], mode: str = 'r') -> TextIO:
    """
    Open file with automatic gzip detection.

    Args:
        filepath: Path to file
        mode: File mode ('r' or 'w')

    Returns:
        File handle
    """
    filepath = Path(filepath)

    if is_gzipped(filepath):
        if 'r' in mode:
            return gzip.open(filepath, 'rt')
        else:
            return gzip.open(filepath, 'wt')
    else:
        return open(filepath, mode)


def mate_name(record_id: str) -> str:
    """
    Strip a trailing /1 or /2 mate marker from a read id.

    Example:
        >>> mate_name("frag42/2")
        'frag42'
    """
    if len(record_id) > 2 and record_id[-2] == '/' and record_id[-1] in '12':
        return record_id[:-2]
    return record_id


# =============================================================================
# SECTION 4: FASTQ INPUT
# =============================================================================

def read_fastq(
    filepath: Union[str, Path],
    strip_mate_suffix: bool = True
) -> Iterator[FastqRead]:
    """
    Read FASTQ file and yield FastqRead objects.

    Interleaved paired-end files are read as-is; pairing is positional and
    checked later by the pair aligner.

    Args:
        filepath: Path to FASTQ file (can be gzipped)
        strip_mate_suffix: Drop trailing /1 and /2 from read ids

    Yields:
        FastqRead objects in file order

    Raises:
        FileNotFoundError: If the file does not exist
        ReadFormatError: If a record cannot be parsed
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"FASTQ file not found: {filepath}")

    with open_file(filepath, 'r') as handle:
        try:
            for record in SeqIO.parse(handle, "fastq"):
                name = mate_name(record.id) if strip_mate_suffix else record.id
                yield FastqRead(
                    name=name,
                    sequence=str(record.seq),
                    qualities=record.letter_annotations["phred_quality"],
                    description=record.description,
                )
        except ValueError as e:
            raise ReadFormatError(f"Malformed FASTQ record in {filepath}: {e}") from e


# =============================================================================
# SECTION 5: CONTIG INPUT
# =============================================================================

def read_contigs(
    filepath: Union[str, Path],
    min_length: int = 0
) -> List[Contig]:
    """
    Load assembled contigs from a FASTA file.

    Contig ids are assigned 0..n-1 in file (assembly) order among the contigs
    that pass the length filter, so ``contigs[contig_id]`` is always the
    contig.

    Args:
        filepath: Path to FASTA file (can be gzipped)
        min_length: Minimum contig length to keep

    Returns:
        List of Contig objects
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"FASTA file not found: {filepath}")

    contigs: List[Contig] = []
    skipped = 0

    with open_file(filepath, 'r') as handle:
        try:
            for record in SeqIO.parse(handle, "fasta"):
                sequence = str(record.seq)
                if len(sequence) < min_length:
                    skipped += 1
                    continue
                contigs.append(Contig(contig_id=len(contigs), name=record.id, sequence=sequence))
        except ValueError as e:
            raise ReadFormatError(f"Malformed FASTA record in {filepath}: {e}") from e

    logger.info(f"Loaded {len(contigs):,} contigs from {filepath}"
                + (f" ({skipped:,} shorter than {min_length} bp skipped)" if skipped else ""))
    return contigs


# =============================================================================
# SECTION 6: REPORT OUTPUT
# =============================================================================

def write_pair_report(
    alignments: Iterable[Any],
    handle: TextIO,
    fmt: str = 'text',
    metadata: Optional[Dict[str, Any]] = None
) -> int:
    """
    Write pair alignments to an open handle.

    Args:
        alignments: PairAlignment objects in pair order
        handle: Writable text handle
        fmt: 'text' (one line per pair) or 'json'
        metadata: Extra top-level fields for JSON output (parameters, index stats)

    Returns:
        Number of pairs written
    """
    if fmt == 'text':
        count = 0
        for alignment in alignments:
            handle.write(alignment.format_line() + '\n')
            count += 1
        return count

    if fmt == 'json':
        pairs = [alignment.to_dict() for alignment in alignments]
        document = dict(metadata or {})
        document['pairs'] = pairs
        json.dump(document, handle, indent=2)
        handle.write('\n')
        return len(pairs)

    raise ValueError(f"Unknown report format: {fmt}")


def contig_names(contigs: Sequence[Contig]) -> Dict[int, str]:
    """Map contig id to contig name, for report legends."""
    return {contig.contig_id: contig.name for contig in contigs}


__all__ = [
    'ReadFormatError',
    'FastqRead',
    'Contig',
    'is_gzipped',
    'open_file',
    'mate_name',
    'read_fastq',
    'read_contigs',
    'write_pair_report',
    'contig_names',
]
