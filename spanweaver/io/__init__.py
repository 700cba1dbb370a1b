"""
Read and contig I/O module for SpanWeaver.

Handles loading interleaved paired-end FASTQ reads and assembled contigs,
and writing per-pair span reports.

CONSOLIDATED MODULES:
- io_core_module.py: Core record structures, FASTQ/FASTA input, report output
"""

from .io_core_module import (
    ReadFormatError,
    FastqRead,
    Contig,
    is_gzipped,
    open_file,
    mate_name,
    read_fastq,
    read_contigs,
    write_pair_report,
    contig_names,
)

__all__ = [
    # Core data structures
    "ReadFormatError",
    "FastqRead",
    "Contig",

    # File helpers
    "is_gzipped",
    "open_file",
    "mate_name",

    # Input
    "read_fastq",
    "read_contigs",

    # Output
    "write_pair_report",
    "contig_names",
]
