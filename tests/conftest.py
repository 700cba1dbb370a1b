#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SpanWeaver v0.1.0

Pytest configuration and shared fixtures.

Author: SpanWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
import pytest
from pathlib import Path
import tempfile
import shutil

from spanweaver.io import Contig, FastqRead
from spanweaver.kmer import KmerIndex


def make_read(name, sequence, quality=40):
    """FastqRead with a constant quality, or explicit per-base qualities."""
    if isinstance(quality, int):
        quality = [quality] * len(sequence)
    return FastqRead(name=name, sequence=sequence, qualities=quality)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo logging setup done by CLI commands under test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="spanweaver_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def small_contigs():
    """Single 7 bp contig used by the k=3 worked examples."""
    return [Contig(contig_id=0, name="ctg0", sequence="ACGTACG")]


@pytest.fixture
def small_index(small_contigs):
    """k=3 index over the 7 bp contig."""
    return KmerIndex.build(small_contigs, 3)


@pytest.fixture
def simple_fasta():
    """The 7 bp contig in FASTA form."""
    return ">ctg0 assembled\nACGTACG\n"


@pytest.fixture
def interleaved_fastq():
    """Two interleaved read pairs with /1 and /2 mate suffixes."""
    return """@p1/1
ACGT
+
IIII
@p1/2
CGTA
+
IIII
@p2/1
CCCC
+
IIII
@p2/2
ACGT
+
II#I
"""


@pytest.fixture
def contigs_file(temp_output_dir, simple_fasta):
    """Path to a FASTA file holding simple_fasta."""
    path = temp_output_dir / "contigs.fa"
    path.write_text(simple_fasta)
    return path


@pytest.fixture
def reads_file(temp_output_dir, interleaved_fastq):
    """Path to an interleaved FASTQ file holding interleaved_fastq."""
    path = temp_output_dir / "reads.fq"
    path.write_text(interleaved_fastq)
    return path

# SpanWeaver v0.1.0
# Any usage is subject to this software's license.
