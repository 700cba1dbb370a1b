"""
Unit tests for interleaved pair validation and alignment.

Author: SpanWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import random

import pytest
from conftest import make_read
from spanweaver.alignment import PairAligner, PairAlignment, PairFormatError
from spanweaver.alignment import span_finder
from spanweaver.config import AlignmentParameters
from spanweaver.io import Contig
from spanweaver.kmer import KmerIndex


@pytest.fixture
def aligner(small_index, small_contigs):
    return PairAligner(small_index, small_contigs, AlignmentParameters(kmer_size=3))


class TestPairValidation:
    """Test interleaving checks."""

    def test_valid_pairs(self):
        """Matching adjacent names pass and give the pair count."""
        reads = [make_read("a", "ACGT"), make_read("a", "CGTA"),
                 make_read("b", "ACGT"), make_read("b", "ACGT")]
        assert PairAligner.validate_pairs(reads) == 2

    def test_odd_count(self):
        """An odd number of reads is rejected."""
        reads = [make_read("a", "ACGT")] * 3
        with pytest.raises(PairFormatError, match="odd number of reads"):
            PairAligner.validate_pairs(reads)

    def test_name_mismatch(self):
        """The message names both records and both names."""
        reads = [make_read("a", "ACGT"), make_read("a", "ACGT"),
                 make_read("b", "ACGT"), make_read("c", "ACGT")]
        with pytest.raises(PairFormatError) as excinfo:
            PairAligner.validate_pairs(reads)
        message = str(excinfo.value)
        assert "record 2" in message and "record 3" in message
        assert "'b'" in message and "'c'" in message

    def test_empty_input(self):
        """No reads is zero pairs, not an error."""
        assert PairAligner.validate_pairs([]) == 0

    def test_validation_precedes_span_finding(self, aligner, monkeypatch):
        """A bad pair late in the input stops the run before any span is found."""
        calls = []
        monkeypatch.setattr(span_finder, "find_spans", lambda *a, **kw: calls.append(a) or {})
        reads = [make_read("a", "ACGT"), make_read("a", "ACGT"),
                 make_read("b", "ACGT"), make_read("x", "ACGT")]
        with pytest.raises(PairFormatError):
            aligner.align_pairs(reads)
        assert calls == []


class TestPairAlignment:
    """Test pair alignment results."""

    def test_format_line(self, aligner):
        """Mate spans are joined by '; ' and the mates by ' | '."""
        reads = [make_read("p1", "ACGT"), make_read("p1", "CGTA")]
        (result,) = aligner.align_pairs(reads)
        assert result.format_line() == (
            "[0-3)/4 -> +0:[4-7)/7; [0-4)/4 -> +0:[0-4)/7; "
            "[0-4)/4 -> -0:[0-4)/7; [1-4)/4 -> -0:[4-7)/7"
            " | "
            "[0-3)/4 -> -0:[0-3)/7; [0-4)/4 -> +0:[1-5)/7; [0-4)/4 -> -0:[3-7)/7"
        )

    def test_unplaced_pair(self, aligner):
        """A pair with no spans renders as an empty line around the bar."""
        reads = [make_read("p", "CCCC"), make_read("p", "CCCC")]
        (result,) = aligner.align_pairs(reads)
        assert result.format_line() == " | "
        assert result.to_dict()["mate1"] == []

    def test_to_dict(self, aligner):
        """Dictionary form carries placement and mismatch statistics."""
        reads = [make_read("p", "ACGA", quality=30), make_read("p", "CCCC")]
        (result,) = aligner.align_pairs(reads)
        data = result.to_dict()
        assert data["pair_index"] == 0
        assert data["name"] == "p"
        first = data["mate1"][0]
        assert first["strand"] == "+"
        assert first["contig_start"] == 4
        assert first["n_mismatches"] == 0
        assert [m["quality_sum"] for m in data["mate1"]] == [0, 30, 30]

    def test_pair_order_preserved(self, aligner):
        """Results come back in input order with their pair index."""
        reads = []
        for i in range(5):
            reads += [make_read(f"p{i}", "ACGT"), make_read(f"p{i}", "CGTA")]
        results = aligner.align_pairs(reads)
        assert [r.pair_index for r in results] == list(range(5))
        assert [r.name for r in results] == [f"p{i}" for i in range(5)]
        assert all(isinstance(r, PairAlignment) for r in results)

    def test_threaded_matches_sequential(self):
        """Threaded alignment gives the same lines in the same order."""
        rng = random.Random(3)
        contigs = [
            Contig(contig_id=i, name=f"ctg{i}", sequence="".join(rng.choice("ACGT") for _ in range(300)))
            for i in range(4)
        ]
        index = KmerIndex.build(contigs, 9)
        parameters = AlignmentParameters(kmer_size=9, min_quality=10, max_quality_sum=60)
        reads = []
        for i in range(25):
            contig = rng.choice(contigs).sequence
            start = rng.randrange(0, 240)
            reads.append(make_read(f"p{i}", contig[start:start + 50]))
            reads.append(make_read(f"p{i}", contig[start + 5:start + 60]))

        sequential = PairAligner(index, contigs, parameters).align_pairs(reads)
        threaded = PairAligner(index, contigs, parameters, num_threads=4).align_pairs(reads)
        assert [r.format_line() for r in threaded] == [r.format_line() for r in sequential]

    def test_invalid_thread_count(self, small_index, small_contigs):
        """Thread count must be positive."""
        with pytest.raises(ValueError):
            PairAligner(small_index, small_contigs, AlignmentParameters(kmer_size=3), num_threads=0)
