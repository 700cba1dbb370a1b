"""
Unit tests for canonical k-mer selection.

Author: SpanWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import random

import pytest
from spanweaver.kmer.canonical import canonical_kmer, reverse_complement_kmer
from spanweaver.kmer.kmerizer import decode_kmer, encode_kmer
from spanweaver.utils.sequence_utils import reverse_complement


class TestReverseComplementKmer:
    """Test packed reverse complement."""

    def test_matches_string_reverse_complement(self):
        """Packed and string reverse complements agree."""
        for kmer in ["ACG", "GATTACA", "TTTTT", "A"]:
            k = len(kmer)
            rc = reverse_complement_kmer(encode_kmer(kmer), k)
            assert decode_kmer(rc, k) == reverse_complement(kmer)

    def test_involution(self):
        """Reverse complementing twice gives the k-mer back."""
        value = encode_kmer("GGACT")
        assert reverse_complement_kmer(reverse_complement_kmer(value, 5), 5) == value


class TestCanonicalKmer:
    """Test canonical form and orientation flag."""

    def test_smaller_kmer_is_canonical(self):
        """ACG < CGT so ACG is canonical."""
        assert canonical_kmer(encode_kmer("ACG"), 3) == (encode_kmer("ACG"), True)
        assert canonical_kmer(encode_kmer("CGT"), 3) == (encode_kmer("ACG"), False)

    def test_palindrome_reports_canonical(self):
        """A self-complementary k-mer is its own canonical form."""
        value = encode_kmer("ACGT")
        assert canonical_kmer(value, 4) == (value, True)

    @pytest.mark.parametrize("k", [1, 3, 11, 31])
    def test_symmetry(self, k):
        """A k-mer and its reverse complement share a canonical form with opposite flags."""
        rng = random.Random(k)
        for _ in range(200):
            kmer = rng.getrandbits(2 * k)
            rc = reverse_complement_kmer(kmer, k)
            canonical, flag = canonical_kmer(kmer, k)
            rc_canonical, rc_flag = canonical_kmer(rc, k)
            assert canonical == rc_canonical == min(kmer, rc)
            # Odd k has no palindromes
            assert flag != rc_flag
