"""Tests for the homozygosity check on haploid-designated samples."""

import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from di2hap.genotypes.codec import end_of_vector_value, missing_value
from di2hap.models import Locus
from di2hap.ploidy.ploidy_map import PloidyMap
from di2hap.ploidy.verifier import (
    VerificationFailure,
    find_first_heterozygous,
    verify_homozygous,
)

LOCUS = Locus(chrom="chrX", pos=3000000, ref="A", alts=("G", "T"))

CELLS = st.sampled_from([missing_value(), end_of_vector_value(), 0, 1, 2, 3])
ROWS = st.lists(st.lists(CELLS, min_size=4, max_size=4), min_size=1, max_size=8)


class TestVerifyHomozygous:
    """Tests for verify_homozygous."""

    def test_homozygous_haploid_samples_pass(self, gt_array):
        gt = gt_array([0, 0, 1, 1])
        verify_homozygous(gt, 2, PloidyMap(flags=(True, True)), LOCUS, ["S1", "S2"])

    def test_heterozygous_diploid_sample_is_ignored(self, gt_array):
        gt = gt_array([1, 1, 0, 1])
        verify_homozygous(gt, 2, PloidyMap(flags=(True, False)), LOCUS, ["S1", "S2"])

    def test_heterozygous_haploid_sample_fails(self, gt_array):
        """A 0/1 call on sample 0 fails with that sample and locus."""
        gt = gt_array([0, 1, 1, 1])
        with pytest.raises(VerificationFailure) as exc_info:
            verify_homozygous(gt, 2, PloidyMap(flags=(True, True)), LOCUS, ["S1", "S2"])

        err = exc_info.value
        assert err.sample_id == "S1"
        assert err.sample_index == 0
        assert err.locus == LOCUS
        assert err.alleles == (0, 1)
        assert str(err) == "cannot convert heterozygous to haploid at chrX:3000000:A:G,T:S1"

    def test_reports_first_failing_sample(self, gt_array):
        gt = gt_array([0, 0, 1, 0, 2, 1])
        with pytest.raises(VerificationFailure) as exc_info:
            verify_homozygous(
                gt, 2, PloidyMap(flags=(True, True, True)), LOCUS, ["S1", "S2", "S3"]
            )
        assert exc_info.value.sample_id == "S2"

    def test_checks_every_position_for_polyploid_stride(self, gt_array):
        """With stride 3 the last position is compared too."""
        gt = gt_array([1, 1, 1, 2, 2, 0])
        with pytest.raises(VerificationFailure) as exc_info:
            verify_homozygous(gt, 3, PloidyMap(flags=(True, True)), LOCUS, ["S1", "S2"])
        assert exc_info.value.sample_id == "S2"

    def test_missing_calls_compare_equal(self, gt_array):
        m = missing_value()
        gt = gt_array([m, m])
        verify_homozygous(gt, 2, PloidyMap(flags=(True,)), LOCUS, ["S1"])

    def test_half_missing_call_fails(self, gt_array):
        gt = gt_array([0, missing_value()])
        with pytest.raises(VerificationFailure):
            verify_homozygous(gt, 2, PloidyMap(flags=(True,)), LOCUS, ["S1"])

    def test_end_of_vector_is_compared_strictly(self, gt_array):
        gt = gt_array([1, end_of_vector_value()])
        with pytest.raises(VerificationFailure):
            verify_homozygous(gt, 2, PloidyMap(flags=(True,)), LOCUS, ["S1"])

    def test_stride_one_always_passes(self, gt_array):
        gt = gt_array([0, 1])
        verify_homozygous(gt, 1, PloidyMap(flags=(True, True)), LOCUS, ["S1", "S2"])

    def test_does_not_modify_array(self, gt_array):
        """Verification is side-effect free and repeatable."""
        gt = gt_array([0, 1, 1, 1])
        before = gt.copy()
        pm = PloidyMap(flags=(True, True))

        for _ in range(2):
            with pytest.raises(VerificationFailure) as exc_info:
                verify_homozygous(gt, 2, pm, LOCUS, ["S1", "S2"])
            assert exc_info.value.sample_id == "S1"

        np.testing.assert_array_equal(gt, before)


class TestFindFirstHeterozygous:
    """Tests for find_first_heterozygous."""

    def test_none_when_no_haploid_samples(self, gt_array):
        gt = gt_array([0, 1, 0, 1])
        assert find_first_heterozygous(gt, 2, PloidyMap(flags=(False, False))) is None

    def test_index_of_first_hit(self, gt_array):
        gt = gt_array([0, 1, 0, 0, 1, 0])
        pm = PloidyMap(flags=(False, True, True))
        assert find_first_heterozygous(gt, 2, pm) == 2

    def test_empty_array(self, gt_array):
        assert find_first_heterozygous(gt_array([]), 0, PloidyMap(flags=())) is None


class TestPropertyBased:
    """Property-based tests using hypothesis."""

    @given(
        rows=ROWS,
        stride=st.integers(min_value=1, max_value=4),
        flags=st.lists(st.booleans(), min_size=8, max_size=8),
    )
    @settings(max_examples=100)
    def test_check_is_read_only_and_repeatable(self, rows, stride, flags):
        rows = [row[:stride] for row in rows]
        pm = PloidyMap(flags=tuple(flags[: len(rows)]))
        gt = np.array([v for row in rows for v in row], dtype=np.int16)
        before = gt.copy()

        first = find_first_heterozygous(gt, stride, pm)
        second = find_first_heterozygous(gt, stride, pm)

        assert first == second
        np.testing.assert_array_equal(gt, before)

    @given(
        rows=ROWS,
        stride=st.integers(min_value=1, max_value=4),
        flags=st.lists(st.booleans(), min_size=8, max_size=8),
    )
    @settings(max_examples=100)
    def test_fails_on_first_mismatched_haploid_row(self, rows, stride, flags):
        rows = [row[:stride] for row in rows]
        flags = tuple(flags[: len(rows)])
        sample_ids = [f"S{i}" for i in range(len(rows))]
        gt = np.array([v for row in rows for v in row], dtype=np.int16)
        expected = next(
            (
                i
                for i, (row, haploid) in enumerate(zip(rows, flags))
                if haploid and any(v != row[0] for v in row)
            ),
            None,
        )

        if expected is None:
            verify_homozygous(gt, stride, PloidyMap(flags=flags), LOCUS, sample_ids)
            return

        with pytest.raises(VerificationFailure) as exc_info:
            verify_homozygous(gt, stride, PloidyMap(flags=flags), LOCUS, sample_ids)
        assert exc_info.value.sample_index == expected
        assert exc_info.value.sample_id == sample_ids[expected]
        assert exc_info.value.alleles == tuple(rows[expected])
