"""Homozygosity check for haploid-designated samples.

Collapsing a sample to a single call is only lossless when every call in its
row is identical. ``verify_homozygous`` checks this for one record before the
row is rewritten.
"""

from collections.abc import Sequence

import numpy as np

from ..models import Locus
from .ploidy_map import PloidyMap


class VerificationFailure(Exception):
    """Raised when a haploid-designated sample has a heterozygous call."""

    def __init__(
        self,
        locus: Locus,
        sample_id: str,
        sample_index: int,
        alleles: tuple[int, ...] = (),
    ):
        self.locus = locus
        self.sample_id = sample_id
        self.sample_index = sample_index
        self.alleles = alleles
        super().__init__(f"cannot convert heterozygous to haploid at {locus}:{sample_id}")


def find_first_heterozygous(gt: np.ndarray, stride: int, ploidy_map: PloidyMap) -> int | None:
    """Return the index of the first haploid sample whose calls differ, or None.

    A row is heterozygous when any position ``j`` in ``[1, stride)`` differs from
    position 0. Samples are considered in index order.
    """
    if stride <= 1 or not ploidy_map.any_haploid:
        return None

    rows = gt[: ploidy_map.sample_count * stride].reshape(ploidy_map.sample_count, stride)
    mismatched = (rows[:, 1:] != rows[:, :1]).any(axis=1) & ploidy_map.mask
    hits = np.flatnonzero(mismatched)
    if hits.size == 0:
        return None
    return int(hits[0])


def verify_homozygous(
    gt: np.ndarray,
    stride: int,
    ploidy_map: PloidyMap,
    locus: Locus,
    sample_ids: Sequence[str],
) -> None:
    """Check that every haploid-designated sample is homozygous at this locus.

    Read-only: ``gt`` is not modified, so repeated calls give the same result.

    Args:
        gt: Flat genotype cells, row-major by sample.
        stride: Calls per sample in this record.
        ploidy_map: Haploid designation per sample.
        locus: Record identity, used in the failure message.
        sample_ids: Sample identifiers parallel to ``ploidy_map``.

    Raises:
        VerificationFailure: For the first heterozygous haploid-designated sample.
    """
    sample_index = find_first_heterozygous(gt, stride, ploidy_map)
    if sample_index is None:
        return

    row = gt[sample_index * stride:(sample_index + 1) * stride]
    raise VerificationFailure(
        locus=locus,
        sample_id=sample_ids[sample_index],
        sample_index=sample_index,
        alleles=tuple(int(v) for v in row),
    )
