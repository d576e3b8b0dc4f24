"""Rewrite a record's genotype cells for haploid samples.

Two layouts are produced depending on the ploidy map:

- uniform collapse, when every sample is haploid: the first call of each row
  is compacted to the front of the array and the stride becomes 1
- mixed padding, otherwise: the stride is kept and every position after the
  first in a haploid row is set to end-of-vector
"""

import numpy as np

from ..genotypes.codec import end_of_vector_value
from .ploidy_map import PloidyMap


class GenotypeShapeError(ValueError):
    """Raised when a genotype array does not match the sample count."""

    pass


def genotype_stride(gt: np.ndarray, sample_count: int) -> int:
    """Return calls per sample for a flat genotype array.

    Raises:
        GenotypeShapeError: If the array length is not a multiple of sample_count.
    """
    if sample_count == 0:
        return 0
    if len(gt) % sample_count:
        raise GenotypeShapeError(
            f"Genotype array of length {len(gt)} does not divide into {sample_count} samples"
        )
    return len(gt) // sample_count


def collapse_to_haploid(gt: np.ndarray, sample_count: int) -> int:
    """Keep only the first call per sample, compacted in place.

    Returns:
        The new logical length (``sample_count``).
    """
    stride = genotype_stride(gt, sample_count)
    if stride > 1:
        # forward copy; the read index i * stride never trails the write index i
        for i in range(1, sample_count):
            gt[i] = gt[i * stride]
    return sample_count


def pad_haploid_rows(gt: np.ndarray, sample_count: int, ploidy_map: PloidyMap) -> int:
    """Fill every position after the first in haploid rows with end-of-vector.

    Diploid rows are left untouched. Mutates in place without allocating.

    Returns:
        The unchanged array length.
    """
    stride = genotype_stride(gt, sample_count)
    if stride > 1 and ploidy_map.any_haploid:
        rows = gt.reshape(sample_count, stride)
        rows[ploidy_map.mask, 1:] = end_of_vector_value(gt.dtype)
    return len(gt)


def rewrite_genotypes(gt: np.ndarray, sample_count: int, ploidy_map: PloidyMap) -> int:
    """Rewrite ``gt`` in place for the haploid samples in ``ploidy_map``.

    Args:
        gt: Flat genotype cells, row-major by sample. Modified in place.
        sample_count: Number of samples in the record.
        ploidy_map: Haploid designation per sample.

    Returns:
        The new logical length; callers truncate ``gt[:length]``.

    Raises:
        GenotypeShapeError: If the array or ploidy map do not match sample_count.
    """
    if len(ploidy_map) != sample_count:
        raise GenotypeShapeError(
            f"Ploidy map has {len(ploidy_map)} samples, record has {sample_count}"
        )
    if sample_count == 0:
        return len(gt)

    if ploidy_map.all_haploid:
        return collapse_to_haploid(gt, sample_count)
    return pad_haploid_rows(gt, sample_count, ploidy_map)
