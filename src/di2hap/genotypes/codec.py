"""Genotype cell encoding.

A record's GT field is handled as a flat array of small signed integers laid
out row-major by sample with a fixed stride (the record's ploidy). Besides
allele indices a cell can hold two reserved values:

- missing: no call at this position (``.`` in VCF)
- end-of-vector: the sample has fewer calls than the record's stride

The sentinels follow the BCF typed value convention: the smallest value of the
cell type is missing and the next one is end-of-vector.

cyvcf2 exposes calls per sample as ``[a0, a1, ..., phased]`` with ``-1`` for a
missing allele. ``decode_genotypes`` and ``encode_genotypes`` translate between
that form and the flat array.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

GT_DTYPE = np.int16

CYVCF2_MISSING = -1


class GenotypeEncodingError(Exception):
    """Raised when a genotype call cannot be represented in the cell type."""

    pass


def missing_value(dtype=GT_DTYPE) -> int:
    """Return the missing-call sentinel for an integer cell type."""
    return int(np.iinfo(dtype).min)


def end_of_vector_value(dtype=GT_DTYPE) -> int:
    """Return the end-of-vector sentinel for an integer cell type."""
    return int(np.iinfo(dtype).min) + 1


class GenotypeBuffer:
    """Reusable backing storage for decoded genotype arrays.

    One buffer is owned by the converter for a whole run. ``acquire`` hands
    out a view of the requested length and only reallocates when a record
    needs more cells than any record before it.
    """

    def __init__(self, capacity: int = 0, dtype=GT_DTYPE):
        self.dtype = np.dtype(dtype)
        self._storage = np.empty(capacity, dtype=self.dtype)

    @property
    def capacity(self) -> int:
        return len(self._storage)

    def acquire(self, size: int) -> np.ndarray:
        if size > len(self._storage):
            self._storage = np.empty(max(size, 2 * len(self._storage)), dtype=self.dtype)
        return self._storage[:size]


@dataclass
class DecodedGenotypes:
    """A record's GT field as a flat cell array plus per-sample phasing."""

    cells: np.ndarray
    sample_count: int
    phased: list[bool]

    @property
    def stride(self) -> int:
        if self.sample_count == 0:
            return 0
        return len(self.cells) // self.sample_count


def _to_cell(allele: int, dtype: np.dtype) -> int:
    if allele == CYVCF2_MISSING:
        return missing_value(dtype)
    if allele < CYVCF2_MISSING:
        return end_of_vector_value(dtype)
    if allele > np.iinfo(dtype).max:
        raise GenotypeEncodingError(f"Allele index {allele} does not fit in {dtype}")
    return allele


def decode_genotypes(calls: Sequence[Sequence], buffer: GenotypeBuffer) -> DecodedGenotypes:
    """Decode cyvcf2 genotype calls into a flat cell array.

    The stride is the longest call among the samples; shorter rows are padded
    with end-of-vector.

    Args:
        calls: Per-sample ``[allele, ..., phased]`` lists, as ``Variant.genotypes``.
        buffer: Storage the returned cells are a view of.

    Returns:
        DecodedGenotypes whose ``cells`` view is only valid until the next
        ``buffer.acquire``.
    """
    sample_count = len(calls)
    stride = max((len(call) - 1 for call in calls), default=0)
    cells = buffer.acquire(sample_count * stride)
    cells.fill(end_of_vector_value(buffer.dtype))

    phased = []
    for i, call in enumerate(calls):
        offset = i * stride
        for j, allele in enumerate(call[:-1]):
            cells[offset + j] = _to_cell(int(allele), buffer.dtype)
        phased.append(bool(call[-1]) if len(call) else False)

    return DecodedGenotypes(cells=cells, sample_count=sample_count, phased=phased)


def encode_genotypes(
    cells: np.ndarray, sample_count: int, phased: Sequence[bool]
) -> list[list]:
    """Encode a flat cell array back into cyvcf2 genotype calls.

    End-of-vector cells are dropped and missing cells become ``-1``. A row
    that would be empty is written as a single missing call.
    """
    if sample_count == 0:
        return []

    eov = end_of_vector_value(cells.dtype)
    missing = missing_value(cells.dtype)
    stride = len(cells) // sample_count

    calls = []
    for i in range(sample_count):
        row = cells[i * stride:(i + 1) * stride]
        alleles = [CYVCF2_MISSING if v == missing else int(v) for v in row if v != eov]
        if not alleles:
            alleles = [CYVCF2_MISSING]
        calls.append([*alleles, bool(phased[i])])
    return calls
