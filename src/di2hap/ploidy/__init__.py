"""Ploidy designation, verification and genotype rewriting."""

from .ploidy_map import PloidyMap, build_ploidy_map
from .rewriter import (
    GenotypeShapeError,
    collapse_to_haploid,
    genotype_stride,
    pad_haploid_rows,
    rewrite_genotypes,
)
from .verifier import VerificationFailure, find_first_heterozygous, verify_homozygous

__all__ = [
    "GenotypeShapeError",
    "PloidyMap",
    "VerificationFailure",
    "build_ploidy_map",
    "collapse_to_haploid",
    "find_first_heterozygous",
    "genotype_stride",
    "pad_haploid_rows",
    "rewrite_genotypes",
    "verify_homozygous",
]
