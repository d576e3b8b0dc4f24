"""Genotype cell encoding module."""

from .codec import (
    GT_DTYPE,
    DecodedGenotypes,
    GenotypeBuffer,
    GenotypeEncodingError,
    decode_genotypes,
    encode_genotypes,
    end_of_vector_value,
    missing_value,
)

__all__ = [
    "GT_DTYPE",
    "DecodedGenotypes",
    "GenotypeBuffer",
    "GenotypeEncodingError",
    "decode_genotypes",
    "encode_genotypes",
    "end_of_vector_value",
    "missing_value",
]
