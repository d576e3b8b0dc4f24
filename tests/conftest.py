"""Pytest configuration and fixtures for di2hap tests."""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent))

from fixtures.vcf_generator import (  # noqa: E402
    SyntheticVariant,
    VCFGenerator,
    make_chrx_vcf_file,
    make_heterozygous_male_vcf_file,
)


class FakeVariant:
    """Stand-in for a cyvcf2 Variant exposing the attributes the converter uses."""

    def __init__(
        self,
        genotypes: list[list],
        chrom: str = "chrX",
        pos: int = 100,
        ref: str = "A",
        alts: list[str] | None = None,
        format_fields: list[str] | None = None,
    ):
        self.CHROM = chrom
        self.POS = pos
        self.REF = ref
        self.ALT = alts if alts is not None else ["G"]
        self.FORMAT = format_fields if format_fields is not None else ["GT"]
        self.genotypes = genotypes


class ListSink:
    """Collects written records in order."""

    def __init__(self):
        self.records = []

    def write(self, variant) -> None:
        self.records.append(variant)


@pytest.fixture
def gt_array():
    """Factory for int16 genotype arrays."""

    def _factory(values):
        return np.array(values, dtype=np.int16)

    return _factory


@pytest.fixture
def fake_variant_factory():
    return FakeVariant


@pytest.fixture
def list_sink():
    return ListSink()


@pytest.fixture
def vcf_generator():
    """Provide VCFGenerator class for tests."""
    return VCFGenerator


@pytest.fixture
def synthetic_variant_factory():
    """Factory for creating SyntheticVariant instances."""

    def _factory(**kwargs):
        defaults = {
            "chrom": "chrX",
            "pos": 100,
            "ref": "A",
            "alt": ["G"],
        }
        defaults.update(kwargs)
        return SyntheticVariant(**defaults)

    return _factory


@pytest.fixture
def chrx_vcf_file(tmp_path):
    """VCF with two chrX records for samples M1, M2, F1."""
    return make_chrx_vcf_file(directory=tmp_path)


@pytest.fixture
def heterozygous_male_vcf_file(tmp_path):
    """VCF whose second record has a heterozygous call for M1."""
    return make_heterozygous_male_vcf_file(directory=tmp_path)


@pytest.fixture
def sex_map_file(tmp_path):
    """Sex map designating M1 and M2 haploid (code 0) and F1 diploid."""
    path = tmp_path / "sexes.tsv"
    path.write_text("M1\t0\nM2\t0\nF1\t1\n")
    return path
