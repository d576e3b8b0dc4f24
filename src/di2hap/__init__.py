"""di2hap: convert diploid VCF genotypes to haploid using a sex map."""

__version__ = "0.1.0"
