"""Per-variant haploid conversion driver."""

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import asdict, dataclass
from typing import Any, Protocol

from .genotypes.codec import GenotypeBuffer, decode_genotypes, encode_genotypes
from .models import Locus
from .ploidy.ploidy_map import PloidyMap
from .ploidy.rewriter import rewrite_genotypes
from .ploidy.verifier import verify_homozygous

logger = logging.getLogger(__name__)

GT_FIELD = "GT"


class RecordSink(Protocol):
    """Anything that accepts converted records in order."""

    def write(self, variant) -> None: ...


@dataclass
class ConversionStats:
    """Counters for a conversion run."""

    sample_count: int = 0
    haploid_count: int = 0
    variants_processed: int = 0
    variants_collapsed: int = 0
    variants_padded: int = 0
    variants_passed_through: int = 0
    variants_without_gt: int = 0
    variants_written: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class HaploidConverter:
    """Convert the GT field of each record for the haploid samples of a run.

    The ploidy map and sample list are fixed at construction. A single
    GenotypeBuffer is reused for every record.
    """

    def __init__(
        self,
        ploidy_map: PloidyMap,
        sample_ids: Sequence[str],
        verify: bool = False,
    ):
        if len(ploidy_map) != len(sample_ids):
            raise ValueError(
                f"Ploidy map has {len(ploidy_map)} samples, source has {len(sample_ids)}"
            )
        self.ploidy_map = ploidy_map
        self.sample_ids = list(sample_ids)
        self.verify = verify
        self.buffer = GenotypeBuffer()
        self.stats = ConversionStats(
            sample_count=len(self.sample_ids),
            haploid_count=ploidy_map.haploid_count,
        )

    def convert_variant(self, variant) -> None:
        """Rewrite one record's GT field in place.

        Raises:
            VerificationFailure: If verification is enabled and a haploid
                sample is heterozygous. The record is left unmodified.
        """
        self.stats.variants_processed += 1
        sample_count = len(self.sample_ids)

        if sample_count == 0 or GT_FIELD not in (variant.FORMAT or ()):
            self.stats.variants_without_gt += 1
            return

        if not self.ploidy_map.any_haploid:
            self.stats.variants_passed_through += 1
            return

        decoded = decode_genotypes(variant.genotypes, self.buffer)
        gt = decoded.cells

        if self.verify:
            verify_homozygous(
                gt, decoded.stride, self.ploidy_map, Locus.from_variant(variant), self.sample_ids
            )

        new_length = rewrite_genotypes(gt, sample_count, self.ploidy_map)
        if self.ploidy_map.all_haploid:
            self.stats.variants_collapsed += 1
        else:
            self.stats.variants_padded += 1

        variant.genotypes = encode_genotypes(gt[:new_length], sample_count, decoded.phased)

    def run(
        self,
        source: Iterable,
        sink: RecordSink,
        progress_callback: Callable[[int], None] | None = None,
        progress_interval: int = 10_000,
    ) -> ConversionStats:
        """Convert and write every record of ``source`` in order.

        Stops at the first error; records already written are left in place.
        """
        logger.info("Converting %d samples to haploid", self.ploidy_map.haploid_count)

        for variant in source:
            self.convert_variant(variant)
            sink.write(variant)
            self.stats.variants_written += 1
            if progress_callback and self.stats.variants_processed % progress_interval == 0:
                progress_callback(self.stats.variants_processed)

        if progress_callback:
            progress_callback(self.stats.variants_processed)

        logger.info(
            "Processed %d variants (%d collapsed, %d padded, %d passed through)",
            self.stats.variants_processed,
            self.stats.variants_collapsed,
            self.stats.variants_padded,
            self.stats.variants_passed_through + self.stats.variants_without_gt,
        )
        return self.stats
