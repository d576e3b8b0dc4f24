"""Data models for variant loci."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Locus:
    """Identity of a variant record, used for diagnostics."""

    chrom: str
    pos: int
    ref: str
    alts: tuple[str, ...] = ()

    @classmethod
    def from_variant(cls, variant) -> "Locus":
        """Build a Locus from a cyvcf2 variant (or anything shaped like one)."""
        return cls(
            chrom=variant.CHROM,
            pos=variant.POS,
            ref=variant.REF,
            alts=tuple(alt for alt in variant.ALT if alt is not None),
        )

    @property
    def alts_display(self) -> str:
        return ",".join(self.alts)

    def __str__(self) -> str:
        return f"{self.chrom}:{self.pos}:{self.ref}:{self.alts_display}"
