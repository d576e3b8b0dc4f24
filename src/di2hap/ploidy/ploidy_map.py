"""Per-sample haploid designation built from a sex map."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import numpy as np

from ..sex_map import SexMapEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PloidyMap:
    """Immutable per-sample flags, ``True`` meaning the sample is haploid.

    Parallel to the sample list of the source file and fixed for a run.
    """

    flags: tuple[bool, ...]
    mask: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        mask = np.array(self.flags, dtype=bool)
        mask.setflags(write=False)
        object.__setattr__(self, "mask", mask)

    def __len__(self) -> int:
        return len(self.flags)

    @property
    def sample_count(self) -> int:
        return len(self.flags)

    @property
    def haploid_count(self) -> int:
        return int(self.mask.sum())

    @property
    def all_haploid(self) -> bool:
        """True when every sample is haploid, selecting the collapse layout."""
        return self.haploid_count == self.sample_count

    @property
    def any_haploid(self) -> bool:
        return self.haploid_count > 0

    @classmethod
    def uniform(cls, sample_count: int, haploid: bool = False) -> "PloidyMap":
        return cls(flags=(haploid,) * sample_count)


def build_ploidy_map(
    sample_ids: Sequence[str],
    entries: Iterable[SexMapEntry] = (),
    haploid_code: str = "0",
    default_haploid: bool = False,
) -> PloidyMap:
    """Build the PloidyMap for an ordered sample list.

    Samples start out as ``default_haploid``. Each entry naming a sample sets
    it haploid when its code equals ``haploid_code`` and diploid otherwise.
    Entries naming an unknown sample are logged and ignored.

    Args:
        sample_ids: Sample identifiers in file order.
        entries: Sex map entries in file order.
        haploid_code: Code designating a haploid sample.
        default_haploid: Initial designation for every sample.

    Returns:
        PloidyMap parallel to ``sample_ids``.
    """
    id_to_idx = {sample_id: idx for idx, sample_id in enumerate(sample_ids)}
    flags = [default_haploid] * len(sample_ids)

    for entry in entries:
        idx = id_to_idx.get(entry.sample_id)
        if idx is None:
            logger.warning("Sex map ID not in VCF (%s)", entry.sample_id)
            continue
        flags[idx] = entry.is_haploid(haploid_code)

    return PloidyMap(flags=tuple(flags))
