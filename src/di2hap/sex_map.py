"""Sex map file loading.

The sex map is a tab-delimited text file with one ``sample_id<TAB>code`` entry
per line. Additional columns are ignored.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import ConfigurationError

logger = logging.getLogger(__name__)


class SexMapError(ConfigurationError):
    """Raised when the sex map file is missing or malformed."""

    pass


@dataclass(frozen=True)
class SexMapEntry:
    """A single sample identifier to ploidy code assignment."""

    sample_id: str
    code: str

    def is_haploid(self, haploid_code: str) -> bool:
        return self.code == haploid_code


def parse_sex_map_line(line: str, line_number: int) -> SexMapEntry:
    """Parse one sex map line into a SexMapEntry.

    Raises:
        SexMapError: If the line has fewer than two tab-separated fields.
    """
    fields = line.rstrip("\r\n").split("\t")
    if len(fields) < 2:
        raise SexMapError(f"Malformed sex map at line {line_number}: expected 2 fields")
    return SexMapEntry(sample_id=fields[0], code=fields[1])


def load_sex_map(path: Path) -> list[SexMapEntry]:
    """Load sex map entries in file order.

    Blank lines are skipped.

    Raises:
        SexMapError: If the file cannot be read or a line is malformed.
    """
    try:
        with open(path) as fh:
            entries = [
                parse_sex_map_line(line, line_number)
                for line_number, line in enumerate(fh, start=1)
                if line.strip()
            ]
    except OSError as e:
        raise SexMapError(f"Could not read sex map {path}: {e}") from e

    logger.debug("Loaded %d sex map entries from %s", len(entries), path)
    return entries
