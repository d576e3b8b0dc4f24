"""Variant file reading and writing backed by cyvcf2."""

import logging
from collections.abc import Iterator
from pathlib import Path

from cyvcf2 import VCF, Writer

from .config import OUTPUT_FORMATS

logger = logging.getLogger(__name__)

STDIO_PATH = "-"


class SourceError(Exception):
    """Raised when the input variant file cannot be opened or read."""

    pass


class SinkError(Exception):
    """Raised when the output variant file cannot be opened or written."""

    pass


class VariantSource:
    """Sequential reader over the records of a VCF/BCF file.

    ``"-"`` reads from stdin.
    """

    def __init__(self, path: Path | str = STDIO_PATH):
        self.path = str(path)
        try:
            self.vcf = VCF(self.path)
        except Exception as e:
            raise SourceError(f"Could not open input file {self.path}: {e}") from e
        self._samples = list(self.vcf.samples)

    @property
    def samples(self) -> list[str]:
        return self._samples

    def __iter__(self) -> Iterator:
        iterator = iter(self.vcf)
        while True:
            try:
                variant = next(iterator)
            except StopIteration:
                return
            except Exception as e:
                raise SourceError(f"Error reading {self.path}: {e}") from e
            yield variant

    def close(self) -> None:
        self.vcf.close()

    def __enter__(self) -> "VariantSource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class VariantSink:
    """Writer that copies the header of a VariantSource.

    ``"-"`` writes to stdout.
    """

    def __init__(
        self,
        path: Path | str,
        source: VariantSource,
        output_format: str = "vcf",
    ):
        if output_format not in OUTPUT_FORMATS:
            raise SinkError(f"Invalid output format: {output_format}")
        self.path = str(path)
        try:
            self.writer = Writer(self.path, source.vcf, mode=OUTPUT_FORMATS[output_format])
        except Exception as e:
            raise SinkError(f"Could not open output file {self.path}: {e}") from e
        logger.debug("Writing %s output to %s", output_format, self.path)

    def write(self, variant) -> None:
        try:
            self.writer.write_record(variant)
        except Exception as e:
            raise SinkError(f"Error writing {self.path}: {e}") from e

    def close(self) -> None:
        try:
            self.writer.close()
        except Exception as e:
            raise SinkError(f"Error closing {self.path}: {e}") from e

    def __enter__(self) -> "VariantSink":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
