"""Output file naming and saving for pdfsmith."""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from pdfsmith.constants import SUFFIX_SPLIT_PART, SUFFIX_SPLIT_SINGLE
from pdfsmith.logging_config import get_logger

logger = get_logger(__name__)

_PDF_EXTENSION = re.compile(r"\.pdf$", re.IGNORECASE)


def output_filename(source_name: str, suffix: str) -> str:
    """
    Derive an output name by suffixing the source name.

    A trailing ``.pdf`` (any case) is replaced by ``<suffix>.pdf``; names
    without it simply get ``<suffix>.pdf`` appended.

    Example:
        output_filename("Report.PDF", "_rotated") -> "Report_rotated.pdf"
    """
    name = Path(source_name).name
    stem = _PDF_EXTENSION.sub("", name)
    return f"{stem}{suffix}.pdf"


def size_suffix(size_name: str) -> str:
    """Suffix for a resize to a named page size, e.g. ``"_a4"``."""
    return f"_{size_name.lower()}"


def split_filenames(source_name: str, count: int) -> list[str]:
    """Names for split output: ``_split`` for one part, else ``_part1`` .. ``_partN``."""
    if count == 1:
        return [output_filename(source_name, SUFFIX_SPLIT_SINGLE)]
    return [output_filename(source_name, SUFFIX_SPLIT_PART.format(n=i + 1)) for i in range(count)]


def save_outputs(results: Sequence[bytes], names: Sequence[str], output_dir: Path) -> list[Path]:
    """
    Write result buffers to ``output_dir``, creating it if needed.

    Returns:
        Paths written, in the order given
    """
    if len(results) != len(names):
        raise ValueError(f"Got {len(results)} results but {len(names)} names")

    output_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for data, name in zip(results, names):
        path = output_dir / name
        path.write_bytes(data)
        logger.info("Saved: %s", path)
        paths.append(path)
    return paths


def format_file_size(size: int) -> str:
    """Human-readable size: ``512 B``, ``1.5 KB``, ``2.0 MB``."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


@dataclass
class CompressionReport:
    """Size comparison between an original and its compressed version."""

    original_size: int
    compressed_size: int

    @property
    def saved(self) -> int:
        return self.original_size - self.compressed_size

    @property
    def savings_percent(self) -> float:
        if self.original_size == 0:
            return 0.0
        return self.saved / self.original_size * 100

    def describe(self) -> str:
        return (
            f"{format_file_size(self.original_size)} -> {format_file_size(self.compressed_size)} "
            f"({self.savings_percent:.1f}% saved)"
        )
