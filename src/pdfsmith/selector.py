"""Page range and page list parsing for pdfsmith.

User-facing page numbers are 1-indexed; everything returned here is
0-indexed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pdfsmith.exceptions import InvalidRangeError, PageIndexError

_PART_RE = re.compile(r"^(\d+)\s*(?:-\s*(\d+))?$")


@dataclass(frozen=True)
class RangeSpec:
    """Closed, inclusive interval of 0-indexed pages."""

    start: int
    end: int
    text: str | None = None

    @classmethod
    def coerce(cls, value: "RangeSpec | tuple[int, int] | list[int]") -> "RangeSpec":
        if isinstance(value, RangeSpec):
            return value
        start, end = value
        return cls(int(start), int(end))

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def indices(self) -> list[int]:
        return list(range(self.start, self.end + 1))

    def describe(self) -> str:
        if self.text:
            return self.text
        return f"{self.start + 1}-{self.end + 1}"


def validate_range(spec: RangeSpec, page_count: int) -> None:
    """
    Check that a range lies inside a document.

    Raises:
        InvalidRangeError: If start > end or either bound is outside [0, page_count)
    """
    if spec.start > spec.end or spec.start < 0 or spec.end >= page_count:
        raise InvalidRangeError(
            f"Invalid range: {spec.describe()}",
            context={"range": spec.describe(), "page_count": page_count},
        )


def parse_ranges(text: str, page_count: int) -> list[RangeSpec]:
    """
    Parse a range list such as ``"1-3, 5, 8-10"``.

    Each comma-separated part is a page number or an ``a-b`` range of
    1-indexed pages. Empty parts are skipped.

    Args:
        text: Range text entered by the user
        page_count: Total number of pages in the PDF

    Returns:
        RangeSpec list in the order given

    Raises:
        InvalidRangeError: On malformed parts, out-of-bounds pages, or no ranges at all
    """
    ranges = []
    for part in (p.strip() for p in text.split(",")):
        if not part:
            continue
        match = _PART_RE.match(part)
        if not match:
            raise InvalidRangeError(
                f"Invalid range: {part}",
                context={"range": part, "page_count": page_count},
            )
        first = int(match.group(1))
        last = int(match.group(2)) if match.group(2) else first
        spec = RangeSpec(first - 1, last - 1, text=part)
        validate_range(spec, page_count)
        ranges.append(spec)

    if not ranges:
        raise InvalidRangeError("No page ranges given", context={"text": text})
    return ranges


def each_page_ranges(page_count: int) -> list[RangeSpec]:
    """One single-page range per page, for splitting into separate files."""
    return [RangeSpec(i, i) for i in range(page_count)]


def parse_page_list(text: str, page_count: int) -> list[int]:
    """
    Convert ``"3, 1, 5-7"`` to 0-indexed page indices, keeping the given order.

    Unlike ``parse_ranges``, ranges expand to individual pages and a
    descending range (``"7-5"``) yields pages in descending order.

    Raises:
        PageIndexError: If a page number is outside the document
        InvalidRangeError: If a part is not a number or range
    """
    pages = []
    for part in (p.strip() for p in text.split(",")):
        if not part:
            continue
        match = _PART_RE.match(part)
        if not match:
            raise InvalidRangeError(f"Invalid page specification: {part}")
        first = int(match.group(1))
        last = int(match.group(2)) if match.group(2) else first
        step = 1 if last >= first else -1
        for page in range(first, last + step, step):
            if not 1 <= page <= page_count:
                raise PageIndexError(
                    f"Page {page} is out of range for {page_count} page PDF",
                    context={"page": page, "page_count": page_count},
                )
            pages.append(page - 1)
    return pages
