"""Split operation for pdfsmith."""

import asyncio
from collections.abc import Sequence

from pypdf import PdfWriter

from pdfsmith.editor._utils import DocumentSource, as_handle, copy_pages, serialize
from pdfsmith.exceptions import InvalidRangeError
from pdfsmith.logging_config import get_logger
from pdfsmith.selector import RangeSpec, validate_range

logger = get_logger(__name__)


def split_document(
    document: DocumentSource,
    ranges: Sequence[RangeSpec | tuple[int, int]],
) -> list[bytes]:
    """
    Extract page ranges into separate documents.

    Args:
        document: The source document
        ranges: Inclusive 0-indexed ranges; one output per range, in order

    Returns:
        One PDF per range, each holding exactly that range's pages

    Raises:
        InvalidRangeError: If ``ranges`` is empty or any range is invalid.
            All ranges are checked before any output is produced.
    """
    handle = as_handle(document)
    specs = [RangeSpec.coerce(r) for r in ranges]
    if not specs:
        raise InvalidRangeError("No page ranges given", context={"page_count": handle.page_count})
    for spec in specs:
        validate_range(spec, handle.page_count)

    results = []
    for spec in specs:
        writer = PdfWriter()
        copy_pages(writer, handle, spec.indices())
        results.append(serialize(writer))

    logger.debug("Split %d pages into %d documents", handle.page_count, len(results))
    return results


async def split(
    document: DocumentSource,
    ranges: Sequence[RangeSpec | tuple[int, int]],
) -> list[bytes]:
    """Async variant of ``split_document``."""
    return await asyncio.to_thread(split_document, document, list(ranges))
