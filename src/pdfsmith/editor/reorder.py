"""Page reordering for pdfsmith."""

import asyncio
from collections.abc import Sequence

from pypdf import PdfWriter

from pdfsmith.editor._utils import DocumentSource, as_handle, copy_pages, serialize
from pdfsmith.exceptions import PageIndexError
from pdfsmith.logging_config import get_logger

logger = get_logger(__name__)


def is_permutation(order: Sequence[int], page_count: int) -> bool:
    """True if ``order`` lists every page of the document exactly once."""
    return sorted(order) == list(range(page_count))


def reorder_document_pages(document: DocumentSource, new_order: Sequence[int]) -> bytes:
    """
    Build a document whose page ``k`` is original page ``new_order[k]``.

    ``new_order`` is expected to be a permutation of ``range(page_count)``,
    but that is not enforced: repeated indices give repeated pages and
    omitted indices drop pages.

    Raises:
        PageIndexError: If any index is outside the document
    """
    handle = as_handle(document)
    count = handle.page_count
    for index in new_order:
        if not 0 <= index < count:
            raise PageIndexError(
                f"Page index {index} is out of range for {count} page PDF",
                context={"index": index, "page_count": count},
            )

    if not is_permutation(new_order, count):
        logger.debug("Page order %s is not a permutation of %d pages", list(new_order), count)

    writer = PdfWriter()
    copy_pages(writer, handle, new_order)
    return serialize(writer)


async def reorder_pages(document: DocumentSource, new_order: Sequence[int]) -> bytes:
    """Async variant of ``reorder_document_pages``."""
    return await asyncio.to_thread(reorder_document_pages, document, list(new_order))
