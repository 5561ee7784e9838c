"""Page deletion for pdfsmith."""

import asyncio
from collections.abc import Iterable

from pypdf import PdfWriter

from pdfsmith.editor._utils import DocumentSource, as_handle, copy_pages, serialize
from pdfsmith.exceptions import AllPagesDeletedError
from pdfsmith.logging_config import get_logger

logger = get_logger(__name__)


def delete_document_pages(document: DocumentSource, indices: Iterable[int]) -> bytes:
    """
    Remove pages from a document.

    Args:
        document: The source document
        indices: 0-indexed pages to drop. Indices not in the document are ignored.

    Returns:
        PDF bytes holding the remaining pages in original order

    Raises:
        AllPagesDeletedError: If no page would remain
    """
    handle = as_handle(document)
    doomed = set(indices)
    keep = [i for i in range(handle.page_count) if i not in doomed]
    if not keep:
        raise AllPagesDeletedError(
            "Cannot delete all pages",
            context={"page_count": handle.page_count},
        )

    writer = PdfWriter()
    copy_pages(writer, handle, keep)
    logger.debug("Deleted %d of %d pages", handle.page_count - len(keep), handle.page_count)
    return serialize(writer)


async def delete_pages(document: DocumentSource, indices: Iterable[int]) -> bytes:
    """Async variant of ``delete_document_pages``."""
    return await asyncio.to_thread(delete_document_pages, document, set(indices))
