"""Merge operation for pdfsmith."""

import asyncio
from collections.abc import Sequence

from pypdf import PdfWriter

from pdfsmith.editor._utils import DocumentSource, as_handle, copy_pages, serialize
from pdfsmith.exceptions import EmptyInputError
from pdfsmith.logging_config import get_logger

logger = get_logger(__name__)


def merge_documents(documents: Sequence[DocumentSource], min_documents: int = 2) -> bytes:
    """
    Concatenate whole documents into one.

    Every page of every input is appended, documents in list order and
    pages in their original order.

    Args:
        documents: Documents to merge, in output order
        min_documents: Fewest documents accepted (at least 1)

    Returns:
        The merged PDF bytes

    Raises:
        EmptyInputError: If fewer than ``min_documents`` documents are given
    """
    required = max(min_documents, 1)
    if len(documents) < required:
        raise EmptyInputError(
            f"Merging needs at least {required} documents, got {len(documents)}",
            context={"documents": len(documents)},
        )

    handles = [as_handle(doc) for doc in documents]

    writer = PdfWriter()
    for handle in handles:
        copy_pages(writer, handle, range(handle.page_count))

    logger.debug(
        "Merged %d documents into %d pages",
        len(handles),
        sum(h.page_count for h in handles),
    )
    return serialize(writer)


async def merge(documents: Sequence[DocumentSource], min_documents: int = 2) -> bytes:
    """Async variant of ``merge_documents``."""
    return await asyncio.to_thread(merge_documents, list(documents), min_documents)
