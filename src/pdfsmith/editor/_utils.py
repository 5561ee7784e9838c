"""Shared helpers for page-tree operations."""

from __future__ import annotations

import io
from collections.abc import Iterable

from pypdf import PageObject, PdfReader, PdfWriter

from pdfsmith.buffers import BytesLike, RawDocumentBytes
from pdfsmith.document import DocumentHandle, load_sync

DocumentSource = DocumentHandle | RawDocumentBytes | BytesLike


def as_handle(source: DocumentSource) -> DocumentHandle:
    """Return ``source`` as a DocumentHandle, parsing raw bytes if needed."""
    if isinstance(source, DocumentHandle):
        return source
    return load_sync(source)


def get_page_dimensions(page: PageObject) -> tuple[float, float]:
    """Get page width and height in points."""
    mediabox = page.mediabox
    return float(mediabox.width), float(mediabox.height)


def private_reader(handle: DocumentHandle) -> PdfReader:
    """Parse the handle's bytes again into a reader nobody else holds.

    pypdf shares content stream objects between a page and its clones, so
    operations that rewrite page content work on a private parse and never
    touch the handle's own reader.
    """
    reader = PdfReader(io.BytesIO(handle.source.data))
    if reader.is_encrypted:
        reader.decrypt("")
    return reader


def copy_pages(writer: PdfWriter, handle: DocumentHandle, indices: Iterable[int]) -> None:
    """Append the handle's pages at ``indices`` to ``writer`` in that order.

    Indices may repeat; each occurrence becomes its own page.
    """
    pages = handle.reader.pages
    for index in indices:
        writer.add_page(pages[index])


def serialize(writer: PdfWriter) -> bytes:
    """Write a document to a new byte string."""
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()
