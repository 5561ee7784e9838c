"""Loaded, read-only view over a PDF's page tree."""

from __future__ import annotations

import asyncio
import io

from pypdf import PageObject, PasswordType, PdfReader

from pdfsmith.buffers import BytesLike, RawDocumentBytes
from pdfsmith.exceptions import PageIndexError, ParseError
from pdfsmith.logging_config import get_logger

logger = get_logger(__name__)


class DocumentHandle:
    """Parsed view of one PDF.

    Handles are never edited in place. Editor operations read pages from a
    handle and serialize a new document, leaving the handle and its source
    buffer untouched.
    """

    def __init__(self, source: RawDocumentBytes, reader: PdfReader):
        self.source = source
        self._reader = reader

    @property
    def reader(self) -> PdfReader:
        return self._reader

    @property
    def page_count(self) -> int:
        return len(self._reader.pages)

    def page(self, index: int) -> PageObject:
        """Return the source page at a 0-indexed position."""
        self._check_index(index)
        return self._reader.pages[index]

    def page_size(self, index: int) -> tuple[float, float]:
        """Return (width, height) of a page's mediabox in points."""
        mediabox = self.page(index).mediabox
        return float(mediabox.width), float(mediabox.height)

    def page_rotation(self, index: int) -> int:
        """Return the page's /Rotate value normalized to [0, 360)."""
        return int(self.page(index).rotation) % 360

    def _check_index(self, index: int) -> None:
        count = self.page_count
        if not 0 <= index < count:
            raise PageIndexError(
                f"Page index {index} is out of range for {count} page PDF",
                context={"index": index, "page_count": count},
            )

    def __repr__(self) -> str:
        return f"<DocumentHandle {self.source!r} pages={self.page_count}>"


def load_sync(
    data: RawDocumentBytes | BytesLike,
    *,
    ignore_encryption: bool = True,
) -> DocumentHandle:
    """
    Parse PDF bytes into a DocumentHandle.

    Args:
        data: The PDF bytes. Plain bytes are wrapped in a new RawDocumentBytes.
        ignore_encryption: When True, encrypted files are opened with the
            empty user password. When False, any encrypted file is rejected.

    Returns:
        A DocumentHandle over the bytes

    Raises:
        ParseError: If the bytes are not a readable PDF
    """
    source = RawDocumentBytes.coerce(data)
    context = {"name": source.name} if source.name else {}

    try:
        reader = PdfReader(io.BytesIO(source.data))
    except Exception as e:
        raise ParseError(f"Not a readable PDF: {e}", context=context) from e

    if reader.is_encrypted:
        if not ignore_encryption:
            raise ParseError("PDF is encrypted", context=context)
        try:
            result = reader.decrypt("")
        except Exception as e:
            raise ParseError(f"Unsupported encryption: {e}", context=context) from e
        if result == PasswordType.NOT_DECRYPTED:
            raise ParseError("PDF requires a password", context=context)

    try:
        page_count = len(reader.pages)
    except Exception as e:
        raise ParseError(f"Unreadable page tree: {e}", context=context) from e

    logger.debug("Loaded %s (%d pages)", source.name or "document", page_count)
    return DocumentHandle(source, reader)


async def load(
    data: RawDocumentBytes | BytesLike,
    *,
    ignore_encryption: bool = True,
) -> DocumentHandle:
    """Parse PDF bytes off the event loop. See ``load_sync``."""
    return await asyncio.to_thread(load_sync, data, ignore_encryption=ignore_encryption)
