"""Thumbnail rendering with a per-buffer cache of parsed documents.

Parsing a PDF for rasterization is the expensive step, so the parsed
document is cached per RawDocumentBytes object and reused for every page
thumbnail. The cache is a ``weakref.WeakKeyDictionary``: an entry lives
exactly as long as its buffer and never keeps the buffer alive.

pypdfium2 keeps a reference to the bytes it is given for the lifetime of the
document, so the cache always hands it a private duplicate rather than the
caller's buffer.
"""

from __future__ import annotations

import asyncio
import base64
import io
import threading
import weakref
from collections.abc import Callable

from pdfsmith.buffers import RawDocumentBytes
from pdfsmith.constants import DEFAULT_THUMBNAIL_SCALE
from pdfsmith.exceptions import RenderError
from pdfsmith.logging_config import get_logger

logger = get_logger(__name__)

# PDFium is not thread-safe; all calls into it go through this lock
_PDFIUM_LOCK = threading.Lock()


class RenderableDocument:
    """A document parsed for rasterization."""

    def __init__(self, pdf, name: str | None = None):
        self._pdf = pdf
        self.name = name

    @property
    def page_count(self) -> int:
        with _PDFIUM_LOCK:
            return len(self._pdf)

    def render_png(self, page_num: int, scale: float) -> bytes:
        """
        Rasterize one page to PNG bytes.

        Args:
            page_num: 1-indexed page number
            scale: Zoom factor, 1.0 renders at 72 dpi

        Raises:
            RenderError: If the page does not exist or cannot be rasterized
        """
        count = self.page_count
        if not 1 <= page_num <= count:
            raise RenderError(
                f"Page {page_num} is out of range for {count} page PDF",
                context={"page": page_num, "page_count": count},
            )
        if scale <= 0:
            raise RenderError(f"Scale must be positive, got {scale}", context={"page": page_num})

        try:
            with _PDFIUM_LOCK:
                page = self._pdf[page_num - 1]
                try:
                    image = page.render(scale=scale).to_pil()
                finally:
                    page.close()
        except Exception as e:
            raise RenderError(f"Failed to render page {page_num}: {e}", context={"page": page_num}) from e

        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()


def open_render_view(payload: bytes, name: str | None = None) -> RenderableDocument:
    """
    Parse PDF bytes with pypdfium2.

    ``payload`` is retained by the returned document and must not be shared
    with anyone else.

    Raises:
        RenderError: If pypdfium2 cannot open the bytes
    """
    import pypdfium2 as pdfium

    try:
        with _PDFIUM_LOCK:
            pdf = pdfium.PdfDocument(payload)
    except Exception as e:
        raise RenderError(f"Cannot open document for rendering: {e}") from e
    return RenderableDocument(pdf, name=name)


def to_data_url(png: bytes) -> str:
    """Encode PNG bytes as a ``data:`` URL."""
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


class ThumbnailCache:
    """Caches parsed documents per buffer object.

    Lookups are by object identity: the same RawDocumentBytes always gets
    the same parsed view, while an equal-but-distinct buffer is parsed on
    its own.

    Args:
        opener: Parses a private copy of the bytes into a RenderableDocument.
            Defaults to ``open_render_view``.
    """

    def __init__(self, opener: Callable[[bytes, str | None], RenderableDocument] | None = None):
        self._opener = opener or open_render_view
        self._entries: weakref.WeakKeyDictionary[RawDocumentBytes, RenderableDocument | asyncio.Future] = (
            weakref.WeakKeyDictionary()
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, data: RawDocumentBytes) -> bool:
        return data in self._entries

    async def get_render_view(self, data: RawDocumentBytes) -> RenderableDocument:
        """
        Return the parsed view for ``data``, parsing it on first use.

        Concurrent first calls for one buffer share a single parse. A failed
        parse is not cached.

        Raises:
            TypeError: If ``data`` is not a RawDocumentBytes
            RenderError: If the document cannot be opened
        """
        if not isinstance(data, RawDocumentBytes):
            raise TypeError(
                f"Thumbnail cache is keyed by buffer identity; expected RawDocumentBytes, "
                f"got {type(data).__name__}"
            )

        entry = self._entries.get(data)
        if isinstance(entry, RenderableDocument):
            logger.debug("Render view cache hit for %r", data)
            return entry

        if entry is None:
            logger.debug("Render view cache miss for %r", data)
            payload = data.duplicate().transfer()
            entry = asyncio.ensure_future(asyncio.to_thread(self._opener, payload, data.name))
            self._entries[data] = entry

        try:
            view = await asyncio.shield(entry)
        except Exception:
            if self._entries.get(data) is entry:
                del self._entries[data]
            raise

        self._entries[data] = view
        return view

    async def render_page_thumbnail(
        self,
        data: RawDocumentBytes,
        page_num: int,
        scale: float = DEFAULT_THUMBNAIL_SCALE,
    ) -> str:
        """
        Render one page as a PNG data URL.

        Args:
            data: The document's buffer (never modified or detached)
            page_num: 1-indexed page number
            scale: Zoom factor, 1.0 renders at 72 dpi

        Returns:
            A ``data:image/png;base64,...`` URL

        Raises:
            RenderError: For this page only; the cached view stays usable
        """
        view = await self.get_render_view(data)
        png = await asyncio.to_thread(view.render_png, page_num, scale)
        return to_data_url(png)

    def clear(self) -> None:
        self._entries.clear()


_default_cache = ThumbnailCache()


def default_cache() -> ThumbnailCache:
    return _default_cache


async def get_render_view(data: RawDocumentBytes) -> RenderableDocument:
    """``ThumbnailCache.get_render_view`` on the shared default cache."""
    return await _default_cache.get_render_view(data)


async def render_page_thumbnail(
    data: RawDocumentBytes,
    page_num: int,
    scale: float = DEFAULT_THUMBNAIL_SCALE,
) -> str:
    """``ThumbnailCache.render_page_thumbnail`` on the shared default cache."""
    return await _default_cache.render_page_thumbnail(data, page_num, scale)
