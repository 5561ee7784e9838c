"""Resize operation for pdfsmith."""

import asyncio
import io
from collections.abc import Iterable
from dataclasses import dataclass

from pypdf import PageObject, PdfReader, PdfWriter, Transformation
from reportlab.pdfgen import canvas

from pdfsmith.constants import ORIENTATIONS, PAGE_SIZES
from pdfsmith.editor._utils import (
    DocumentSource,
    as_handle,
    get_page_dimensions,
    private_reader,
    serialize,
)
from pdfsmith.exceptions import InvalidPageSizeError
from pdfsmith.logging_config import get_logger

logger = get_logger(__name__)

WHITE = (1.0, 1.0, 1.0)


@dataclass(frozen=True)
class PagePlacement:
    """Where an original page lands on a resized page."""

    scale: float
    draw_width: float
    draw_height: float
    offset_x: float
    offset_y: float


def resolve_page_size(name: str, orientation: str = "portrait") -> tuple[float, float]:
    """
    Look up a named page size, case-insensitively.

    Args:
        name: Size key such as "A4" or "letter"
        orientation: "portrait" or "landscape" (swaps width and height)

    Returns:
        (width, height) in points

    Raises:
        InvalidPageSizeError: If the name or orientation is unknown
    """
    sizes = {key.lower(): value for key, value in PAGE_SIZES.items()}
    if name.lower() not in sizes:
        valid = ", ".join(PAGE_SIZES)
        raise InvalidPageSizeError(f"Unknown page size: {name}. Valid sizes: {valid}")
    if orientation not in ORIENTATIONS:
        raise InvalidPageSizeError(
            f"Unknown orientation: {orientation}. Valid options: {', '.join(ORIENTATIONS)}"
        )
    width, height = sizes[name.lower()]
    if orientation == "landscape":
        return height, width
    return width, height


def compute_placement(
    orig_width: float,
    orig_height: float,
    target_width: float,
    target_height: float,
) -> PagePlacement:
    """
    Fit an original page inside a target page without upscaling.

    The scale is ``min(target_w / orig_w, target_h / orig_h, 1)`` so aspect
    ratio is kept and nothing is cropped; the scaled page is centered.
    """
    if target_width <= 0 or target_height <= 0:
        raise InvalidPageSizeError(
            f"Target size must be positive, got {target_width}x{target_height}"
        )
    if orig_width <= 0 or orig_height <= 0:
        raise InvalidPageSizeError(
            f"Page has no area: {orig_width}x{orig_height}",
            context={"width": orig_width, "height": orig_height},
        )

    scale = min(target_width / orig_width, target_height / orig_height, 1.0)
    # Clamp so float rounding never pushes the drawing past the page edge
    draw_width = min(orig_width * scale, target_width)
    draw_height = min(orig_height * scale, target_height)
    return PagePlacement(
        scale=scale,
        draw_width=draw_width,
        draw_height=draw_height,
        offset_x=(target_width - draw_width) / 2,
        offset_y=(target_height - draw_height) / 2,
    )


def _background_pdf(width: float, height: float, color: tuple[float, float, float] = WHITE) -> bytes:
    """Create a one-page PDF of the given size filled with a solid color."""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=(width, height))
    c.setFillColorRGB(*color)
    c.rect(0, 0, width, height, stroke=0, fill=1)
    c.save()
    return buffer.getvalue()


def fit_page(page: PageObject, background: PageObject, width: float, height: float) -> PagePlacement:
    """
    Draw ``page`` onto ``background`` scaled and centered per ``compute_placement``.

    The page's content is shifted so its mediabox origin sits at (0, 0)
    before scaling. ``background`` is modified in place.
    """
    orig_width, orig_height = get_page_dimensions(page)
    placement = compute_placement(orig_width, orig_height, width, height)

    mediabox = page.mediabox
    transform = (
        Transformation()
        .translate(tx=-float(mediabox.left), ty=-float(mediabox.bottom))
        .scale(sx=placement.scale, sy=placement.scale)
        .translate(tx=placement.offset_x, ty=placement.offset_y)
    )
    background.merge_transformed_page(page, transform)
    return placement


def resize_document_pages(
    document: DocumentSource,
    width: float,
    height: float,
    target_indices: Iterable[int] | None = None,
) -> bytes:
    """
    Put pages on a new page size.

    Each targeted page becomes a white page of ``width`` x ``height`` with
    the original content fitted inside it (see ``compute_placement``).
    Other pages are copied unchanged.

    Args:
        document: The source document
        width: Target width in points
        height: Target height in points
        target_indices: 0-indexed pages to resize; all pages when None

    Returns:
        The resized PDF bytes

    Raises:
        InvalidPageSizeError: If the target size is not positive
    """
    if width <= 0 or height <= 0:
        raise InvalidPageSizeError(f"Target size must be positive, got {width}x{height}")

    handle = as_handle(document)
    targets = set(range(handle.page_count)) if target_indices is None else set(target_indices)

    reader = private_reader(handle)
    background_bytes = _background_pdf(width, height)

    writer = PdfWriter()
    resized = 0
    for index, page in enumerate(reader.pages):
        if index in targets:
            # merge_transformed_page must write into a page owned by the writer
            background = writer.add_page(PdfReader(io.BytesIO(background_bytes)).pages[0])
            fit_page(page, background, width, height)
            resized += 1
        else:
            writer.add_page(page)

    logger.debug("Resized %d of %d pages to %.2fx%.2f", resized, handle.page_count, width, height)
    return serialize(writer)


async def resize_pages(
    document: DocumentSource,
    width: float,
    height: float,
    target_indices: Iterable[int] | None = None,
) -> bytes:
    """Async variant of ``resize_document_pages``."""
    targets = None if target_indices is None else set(target_indices)
    return await asyncio.to_thread(resize_document_pages, document, width, height, targets)
