"""Rotate operation for pdfsmith."""

import asyncio
from collections.abc import Mapping

from pypdf import PdfWriter

from pdfsmith.constants import ROTATION_STEP
from pdfsmith.editor._utils import DocumentSource, as_handle, serialize
from pdfsmith.exceptions import InvalidRotationError
from pdfsmith.logging_config import get_logger

logger = get_logger(__name__)


def normalize_rotation(delta: int) -> int:
    """
    Normalize a rotation delta to [0, 360).

    Negative deltas rotate counter-clockwise, so -90 becomes 270.

    Raises:
        InvalidRotationError: If the delta is not a multiple of 90
    """
    if isinstance(delta, bool) or int(delta) != delta or int(delta) % ROTATION_STEP:
        raise InvalidRotationError(
            f"Rotation must be a multiple of {ROTATION_STEP} degrees, got {delta}",
            context={"angle": delta},
        )
    return int(delta) % 360


def rotate_document_pages(document: DocumentSource, rotations: Mapping[int, int]) -> bytes:
    """
    Add rotation deltas to individual pages.

    Rotation is additive: a page at 90 rotated by 180 ends at 270. Pages
    not in ``rotations`` keep their rotation, and indices outside the
    document are ignored. Everything else in the document (metadata,
    outlines, links) is carried over.

    Args:
        document: The source document
        rotations: Map of 0-indexed page to rotation delta in degrees

    Returns:
        The rotated PDF bytes

    Raises:
        InvalidRotationError: If any delta is not a multiple of 90
    """
    handle = as_handle(document)
    deltas = {index: normalize_rotation(delta) for index, delta in rotations.items()}

    writer = PdfWriter(clone_from=handle.reader)
    rotated = 0
    for index, delta in deltas.items():
        if not 0 <= index < handle.page_count:
            continue
        current = handle.page_rotation(index)
        writer.pages[index].rotation = (current + delta) % 360
        rotated += 1

    logger.debug("Rotated %d of %d pages", rotated, handle.page_count)
    return serialize(writer)


async def rotate_pages(document: DocumentSource, rotations: Mapping[int, int]) -> bytes:
    """Async variant of ``rotate_document_pages``."""
    return await asyncio.to_thread(rotate_document_pages, document, dict(rotations))
