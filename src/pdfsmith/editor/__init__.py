"""Page-tree editing operations.

Each operation has a blocking form that runs in the caller's thread and an
async form that runs it via ``asyncio.to_thread``:

    from pdfsmith.editor import merge, split

    merged = await merge([first, second])
    parts = await split(document, [(0, 0), (1, 2)])

Sources may be DocumentHandles or raw bytes; results are new PDF bytes and
the sources are never modified.
"""

from pdfsmith.editor._utils import DocumentSource, get_page_dimensions
from pdfsmith.editor.delete import delete_document_pages, delete_pages
from pdfsmith.editor.merge import merge, merge_documents
from pdfsmith.editor.reorder import is_permutation, reorder_document_pages, reorder_pages
from pdfsmith.editor.resize import (
    PagePlacement,
    compute_placement,
    fit_page,
    resize_document_pages,
    resize_pages,
    resolve_page_size,
)
from pdfsmith.editor.rotate import normalize_rotation, rotate_document_pages, rotate_pages
from pdfsmith.editor.split import split, split_document

__all__ = [
    "DocumentSource",
    "get_page_dimensions",
    # Async operations
    "merge",
    "split",
    "delete_pages",
    "reorder_pages",
    "rotate_pages",
    "resize_pages",
    # Blocking operations
    "merge_documents",
    "split_document",
    "delete_document_pages",
    "reorder_document_pages",
    "rotate_document_pages",
    "resize_document_pages",
    # Helpers
    "PagePlacement",
    "compute_placement",
    "fit_page",
    "resolve_page_size",
    "normalize_rotation",
    "is_permutation",
]
