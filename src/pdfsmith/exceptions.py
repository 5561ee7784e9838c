"""Unified exception hierarchy for pdfsmith.

All pdfsmith exceptions inherit from PdfSmithError, enabling:
- Catching all pdfsmith errors with `except PdfSmithError`
- Error context preservation via the `context` attribute
- Causality chains via `raise ... from e` patterns
"""

from typing import Any


class PdfSmithError(Exception):
    """Base exception for all pdfsmith errors.

    Args:
        message: Human-readable error description
        context: Optional dict of contextual information (page, range, etc.)
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}

    def __str__(self) -> str:
        base = super().__str__()
        if self.context:
            details = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base} [{details}]"
        return base


class ConfigError(PdfSmithError):
    """Raised when configuration is invalid or cannot be loaded."""


class ParseError(PdfSmithError):
    """Raised when bytes are not a readable PDF (malformed or encrypted)."""


class PageIndexError(PdfSmithError, IndexError):
    """Raised when a page reference is outside the document."""


class InvalidRangeError(PdfSmithError):
    """Raised when a split range is malformed or out of bounds."""


class EmptyInputError(PdfSmithError):
    """Raised when an operation is given too few documents."""


class AllPagesDeletedError(PdfSmithError):
    """Raised when a deletion would leave a document with no pages."""


class InvalidRotationError(PdfSmithError):
    """Raised when a rotation delta is not a multiple of 90 degrees."""


class InvalidPageSizeError(PdfSmithError):
    """Raised when a target page size is unknown or not positive."""


class RenderError(PdfSmithError):
    """Raised when a single page thumbnail cannot be rendered."""


class CompressionFailed(PdfSmithError):
    """Raised when the compression engine fails, crashes, or times out.

    Args:
        reason: Why the compression did not produce output
        context: Optional dict of contextual information
    """

    def __init__(self, reason: str, context: dict[str, Any] | None = None):
        super().__init__(f"Compression failed: {reason}", context)
        self.reason = reason


class BufferDetachedError(PdfSmithError):
    """Raised when a buffer is used after its contents were transferred."""
