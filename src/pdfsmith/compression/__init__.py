"""Ghostscript compression in isolated, single-use worker processes."""

from pdfsmith.compression.client import await_reply, compress_pdf, run_job
from pdfsmith.compression.engine import EngineSettings, GhostscriptEngine
from pdfsmith.compression.protocol import (
    CompressionRequest,
    CompressionResponse,
    build_arguments,
    new_request_id,
    validate_quality,
)
from pdfsmith.compression.worker import CompressionWorker, handle_request, serve_one

__all__ = [
    "compress_pdf",
    "await_reply",
    "run_job",
    "EngineSettings",
    "GhostscriptEngine",
    "CompressionRequest",
    "CompressionResponse",
    "CompressionWorker",
    "build_arguments",
    "handle_request",
    "new_request_id",
    "serve_one",
    "validate_quality",
]
