"""Caller side of the compression protocol."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import Protocol

from pdfsmith.buffers import BytesLike, RawDocumentBytes
from pdfsmith.compression.engine import EngineSettings
from pdfsmith.compression.protocol import (
    CompressionRequest,
    CompressionResponse,
    new_request_id,
    validate_quality,
)
from pdfsmith.compression.worker import CompressionWorker
from pdfsmith.constants import DEFAULT_QUALITY
from pdfsmith.exceptions import CompressionFailed
from pdfsmith.logging_config import get_logger

logger = get_logger(__name__)

# Seconds added to the engine timeout for worker startup and buffer transfer
WORKER_STARTUP_ALLOWANCE = 30.0


class Worker(Protocol):
    def start(self) -> None: ...

    def post(self, request: CompressionRequest) -> None: ...

    def receive(self, timeout: float | None = None) -> CompressionResponse: ...

    def terminate(self) -> None: ...


WorkerFactory = Callable[[], Worker]


def await_reply(worker: Worker, request_id: str, timeout: float | None = None) -> bytes:
    """
    Block until the reply for ``request_id`` arrives.

    Replies carrying any other id belong to a superseded job and are
    skipped.

    Raises:
        CompressionFailed: If the reply is an error, empty, or never arrives
    """
    deadline = None if timeout is None else time.monotonic() + timeout
    while True:
        remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
        response = worker.receive(remaining)
        if response.id != request_id:
            logger.warning("Ignoring reply for stale compression request %s", response.id)
            continue
        if response.error is not None:
            raise CompressionFailed(response.error, context={"request_id": request_id})
        if not response.result:
            raise CompressionFailed("Engine produced an empty file", context={"request_id": request_id})
        return bytes(response.result)


def run_job(
    worker: Worker,
    request: CompressionRequest,
    timeout: float | None = None,
) -> bytes:
    """Start ``worker``, send one request, wait for its reply, then tear the worker down."""
    try:
        worker.start()
        worker.post(request)
        return await_reply(worker, request.id, timeout)
    finally:
        worker.terminate()


async def compress_pdf(
    data: RawDocumentBytes | BytesLike,
    quality: str = DEFAULT_QUALITY,
    *,
    settings: EngineSettings | None = None,
    start_method: str = "spawn",
    worker_factory: WorkerFactory | None = None,
) -> bytes:
    """
    Compress a PDF with Ghostscript in a dedicated worker process.

    The caller's buffer is never handed to the worker: a duplicate is taken
    and its contents transferred, so ``data`` stays valid for other users.
    Cancelling the awaiting task abandons the request and kills the worker.

    Args:
        data: The PDF to compress
        quality: Ghostscript preset: screen, ebook, printer or prepress
        settings: Engine settings (executable, compatibility level, timeout)
        start_method: multiprocessing start method for the worker
        worker_factory: Creates the worker; defaults to a CompressionWorker

    Returns:
        The compressed PDF bytes

    Raises:
        ConfigError: If ``quality`` is not a known preset
        CompressionFailed: If the engine fails, the worker dies, or it times out
    """
    validate_quality(quality)
    settings = settings or EngineSettings()
    source = RawDocumentBytes.coerce(data)

    request = CompressionRequest(
        id=new_request_id(),
        payload=source.duplicate().transfer(),
        quality=quality,
    )
    if worker_factory is None:
        worker = CompressionWorker(settings, start_method=start_method)
    else:
        worker = worker_factory()

    logger.debug("Compressing %d bytes at %s quality (request %s)", len(request.payload), quality, request.id)
    timeout = None if settings.timeout is None else settings.timeout + WORKER_STARTUP_ALLOWANCE
    try:
        return await asyncio.to_thread(run_job, worker, request, timeout)
    except asyncio.CancelledError:
        worker.terminate()
        raise
