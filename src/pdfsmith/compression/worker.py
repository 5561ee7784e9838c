"""One-shot compression worker process.

A worker handles exactly one request: it receives a CompressionRequest over
a pipe, runs a fresh GhostscriptEngine, sends back one CompressionResponse
and exits. Ghostscript state is never reused between jobs; parallel
compressions use separate workers.
"""

from __future__ import annotations

import multiprocessing
from multiprocessing.connection import Connection

from pdfsmith.compression.engine import EngineSettings, GhostscriptEngine
from pdfsmith.compression.protocol import (
    INPUT_PATH,
    OUTPUT_PATH,
    CompressionRequest,
    CompressionResponse,
    build_arguments,
)
from pdfsmith.exceptions import CompressionFailed
from pdfsmith.logging_config import get_logger

logger = get_logger(__name__)

# Seconds to wait for a terminated worker before killing it
TERMINATE_GRACE = 2.0


def handle_request(request: CompressionRequest, settings: EngineSettings) -> CompressionResponse:
    """Run one request through a new engine and build the reply."""
    try:
        with GhostscriptEngine(settings) as engine:
            engine.write_file(INPUT_PATH, request.payload)
            engine.run(
                build_arguments(
                    request.quality,
                    engine.path(INPUT_PATH),
                    engine.path(OUTPUT_PATH),
                    settings.compatibility_level,
                )
            )
            result = engine.read_file(OUTPUT_PATH)
    except CompressionFailed as e:
        return CompressionResponse(id=request.id, error=e.reason)
    except Exception as e:
        return CompressionResponse(id=request.id, error=str(e))
    return CompressionResponse(id=request.id, result=result)


def serve_one(conn: Connection, settings: EngineSettings) -> None:
    """Worker process entry point."""
    try:
        request = conn.recv()
    except EOFError:
        return
    try:
        conn.send(handle_request(request, settings))
    finally:
        conn.close()


class CompressionWorker:
    """Caller-side handle on one worker process.

    Args:
        settings: Engine settings passed to the worker
        start_method: multiprocessing start method ("spawn", "forkserver", "fork")
    """

    def __init__(self, settings: EngineSettings | None = None, start_method: str = "spawn"):
        ctx = multiprocessing.get_context(start_method)
        self._conn, self._child_conn = ctx.Pipe()
        self._process = ctx.Process(
            target=serve_one,
            args=(self._child_conn, settings or EngineSettings()),
            name="pdfsmith-compress",
            daemon=True,
        )

    @property
    def pid(self) -> int | None:
        return self._process.pid

    def start(self) -> None:
        self._process.start()
        # Drop our copy of the child end so a dead worker reads as EOF
        self._child_conn.close()
        logger.debug("Started compression worker pid=%s", self._process.pid)

    def is_alive(self) -> bool:
        return self._process.is_alive()

    def post(self, request: CompressionRequest) -> None:
        """
        Send the request to the worker.

        Raises:
            CompressionFailed: If the worker exited before taking the request
        """
        try:
            self._conn.send(request)
        except (EOFError, OSError) as e:
            self._process.join(TERMINATE_GRACE)
            raise CompressionFailed(
                f"Worker exited before receiving the request (exit code {self._process.exitcode})",
                context={"pid": self._process.pid},
            ) from e

    def receive(self, timeout: float | None = None) -> CompressionResponse:
        """
        Wait for the worker's reply.

        Raises:
            CompressionFailed: On timeout or if the worker died without replying
        """
        try:
            if not self._conn.poll(timeout):
                raise CompressionFailed(f"No reply from worker within {timeout}s")
            return self._conn.recv()
        except (EOFError, OSError) as e:
            self._process.join(TERMINATE_GRACE)
            raise CompressionFailed(
                f"Worker exited without replying (exit code {self._process.exitcode})",
                context={"pid": self._process.pid},
            ) from e

    def terminate(self) -> None:
        """Stop the worker if it is still running and release the pipe."""
        if self.is_alive():
            self._process.terminate()
            self._process.join(TERMINATE_GRACE)
            if self._process.is_alive():
                self._process.kill()
                self._process.join()
        self._conn.close()
        logger.debug("Tore down compression worker pid=%s", self._process.pid)
