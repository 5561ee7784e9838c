"""Single-use Ghostscript engine with a private scratch filesystem."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from pdfsmith.constants import DEFAULT_COMPATIBILITY_LEVEL, DEFAULT_ENGINE_TIMEOUT, DEFAULT_GHOSTSCRIPT
from pdfsmith.exceptions import CompressionFailed
from pdfsmith.logging_config import get_logger

logger = get_logger(__name__)

# Keep only the tail of Ghostscript's stderr in error messages
STDERR_LIMIT = 400


@dataclass(frozen=True)
class EngineSettings:
    """How to invoke Ghostscript. Sent to worker processes, so it must pickle."""

    executable: str = DEFAULT_GHOSTSCRIPT
    compatibility_level: str = DEFAULT_COMPATIBILITY_LEVEL
    timeout: float | None = DEFAULT_ENGINE_TIMEOUT


class GhostscriptEngine:
    """
    One Ghostscript run, from scratch directory creation to cleanup.

    Virtual paths such as ``/input.pdf`` resolve inside a temporary directory
    owned by this instance. ``run`` may be called once; create a new engine
    for every job.

    Usage:
        with GhostscriptEngine(settings) as engine:
            engine.write_file("/input.pdf", data)
            engine.run([...])
            result = engine.read_file("/output.pdf")
    """

    def __init__(self, settings: EngineSettings | None = None):
        self.settings = settings or EngineSettings()
        self._root: Path | None = Path(tempfile.mkdtemp(prefix="pdfsmith-gs-"))
        self._used = False

    @property
    def root(self) -> Path:
        if self._root is None:
            raise RuntimeError("Engine is closed")
        return self._root

    def path(self, virtual_path: str) -> str:
        """Map a virtual path to a real path under the scratch directory."""
        relative = PurePosixPath(virtual_path.lstrip("/"))
        if not relative.parts or ".." in relative.parts:
            raise ValueError(f"Invalid engine path: {virtual_path}")
        return str(self.root.joinpath(*relative.parts))

    def write_file(self, virtual_path: str, data: bytes) -> None:
        Path(self.path(virtual_path)).write_bytes(data)

    def read_file(self, virtual_path: str) -> bytes:
        target = Path(self.path(virtual_path))
        if not target.exists():
            raise CompressionFailed(f"Engine produced no file at {virtual_path}")
        return target.read_bytes()

    def run(self, argv: list[str]) -> None:
        """
        Invoke Ghostscript once.

        Raises:
            RuntimeError: If this engine has already run
            CompressionFailed: If Ghostscript is missing, times out, or exits non-zero
        """
        if self._used:
            raise RuntimeError("GhostscriptEngine instances are single-use")
        self._used = True

        cmd = [self.settings.executable, *argv]
        logger.debug("Running: %s", " ".join(cmd))
        try:
            completed = subprocess.run(
                cmd,
                cwd=self.root,
                capture_output=True,
                text=True,
                timeout=self.settings.timeout,
            )
        except FileNotFoundError as e:
            raise CompressionFailed(
                f"Ghostscript executable not found: {self.settings.executable}"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise CompressionFailed(f"Ghostscript timed out after {self.settings.timeout}s") from e

        if completed.returncode != 0:
            stderr = (completed.stderr or "").strip()[-STDERR_LIMIT:]
            raise CompressionFailed(
                f"Ghostscript exited with code {completed.returncode}: {stderr}",
                context={"returncode": completed.returncode},
            )

    def close(self) -> None:
        if self._root is not None:
            shutil.rmtree(self._root, ignore_errors=True)
            self._root = None

    def __enter__(self) -> "GhostscriptEngine":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
