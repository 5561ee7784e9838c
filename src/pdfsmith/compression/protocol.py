"""Messages exchanged with a compression worker."""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from pdfsmith.constants import DEFAULT_COMPATIBILITY_LEVEL, QUALITY_PRESETS
from pdfsmith.exceptions import ConfigError

# Paths inside the engine's private filesystem
INPUT_PATH = "/input.pdf"
OUTPUT_PATH = "/output.pdf"


@dataclass
class CompressionRequest:
    """One compression job. ``payload`` is owned by whoever holds the request."""

    id: str
    payload: bytes
    quality: str


@dataclass
class CompressionResponse:
    """Worker reply: exactly one of ``result`` or ``error`` is set."""

    id: str
    result: bytes | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def new_request_id() -> str:
    return uuid.uuid4().hex


def validate_quality(quality: str) -> str:
    """
    Check a quality preset name.

    Raises:
        ConfigError: If the preset is not one of screen, ebook, printer, prepress
    """
    if quality not in QUALITY_PRESETS:
        valid = ", ".join(QUALITY_PRESETS)
        raise ConfigError(
            f"Invalid quality preset '{quality}'. Valid values are: {valid}",
            context={"quality": quality},
        )
    return quality


def build_arguments(
    quality: str,
    input_path: str,
    output_path: str,
    compatibility_level: str = DEFAULT_COMPATIBILITY_LEVEL,
) -> list[str]:
    """Ghostscript argv (without the executable) for a pdfwrite pass."""
    validate_quality(quality)
    return [
        "-sDEVICE=pdfwrite",
        f"-dCompatibilityLevel={compatibility_level}",
        "-dNOPAUSE",
        "-dBATCH",
        "-dQUIET",
        f"-dPDFSETTINGS=/{quality}",
        f"-sOutputFile={output_path}",
        input_path,
    ]
