"""Shared fixtures for pdfsmith tests."""

import io
import logging
import shutil
import tempfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml
from pypdf import PdfReader, PdfWriter

from pdfsmith.buffers import RawDocumentBytes


def build_pdf(sizes, rotations=None) -> bytes:
    """Build a PDF with one blank page per (width, height) in ``sizes``."""
    writer = PdfWriter()
    for i, (width, height) in enumerate(sizes):
        page = writer.add_blank_page(width=width, height=height)
        if rotations and rotations.get(i):
            page.rotation = rotations[i]
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def page_widths(data: bytes) -> list[float]:
    """Mediabox widths of every page, used to identify pages by origin."""
    reader = PdfReader(io.BytesIO(data))
    return [float(page.mediabox.width) for page in reader.pages]


# Pages are told apart by width: page i is (100 * (i + 1)) points wide
def numbered_sizes(count: int) -> list[tuple[float, float]]:
    return [(100.0 * (i + 1), 500.0) for i in range(count)]


# === Logging ===

@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging so streams do not leak between tests."""
    yield
    logger = logging.getLogger("pdfsmith")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)


# === Path/Directory Fixtures ===

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


# === PDF Fixtures ===

@pytest.fixture
def pdf_factory():
    """Return a builder for PDFs with the given page sizes."""
    return build_pdf


@pytest.fixture
def widths():
    """Return a helper reading page widths from PDF bytes."""
    return page_widths


@pytest.fixture
def five_page_pdf():
    """Five pages, 100..500 points wide."""
    return build_pdf(numbered_sizes(5))


@pytest.fixture
def two_page_pdf():
    """Two pages, 100 and 200 points wide."""
    return build_pdf(numbered_sizes(2))


@pytest.fixture
def letter_pdf():
    """A single Letter page."""
    return build_pdf([(612, 792)])


@pytest.fixture
def five_page_buffer(five_page_pdf):
    return RawDocumentBytes(five_page_pdf, name="five.pdf")


@pytest.fixture
def temp_pdf(temp_dir):
    """Write a 3-page PDF to disk."""
    pdf_path = temp_dir / "test.pdf"
    pdf_path.write_bytes(build_pdf(numbered_sizes(3)))
    return pdf_path


@pytest.fixture
def encrypted_pdf():
    """One page encrypted with an empty user password."""
    writer = PdfWriter()
    writer.add_blank_page(width=300, height=300)
    writer.encrypt(user_password="", owner_password="owner")
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture
def password_pdf():
    """One page that needs a user password to open."""
    writer = PdfWriter()
    writer.add_blank_page(width=300, height=300)
    writer.encrypt(user_password="secret", owner_password="owner")
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


# === Mock pypdf PageObject Fixtures ===

@pytest.fixture
def mock_page():
    """Create a mock pypdf PageObject (portrait letter size)."""
    page = MagicMock()
    mediabox = MagicMock()
    mediabox.width = 612.0
    mediabox.height = 792.0
    page.mediabox = mediabox
    return page


# === Config Fixtures ===

@pytest.fixture
def full_config_dict():
    """Configuration dictionary with every section."""
    return {
        "version": 1,
        "settings": {
            "ignore_encryption": False,
            "output_dir": "./results",
        },
        "engine": {
            "ghostscript": "/usr/local/bin/gs",
            "compatibility_level": "1.4",
            "quality": "screen",
            "timeout": 60,
            "start_method": "forkserver",
        },
        "thumbnails": {"scale": 0.5},
        "resize": {"size": "letter", "orientation": "landscape"},
    }


@pytest.fixture
def full_config_file(temp_dir, full_config_dict):
    """Create a temporary full config file."""
    config_path = temp_dir / "config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(full_config_dict, f)
    return config_path


# === Mock subprocess ===

@pytest.fixture
def mock_subprocess_run():
    """Mock subprocess.run for Ghostscript calls."""
    with patch("pdfsmith.compression.engine.subprocess.run") as mock_run:
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        yield mock_run


# === Session-scoped PDF fixtures for integration tests ===

@pytest.fixture(scope="session")
def session_fixtures_dir(tmp_path_factory):
    """Create fixture PDFs for the entire test session."""
    fixtures = tmp_path_factory.mktemp("fixtures")

    sample = fixtures / "sample.pdf"
    sample.write_bytes(build_pdf([(612, 792)]))

    multi = fixtures / "multi_page.pdf"
    multi.write_bytes(build_pdf(numbered_sizes(6)))

    landscape = fixtures / "landscape.pdf"
    landscape.write_bytes(build_pdf([(792, 612)]))

    return {
        "sample": sample,
        "multi_page": multi,
        "landscape": landscape,
        "dir": fixtures,
    }
