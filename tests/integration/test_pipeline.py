"""Integration tests chaining pdfsmith operations on real documents."""

import asyncio
import io
import shutil

import pytest
from pypdf import PdfReader

from pdfsmith.buffers import RawDocumentBytes
from pdfsmith.compression import EngineSettings, compress_pdf
from pdfsmith.document import load
from pdfsmith.editor import (
    delete_pages,
    merge,
    reorder_pages,
    resize_pages,
    resolve_page_size,
    rotate_pages,
    split,
)
from pdfsmith.exceptions import CompressionFailed
from pdfsmith.selector import parse_ranges
from pdfsmith.thumbnails import ThumbnailCache

requires_gs = pytest.mark.skipif(shutil.which("gs") is None, reason="Ghostscript not installed")


def page_info(data: bytes) -> list[tuple[float, int]]:
    reader = PdfReader(io.BytesIO(data))
    return [(float(p.mediabox.width), int(p.rotation) % 360) for p in reader.pages]


@pytest.mark.integration
class TestEditingPipeline:
    """End-to-end editing with real PDF processing."""

    def test_chain_of_edits(self, session_fixtures_dir):
        """Each step consumes the previous step's output."""
        source = RawDocumentBytes.from_path(session_fixtures_dir["multi_page"])

        async def run():
            handle = await load(source)
            trimmed = await delete_pages(handle, {0, 5})
            reordered = await reorder_pages(trimmed, [3, 2, 1, 0])
            return await rotate_pages(reordered, {0: 90, 3: -90})

        result = asyncio.run(run())
        assert page_info(result) == [(500.0, 90), (400.0, 0), (300.0, 0), (200.0, 270)]
        assert source.data == session_fixtures_dir["multi_page"].read_bytes()

    def test_split_merge_round_trip(self, session_fixtures_dir):
        data = session_fixtures_dir["multi_page"].read_bytes()

        async def run():
            handle = await load(data)
            parts = await split(handle, parse_ranges("1-2, 3, 4-6", handle.page_count))
            return await merge(parts)

        assert page_info(asyncio.run(run())) == page_info(data)

    def test_resize_then_render(self, session_fixtures_dir):
        pytest.importorskip("pypdfium2")
        data = session_fixtures_dir["landscape"].read_bytes()
        width, height = resolve_page_size("A4")

        async def run():
            resized = RawDocumentBytes(await resize_pages(data, width, height))
            cache = ThumbnailCache()
            return await cache.render_page_thumbnail(resized, 1, scale=0.5)

        assert asyncio.run(run()).startswith("data:image/png;base64,")


@pytest.mark.integration
class TestCompressionPipeline:
    """Compression through a real worker process."""

    @requires_gs
    def test_compress_real_document(self, session_fixtures_dir):
        source = RawDocumentBytes.from_path(session_fixtures_dir["multi_page"])
        result = asyncio.run(compress_pdf(source, "screen", settings=EngineSettings(timeout=120)))

        assert result.startswith(b"%PDF")
        assert len(PdfReader(io.BytesIO(result)).pages) == 6
        assert not source.detached

    def test_missing_executable(self, session_fixtures_dir):
        source = RawDocumentBytes.from_path(session_fixtures_dir["sample"])
        settings = EngineSettings(executable="pdfsmith-no-such-gs", timeout=30)
        with pytest.raises(CompressionFailed, match="not found"):
            asyncio.run(compress_pdf(source, settings=settings))
