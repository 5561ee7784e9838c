"""Command-line interface for pdfsmith."""

import argparse
import asyncio
import sys
from pathlib import Path

from pdfsmith import __version__
from pdfsmith.buffers import RawDocumentBytes
from pdfsmith.config import Config, load_config
from pdfsmith.constants import (
    ORIENTATIONS,
    PAGE_SIZES,
    QUALITY_PRESETS,
    SUFFIX_COMPRESS,
    SUFFIX_DELETE,
    SUFFIX_MERGE,
    SUFFIX_REORDER,
    SUFFIX_ROTATE,
)
from pdfsmith.document import DocumentHandle, load
from pdfsmith.exceptions import ConfigError, PdfSmithError
from pdfsmith.logging_config import get_logger, setup_logging
from pdfsmith.output import (
    CompressionReport,
    format_file_size,
    output_filename,
    save_outputs,
    size_suffix,
    split_filenames,
)

logger = get_logger(__name__)


async def _load_file(path: Path, config: Config) -> DocumentHandle:
    return await load(
        RawDocumentBytes.from_path(path),
        ignore_encryption=config.settings.ignore_encryption,
    )


def _output_dir(parsed: argparse.Namespace, config: Config) -> Path:
    return parsed.output_dir or config.settings.output_dir


def _save_one(data: bytes, name: str, parsed: argparse.Namespace, config: Config) -> int:
    save_outputs([data], [name], _output_dir(parsed, config))
    return 0


# ============================================================================
# Subcommands
# ============================================================================


async def cmd_info(parsed: argparse.Namespace, config: Config) -> int:
    """Print page count and size for each file."""
    for path in parsed.files:
        handle = await _load_file(path, config)
        logger.info(
            "%s: %d page(s), %s",
            path.name,
            handle.page_count,
            format_file_size(handle.source.size),
        )
        if parsed.pages:
            for i in range(handle.page_count):
                width, height = handle.page_size(i)
                logger.info(
                    "  Page %d: %.1f x %.1f pt, rotation %d",
                    i + 1,
                    width,
                    height,
                    handle.page_rotation(i),
                )
    return 0


async def cmd_merge(parsed: argparse.Namespace, config: Config) -> int:
    from pdfsmith.editor import merge

    handles = [await _load_file(path, config) for path in parsed.files]
    result = await merge(handles)
    name = parsed.output or output_filename(parsed.files[0].name, SUFFIX_MERGE)
    logger.info("Merged %d files", len(handles))
    return _save_one(result, name, parsed, config)


async def cmd_split(parsed: argparse.Namespace, config: Config) -> int:
    from pdfsmith.editor import split
    from pdfsmith.selector import each_page_ranges, parse_ranges

    handle = await _load_file(parsed.file, config)
    if parsed.ranges:
        ranges = parse_ranges(parsed.ranges, handle.page_count)
    else:
        ranges = each_page_ranges(handle.page_count)

    results = await split(handle, ranges)
    names = split_filenames(parsed.file.name, len(results))
    save_outputs(results, names, _output_dir(parsed, config))
    logger.info("Split into %d file(s)", len(results))
    return 0


async def cmd_delete(parsed: argparse.Namespace, config: Config) -> int:
    from pdfsmith.editor import delete_pages
    from pdfsmith.selector import parse_page_list

    handle = await _load_file(parsed.file, config)
    indices = parse_page_list(parsed.pages, handle.page_count)
    result = await delete_pages(handle, indices)
    logger.info("Deleted %d page(s)", len(set(indices)))
    return _save_one(result, output_filename(parsed.file.name, SUFFIX_DELETE), parsed, config)


async def cmd_reorder(parsed: argparse.Namespace, config: Config) -> int:
    from pdfsmith.editor import reorder_pages
    from pdfsmith.selector import parse_page_list

    handle = await _load_file(parsed.file, config)
    if parsed.reverse:
        order = list(range(handle.page_count - 1, -1, -1))
    else:
        order = parse_page_list(parsed.order, handle.page_count)
    result = await reorder_pages(handle, order)
    return _save_one(result, output_filename(parsed.file.name, SUFFIX_REORDER), parsed, config)


async def cmd_rotate(parsed: argparse.Namespace, config: Config) -> int:
    from pdfsmith.editor import rotate_pages
    from pdfsmith.selector import parse_page_list

    handle = await _load_file(parsed.file, config)
    if parsed.pages:
        indices = parse_page_list(parsed.pages, handle.page_count)
    else:
        indices = range(handle.page_count)
    result = await rotate_pages(handle, {i: parsed.angle for i in indices})
    return _save_one(result, output_filename(parsed.file.name, SUFFIX_ROTATE), parsed, config)


async def cmd_resize(parsed: argparse.Namespace, config: Config) -> int:
    from pdfsmith.editor import resize_pages, resolve_page_size
    from pdfsmith.selector import parse_page_list

    size = parsed.size or config.resize.size
    orientation = parsed.orientation or config.resize.orientation.value
    width, height = resolve_page_size(size, orientation)

    handle = await _load_file(parsed.file, config)
    targets = parse_page_list(parsed.pages, handle.page_count) if parsed.pages else None
    result = await resize_pages(handle, width, height, targets)
    logger.info("Resized to %s %s (%.1f x %.1f pt)", size, orientation, width, height)
    return _save_one(result, output_filename(parsed.file.name, size_suffix(size)), parsed, config)


async def cmd_compress(parsed: argparse.Namespace, config: Config) -> int:
    from pdfsmith.compression import compress_pdf

    source = RawDocumentBytes.from_path(parsed.file)
    quality = parsed.quality or config.engine.quality.value
    result = await compress_pdf(
        source,
        quality,
        settings=config.engine.to_settings(),
        start_method=config.engine.start_method.value,
    )
    report = CompressionReport(source.size, len(result))
    logger.info("%s: %s", parsed.file.name, report.describe())
    return _save_one(result, output_filename(parsed.file.name, SUFFIX_COMPRESS), parsed, config)


async def cmd_thumbnail(parsed: argparse.Namespace, config: Config) -> int:
    from pdfsmith.thumbnails import default_cache

    source = RawDocumentBytes.from_path(parsed.file)
    scale = parsed.scale or config.thumbnails.scale
    view = await default_cache().get_render_view(source)
    png = await asyncio.to_thread(view.render_png, parsed.page, scale)

    target = parsed.output
    if target is None:
        target = _output_dir(parsed, config) / f"{parsed.file.stem}_page{parsed.page}.png"
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(png)
    logger.info("Saved: %s", target)
    return 0


COMMANDS = {
    "info": cmd_info,
    "merge": cmd_merge,
    "split": cmd_split,
    "delete": cmd_delete,
    "reorder": cmd_reorder,
    "rotate": cmd_rotate,
    "resize": cmd_resize,
    "compress": cmd_compress,
    "thumbnail": cmd_thumbnail,
}


# ============================================================================
# Parser
# ============================================================================


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pdfsmith",
        description="Merge, split, rearrange, resize, compress and preview PDF files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pdfsmith info report.pdf --pages              Show page sizes and rotation
  pdfsmith merge a.pdf b.pdf -o combined.pdf    Merge into one file
  pdfsmith split report.pdf --ranges "1-3, 5"   Split by page ranges
  pdfsmith rotate scan.pdf --angle -90          Rotate every page left
  pdfsmith resize scan.pdf --size Letter        Fit pages onto Letter
  pdfsmith compress big.pdf --quality screen    Compress with Ghostscript
  pdfsmith -d ./out delete report.pdf --pages 2 Write results to ./out

Page numbers are 1-indexed.
""",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "-d",
        "--output-dir",
        type=Path,
        help="Output directory (overrides config)",
    )

    # Logging options
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for verbose, -vv for debug)",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress all output except errors",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Write logs to file (includes all levels)",
    )

    sub = parser.add_subparsers(dest="command", metavar="command")

    p = sub.add_parser("info", help="Show page count, file size and page details")
    p.add_argument("files", type=Path, nargs="+", help="PDF files")
    p.add_argument("-p", "--pages", action="store_true", help="List every page's size and rotation")

    p = sub.add_parser("merge", help="Concatenate PDFs in order")
    p.add_argument("files", type=Path, nargs="+", help="PDF files, at least two")
    p.add_argument("-o", "--output", help="Output file name (default: <first>_merged.pdf)")

    p = sub.add_parser("split", help="Split into one file per range")
    p.add_argument("file", type=Path, help="PDF file")
    p.add_argument("--ranges", help='Ranges such as "1-3, 5, 8-10" (default: one file per page)')

    p = sub.add_parser("delete", help="Remove pages")
    p.add_argument("file", type=Path, help="PDF file")
    p.add_argument("--pages", required=True, help='Pages to delete, e.g. "2, 4-5"')

    p = sub.add_parser("reorder", help="Rearrange pages")
    p.add_argument("file", type=Path, help="PDF file")
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument("--order", help='New page order, e.g. "3,1,2"')
    group.add_argument("--reverse", action="store_true", help="Reverse the page order")

    p = sub.add_parser("rotate", help="Rotate pages by a multiple of 90 degrees")
    p.add_argument("file", type=Path, help="PDF file")
    p.add_argument("--angle", type=int, required=True, help="Degrees clockwise; negative rotates left")
    p.add_argument("--pages", help="Pages to rotate (default: all)")

    p = sub.add_parser("resize", help="Fit pages onto a standard page size")
    p.add_argument("file", type=Path, help="PDF file")
    p.add_argument("--size", choices=list(PAGE_SIZES), help="Target size (default from config)")
    p.add_argument("--orientation", choices=ORIENTATIONS, help="Target orientation")
    p.add_argument("--pages", help="Pages to resize (default: all)")

    p = sub.add_parser("compress", help="Compress with Ghostscript")
    p.add_argument("file", type=Path, help="PDF file")
    p.add_argument("--quality", choices=QUALITY_PRESETS, help="Quality preset (default: ebook)")

    p = sub.add_parser("thumbnail", help="Render one page as PNG")
    p.add_argument("file", type=Path, help="PDF file")
    p.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    p.add_argument("--scale", type=float, help="Zoom factor, 1.0 is 72 dpi")
    p.add_argument("-o", "--output", type=Path, help="PNG file to write")

    return parser


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    setup_logging(
        verbosity=parsed.verbose,
        quiet=parsed.quiet,
        log_file=parsed.log_file,
    )

    if parsed.version:
        logger.info("pdfsmith %s", __version__)
        return 0

    if not parsed.command:
        parser.print_help()
        return 1

    try:
        config = load_config(parsed.config) if parsed.config else Config()
        return asyncio.run(COMMANDS[parsed.command](parsed, config))
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1
    except FileNotFoundError as e:
        logger.error("File not found: %s", e)
        return 1
    except PdfSmithError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
