"""Centralized constants for pdfsmith."""

# Standard page sizes in points (portrait width, height)
PAGE_SIZES: dict[str, tuple[float, float]] = {
    "A3": (841.89, 1190.55),
    "A4": (595.28, 841.89),
    "A5": (419.53, 595.28),
    "Letter": (612.0, 792.0),
    "Legal": (612.0, 1008.0),
    "Tabloid": (792.0, 1224.0),
}

ORIENTATIONS = ("portrait", "landscape")

# Ghostscript PDFSETTINGS presets, most to least aggressive
QUALITY_PRESETS = ("screen", "ebook", "printer", "prepress")
DEFAULT_QUALITY = "ebook"

DEFAULT_COMPATIBILITY_LEVEL = "1.5"
DEFAULT_GHOSTSCRIPT = "gs"

# Seconds a single Ghostscript run may take
DEFAULT_ENGINE_TIMEOUT = 300.0

# Rotation is stored in /Rotate and must be a multiple of 90
ROTATION_STEP = 90

# Thumbnail scale relative to 72 dpi
DEFAULT_THUMBNAIL_SCALE = 0.4

# Output filename suffixes per operation
SUFFIX_COMPRESS = "_optimized"
SUFFIX_DELETE = "_edited"
SUFFIX_REORDER = "_reordered"
SUFFIX_ROTATE = "_rotated"
SUFFIX_MERGE = "_merged"
SUFFIX_SPLIT_SINGLE = "_split"
SUFFIX_SPLIT_PART = "_part{n}"
