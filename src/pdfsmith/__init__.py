"""pdfsmith - Page-level PDF editing: merge, split, rotate, resize, compress."""

import logging

__version__ = "0.1.0"
__all__ = ["__version__"]

# Prevent "No handler found" warnings when used as a library
logging.getLogger("pdfsmith").addHandler(logging.NullHandler())
