"""PDF content extraction for feed display.

Transforms an uploaded document into ordered, renderable content items.

Responsibilities:
    - Page text runs via pypdf, page rendering via PyMuPDF
    - Chunking page text on paragraph and sentence boundaries
    - Dropping blank page renders
    - Assigning synthetic order keys for a stable feed order

Output is a single ExtractionResult: every page, or one user-facing error.
"""

from pdf_feed.parsing.pdf_source import PDFParseError, PdfSource, validate_pdf_bytes
from pdf_feed.parsing.pipeline import (
    EXTRACTION_ERROR_MESSAGE,
    build_timeline,
    extract,
    extract_pdf,
)

__all__ = [
    "EXTRACTION_ERROR_MESSAGE",
    "PDFParseError",
    "PdfSource",
    "build_timeline",
    "extract",
    "extract_pdf",
    "validate_pdf_bytes",
]
