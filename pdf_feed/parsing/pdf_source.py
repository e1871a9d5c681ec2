"""PDF page source built on pypdf and PyMuPDF.

pypdf supplies the raw text runs of each page; PyMuPDF renders pages to
rasters. Both read the same in-memory upload.
"""

import io
import logging
from typing import Protocol

import fitz  # PyMuPDF
from PIL import Image
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from pdf_feed.config import DEFAULT_MAX_FILE_SIZE
from pdf_feed.models.schemas import Viewport

logger = logging.getLogger(__name__)

PDF_MAGIC_BYTES = b"%PDF"


class PDFParseError(Exception):
    """Raised when a PDF cannot be validated or opened."""

    pass


class PageHandle(Protocol):
    """A page that can be measured and rendered."""

    def get_viewport(self, scale: float = 1.0) -> Viewport: ...

    def render(self, viewport: Viewport) -> Image.Image: ...


class PageSource(Protocol):
    """An opened document yielding text runs and renderable pages."""

    @property
    def page_count(self) -> int: ...

    def read_text_runs(self, page_number: int) -> list[str]: ...

    def get_page(self, page_number: int) -> PageHandle: ...


def validate_pdf_bytes(file_content: bytes, max_size: int = DEFAULT_MAX_FILE_SIZE) -> None:
    """Validate PDF file content before parsing.

    Args:
        file_content: Raw bytes of the PDF file.
        max_size: Largest accepted size in bytes.

    Raises:
        PDFParseError: If validation fails.
    """
    if not file_content:
        raise PDFParseError("Empty file provided")

    if len(file_content) > max_size:
        size_mb = len(file_content) / (1024 * 1024)
        limit_mb = max_size / (1024 * 1024)
        raise PDFParseError(
            f"File size ({size_mb:.1f}MB) exceeds maximum allowed ({limit_mb:.0f}MB)"
        )

    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise PDFParseError("Invalid PDF: file does not start with PDF header")


class RenderablePage:
    """PyMuPDF page wrapper exposing viewport and raster rendering."""

    def __init__(self, page: fitz.Page) -> None:
        self._page = page

    def get_viewport(self, scale: float = 1.0) -> Viewport:
        rect = self._page.rect
        return Viewport(
            width=max(1, round(rect.width * scale)),
            height=max(1, round(rect.height * scale)),
            scale=scale,
        )

    def render(self, viewport: Viewport) -> Image.Image:
        """Render the page into a white RGB raster sized to the viewport.

        Args:
            viewport: Target dimensions and scale.

        Returns:
            RGB image of exactly viewport.width x viewport.height pixels.
        """
        matrix = fitz.Matrix(viewport.scale, viewport.scale)
        pix = self._page.get_pixmap(matrix=matrix, alpha=False)
        rendered = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)

        canvas = Image.new("RGB", (viewport.width, viewport.height), (255, 255, 255))
        canvas.paste(rendered, (0, 0))
        return canvas


class PdfSource:
    """An opened PDF held in memory for the duration of one extraction.

    Use as a context manager so both underlying handles are released.
    """

    def __init__(self, reader: PdfReader, document: fitz.Document) -> None:
        self._reader = reader
        self._document = document

    @classmethod
    def from_bytes(
        cls, file_content: bytes, max_size: int = DEFAULT_MAX_FILE_SIZE
    ) -> "PdfSource":
        """Validate and open a PDF from raw bytes.

        Args:
            file_content: Raw bytes of the PDF file.
            max_size: Largest accepted size in bytes.

        Returns:
            Opened PdfSource.

        Raises:
            PDFParseError: If the file is invalid, too large, empty, or corrupt.
        """
        validate_pdf_bytes(file_content, max_size)

        try:
            reader = PdfReader(io.BytesIO(file_content))
            text_pages = len(reader.pages)
        except PdfReadError as e:
            raise PDFParseError(f"Corrupt or invalid PDF: {e}") from e
        except Exception as e:
            raise PDFParseError(f"Failed to read PDF: {e}") from e

        try:
            document = fitz.open(stream=file_content, filetype="pdf")
        except Exception as e:
            raise PDFParseError(f"Failed to open PDF for rendering: {e}") from e

        if text_pages == 0 or document.page_count == 0:
            document.close()
            raise PDFParseError("PDF contains no pages")

        # Text and renders must describe the same pages
        if text_pages != document.page_count:
            document.close()
            raise PDFParseError(
                f"Page count mismatch: pypdf={text_pages}, pymupdf={document.page_count}"
            )

        return cls(reader, document)

    @property
    def page_count(self) -> int:
        return len(self._reader.pages)

    def read_text_runs(self, page_number: int) -> list[str]:
        """Collect the raw text runs of a page in content-stream order.

        Args:
            page_number: 1-based page number.

        Returns:
            Text runs without positional metadata.
        """
        runs: list[str] = []

        def visitor(text, cm, tm, font_dict, font_size) -> None:
            if text:
                runs.append(text)

        self._reader.pages[page_number - 1].extract_text(visitor_text=visitor)
        return runs

    def get_page(self, page_number: int) -> RenderablePage:
        return RenderablePage(self._document.load_page(page_number - 1))

    def close(self) -> None:
        self._document.close()

    def __enter__(self) -> "PdfSource":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
