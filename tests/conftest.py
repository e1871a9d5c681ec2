"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - text_pdf_bytes: One-page PDF with two lines of text
    - blank_pdf_bytes: One-page PDF with nothing on it
    - mixed_pdf_bytes: Page 1 text, page 2 a filled shape and no text
    - miscounted_pdf_bytes: mixed_pdf_bytes with a wrong page tree /Count
    - base_time: Fixed instant for deterministic order keys
    - async_client: HTTPX client for API testing

PDFs are generated with PyMuPDF so no binary fixtures are needed.
"""

import re
from collections.abc import AsyncGenerator
from datetime import datetime, timezone

import fitz
import pytest
from httpx import ASGITransport, AsyncClient

from pdf_feed.api import app


def _write_text_page(doc: fitz.Document) -> None:
    page = doc.new_page()
    page.insert_text((72, 72), "Hello World.")
    page.insert_text((72, 90), "This is a test.")


def _write_shape_page(doc: fitz.Document) -> None:
    page = doc.new_page()
    page.draw_rect(fitz.Rect(100, 100, 300, 300), color=(0, 0, 0), fill=(0, 0, 0))


@pytest.fixture
def text_pdf_bytes() -> bytes:
    """Return a one-page PDF containing two lines of text."""
    doc = fitz.open()
    _write_text_page(doc)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def blank_pdf_bytes() -> bytes:
    """Return a one-page PDF with an empty page."""
    doc = fitz.open()
    doc.new_page()
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def mixed_pdf_bytes() -> bytes:
    """Return a two-page PDF: text on page 1, a black square on page 2."""
    doc = fitz.open()
    _write_text_page(doc)
    _write_shape_page(doc)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def miscounted_pdf_bytes(mixed_pdf_bytes: bytes) -> bytes:
    """Return the two-page PDF with its page tree /Count rewritten to 1.

    pypdf walks the page tree kids while PyMuPDF trusts /Count, so the two
    parsers disagree on the number of pages.
    """
    data, replaced = re.subn(rb"(/Count\s*)2", rb"\g<1>1", mixed_pdf_bytes, count=1)
    assert replaced == 1
    return data


@pytest.fixture
def base_time() -> datetime:
    """Fixed base instant for order keys."""
    return datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
