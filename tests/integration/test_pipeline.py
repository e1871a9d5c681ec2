"""Integration tests for the extraction pipeline.

Real PDFs generated with PyMuPDF for the happy paths; in-memory fake sources
for failure injection and call ordering.
"""

from datetime import datetime

import pytest
import pytest_check as check

from pdf_feed.models.schemas import ImageItem, TextItem
from pdf_feed.parsing.assembler import NO_CONTENT_MESSAGE
from pdf_feed.parsing.pdf_source import PdfSource, RenderablePage
from pdf_feed.parsing.pipeline import (
    EXTRACTION_ERROR_MESSAGE,
    build_timeline,
    extract,
    extract_pdf,
)
from tests.fakes import FakePage, FakeSource


class TestExtractPdf:
    """End-to-end tests over real PDF bytes."""

    async def test_text_and_image_pages(self, mixed_pdf_bytes: bytes, base_time: datetime) -> None:
        """Text page yields text items, shape-only page yields one image item."""
        result = await extract_pdf(mixed_pdf_bytes, base_time=base_time)

        assert result.success is True
        assert result.error is None
        assert len(result.pages) == 2

        page_one, page_two = result.pages
        check.equal(page_one.page_number, 1)
        check.is_in("Hello World", page_one.full_text)
        text_items = [i for i in page_one.content_items if isinstance(i, TextItem)]
        check.greater_equal(len(text_items), 1)
        check.is_in("Hello World", text_items[0].content)

        check.equal(page_two.page_number, 2)
        check.equal(len(page_two.content_items), 1)
        check.is_instance(page_two.content_items[0], ImageItem)
        check.equal(page_two.content_items[0].content, "Page 2")
        check.equal(len(page_two.images), 1)

    async def test_blank_page_gets_placeholder(self, blank_pdf_bytes: bytes) -> None:
        """An empty page yields no images and one placeholder item."""
        result = await extract_pdf(blank_pdf_bytes)

        assert result.success is True
        page = result.pages[0]
        check.equal(page.images, [])
        check.equal(len(page.content_items), 1)
        check.equal(page.content_items[0].content, NO_CONTENT_MESSAGE)

    async def test_deterministic_order_keys(
        self, text_pdf_bytes: bytes, base_time: datetime
    ) -> None:
        """A fixed base time gives fixed order keys."""
        result = await extract_pdf(text_pdf_bytes, base_time=base_time)

        assert result.pages[0].content_items[0].order_key == "2024-01-01T00:00:10.000Z"

    async def test_invalid_bytes_fail(self) -> None:
        """Non-PDF content produces the fixed error."""
        result = await extract_pdf(b"not a pdf at all")

        check.is_false(result.success)
        check.is_none(result.pages)
        check.equal(result.error, EXTRACTION_ERROR_MESSAGE)

    async def test_page_count_mismatch_fails(self, miscounted_pdf_bytes: bytes) -> None:
        """No page is silently dropped when the parsers disagree on page count."""
        result = await extract_pdf(miscounted_pdf_bytes)

        check.is_false(result.success)
        check.is_none(result.pages)
        check.equal(result.error, EXTRACTION_ERROR_MESSAGE)

    async def test_open_failure_fails(
        self, text_pdf_bytes: bytes, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """An exception while opening yields the fixed error, not the cause."""

        def broken_open(*args, **kwargs):
            raise RuntimeError("Invalid PDF structure")

        monkeypatch.setattr(PdfSource, "from_bytes", broken_open)

        result = await extract_pdf(text_pdf_bytes)

        check.is_false(result.success)
        check.is_none(result.pages)
        check.equal(result.error, EXTRACTION_ERROR_MESSAGE)

    async def test_render_failure_keeps_text(
        self, text_pdf_bytes: bytes, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A page whose render throws keeps its text chunks and has no images."""

        def broken_render(self, viewport):
            raise RuntimeError("render failed")

        monkeypatch.setattr(RenderablePage, "render", broken_render)

        result = await extract_pdf(text_pdf_bytes)

        assert result.success is True
        page = result.pages[0]
        check.equal(page.images, [])
        check.greater_equal(len(page.content_items), 1)
        check.is_true(all(isinstance(i, TextItem) for i in page.content_items))
        check.is_in("Hello World", page.content_items[0].content)

    async def test_source_closed_after_extraction(
        self, text_pdf_bytes: bytes, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The document handle is released once extraction finishes."""
        closed: list[bool] = []
        original_close = PdfSource.close

        def tracking_close(self) -> None:
            closed.append(True)
            original_close(self)

        monkeypatch.setattr(PdfSource, "close", tracking_close)

        await extract_pdf(text_pdf_bytes)

        assert closed == [True]


class TestExtract:
    """Pipeline tests over fake page sources."""

    async def test_pages_processed_sequentially(self, base_time: datetime) -> None:
        """Each page finishes text and render before the next page starts."""
        source = FakeSource(
            [FakePage(["First page text here"]), FakePage(["Second page text here"])]
        )

        await extract(source, base_time=base_time)

        assert source.calls == ["text 1", "render 1", "text 2", "render 2"]

    async def test_runs_concatenated_without_separator(self, base_time: datetime) -> None:
        """Text runs are joined as-is into the page's full text."""
        source = FakeSource([FakePage(["Hello", " ", "World", "\n", "This is a test PDF."])])

        result = await extract(source, base_time=base_time)

        assert result.pages[0].full_text == "Hello World\nThis is a test PDF."

    async def test_text_failure_discards_partial_pages(self, base_time: datetime) -> None:
        """A text read failure on any page fails the whole document."""
        source = FakeSource(
            [FakePage(["First page text here"]), FakePage(["Second page text here"])],
            text_error_at=2,
        )

        result = await extract(source, base_time=base_time)

        check.is_false(result.success)
        check.is_none(result.pages)
        check.equal(result.error, EXTRACTION_ERROR_MESSAGE)

    async def test_render_failure_is_page_local(self, base_time: datetime) -> None:
        """One failing render does not affect other pages."""
        source = FakeSource(
            [
                FakePage(["First page text here"], render_error=RuntimeError("boom")),
                FakePage(["Second page text here"], dark=True),
            ]
        )

        result = await extract(source, base_time=base_time)

        assert result.success is True
        check.equal(result.pages[0].images, [])
        check.equal(len(result.pages[1].images), 1)
        check.equal([i.type for i in result.pages[1].content_items], ["text", "image"])

    async def test_keys_separated_across_pages(self, base_time: datetime) -> None:
        """Every item on page 1 sorts before every item on page 2."""
        source = FakeSource(
            [
                FakePage(["Paragraph one text\n\nParagraph two text"], dark=True),
                FakePage([]),
            ]
        )

        result = await extract(source, base_time=base_time)

        first_keys = [i.order_key for i in result.pages[0].content_items]
        second_keys = [i.order_key for i in result.pages[1].content_items]
        assert max(first_keys) < min(second_keys)


class TestBuildTimeline:
    """Tests for newest-first feed reconstruction."""

    async def test_newest_first(self, base_time: datetime) -> None:
        """Latest page's last item comes first, first page's first item last."""
        source = FakeSource(
            [
                FakePage(["Paragraph one text\n\nParagraph two text"]),
                FakePage(["Closing page text here"], dark=True),
            ]
        )
        result = await extract(source, base_time=base_time)

        timeline = build_timeline(result.pages)

        check.equal(len(timeline), 4)
        check.is_instance(timeline[0], ImageItem)
        check.equal(timeline[0].content, "Page 2")
        check.equal(timeline[-1].content, "Paragraph one text")
        keys = [item.order_key for item in timeline]
        check.equal(keys, sorted(keys, reverse=True))

    def test_empty_pages(self) -> None:
        """No pages gives an empty feed."""
        assert build_timeline([]) == []
