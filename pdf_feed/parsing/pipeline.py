"""Document extraction pipeline.

Drives the page source, chunker, image extractor, and assembler over every
page in order. Pages are processed one at a time: rendering shares a single
document handle, so pages must never render concurrently.

Failure policy:
    - Image failures are absorbed by the image extractor (page keeps its text).
    - Anything else aborts the run and yields one fixed user-facing error;
      the underlying cause is only logged.
"""

import asyncio
import logging
from datetime import datetime, timezone

from pdf_feed.config import FeedConfig, get_feed_config
from pdf_feed.models.schemas import ContentItem, ExtractionResult, Page
from pdf_feed.parsing.assembler import OrderKeyClock, assemble_page
from pdf_feed.parsing.chunker import chunk_text
from pdf_feed.parsing.image_extractor import extract_page_image
from pdf_feed.parsing.pdf_source import PageSource, PdfSource

logger = logging.getLogger(__name__)

EXTRACTION_ERROR_MESSAGE = "PDFの解析に失敗しました"


def _failure() -> ExtractionResult:
    return ExtractionResult(success=False, error=EXTRACTION_ERROR_MESSAGE)


async def _extract_page(
    source: PageSource,
    page_number: int,
    config: FeedConfig,
    clock: OrderKeyClock,
) -> Page:
    runs = await asyncio.to_thread(source.read_text_runs, page_number)
    full_text = "".join(runs)

    page = source.get_page(page_number)
    viewport = page.get_viewport(config.render_scale)
    images = await extract_page_image(page, viewport, config.blank_pixel_threshold)

    chunks = chunk_text(full_text, config.max_chunk_length, config.min_chunk_length)
    logger.debug(f"Page {page_number}: {len(chunks)} chunks, {len(images)} images")

    return assemble_page(page_number, full_text, chunks, images, clock)


async def extract(
    source: PageSource,
    config: FeedConfig | None = None,
    base_time: datetime | None = None,
) -> ExtractionResult:
    """Extract every page of an opened document into feed content.

    Must not be called twice concurrently on the same source.

    Args:
        source: Opened page source.
        config: Pipeline configuration. Loads from environment if not provided.
        base_time: Instant order keys are derived from. Defaults to now (UTC).

    Returns:
        ExtractionResult with all pages, or the fixed error on any fatal failure.
    """
    config = config or get_feed_config()
    clock = OrderKeyClock(
        base_time or datetime.now(timezone.utc),
        page_offset_ms=config.page_offset_ms,
        item_step_ms=config.item_step_ms,
    )

    pages: list[Page] = []
    try:
        for page_number in range(1, source.page_count + 1):
            pages.append(await _extract_page(source, page_number, config, clock))
    except Exception:
        logger.exception(f"Extraction failed at page {len(pages) + 1}")
        return _failure()

    logger.info(f"Extracted {len(pages)} pages")
    return ExtractionResult(success=True, pages=pages)


async def extract_pdf(
    file_content: bytes,
    config: FeedConfig | None = None,
    base_time: datetime | None = None,
) -> ExtractionResult:
    """Open a PDF from bytes and extract it.

    Args:
        file_content: Whole PDF file loaded in memory.
        config: Pipeline configuration. Loads from environment if not provided.
        base_time: Instant order keys are derived from. Defaults to now (UTC).

    Returns:
        ExtractionResult; opening failures produce the same fixed error.
    """
    config = config or get_feed_config()

    try:
        source = await asyncio.to_thread(PdfSource.from_bytes, file_content, config.max_file_size)
    except Exception:
        logger.exception("Failed to open PDF")
        return _failure()

    with source:
        return await extract(source, config=config, base_time=base_time)


def build_timeline(pages: list[Page]) -> list[ContentItem]:
    """Flatten all pages' items into a newest-first feed."""
    items = [item for page in pages for item in page.content_items]
    return sorted(items, key=lambda item: item.order_key, reverse=True)
