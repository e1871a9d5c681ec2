"""Turn page chunks and images into ordered feed items.

Order keys are synthetic timestamps: documents carry no per-item time, so each
run derives keys from one base instant. Every page is offset far enough that
all of its items sort after every item of the previous page.
"""

import logging
from datetime import datetime, timedelta, timezone

from pdf_feed.models.schemas import ContentItem, ImageItem, Page, TextItem

logger = logging.getLogger(__name__)

PAGE_OFFSET_MS = 10_000
ITEM_STEP_MS = 100
NO_CONTENT_MESSAGE = "このページにはコンテンツが見つかりませんでした"


def format_order_key(moment: datetime) -> str:
    """Format an instant as a sortable UTC ISO-8601 string with milliseconds."""
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class OrderKeyClock:
    """Deterministic order key generator for one extraction run.

    Attributes:
        base: Instant the run's keys are derived from.
        page_offset_ms: Distance between base keys of adjacent pages.
        item_step_ms: Distance between consecutive items on one page.
    """

    def __init__(
        self,
        base: datetime,
        page_offset_ms: int = PAGE_OFFSET_MS,
        item_step_ms: int = ITEM_STEP_MS,
    ) -> None:
        if base.tzinfo is None:
            base = base.replace(tzinfo=timezone.utc)
        self.base = base
        self.page_offset_ms = page_offset_ms
        self.item_step_ms = item_step_ms

    @property
    def items_per_page(self) -> int:
        return self.page_offset_ms // self.item_step_ms

    def page_base(self, page_number: int) -> datetime:
        return self.base + timedelta(milliseconds=page_number * self.page_offset_ms)

    def key(self, page_number: int, index: int) -> str:
        """Order key of the item at index on the given page."""
        moment = self.page_base(page_number) + timedelta(milliseconds=index * self.item_step_ms)
        return format_order_key(moment)


def assemble_content_items(
    page_number: int,
    text_chunks: list[str],
    images: list[str],
    clock: OrderKeyClock,
) -> list[ContentItem]:
    """Build a page's feed items: text chunks first, then images.

    A page with neither text nor images gets one placeholder text item.

    Args:
        page_number: 1-based page number.
        text_chunks: Chunks from the text chunker.
        images: Encoded images from the image extractor.
        clock: Order key generator for the current run.

    Returns:
        At least one content item, order keys strictly increasing.
    """
    items: list[ContentItem] = []

    for i, chunk in enumerate(text_chunks):
        items.append(TextItem(content=chunk, order_key=clock.key(page_number, i)))

    for j, image_data in enumerate(images):
        items.append(
            ImageItem(
                content=f"Page {page_number}",
                image_data=image_data,
                order_key=clock.key(page_number, len(text_chunks) + j),
            )
        )

    if not items:
        items.append(TextItem(content=NO_CONTENT_MESSAGE, order_key=clock.key(page_number, 0)))

    if len(items) > clock.items_per_page:
        logger.warning(
            f"Page {page_number} has {len(items)} items; order keys overlap the next page "
            f"beyond {clock.items_per_page}"
        )

    return items


def assemble_page(
    page_number: int,
    full_text: str,
    text_chunks: list[str],
    images: list[str],
    clock: OrderKeyClock,
) -> Page:
    """Build the immutable Page record for one document page."""
    return Page(
        page_number=page_number,
        full_text=full_text,
        content_items=assemble_content_items(page_number, text_chunks, images, clock),
        images=list(images),
    )
