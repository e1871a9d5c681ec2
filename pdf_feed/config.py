"""Pipeline configuration with environment variable loading.

Pydantic-based configuration for chunking, rendering, and order key spacing.
Defaults reproduce the feed's established display behavior.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

from pdf_feed.models.schemas import MIN_TEXT_LENGTH

# Load environment variables from .env file
load_dotenv()

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB


class FeedConfig(BaseModel):
    """Configuration for the PDF feed extraction pipeline.

    Attributes:
        max_chunk_length: Longest text chunk packed from several sentences.
        min_chunk_length: Chunks at or below this stripped length are dropped.
        blank_pixel_threshold: A channel value below this marks a pixel as visible.
        render_scale: Scale factor applied to page size when rendering.
        page_offset_ms: Order key distance between consecutive pages.
        item_step_ms: Order key distance between items on one page.
        max_file_size: Largest accepted upload in bytes.
    """

    max_chunk_length: int = Field(
        default_factory=lambda: int(os.getenv("FEED_MAX_CHUNK_LENGTH", "200")),
        ge=1,
        description="Maximum characters in a packed text chunk",
    )
    min_chunk_length: int = Field(
        default_factory=lambda: int(os.getenv("FEED_MIN_CHUNK_LENGTH", str(MIN_TEXT_LENGTH))),
        ge=MIN_TEXT_LENGTH,
        description="Chunks with stripped length at or below this are discarded",
    )
    blank_pixel_threshold: int = Field(
        default_factory=lambda: int(os.getenv("FEED_BLANK_PIXEL_THRESHOLD", "250")),
        ge=0,
        le=255,
        description="RGB channel value below which a pixel counts as content",
    )
    render_scale: float = Field(
        default_factory=lambda: float(os.getenv("FEED_RENDER_SCALE", "1.0")),
        gt=0.0,
        description="Page render scale (1.0 = one device pixel per PDF point)",
    )
    page_offset_ms: int = Field(
        default_factory=lambda: int(os.getenv("FEED_PAGE_OFFSET_MS", "10000")),
        ge=1,
        description="Milliseconds between the base order keys of adjacent pages",
    )
    item_step_ms: int = Field(
        default_factory=lambda: int(os.getenv("FEED_ITEM_STEP_MS", "100")),
        ge=1,
        description="Milliseconds between order keys of items on one page",
    )
    max_file_size: int = Field(
        default_factory=lambda: int(os.getenv("FEED_MAX_FILE_SIZE", str(DEFAULT_MAX_FILE_SIZE))),
        ge=1,
        description="Maximum upload size in bytes",
    )

    @model_validator(mode="after")
    def validate_ranges(self) -> "FeedConfig":
        """Reject settings that would break chunk or ordering guarantees."""
        if self.min_chunk_length >= self.max_chunk_length:
            raise ValueError("min_chunk_length must be smaller than max_chunk_length")
        if self.item_step_ms >= self.page_offset_ms:
            raise ValueError("item_step_ms must be smaller than page_offset_ms")
        return self

    @property
    def items_per_page(self) -> int:
        """Number of items that fit on one page before order keys collide."""
        return self.page_offset_ms // self.item_step_ms


def get_feed_config() -> FeedConfig:
    """Create pipeline configuration from environment.

    Returns:
        Configured FeedConfig instance.

    Raises:
        ValidationError: If an environment override is out of range.
    """
    return FeedConfig()
