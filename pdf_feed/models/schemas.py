from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Shortest stripped text worth a feed entry is MIN_TEXT_LENGTH + 1 characters
MIN_TEXT_LENGTH = 10


class TextItem(BaseModel):
    """A text fragment shown as one feed entry.

    Attributes:
        type: Variant tag, always "text".
        content: The fragment text, longer than MIN_TEXT_LENGTH once stripped.
        order_key: Sortable ISO-8601 key establishing display order.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    content: str
    order_key: str

    @field_validator("content")
    @classmethod
    def reject_short_content(cls, v: str) -> str:
        """Text items carry more than MIN_TEXT_LENGTH visible characters."""
        if len(v.strip()) <= MIN_TEXT_LENGTH:
            raise ValueError(
                f"Text item content must be longer than {MIN_TEXT_LENGTH} characters"
            )
        return v


class ImageItem(BaseModel):
    """A rendered page image shown as one feed entry.

    Attributes:
        type: Variant tag, always "image".
        content: Caption, e.g. "Page 3".
        image_data: Encoded raster as a data URL.
        order_key: Sortable ISO-8601 key establishing display order.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["image"] = "image"
    content: str
    image_data: str = Field(..., min_length=1)
    order_key: str


ContentItem = Annotated[TextItem | ImageItem, Field(discriminator="type")]


class Viewport(BaseModel):
    """Device-pixel dimensions of a page at a given render scale."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)
    scale: float = Field(1.0, gt=0.0)


class Page(BaseModel):
    """Content extracted from one document page.

    Attributes:
        page_number: 1-based page position in the document.
        full_text: Concatenated raw text runs of the page.
        content_items: Feed items in assembly order (text before images).
        images: Raw encoded image payloads kept for the page.
    """

    model_config = ConfigDict(frozen=True)

    page_number: int = Field(..., ge=1)
    full_text: str
    content_items: list[ContentItem] = Field(..., min_length=1)
    images: list[str] = Field(default_factory=list)


class ExtractionResult(BaseModel):
    """Outcome of extracting a whole document.

    Attributes:
        success: Whether every page was extracted.
        pages: Extracted pages in document order (only on success).
        error: User-facing error message (only on failure).
    """

    success: bool
    pages: list[Page] | None = None
    error: str | None = None

    @model_validator(mode="after")
    def check_outcome_fields(self) -> "ExtractionResult":
        """Pages are present only on success, an error only on failure."""
        if self.success and (self.pages is None or self.error is not None):
            raise ValueError("Successful result requires pages and no error")
        if not self.success and (self.pages is not None or not self.error):
            raise ValueError("Failed result requires an error and no pages")
        return self


class TimelineResponse(BaseModel):
    """Newest-first feed built from an uploaded document.

    Attributes:
        filename: Name of the uploaded file.
        page_count: Number of pages in the document.
        items: All content items sorted by order key, newest first.
    """

    filename: str
    page_count: int = Field(..., ge=1)
    items: list[ContentItem]
