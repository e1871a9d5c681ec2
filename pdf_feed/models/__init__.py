"""Pydantic models for extraction results and API responses.

Models:
    - TextItem / ImageItem: Tagged variants of a feed content item
    - ContentItem: Discriminated union of the two variants
    - Page: Items and images extracted from one page
    - ExtractionResult: Whole-document outcome (pages or a single error)
    - TimelineResponse: Newest-first feed for the HTTP surface
    - Viewport: Render dimensions of a page
"""

from pdf_feed.models.schemas import (
    ContentItem,
    ExtractionResult,
    ImageItem,
    Page,
    TextItem,
    TimelineResponse,
    Viewport,
)

__all__ = [
    "ContentItem",
    "ExtractionResult",
    "ImageItem",
    "Page",
    "TextItem",
    "TimelineResponse",
    "Viewport",
]
