"""Page rendering and blank-page filtering.

A rendered page is kept as an image only when some pixel is visibly darker
than paper white. Rendering failures never abort extraction; the page simply
yields no image.
"""

import asyncio
import base64
import io
import logging

from PIL import Image

from pdf_feed.models.schemas import Viewport
from pdf_feed.parsing.pdf_source import PageHandle

logger = logging.getLogger(__name__)

BLANK_PIXEL_THRESHOLD = 250
PNG_DATA_URL_PREFIX = "data:image/png;base64,"


def has_visible_content(image: Image.Image, threshold: int = BLANK_PIXEL_THRESHOLD) -> bool:
    """Check whether any pixel has an RGB channel below threshold.

    Args:
        image: Rendered page raster.
        threshold: Channel value below which a pixel counts as content.

    Returns:
        True if the page has visible content, False if it is blank.
    """
    # Per-band (min, max) over the whole buffer; alpha is ignored
    extrema = image.convert("RGB").getextrema()
    return any(low < threshold for low, _ in extrema)


def encode_png_data_url(image: Image.Image) -> str:
    """Encode a raster as a base64 PNG data URL."""
    buffered = io.BytesIO()
    image.save(buffered, format="PNG")
    encoded = base64.b64encode(buffered.getvalue()).decode("utf-8")
    return f"{PNG_DATA_URL_PREFIX}{encoded}"


def _render_and_encode(page: PageHandle, viewport: Viewport, threshold: int) -> str | None:
    image = page.render(viewport)
    if not has_visible_content(image, threshold):
        return None
    return encode_png_data_url(image)


async def extract_page_image(
    page: PageHandle,
    viewport: Viewport,
    threshold: int = BLANK_PIXEL_THRESHOLD,
) -> list[str]:
    """Render a page and keep it as an image if it is not blank.

    Rendering runs in a worker thread. Any error is logged and treated as
    "no image" for the page.

    Args:
        page: Renderable page handle.
        viewport: Render dimensions.
        threshold: Blank-page pixel threshold.

    Returns:
        A one-element list with the PNG data URL, or an empty list.
    """
    try:
        data_url = await asyncio.to_thread(_render_and_encode, page, viewport, threshold)
    except Exception as e:
        logger.warning(f"Image extraction failed, continuing without image: {e}")
        return []

    if data_url is None:
        logger.debug("Rendered page is blank, no image kept")
        return []

    return [data_url]
