"""FastAPI application for PDF feed uploads.

Builds the upload service: pipeline settings are checked once at startup,
then the upload router and a health probe are served behind open CORS.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pdf_feed import __version__
from pdf_feed.api.routes import router as upload_router
from pdf_feed.config import get_feed_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Validate pipeline settings before accepting uploads.

    A bad FEED_* override fails startup instead of the first upload.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    config = get_feed_config()
    logger.info(
        f"PDF Feed ready: chunks {config.min_chunk_length + 1}-{config.max_chunk_length} chars, "
        f"blank threshold {config.blank_pixel_threshold}, "
        f"upload limit {config.max_file_size // (1024 * 1024)}MB"
    )
    yield
    logger.info("PDF Feed stopped")


def create_app() -> FastAPI:
    """Create the upload service with its router and health check.

    Returns:
        FastAPI application serving /upload and /health.
    """
    application = FastAPI(
        title="PDF Feed API",
        description=(
            "Turns uploaded PDF documents into feed-style content items: "
            "short text chunks and rendered page images with a stable "
            "newest-first display order."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Browser front ends post uploads from their own origin
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(upload_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Report that the upload service is up."""
        return {"status": "healthy", "service": "pdf-feed"}

    return application


app = create_app()
