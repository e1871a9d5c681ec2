"""FastAPI endpoints for the PDF feed.

Endpoints:
    - GET /health: Service health status
    - POST /upload/pdf: Extract an uploaded PDF into pages of content items
    - POST /upload/pdf/timeline: Extract and return all items newest first
"""

from pdf_feed.api.app import app, create_app

__all__ = ["app", "create_app"]
