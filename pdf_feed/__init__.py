"""PDF Feed - turn PDF documents into a feed of short content items.

Combines pypdf for text, PyMuPDF and Pillow for page images, Pydantic for
data validation, and FastAPI for the upload endpoints.

Components:
    - parsing: Page source, text chunking, image extraction, item assembly
    - models: Content item, page, and result schemas
    - api: HTTP upload endpoints
    - config: Environment-driven pipeline settings
"""

__version__ = "0.1.0"
