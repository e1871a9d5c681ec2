"""PDF upload endpoints for feed extraction.

Handles file upload, validation, and extraction into feed content.
"""

import logging

from fastapi import APIRouter, HTTPException, UploadFile, status

from pdf_feed.config import get_feed_config
from pdf_feed.models.schemas import ExtractionResult, TimelineResponse
from pdf_feed.parsing.pdf_source import PDFParseError, validate_pdf_bytes
from pdf_feed.parsing.pipeline import build_timeline, extract_pdf

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"])

PDF_CONTENT_TYPE = "application/pdf"


def _validate_file_type(filename: str | None, content_type: str | None) -> str:
    """Validate that the upload is declared as a PDF.

    Args:
        filename: The uploaded filename.
        content_type: The declared MIME type.

    Returns:
        The validated filename.

    Raises:
        HTTPException: 400 if filename is missing or the file is not a PDF.
    """
    if not filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Filename is required",
        )

    if not filename.lower().endswith(".pdf"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF files are accepted",
        )

    if content_type and content_type != PDF_CONTENT_TYPE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF files are accepted",
        )

    return filename


async def _read_and_validate(file: UploadFile, max_size: int) -> bytes:
    """Read file content and validate size and header.

    Args:
        file: The uploaded file.
        max_size: Largest accepted size in bytes.

    Returns:
        File content as bytes.

    Raises:
        HTTPException: 413 if file exceeds size limit, 400 if it is not a PDF.
    """
    content = await file.read()

    if len(content) > max_size:
        size_mb = len(content) / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File size ({size_mb:.1f}MB) exceeds maximum allowed ({max_size // (1024 * 1024)}MB)",
        )

    try:
        validate_pdf_bytes(content, max_size)
    except PDFParseError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    return content


async def _extract_upload(file: UploadFile) -> tuple[str, ExtractionResult]:
    config = get_feed_config()
    filename = _validate_file_type(file.filename, file.content_type)
    content = await _read_and_validate(file, config.max_file_size)

    result = await extract_pdf(content, config=config)
    if not result.success:
        logger.warning(f"Extraction failed for {filename}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=result.error,
        )

    logger.info(f"Extracted {filename} ({len(result.pages)} pages)")
    return filename, result


@router.post("/pdf", response_model=ExtractionResult)
async def upload_pdf(file: UploadFile) -> ExtractionResult:
    """Upload a PDF and extract its pages into content items.

    Args:
        file: The uploaded PDF file (multipart/form-data).

    Returns:
        ExtractionResult with pages in document order.

    Raises:
        400: Invalid file (not PDF, empty, corrupt) or extraction failure.
        413: File exceeds size limit.
    """
    _, result = await _extract_upload(file)
    return result


@router.post("/pdf/timeline", response_model=TimelineResponse)
async def upload_pdf_timeline(file: UploadFile) -> TimelineResponse:
    """Upload a PDF and return its content items newest first.

    Args:
        file: The uploaded PDF file (multipart/form-data).

    Returns:
        TimelineResponse with all items sorted by order key, descending.

    Raises:
        400: Invalid file (not PDF, empty, corrupt) or extraction failure.
        413: File exceeds size limit.
    """
    filename, result = await _extract_upload(file)
    return TimelineResponse(
        filename=filename,
        page_count=len(result.pages),
        items=build_timeline(result.pages),
    )
