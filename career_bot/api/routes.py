"""PDF parse endpoint for resume uploads.

Extracts the text of an uploaded PDF and returns it to the client, which
attaches it to the next chat message. Nothing is stored server-side.

Every failure is returned as a JSON ``{"error": ...}`` body; the endpoint
never lets an exception escape. The multipart form is read inside the
handler so that malformed bodies get the same error shape.
"""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from career_bot.models.schemas import ErrorResponse, ParsedPDFResponse
from career_bot.parsing.pdf_parser import (
    PDF_CONTENT_TYPE,
    PDFTooLargeError,
    check_size,
    parse_pdf,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["pdf"])

UPLOAD_REQUEST_BODY = {
    "required": True,
    "content": {
        "multipart/form-data": {
            "schema": {
                "type": "object",
                "properties": {"file": {"type": "string", "format": "binary"}},
                "required": ["file"],
            }
        }
    },
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


async def _parse_upload(file: UploadFile) -> ParsedPDFResponse | JSONResponse:
    if file.content_type != PDF_CONTENT_TYPE:
        logger.warning(f"Rejected upload {file.filename!r} with content type {file.content_type}")
        return _error(status.HTTP_400_BAD_REQUEST, "Only PDF files are allowed")

    try:
        content = await file.read()
        check_size(content)
        pdf_content = await run_in_threadpool(parse_pdf, content)
    except PDFTooLargeError as e:
        logger.warning(f"Rejected oversized upload {file.filename!r}: {e}")
        return _error(status.HTTP_413_CONTENT_TOO_LARGE, str(e))
    except Exception as e:
        logger.error(f"PDF parsing error for {file.filename!r}: {e}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Failed to parse PDF: {e}")

    logger.info(f"Parsed PDF {file.filename!r} ({pdf_content.pages} pages)")
    return ParsedPDFResponse(
        text=pdf_content.text,
        file_name=file.filename or "",
        upload_date=datetime.now(UTC).isoformat().replace("+00:00", "Z"),
    )


@router.post(
    "/parse-pdf",
    response_model=ParsedPDFResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    openapi_extra={"requestBody": UPLOAD_REQUEST_BODY},
)
async def parse_pdf_upload(request: Request) -> ParsedPDFResponse | JSONResponse:
    """Extract text from an uploaded PDF.

    Expects multipart/form-data with the PDF in the ``file`` field.

    Returns:
        ParsedPDFResponse with text, uploaded filename, and upload time.

    Raises:
        400: Unreadable form body, no file, or content type is not application/pdf.
        413: File exceeds 10MB limit.
        500: The parser failed.
    """
    try:
        form = await request.form()
    except (MultiPartException, HTTPException) as e:
        logger.warning(f"Rejected malformed upload body: {e}")
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid form data")

    try:
        file = form.get("file")
        # A plain text field named "file" carries no upload
        if not isinstance(file, UploadFile):
            return _error(status.HTTP_400_BAD_REQUEST, "No file provided")
        return await _parse_upload(file)
    finally:
        await form.close()
