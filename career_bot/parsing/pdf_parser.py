"""Resume PDF text extraction using pypdf.

Used by the parse endpoint to turn an uploaded resume into plain text that
the client injects into the next chat message. Nothing is written to disk.
"""

import io
import logging
from collections.abc import Iterator

from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
PDF_MAGIC_BYTES = b"%PDF"
PDF_CONTENT_TYPE = "application/pdf"


class PDFContent(BaseModel):
    """Text of an uploaded resume.

    Attributes:
        text: Page texts separated by blank lines.
        pages: Page count of the document, including pages without text.
    """

    text: str
    pages: int = Field(ge=0)


class PDFParseError(Exception):
    """Raised when an upload cannot be read as a PDF."""


class PDFTooLargeError(PDFParseError):
    """Raised when an upload exceeds MAX_FILE_SIZE."""


def check_size(file_content: bytes) -> None:
    """Reject uploads over the 10MB limit.

    Raises:
        PDFTooLargeError: If the content exceeds MAX_FILE_SIZE.
    """
    size = len(file_content)
    if size > MAX_FILE_SIZE:
        raise PDFTooLargeError(
            f"File size ({size / (1024 * 1024):.1f}MB) exceeds maximum allowed (10MB)"
        )


def _open(file_content: bytes) -> PdfReader:
    if not file_content:
        raise PDFParseError("Empty file provided")
    check_size(file_content)
    # Leading whitespace before the header is tolerated
    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise PDFParseError("Invalid PDF: file does not start with PDF header")

    try:
        reader = PdfReader(io.BytesIO(file_content))
        if not reader.pages:
            raise PDFParseError("PDF contains no pages")
    except PDFParseError:
        raise
    except PdfReadError as e:
        raise PDFParseError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFParseError(f"Failed to read PDF: {e}") from e
    return reader


def _page_texts(reader: PdfReader) -> Iterator[str]:
    for number, page in enumerate(reader.pages, start=1):
        try:
            text = page.extract_text()
        except Exception as e:
            logger.warning(f"Skipping page {number}, text extraction failed: {e}")
            continue
        if text:
            yield text


def parse_pdf(file_content: bytes) -> PDFContent:
    """Extract the text of every page of a resume PDF.

    Pages whose text cannot be extracted are skipped with a warning, so a
    scanned resume yields empty text rather than an error.

    Args:
        file_content: Raw bytes of the uploaded file.

    Returns:
        PDFContent with the joined text and the page count.

    Raises:
        PDFParseError: If the file is empty, too large, not a PDF, or corrupt.
    """
    reader = _open(file_content)
    text = "\n\n".join(_page_texts(reader))
    if not text.strip():
        logger.warning("Resume PDF has no extractable text, it may be a scanned image")
    return PDFContent(text=text, pages=len(reader.pages))
