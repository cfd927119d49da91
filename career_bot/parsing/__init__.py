"""PDF parsing utilities for resume uploads.

Responsibilities:
    - PDF validation (header, size) and text extraction with pypdf
    - Splitting resume text into contact, summary, experience, education,
      skills, projects and certifications sections

Output is plain text the client injects into the next chat message.
"""

from career_bot.parsing.pdf_parser import (
    MAX_FILE_SIZE,
    PDF_CONTENT_TYPE,
    PDFContent,
    PDFParseError,
    PDFTooLargeError,
    parse_pdf,
)
from career_bot.parsing.resume_sections import ResumeSections, extract_resume_sections

__all__ = [
    "MAX_FILE_SIZE",
    "PDF_CONTENT_TYPE",
    "PDFContent",
    "PDFParseError",
    "PDFTooLargeError",
    "ResumeSections",
    "extract_resume_sections",
    "parse_pdf",
]
