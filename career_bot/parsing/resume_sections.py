"""Keyword-based splitting of resume text into sections."""

import re

from pydantic import BaseModel

_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_PHONE_RE = re.compile(r"(\+?1[-.\s]?)?\(?([0-9]{3})\)?[-.\s]?([0-9]{3})[-.\s]?([0-9]{4})")

# First match wins, so "work experience" is experience, not skills
_SECTION_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("summary", ("summary", "objective", "profile")),
    ("experience", ("experience", "work history", "employment")),
    ("education", ("education", "academic")),
    ("skills", ("skills", "competencies")),
    ("projects", ("projects", "portfolio")),
    ("certifications", ("certification", "certificates")),
]


class ResumeSections(BaseModel):
    contact: str = ""
    summary: str = ""
    experience: str = ""
    education: str = ""
    skills: str = ""
    projects: str = ""
    certifications: str = ""


def _section_for(line: str) -> str | None:
    lower = line.lower()
    for section, keywords in _SECTION_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return section
    return None


def extract_resume_sections(text: str) -> ResumeSections:
    """Split resume text into sections by header keywords.

    Any line containing a section keyword starts that section; following
    lines belong to it until the next header. Lines before the first header
    are ignored. Emails and phone numbers found anywhere go to contact.
    """
    sections = ResumeSections()

    contact_lines: list[str] = []
    emails = _EMAIL_RE.findall(text)
    if emails:
        contact_lines.append(f"Email: {', '.join(emails)}")
    phones = [m.group(0) for m in _PHONE_RE.finditer(text)]
    if phones:
        contact_lines.append(f"Phone: {', '.join(phones)}")
    sections.contact = "\n".join(contact_lines)

    current: str | None = None
    content: list[str] = []

    def flush() -> None:
        body = "\n".join(content).strip()
        if current and body:
            setattr(sections, current, body)

    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        header = _section_for(line)
        if header:
            flush()
            current, content = header, []
        elif current:
            content.append(line)

    flush()
    return sections
