"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - db_engine / db_session: In-memory SQLite database per test
    - auth_config: Fast bcrypt rounds and a fixed signing key
    - fake_agent: Stand-in for the language model
    - app / async_client: FastAPI app wired to the test database and agent
    - make_pdf / resume_pdf / blank_pdf: Generated PDF documents
"""

import io
from collections.abc import AsyncGenerator, Callable, Generator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pypdf import PdfWriter
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from career_bot.api import rpc
from career_bot.api.app import create_app
from career_bot.auth.config import AuthConfig
from career_bot.db.models import Base
from career_bot.db.session import get_db
from career_bot.models.schemas import ChatMessage

RESUME_LINES = [
    "Jane Doe",
    "jane.doe@example.com | (555) 123-4567",
    "Summary",
    "Backend engineer focused on Python services.",
    "Work Experience",
    "Acme Corp, Senior Engineer 2019-2024",
    "Education",
    "BSc Computer Science, State University",
    "Skills",
    "Python, FastAPI, SQL",
]


class FakeAgent:
    """Records the conversations it is given and answers with a fixed reply."""

    def __init__(self, reply: str = "Quantify your impact in every bullet.") -> None:
        self.reply = reply
        self.error: Exception | None = None
        self.calls: list[list[ChatMessage]] = []

    async def get_response(self, messages: list[ChatMessage]) -> str:
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def auth_config() -> AuthConfig:
    """Auth settings with the cheapest bcrypt cost for speed."""
    return AuthConfig(jwt_secret="test-signing-key-0123456789abcdef", bcrypt_rounds=4, expires_days=7)


@pytest.fixture(autouse=True)
def fast_auth(monkeypatch: pytest.MonkeyPatch, auth_config: AuthConfig) -> None:
    """Use the test auth settings wherever no config is passed explicitly."""
    monkeypatch.setattr("career_bot.auth.security.get_auth_config", lambda: auth_config)


@pytest.fixture
def db_engine() -> Generator[Engine]:
    """Create a fresh in-memory database with all tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory: sessionmaker[Session]) -> Generator[Session]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def fake_agent() -> FakeAgent:
    return FakeAgent()


@pytest.fixture
def app(session_factory: sessionmaker[Session], fake_agent: FakeAgent) -> FastAPI:
    """FastAPI app using the test database and the fake agent."""

    def override_get_db() -> Generator[Session]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    application = create_app()
    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[rpc.get_agent] = lambda: fake_agent
    return application


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(lines: list[str]) -> bytes:
    """Build a one-page PDF showing each line in Helvetica."""
    shown = " T* ".join(f"({_escape(line)}) Tj" for line in lines)
    stream = f"BT /F1 12 Tf 14 TL 72 720 Td {shown} ET".encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
    out += b"startxref\n%d\n%%%%EOF\n" % xref_at
    return bytes(out)


@pytest.fixture
def make_pdf() -> Callable[[list[str]], bytes]:
    return build_pdf


@pytest.fixture
def resume_pdf() -> bytes:
    """A one-page resume with contact details and four sections."""
    return build_pdf(RESUME_LINES)


@pytest.fixture
def blank_pdf() -> bytes:
    """A valid PDF with one empty page."""
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()
