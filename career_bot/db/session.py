"""Database engine and session management.

One engine per process, one session per request. SQLite is the default
backend; any SQLAlchemy URL can be supplied through DATABASE_URL.
"""

import logging
import os
from collections.abc import Generator
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from career_bot.db.models import Base

load_dotenv()

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).parent.parent.parent / "data"


class DatabaseConfig(BaseModel):
    """Configuration for the relational store.

    Attributes:
        url: SQLAlchemy database URL.
        echo: Log every SQL statement.
    """

    url: str = Field(
        default_factory=lambda: os.getenv(
            "DATABASE_URL", f"sqlite:///{_DATA_DIR / 'career_bot.db'}"
        ),
        description="SQLAlchemy database URL",
    )
    echo: bool = Field(
        default_factory=lambda: os.getenv("DATABASE_ECHO", "false").lower() in {"1", "true", "yes"},
        description="Echo SQL statements to the log",
    )


def get_database_config() -> DatabaseConfig:
    """Create database configuration from environment."""
    return DatabaseConfig()


def create_db_engine(config: DatabaseConfig | None = None) -> Engine:
    """Create a SQLAlchemy engine for the configured URL.

    SQLite connections are shared across FastAPI's worker threads, so the
    same-thread check is disabled for them.
    """
    config = config or get_database_config()
    connect_args: dict[str, object] = {}
    if config.url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(config.url, echo=config.echo, connect_args=connect_args)


engine = create_db_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(bind: Engine | None = None) -> None:
    """Create all tables that do not exist yet."""
    bind = bind or engine
    if bind.url.get_backend_name() == "sqlite" and bind.url.database not in (None, "", ":memory:"):
        Path(bind.url.database).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=bind)
    logger.info(f"Database ready at {bind.url.render_as_string(hide_password=True)}")


def get_db() -> Generator[Session]:
    """Yield a database session for a single request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
