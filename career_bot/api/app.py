"""Career Bot API application factory.

Builds the FastAPI app: database setup on startup, CORS, the handler that
renders CareerBotError as JSON, the RPC and PDF routers, and a health check.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from career_bot.api.routes import router as pdf_router
from career_bot.api.rpc import router as rpc_router
from career_bot.db.session import init_db
from career_bot.services.errors import CareerBotError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Create missing database tables before serving requests."""
    logger.info("Starting Career Bot API...")
    init_db()
    yield
    logger.info("Shutting down Career Bot API...")


async def career_bot_error_handler(request: Request, exc: CareerBotError) -> JSONResponse:
    """Render an expected application error as ``{"detail": message}``."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app() -> FastAPI:
    """Build the API application with all routers and handlers attached."""
    application = FastAPI(
        title="Career Bot API",
        description=(
            "Career-advice chatbot API. Persists users, chats, and messages, "
            "proxies conversation turns to a language model restricted to career "
            "guidance, and extracts resume text from uploaded PDFs."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.add_exception_handler(CareerBotError, career_bot_error_handler)

    application.include_router(rpc_router)
    application.include_router(pdf_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Report that the service is up."""
        return {"status": "healthy", "service": "career-bot"}

    return application


app = create_app()
