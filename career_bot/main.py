"""Launcher for the Career Bot API and chat UI.

By default serves the API and the NiceGUI page from one uvicorn process on
port 8000. Settings are read from the environment and a local .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Config modules read the environment at import time
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def run_integrated() -> None:
    """Serve the RPC and PDF routes and the chat page from one server."""
    import uvicorn
    from nicegui import ui

    from career_bot.api.app import create_app
    from career_bot.ui.chat_page import chat_page  # noqa: F401 - Registers the page
    from career_bot.ui.session import get_ui_config

    app = create_app()

    ui.run_with(
        app,
        title="Career Bot",
        favicon="🤖",
        storage_secret=get_ui_config().storage_secret,
    )

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting integrated server on http://localhost:{port}")
    logger.info(f"API docs available at http://localhost:{port}/docs")
    logger.info(f"Chat UI available at http://localhost:{port}/")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_separate() -> None:
    """Run FastAPI and NiceGUI as separate servers.

    FastAPI on port 8000, NiceGUI on port 8080 (set API_BASE_URL for the UI).
    """
    import subprocess

    logger.info("Starting FastAPI on http://localhost:8000")
    logger.info("Starting NiceGUI on http://localhost:8080")

    fastapi_proc = subprocess.Popen(
        [
            sys.executable,
            "-m",
            "uvicorn",
            "career_bot.api.app:app",
            "--host",
            os.getenv("HOST", "0.0.0.0"),
            "--port",
            "8000",
        ]
    )
    nicegui_proc = subprocess.Popen(
        [sys.executable, "-c", "from career_bot.ui.chat_page import main; main()"]
    )

    try:
        while fastapi_proc.poll() is None and nicegui_proc.poll() is None:
            try:
                fastapi_proc.wait(timeout=1)
            except subprocess.TimeoutExpired:
                continue
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        fastapi_proc.terminate()
        nicegui_proc.terminate()
        fastapi_proc.wait()
        nicegui_proc.wait()


def main() -> None:
    """Start Career Bot in the mode named by RUN_MODE (integrated or separate)."""
    mode = os.getenv("RUN_MODE", "integrated").lower()

    logger.info(f"Starting Career Bot in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
