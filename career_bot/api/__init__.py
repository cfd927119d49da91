"""FastAPI layer for the career chatbot.

Endpoints:
    - POST /rpc/<procedure>: Typed RPC procedures (auth, chats, messages)
    - POST /api/parse-pdf: Resume text extraction
    - GET /health: Service health status
"""

from career_bot.api.app import app, create_app

__all__ = ["app", "create_app"]
