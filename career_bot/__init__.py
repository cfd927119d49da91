"""Career Bot - a career-advice chatbot with persisted chats and resume context.

Combines FastAPI for the RPC layer, SQLAlchemy for persistence, Agno for the
LLM call, NiceGUI for the chat interface, and Pydantic for data validation.

Components:
    - api: RPC procedures, PDF parse endpoint, error handlers
    - agent: LLM wrapper with the career-advisor system prompt
    - auth: Password hashing and signed session tokens
    - db: ORM models and session management
    - services: Business logic behind each procedure
    - parsing: PDF text extraction and resume sections
    - ui: Web interface with optimistic message status
    - models: Request/response schemas
"""

__version__ = "0.1.0"
