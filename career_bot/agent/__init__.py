"""Agno agent logic for the career-advisor model call.

Responsibilities:
    - Agent initialization with OpenAI models
    - Fixed system prompt restricting persona and topics
    - Chat history to model context assembly
    - Resume context injection for attached PDFs

Leverages the Agno framework for the model call.
Maintains clean separation from the HTTP layer.
"""

from career_bot.agent.chat_agent import AgentService, get_agent_service
from career_bot.agent.config import AgentConfig, get_agent_config
from career_bot.agent.context import (
    build_chat_context,
    split_resume_context,
    with_resume_context,
)

__all__ = [
    "AgentConfig",
    "AgentService",
    "build_chat_context",
    "get_agent_config",
    "get_agent_service",
    "split_resume_context",
    "with_resume_context",
]
