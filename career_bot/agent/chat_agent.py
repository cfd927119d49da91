"""Agno agent service for the career-advisor model call.

Core module for the chatbot's replies.

The agent is stateless: chat history lives in our own database, so every
call receives the full conversation as input and the agent carries no
session storage of its own. The fixed system prompt scopes the persona and
topics, and the model choice, token cap, and temperature come from
AgentConfig.
"""

import logging

from agno.agent import Agent
from agno.models.message import Message
from agno.models.openai import OpenAIChat

from career_bot.agent.config import AgentConfig, get_agent_config
from career_bot.agent.prompts import CAREER_SYSTEM_PROMPT, FALLBACK_REPLY
from career_bot.models.schemas import ChatMessage
from career_bot.services.errors import LLMServiceError

logger = logging.getLogger(__name__)


class AgentService:
    """Service wrapping the Agno agent used for every chat turn.

    Wraps Agno's Agent with:
    - A hard-coded career-advisor system prompt
    - Singleton lifecycle management
    - Conversion from stored history to model messages
    - Provider failures re-raised as LLMServiceError
    """

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Build the Agno agent once for the lifetime of the service.

        Args:
            config: Model settings, read from the environment when omitted.
        """
        self._config = config or get_agent_config()
        self._agent = self._create_agent()

    def _create_agent(self) -> Agent:
        """Create the Agno agent instance.

        Returns:
            Configured Agent with OpenAI model and the career system prompt.
        """
        model = OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )

        return Agent(
            model=model,
            system_message=CAREER_SYSTEM_PROMPT,
            # History comes from our database on every call
            add_history_to_context=False,
            markdown=False,
        )

    @property
    def system_prompt(self) -> str:
        return CAREER_SYSTEM_PROMPT

    async def get_response(self, messages: list[ChatMessage]) -> str:
        """Get the assistant reply for a conversation.

        Args:
            messages: Conversation turns in creation order, ending with
                the user's latest message.

        Returns:
            The reply text, or a fallback sentence if the model returned
            nothing.

        Raises:
            LLMServiceError: If the provider call fails.
        """
        model_input = [Message(role=m.role, content=m.content) for m in messages]

        try:
            response = await self._agent.arun(model_input)
        except Exception as e:
            logger.error(f"Language model call failed: {e}")
            raise LLMServiceError("Failed to get response from the language model") from e

        content = response.content if response is not None else None
        if not content:
            return FALLBACK_REPLY
        return content if isinstance(content, str) else str(content)


_agent_service: AgentService | None = None


def get_agent_service() -> AgentService:
    """Return the process-wide AgentService, creating it on first use.

    Raises:
        ValueError: If no API key is configured.
    """
    global _agent_service
    if _agent_service is None:
        _agent_service = AgentService()
    return _agent_service
