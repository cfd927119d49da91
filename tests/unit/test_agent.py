"""Unit tests for AgentService and AgentConfig.

Tests configuration validation, agent initialization, and the model call
with the Agno agent mocked out.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_check as check
from pydantic import ValidationError

from career_bot.agent.config import AgentConfig
from career_bot.agent.prompts import CAREER_SYSTEM_PROMPT, FALLBACK_REPLY
from career_bot.models.schemas import ChatMessage
from career_bot.services.errors import LLMServiceError


class TestAgentConfig:
    """Tests for AgentConfig validation."""

    def test_config_with_default_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Config uses the career bot defaults when only an API key is provided."""
        monkeypatch.delenv("LLM_MODEL", raising=False)
        monkeypatch.delenv("LLM_BASE_URL", raising=False)

        config = AgentConfig(api_key="sk-test-key")

        check.equal(config.model_name, "gpt-3.5-turbo")
        check.equal(config.temperature, 0.7)
        check.equal(config.max_tokens, 1000)
        check.is_none(config.base_url)

    def test_config_fails_with_missing_api_key(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AgentConfig(api_key="")

        assert "API key required" in str(exc_info.value)

    def test_config_fails_with_whitespace_api_key(self) -> None:
        with pytest.raises(ValidationError):
            AgentConfig(api_key="   ")

    def test_config_strips_api_key_whitespace(self) -> None:
        config = AgentConfig(api_key="  sk-test-key  ")

        assert config.api_key == "sk-test-key"

    def test_api_key_from_either_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """LLM_API_KEY wins over OPENAI_API_KEY when both are set."""
        monkeypatch.delenv("LLM_API_KEY", raising=False)
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        check.equal(AgentConfig().api_key, "sk-openai")

        monkeypatch.setenv("LLM_API_KEY", "sk-llm")
        check.equal(AgentConfig().api_key, "sk-llm")

    def test_config_rejects_out_of_range_values(self) -> None:
        with pytest.raises(ValidationError, match="temperature"):
            AgentConfig(api_key="sk-test", temperature=2.5)
        with pytest.raises(ValidationError, match="max_tokens"):
            AgentConfig(api_key="sk-test", max_tokens=0)


class TestAgentServiceInit:
    """Tests for AgentService initialization."""

    @patch("career_bot.agent.chat_agent.OpenAIChat")
    @patch("career_bot.agent.chat_agent.Agent")
    def test_service_uses_config_values(
        self,
        mock_agent_class: MagicMock,
        mock_openai_chat: MagicMock,
    ) -> None:
        """AgentService passes config values to OpenAIChat."""
        from career_bot.agent.chat_agent import AgentService

        config = AgentConfig(
            api_key="sk-custom-key",
            base_url="http://localhost:11434/v1",
            model_name="gpt-4o-mini",
            temperature=0.3,
            max_tokens=500,
        )

        AgentService(config=config)

        mock_openai_chat.assert_called_once_with(
            id="gpt-4o-mini",
            api_key="sk-custom-key",
            base_url="http://localhost:11434/v1",
            temperature=0.3,
            max_tokens=500,
        )

    @patch("career_bot.agent.chat_agent.OpenAIChat")
    @patch("career_bot.agent.chat_agent.Agent")
    def test_service_creates_stateless_agent_with_career_prompt(
        self,
        mock_agent_class: MagicMock,
        mock_openai_chat: MagicMock,
    ) -> None:
        from career_bot.agent.chat_agent import AgentService

        service = AgentService(config=AgentConfig(api_key="sk-test"))

        call_kwargs = mock_agent_class.call_args.kwargs
        check.equal(call_kwargs["system_message"], CAREER_SYSTEM_PROMPT)
        check.is_false(call_kwargs["add_history_to_context"])
        check.is_in("Career Bot", service.system_prompt)


class TestGetResponse:
    """Tests for the model call."""

    @pytest.fixture
    def agent_class(self):
        with (
            patch("career_bot.agent.chat_agent.OpenAIChat"),
            patch("career_bot.agent.chat_agent.Agent") as mock_agent_class,
        ):
            yield mock_agent_class

    @pytest.fixture
    def service(self, agent_class: MagicMock):
        from career_bot.agent.chat_agent import AgentService

        return AgentService(config=AgentConfig(api_key="sk-test"))

    async def test_returns_reply_text(self, agent_class: MagicMock, service) -> None:
        agent_class.return_value.arun = AsyncMock(
            return_value=MagicMock(content="Lead with your impact.")
        )

        reply = await service.get_response(
            [
                ChatMessage(role="user", content="Hi"),
                ChatMessage(role="assistant", content="Hello!"),
                ChatMessage(role="user", content="Resume tips?"),
            ]
        )

        check.equal(reply, "Lead with your impact.")
        sent = agent_class.return_value.arun.await_args.args[0]
        check.equal([(m.role, m.content) for m in sent], [
            ("user", "Hi"),
            ("assistant", "Hello!"),
            ("user", "Resume tips?"),
        ])

    async def test_empty_reply_uses_fallback(self, agent_class: MagicMock, service) -> None:
        agent_class.return_value.arun = AsyncMock(return_value=MagicMock(content=None))

        reply = await service.get_response([ChatMessage(role="user", content="Hi")])

        assert reply == FALLBACK_REPLY

    async def test_provider_failure_raises_llm_error(self, agent_class: MagicMock, service) -> None:
        agent_class.return_value.arun = AsyncMock(side_effect=RuntimeError("rate limited"))

        with pytest.raises(LLMServiceError, match="Failed to get response"):
            await service.get_response([ChatMessage(role="user", content="Hi")])


class TestGetAgentService:
    """Tests for get_agent_service singleton function."""

    def test_singleton_returns_same_instance(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import career_bot.agent.chat_agent as chat_agent_module

        monkeypatch.setattr(chat_agent_module, "_agent_service", None)

        with patch.object(chat_agent_module, "AgentService") as mock_service:
            mock_service.return_value = MagicMock()

            first = chat_agent_module.get_agent_service()
            second = chat_agent_module.get_agent_service()

            assert first is second
            mock_service.assert_called_once()

    async def test_rpc_dependency_reports_missing_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A missing key surfaces as an LLM error when the reply is requested."""
        from career_bot.api import rpc

        def missing_key():
            raise ValueError("API key required")

        monkeypatch.setattr(rpc, "get_agent_service", missing_key)
        agent = rpc.get_agent()

        with pytest.raises(LLMServiceError, match="Failed to get AI response"):
            await agent.get_response([ChatMessage(role="user", content="Hi")])

    async def test_rpc_dependency_delegates_to_shared_agent(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from career_bot.api import rpc

        shared = MagicMock()
        shared.get_response = AsyncMock(return_value="Advice")
        monkeypatch.setattr(rpc, "get_agent_service", lambda: shared)
        turns = [ChatMessage(role="user", content="Hi")]

        reply = await rpc.get_agent().get_response(turns)

        check.equal(reply, "Advice")
        shared.get_response.assert_awaited_once_with(turns)
