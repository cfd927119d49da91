"""Language model settings for the career advisor.

Values come from the environment (and a local .env file). Only the API key
is mandatory; the model, token cap, and temperature default to the values
the advisor was tuned for. LLM_BASE_URL points the client at any
OpenAI-compatible server.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_MAX_TOKENS = 1000
DEFAULT_TEMPERATURE = 0.7


def _api_key_from_env() -> str:
    # LLM_API_KEY wins over OPENAI_API_KEY
    return os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY", "")


class AgentConfig(BaseModel):
    """Settings for the model behind every chat reply.

    Attributes:
        api_key: Provider key, from LLM_API_KEY or OPENAI_API_KEY.
        base_url: Optional OpenAI-compatible endpoint, from LLM_BASE_URL.
        model_name: Chat model id, from LLM_MODEL.
        temperature: Sampling temperature of each reply.
        max_tokens: Upper bound on reply length.
    """

    api_key: str = Field(default_factory=_api_key_from_env)
    base_url: str | None = Field(default_factory=lambda: os.getenv("LLM_BASE_URL") or None)
    model_name: str = Field(default_factory=lambda: os.getenv("LLM_MODEL", DEFAULT_MODEL))
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, ge=1, le=128000)

    @field_validator("api_key")
    @classmethod
    def require_api_key(cls, v: str) -> str:
        key = v.strip()
        if not key:
            raise ValueError("API key required. Set LLM_API_KEY or OPENAI_API_KEY in .env")
        return key


def get_agent_config() -> AgentConfig:
    """Build the model settings from the environment.

    Raises:
        ValueError: If neither API key variable is set.
    """
    return AgentConfig()
