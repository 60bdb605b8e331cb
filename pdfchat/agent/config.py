"""Agent configuration with environment variable loading.

Pydantic-based configuration for the Gemini chat agent. The sampling
parameters and the request deadline are fixed defaults; only the credential
and the model id come from the environment.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

API_KEY_ENV = "GOOGLE_GENERATIVE_AI_API_KEY"
DEFAULT_MODEL = "gemini-1.5-flash"


class AgentConfig(BaseModel):
    """Configuration for the Gemini chat agent.

    Attributes:
        api_key: Google AI API key for model access.
        model_name: Model identifier to use.
        temperature: Sampling temperature.
        max_tokens: Maximum tokens in generated response.
        max_duration: Wall-clock limit for a whole request, in seconds.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv(API_KEY_ENV, os.getenv("GOOGLE_API_KEY", "")),
        description="API key for the Gemini provider",
        validate_default=True,
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", DEFAULT_MODEL),
        description="Model to use",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_tokens: int = Field(
        default=1000,
        ge=1,
        le=65536,
        description="Maximum tokens in generated response",
    )
    max_duration: float = Field(
        default=30.0,
        gt=0.0,
        description="Maximum wall-clock seconds for one chat request",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(f"API key required. Set {API_KEY_ENV} in .env")
        return v.strip()

    @property
    def masked_api_key(self) -> str:
        """Key prefix that is safe to log."""
        return f"{self.api_key[:10]}..."


def get_agent_config() -> AgentConfig:
    """Create agent configuration from environment.

    Read on every request so that a missing key is reported before any
    provider call is made.

    Returns:
        Configured AgentConfig instance.

    Raises:
        ValidationError: If no API key is set.
    """
    return AgentConfig()
