"""Agno agent logic for LLM orchestration.

Responsibilities:
    - Agent initialization with Gemini models
    - System prompt selection for document-aware conversations
    - Conversion of attachments into model media parts
    - Streaming token generation coordination

Maintains clean separation from the HTTP layer.
"""

from pdfchat.agent.chat_agent import AgentService, ProviderError, get_agent_service
from pdfchat.agent.config import AgentConfig, get_agent_config

__all__ = [
    "AgentConfig",
    "AgentService",
    "ProviderError",
    "get_agent_config",
    "get_agent_service",
]
