"""Agno agent service streaming Gemini completions.

The service is stateless: the client sends the whole conversation with every
request, so no Agno storage or session history is configured. Two agents are
built up front, one per system prompt, and the request picks between them.

Attachments arrive as data URLs (uploaded files) or http(s) URLs. Data URLs
are decoded here so that Gemini receives inline bytes; remote URLs are passed
through by reference.
"""

import logging
from collections.abc import AsyncGenerator

from agno.agent import Agent
from agno.media import File, Image
from agno.models.google import Gemini
from agno.models.message import Message
from agno.run.agent import RunEvent

from pdfchat.agent.config import AgentConfig, get_agent_config
from pdfchat.agent.prompts import DOCUMENT_PROMPT, GENERAL_PROMPT, select_system_prompt
from pdfchat.models.schemas import Attachment, ChatMessage, ChatRequest
from pdfchat.parsing.attachments import decode_data_url, is_data_url

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Raised when the model provider reports a failed run."""

    pass


def _to_image(attachment: Attachment) -> Image:
    if is_data_url(attachment.url):
        mime_type, content = decode_data_url(attachment.url)
        return Image(content=content, mime_type=mime_type)
    return Image(url=attachment.url, mime_type=attachment.content_type)


def _to_file(attachment: Attachment) -> File:
    if is_data_url(attachment.url):
        mime_type, content = decode_data_url(attachment.url)
        return File(content=content, mime_type=mime_type)
    return File(url=attachment.url, mime_type=attachment.content_type)


def to_agno_message(message: ChatMessage) -> Message:
    """Convert a wire message into an Agno message with media parts.

    Raises:
        ValueError: If an attachment carries a malformed data URL.
    """
    images = [_to_image(a) for a in message.attachments if a.is_image]
    files = [_to_file(a) for a in message.attachments if not a.is_image]

    return Message(
        role=message.role.value,
        content=message.content,
        images=images or None,
        files=files or None,
    )


class AgentService:
    """Service for streaming Gemini replies through Agno.

    Wraps Agno's Agent with:
    - One agent per fixed system prompt
    - Conversion of wire messages and attachments to Agno messages
    - A streaming interface that yields plain text chunks
    """

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Initialize the agent service.

        Args:
            config: Optional agent configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_agent_config()
        self._agents = {
            DOCUMENT_PROMPT: self._create_agent(DOCUMENT_PROMPT),
            GENERAL_PROMPT: self._create_agent(GENERAL_PROMPT),
        }

    @property
    def config(self) -> AgentConfig:
        return self._config

    def _create_agent(self, system_prompt: str) -> Agent:
        """Create an Agno agent bound to one system prompt.

        Returns:
            Configured Agent with a Gemini model and no storage.
        """
        model = Gemini(
            id=self._config.model_name,
            api_key=self._config.api_key,
            temperature=self._config.temperature,
            max_output_tokens=self._config.max_tokens,
        )

        return Agent(
            model=model,
            system_message=system_prompt,
            markdown=False,
        )

    def agent_for(self, request: ChatRequest) -> Agent:
        return self._agents[select_system_prompt(request)]

    async def stream_response(self, request: ChatRequest) -> AsyncGenerator[str]:
        """Stream response chunks for a conversation.

        Yields response tokens as they arrive; nothing is buffered.

        Args:
            request: The validated conversation.

        Yields:
            Response text chunks as they arrive.

        Raises:
            ProviderError: If the run fails on the provider side.
            ValueError: If an attachment cannot be decoded.
        """
        messages = [to_agno_message(m) for m in request.messages]
        agent = self.agent_for(request)

        response_stream = agent.arun(input=messages, stream=True)

        async for chunk in response_stream:
            event = getattr(chunk, "event", None)
            if event == RunEvent.run_error:
                raise ProviderError(getattr(chunk, "content", None) or "Model run failed")
            if event == RunEvent.run_content and chunk.content:
                yield chunk.content


# Module-level singleton instance
_agent_service: AgentService | None = None


def get_agent_service(config: AgentConfig | None = None) -> AgentService:
    """Get or create the global agent service.

    The instance is rebuilt when the configuration changes, for example when
    the API key is rotated in the environment.

    Returns:
        The AgentService instance.
    """
    global _agent_service
    config = config or get_agent_config()
    if _agent_service is None or _agent_service.config != config:
        _agent_service = AgentService(config)
    return _agent_service
