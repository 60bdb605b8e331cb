"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - api_key: Sets a provider key in the environment
    - fake_service: Replaces the Gemini agent service behind /api/chat
    - async_client: HTTPX client for API testing
    - storage / store: In-memory session storage
    - make_pdf: Builds small valid PDFs with pypdf
"""

import asyncio
import io
from collections.abc import AsyncGenerator, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from pypdf import PdfWriter

import pdfchat.api.chat as chat_module
from pdfchat.agent.chat_agent import ProviderError
from pdfchat.agent.config import AgentConfig
from pdfchat.api.app import app
from pdfchat.models.schemas import ChatRequest
from pdfchat.store.session_store import SessionStore


class FakeAgentService:
    """Stands in for AgentService; yields canned chunks.

    Args:
        chunks: Text chunks to yield in order.
        fail_at: Index before which ProviderError is raised, if any.
        delay: Seconds to sleep before each chunk.
    """

    def __init__(
        self,
        chunks: tuple[str, ...] = ("Hello", ", world"),
        fail_at: int | None = None,
        delay: float = 0.0,
    ) -> None:
        self.chunks = chunks
        self.fail_at = fail_at
        self.delay = delay
        self.requests: list[ChatRequest] = []
        self.configs: list[AgentConfig] = []

    async def stream_response(self, request: ChatRequest) -> AsyncGenerator[str]:
        self.requests.append(request)
        for index, chunk in enumerate(self.chunks):
            if index == self.fail_at:
                raise ProviderError("model overloaded")
            if self.delay:
                await asyncio.sleep(self.delay)
            yield chunk
        if self.fail_at == len(self.chunks):
            raise ProviderError("model overloaded")


@pytest.fixture
def api_key(monkeypatch: pytest.MonkeyPatch) -> str:
    """Configure a provider key for the duration of a test."""
    key = "test-google-key-12345"
    monkeypatch.setenv("GOOGLE_GENERATIVE_AI_API_KEY", key)
    return key


@pytest.fixture
def no_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every environment variable the key could come from."""
    monkeypatch.delenv("GOOGLE_GENERATIVE_AI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)


@pytest.fixture
def fake_service(monkeypatch: pytest.MonkeyPatch) -> FakeAgentService:
    """Route /api/chat to a FakeAgentService instead of Gemini."""
    service = FakeAgentService()

    def get_service(config: AgentConfig) -> FakeAgentService:
        service.configs.append(config)
        return service

    monkeypatch.setattr(chat_module, "get_agent_service", get_service)
    return service


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def storage() -> dict[str, str]:
    """Plain dict standing in for per-browser storage."""
    return {}


@pytest.fixture
def store(storage: dict[str, str]) -> SessionStore:
    return SessionStore(storage)


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    """Return a builder for small valid PDFs."""

    def build(pages: int = 1, title: str | None = None) -> bytes:
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=200, height=200)
        if title:
            writer.add_metadata({"/Title": title})
        buffer = io.BytesIO()
        writer.write(buffer)
        return buffer.getvalue()

    return build
