"""HTTP client for the streaming chat endpoint."""

import json
import logging
import os
from collections.abc import Callable

import httpx

from pdfchat.models.schemas import ChatMessage

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")


def _error_from_response(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if not isinstance(body, dict):
        return f"HTTP {response.status_code}"
    if details := body.get("details"):
        return f"{body.get('error', 'Error')}: {details}"
    return body.get("error") or f"HTTP {response.status_code}"


async def stream_chat_response(
    messages: list[ChatMessage],
    on_chunk: Callable[[str], None],
    on_complete: Callable[[], None],
    on_error: Callable[[str], None],
    *,
    base_url: str = API_BASE_URL,
    transport: httpx.AsyncBaseTransport | None = None,
    timeout: float = 120.0,
) -> None:
    """Consume the SSE stream from /api/chat.

    Exactly one of ``on_complete`` or ``on_error`` is called, unless the
    coroutine is cancelled.
    """
    payload = {"messages": [m.model_dump(mode="json", by_alias=True) for m in messages]}

    async with httpx.AsyncClient(
        base_url=base_url, transport=transport, timeout=timeout
    ) as client:
        try:
            async with client.stream(
                "POST",
                "/api/chat",
                json=payload,
                headers={"Accept": "text/event-stream"},
            ) as response:
                if response.is_error:
                    await response.aread()
                    on_error(_error_from_response(response))
                    return
                async for line in response.aiter_lines():
                    if not line.startswith("data: "):
                        continue
                    data = json.loads(line[6:])
                    if data.get("error"):
                        on_error(data["error"])
                        return
                    if content := data.get("content"):
                        on_chunk(content)
                    if data.get("done"):
                        on_complete()
                        return
            on_error("Stream closed before completion")
        except httpx.RequestError as e:
            logger.warning(f"Chat request failed: {e}")
            on_error(f"Connection failed: {e}")
