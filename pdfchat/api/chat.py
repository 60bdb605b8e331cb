"""Streaming chat endpoint.

Accepts the whole conversation, picks a system prompt and relays the Gemini
reply as Server-Sent Events. Failures before the first chunk become an
HTTP 500 with a JSON body; failures after it are reported in the final frame.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator, AsyncIterator
from datetime import UTC, datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse
from pydantic import ValidationError

from pdfchat.agent.chat_agent import get_agent_service
from pdfchat.agent.config import API_KEY_ENV, get_agent_config
from pdfchat.models.schemas import ChatRequest, ErrorResponse, StreamChunk

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


def _sse(chunk: StreamChunk) -> str:
    return f"data: {chunk.model_dump_json()}\n\n"


def _error_response(body: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content=body.model_dump(exclude_none=True),
    )


async def _next_chunk(iterator: AsyncIterator[str]) -> str | None:
    try:
        return await anext(iterator)
    except StopAsyncIteration:
        return None


async def _relay(stream: AsyncGenerator[str], deadline: float) -> AsyncGenerator[str]:
    """Forward provider chunks until the stream ends or the deadline passes.

    Raises:
        TimeoutError: If the request runs past its deadline.
    """
    loop = asyncio.get_running_loop()
    try:
        while True:
            remaining = deadline - loop.time()
            if remaining <= 0:
                raise TimeoutError("Chat request exceeded its maximum duration")
            chunk = await asyncio.wait_for(_next_chunk(stream), timeout=remaining)
            if chunk is None:
                return
            yield chunk
    finally:
        await stream.aclose()


async def _event_stream(
    first: str | None,
    relay: AsyncGenerator[str],
) -> AsyncGenerator[str]:
    """Format relayed chunks as SSE frames, ending with a done frame."""
    try:
        if first is not None:
            yield _sse(StreamChunk(content=first, done=False))
            async for chunk in relay:
                yield _sse(StreamChunk(content=chunk, done=False))
        yield _sse(StreamChunk(content="", done=True))
    except Exception as e:
        logger.error(f"Chat stream failed after it was opened: {e}", exc_info=True)
        yield _sse(StreamChunk(content="", done=True, error=str(e) or type(e).__name__))
    finally:
        await relay.aclose()


@router.post(
    "/chat",
    responses={
        200: {"content": {"text/event-stream": {}}},
        500: {"model": ErrorResponse},
    },
)
async def chat(request: Request) -> Response:
    """Stream an assistant reply for a conversation.

    Body: ``{"messages": [...]}``, see ChatRequest.

    Returns:
        200 text/event-stream of StreamChunk frames.

    Raises:
        500: Missing API key, malformed body, or provider failure.
    """
    logger.info("Chat API called")

    try:
        config = get_agent_config()
    except ValidationError:
        logger.error(f"Missing {API_KEY_ENV} environment variable")
        return _error_response(ErrorResponse(error="API key not configured"))

    logger.debug(f"API key exists: {config.masked_api_key}")

    try:
        payload = ChatRequest.model_validate(await request.json())
        logger.info(f"Received {len(payload.messages)} messages")
        logger.info(f"Has PDF attachment: {payload.has_pdf_attachment()}")

        service = get_agent_service(config)
        deadline = asyncio.get_running_loop().time() + config.max_duration
        relay = _relay(service.stream_response(payload), deadline)
        first = await anext(relay, None)
    except Exception as e:
        logger.error(f"Error in chat API: {e}")
        logger.error(
            f"Error details: {dict(message=str(e), name=type(e).__name__)}",
            exc_info=True,
        )
        return _error_response(
            ErrorResponse(
                error="Internal Server Error",
                details=str(e) or type(e).__name__,
                timestamp=datetime.now(UTC).isoformat(),
            )
        )

    logger.info("Stream created successfully")
    return StreamingResponse(
        _event_stream(first, relay),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
