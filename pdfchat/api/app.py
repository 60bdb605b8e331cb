"""FastAPI application factory.

Serves the streaming chat endpoint and a health check. The NiceGUI page is
mounted on the same app in integrated mode (see pdfchat.main).
"""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from pdfchat import __version__
from pdfchat.agent.config import API_KEY_ENV, get_agent_config
from pdfchat.api.chat import router as chat_router

logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Report the model configuration on startup.

    A missing key is only a warning here; /api/chat answers 500 until it is set.
    """
    logger.info(f"Starting PDF Chat API v{__version__}...")
    try:
        config = get_agent_config()
    except ValidationError:
        logger.warning(f"{API_KEY_ENV} is not set; chat requests will fail")
    else:
        logger.info(f"Using model {config.model_name} (key {config.masked_api_key})")
    yield
    logger.info("Shutting down PDF Chat API...")


def create_app() -> FastAPI:
    """Build the API application.

    Returns:
        FastAPI app with CORS, the chat router and /health.
    """
    application = FastAPI(
        title="PDF Chat API",
        description=(
            "Chat with Google Gemini about PDF documents and images. "
            "Accepts the full conversation with attachments and streams the "
            "assistant reply as Server-Sent Events."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "service": "pdf-chat"}

    return application


app = create_app()
