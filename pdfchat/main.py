"""Main application entry point.

Runs FastAPI (port 8000) with NiceGUI mounted for the chat interface.
Environment variables are loaded from .env file.
"""

import logging
import os
import subprocess
import sys
import time

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def storage_secret() -> str:
    """Secret that signs NiceGUI's per-browser storage cookie."""
    return os.getenv("NICEGUI_STORAGE_SECRET", "pdf-chat-secret")


def run_integrated() -> None:
    """Run FastAPI with NiceGUI mounted on the same server.

    The UI calls the API over HTTP on the same port, so API_BASE_URL
    defaults to this server when it is not set explicitly.
    """
    port = int(os.getenv("PORT", "8000"))
    os.environ.setdefault("API_BASE_URL", f"http://localhost:{port}")

    import uvicorn
    from nicegui import ui

    from pdfchat.api.app import create_app
    from pdfchat.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()

    # Mount NiceGUI onto FastAPI
    ui.run_with(
        app,
        title="Gemini PDF Chat",
        favicon="✨",
        storage_secret=storage_secret(),
    )

    logger.info(f"Starting integrated server on http://localhost:{port}")
    logger.info(f"API docs available at http://localhost:{port}/docs")
    logger.info(f"Chat UI available at http://localhost:{port}/")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def wait_for_first_exit(procs: dict[str, subprocess.Popen], interval: float = 1.0) -> str:
    """Block until one of the server processes exits.

    Returns:
        Name of the process that exited first.
    """
    while True:
        for name, proc in procs.items():
            if proc.poll() is not None:
                logger.warning(f"{name} exited with code {proc.returncode}, stopping")
                return name
        time.sleep(interval)


def run_separate() -> None:
    """Run FastAPI and NiceGUI as separate servers.

    FastAPI on port 8000, NiceGUI on port 8080. The UI reaches the API
    through API_BASE_URL. Both are stopped as soon as either one exits.
    """
    logger.info("Starting FastAPI on http://localhost:8000")
    logger.info("Starting NiceGUI on http://localhost:8080")

    fastapi_proc = subprocess.Popen(
        [
            sys.executable,
            "-m",
            "uvicorn",
            "pdfchat.api.app:app",
            "--host",
            os.getenv("HOST", "0.0.0.0"),
            "--port",
            "8000",
        ]
    )
    nicegui_proc = subprocess.Popen(
        [sys.executable, "-c", "from pdfchat.ui.chat_page import main; main()"]
    )

    try:
        wait_for_first_exit({"FastAPI": fastapi_proc, "NiceGUI": nicegui_proc})
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        fastapi_proc.terminate()
        nicegui_proc.terminate()
        fastapi_proc.wait()
        nicegui_proc.wait()


def main() -> None:
    """Application entry point.

    Set RUN_MODE=separate to run FastAPI and NiceGUI on different ports.
    Default is integrated mode (both on port 8000).
    """
    mode = os.getenv("RUN_MODE", "integrated").lower()

    logger.info(f"Starting PDF Chat in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
