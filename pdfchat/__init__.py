"""PDF Chat - chat with Google Gemini about PDF documents and images.

Combines FastAPI for HTTP streaming, Agno for model orchestration,
NiceGUI for the chat interface, and Pydantic for data validation.

Components:
    - api: HTTP endpoints and streaming responses
    - agent: Gemini orchestration and system prompt selection
    - parsing: Attachment encoding and PDF validation
    - store: Persisted chat sessions
    - ui: Web interface for chat interactions
    - models: Request, response and session schemas
"""

__version__ = "0.1.0"
