"""FastAPI endpoints for the PDF chat service.

HTTP and streaming routes with async request handling.
Supports Server-Sent Events for real-time chat streaming.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Streamed chat completion for a conversation
"""
