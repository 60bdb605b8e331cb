"""Integration tests for the chat endpoint and streaming client.

Requests go through httpx.ASGITransport into the real FastAPI app, so
routing, validation, SSE framing and error bodies are exercised end to end.
Only the agent service is replaced.
"""
