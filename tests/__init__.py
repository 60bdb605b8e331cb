"""Test package for PDF Chat.

Structure:
    - unit/: Individual function and class tests
    - integration/: API and streaming client tests over ASGI

The model provider is never called. Integration tests swap the agent
service for a scripted fake; sample PDFs are generated with pypdf.
Leverages pytest with pytest-check for soft assertions.
"""
