"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Session sidebar with create, load and delete
    - Chat message display with streaming support
    - File upload for PDF documents and images
    - Inline rendering of image and PDF attachments

State and operations live in ChatController; the page only renders and
forwards user actions. Replies are fetched from the API over HTTP.
"""
