"""Unit tests for individual components in isolation.

Coverage:
    - models/: Pydantic validation and wire aliases
    - parsing/: PDF inspection and attachment encoding
    - agent/: Configuration, prompt selection and streaming filter
    - store/: Session persistence and recovery from corrupt storage
    - ui/: Chat controller state transitions

Uses mocks for the Gemini model and agno Agent.
"""
