"""Unit tests for individual components in isolation.

Coverage:
    - auth/: Password hashing and session tokens
    - services/: Account and chat procedures against an in-memory database
    - agent/: Agent configuration, context assembly, and the model call
    - parsing/: PDF text extraction and resume sections
    - ui/: Status tracker, session cache, and HTTP client

Uses mocks for the language model. Leverages pytest-check for multiple
assertions per test.
"""
