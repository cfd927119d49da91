"""Test package for Career Bot.

Unit tests cover isolated logic and integration tests cover the HTTP
surface end to end.

Structure:
    - unit/: Individual function and class tests
    - integration/: RPC procedures and the PDF endpoint over HTTP

Databases are in-memory SQLite and the language model is replaced by a
fake agent. Leverages pytest with pytest-check for soft assertions.
"""
