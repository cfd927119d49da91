"""Integration tests for the API working as a system.

Coverage:
    - RPC procedures with real HTTP requests
    - PDF parse endpoint with generated documents
    - Full chat workflow from signup to reply

Runs against an in-memory database with a fake agent, so no API key is
required.
"""
