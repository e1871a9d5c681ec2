"""Integration tests for components working together as a system.

Coverage:
    - Full extraction over generated PDFs
    - Fatal versus page-local failures
    - API endpoints with real HTTP requests through ASGI transport
"""
