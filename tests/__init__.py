"""Test package for PDF Feed.

Provides coverage for all components with unit tests for isolated logic
and integration tests for workflows.

Structure:
    - unit/: Individual function and class tests
    - integration/: End-to-end pipeline and HTTP upload tests
    - fakes.py: In-memory page sources for failure injection

Test PDFs are generated with PyMuPDF inside fixtures.
Leverages pytest with pytest-check for soft assertions.
"""
