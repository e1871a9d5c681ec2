"""Unit tests for individual components in isolation.

Coverage:
    - chunker: Paragraph splitting, sentence packing, short-chunk filter
    - image_extractor: Blank-page heuristic and PNG encoding
    - assembler: Order keys and placeholder rule
    - pdf_source: Validation, text runs, and rendering
    - config / models: Pydantic validation
"""
