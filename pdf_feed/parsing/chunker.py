"""Split page text into feed-sized chunks.

Paragraphs break on blank lines and on Japanese terminal punctuation.
Paragraphs longer than the chunk limit are regrouped sentence by sentence,
never cutting inside a sentence.
"""

import logging
import re

from pdf_feed.models.schemas import MIN_TEXT_LENGTH

logger = logging.getLogger(__name__)

MAX_CHUNK_LENGTH = 200
MIN_CHUNK_LENGTH = MIN_TEXT_LENGTH
SENTENCE_JOINER = "。"

PARAGRAPH_BOUNDARY = re.compile(r"\n\s*\n|[。！？]\s*")
SENTENCE_BOUNDARY = re.compile(r"[。！？]")


def split_paragraphs(text: str) -> list[str]:
    """Split text on blank lines and terminal punctuation, dropping empties."""
    return [p.strip() for p in PARAGRAPH_BOUNDARY.split(text) if p.strip()]


def split_sentences(paragraph: str) -> list[str]:
    """Split a paragraph on terminal punctuation, dropping empties."""
    return [s.strip() for s in SENTENCE_BOUNDARY.split(paragraph) if s.strip()]


def pack_sentences(sentences: list[str], max_length: int = MAX_CHUNK_LENGTH) -> list[str]:
    """Greedily join sentences into chunks of at most max_length characters.

    A chunk is flushed before the sentence that would push it over the limit.
    A sentence longer than max_length on its own becomes its own chunk.

    Args:
        sentences: Sentences in reading order.
        max_length: Chunk length limit, joiners included.

    Returns:
        Packed chunks in reading order.
    """
    chunks: list[str] = []
    current = ""

    for sentence in sentences:
        candidate = f"{current}{SENTENCE_JOINER}{sentence}" if current else sentence
        if current and len(candidate) > max_length:
            chunks.append(current)
            current = sentence
        else:
            current = candidate

    if current:
        chunks.append(current)

    return chunks


def chunk_text(
    full_text: str,
    max_length: int = MAX_CHUNK_LENGTH,
    min_length: int = MIN_CHUNK_LENGTH,
) -> list[str]:
    """Split a page's full text into ordered display chunks.

    Args:
        full_text: Concatenated text runs of one page.
        max_length: Longest chunk produced by packing sentences.
        min_length: Chunks with stripped length at or below this are dropped.

    Returns:
        Chunks in original left-to-right order. Empty for blank input.
    """
    if not full_text or not full_text.strip():
        return []

    chunks: list[str] = []
    for paragraph in split_paragraphs(full_text):
        if len(paragraph) > max_length:
            chunks.extend(pack_sentences(split_sentences(paragraph), max_length))
        else:
            chunks.append(paragraph)

    kept = [chunk for chunk in chunks if len(chunk.strip()) > min_length]
    if len(kept) < len(chunks):
        logger.debug(f"Dropped {len(chunks) - len(kept)} short chunks")

    return kept
