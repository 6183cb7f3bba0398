"""
Documents feature: Split extracted syllabus text into overlapping chunks.

Sizes are characters standing in for tokens (1 token ~ 4 chars).
Paragraphs are packed greedily; each new chunk starts with the tail of
the previous one. Chunks that still come out far too large are re-split
on sentence boundaries.
"""

import re

from langchain_text_splitters import RecursiveCharacterTextSplitter

CHARS_PER_TOKEN = 4
OVERSIZE_FACTOR = 1.5
SENTENCE_SEPARATORS = [". ", "! ", "? ", " ", ""]


def normalize_text(text: str) -> str:
    """Collapse spaces/tabs, trim lines, cap blank runs at one empty line."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"[^\S\n]+", " ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def split_paragraphs(text: str) -> list[str]:
    """Split normalized text on blank lines; inner line breaks become spaces."""
    return [" ".join(p.split()) for p in re.split(r"\n{2,}", text) if p.strip()]


def _split_sentences(chunk: str, max_chars: int) -> list[str]:
    splitter = RecursiveCharacterTextSplitter(
        chunk_size=max_chars,
        chunk_overlap=0,
        separators=SENTENCE_SEPARATORS,
        keep_separator="end",
    )
    return splitter.split_text(chunk)


def chunk_text(
    text: str,
    max_tokens: int = 600,
    overlap: int = 200,
    min_chars: int = 50,
) -> list[str]:
    """Split text into overlapping chunks suitable for embedding.

    Args:
        text: The full document text.
        max_tokens: Approximate max tokens per chunk.
        overlap: Characters carried from the end of one chunk into the next.
        min_chars: Chunks shorter than this are dropped (unless it is the only one).

    Returns:
        Ordered list of chunk strings; no chunk exceeds 1.5 * max_tokens * 4 chars.
    """
    max_chars = max_tokens * CHARS_PER_TOKEN
    cleaned = normalize_text(text)
    if not cleaned:
        return []
    if len(cleaned) <= max_chars:
        return [cleaned]

    chunks: list[str] = []
    current = ""
    for para in split_paragraphs(cleaned):
        if current and len(current) + 1 + len(para) > max_chars:
            chunks.append(current)
            tail = current[-overlap:].lstrip() if overlap > 0 else ""
            current = f"{tail} {para}" if tail else para
        else:
            current = f"{current} {para}" if current else para
    if current:
        chunks.append(current)

    ceiling = max_chars * OVERSIZE_FACTOR
    final: list[str] = []
    for chunk in chunks:
        if len(chunk) > ceiling:
            final.extend(_split_sentences(chunk, max_chars))
        else:
            final.append(chunk)

    if len(final) > 1:
        final = [c for c in final if len(c) >= min_chars]
    return final
