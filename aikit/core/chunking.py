"""Sliding-window character chunker.

Chunks are ``chunk_size`` characters wide and start every
``chunk_size - overlap`` characters, so neighbours share exactly ``overlap``
characters. The last chunk ends at the end of the document and may be
shorter.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .ingest import Document

DEFAULT_CHUNK_SIZE = 512
DEFAULT_CHUNK_OVERLAP = 32


@dataclass(frozen=True)
class Chunk:
    text: str
    source: str
    index: int
    start: int
    end: int

    def __len__(self) -> int:
        return len(self.text)


def split_text(
    text: str,
    source: str = "",
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> List[Chunk]:
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if overlap < 0 or overlap >= chunk_size:
        raise ValueError("overlap must be in [0, chunk_size)")

    step = chunk_size - overlap
    chunks: List[Chunk] = []
    start = 0
    n = len(text)
    while start < n:
        end = min(start + chunk_size, n)
        chunks.append(Chunk(text=text[start:end], source=source, index=len(chunks), start=start, end=end))
        if end == n:
            break
        start += step
    return chunks


def split_document(
    document: Document,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> List[Chunk]:
    return split_text(document.content, document.source, chunk_size, overlap)
