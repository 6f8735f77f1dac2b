"""In-memory FAISS index over chunk embeddings.

Vectors are L2-normalized and stored in an ``IndexFlatIP``, so inner product
equals cosine similarity and search is exact.
"""
from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

import faiss
import numpy as np

from .chunking import Chunk

logger = logging.getLogger("aikit.index")


def _as_rows(vectors) -> np.ndarray:
    m = np.ascontiguousarray(np.asarray(vectors, dtype="float32"))
    if m.ndim == 1:
        m = m.reshape(1, -1)
    return m


class SimilarityIndex:
    """Read-only after construction; FAISS row i holds chunk i."""

    def __init__(self, chunks: Sequence[Chunk], vectors: np.ndarray):
        rows = _as_rows(vectors)
        if rows.shape[0] != len(chunks):
            raise ValueError(f"expected {len(chunks)} embedding rows, got shape {rows.shape}")
        # faiss normalizes in place
        rows = rows.copy()
        faiss.normalize_L2(rows)

        self._chunks: Tuple[Chunk, ...] = tuple(chunks)
        self._index = faiss.IndexFlatIP(rows.shape[1])
        self._index.add(rows)
        logger.debug(f"FAISS index built (dim={rows.shape[1]}, size={self._index.ntotal})")

    @classmethod
    def from_chunks(cls, chunks: Sequence[Chunk], embedder) -> "SimilarityIndex":
        if not chunks:
            raise ValueError("cannot build an index from zero chunks")
        vectors = embedder.embed_documents([c.text for c in chunks])
        return cls(chunks, vectors)

    def __len__(self) -> int:
        return int(self._index.ntotal)

    @property
    def dim(self) -> int:
        return int(self._index.d)

    def search(self, query_vector: np.ndarray, k: int = 4) -> List[Tuple[Chunk, float]]:
        """Top-k chunks by cosine similarity, best first."""
        k = max(0, min(k, len(self._chunks)))
        if k == 0:
            return []
        q = _as_rows(query_vector).copy()
        faiss.normalize_L2(q)
        scores, ids = self._index.search(q, k)
        return [(self._chunks[i], float(s)) for s, i in zip(scores[0], ids[0]) if i >= 0]
