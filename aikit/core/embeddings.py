"""Sentence-transformers embeddings, lazy-loaded on first use."""
from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

logger = logging.getLogger("aikit.embeddings")

DEFAULT_EMBEDDING_MODEL = "sentence-transformers/all-MiniLM-L6-v2"


class Embedder:
    """Wraps a SentenceTransformer model behind embed_documents / embed_query.

    Anything with these two methods can stand in for it (tests use a fake).
    """

    def __init__(self, model_name: str = DEFAULT_EMBEDDING_MODEL, device: Optional[str] = None):
        self.model_name = model_name
        self.device = device
        self._model = None

    @property
    def model(self):
        if self._model is None:
            try:
                from sentence_transformers import SentenceTransformer  # type: ignore
            except Exception as e:
                raise RuntimeError(
                    "Embeddings require 'sentence-transformers'. Install with: pip install sentence-transformers"
                ) from e
            logger.info(f"Loading embedding model: {self.model_name}...")
            self._model = SentenceTransformer(self.model_name, device=self.device)
        return self._model

    def embed_documents(self, texts: List[str], batch_size: int = 32) -> np.ndarray:
        return np.asarray(
            self.model.encode(texts, batch_size=batch_size, show_progress_bar=False, convert_to_numpy=True),
            dtype=np.float32,
        )

    def embed_query(self, text: str) -> np.ndarray:
        return np.asarray(self.model.encode(text, convert_to_numpy=True), dtype=np.float32)
