"""Retrieval-augmented QA over one document.

A RagChain starts empty. preload() loads and chunks the document, embeds the
chunks, builds the index and the model backend, and only then publishes them
and marks the chain loaded. If any step fails nothing is kept and the chain
stays empty, so preload can be retried.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Union

from . import speech
from .backends import BackendSettings, ModelKind, backend_settings, create_model
from .chunking import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE, Chunk, split_document
from .config import DEFAULT_LOCAL_BASE_URL, DEFAULT_TEMPERATURE, ProviderConfig, resolve
from .embeddings import Embedder
from .index import SimilarityIndex
from .ingest import DocumentRef, load_document
from .prompts import render_qa_prompt
from .results import RagPreloadError, RagStateError, Result

logger = logging.getLogger("aikit.rag")

DEFAULT_TOP_K = 4

ModelFactory = Callable[[BackendSettings, float], object]


@dataclass(frozen=True)
class RagAnswer:
    text: str
    sources: List[Chunk] = field(default_factory=list)
    voice_url: str = ""


class RagChain:
    """Document QA chain. Use create_rag_chain() to build and preload in one step."""

    def __init__(
        self,
        config: Optional[ProviderConfig] = None,
        embedder=None,
        model_factory: Optional[ModelFactory] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
        top_k: int = DEFAULT_TOP_K,
    ):
        self.config = resolve(config)
        self.embedder = embedder if embedder is not None else Embedder()
        self.model_factory = model_factory or create_model
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.top_k = top_k

        self._index: Optional[SimilarityIndex] = None
        self._model = None
        self._loaded = False
        self._lock = threading.Lock()

    def preload(
        self,
        model_kind: ModelKind,
        document: Union[DocumentRef, Tuple[str, str]],
        model_name: str = "",
        temperature: float = DEFAULT_TEMPERATURE,
        base_url: str = DEFAULT_LOCAL_BASE_URL,
    ) -> None:
        if not isinstance(document, DocumentRef):
            document = DocumentRef(*document)

        with self._lock:
            if self._loaded:
                raise RagStateError("RAG chain is already loaded")

            logger.info("Preloading RAG chain model...")
            step = "load"
            try:
                doc = load_document(document)
                step = "chunk"
                chunks = split_document(doc, self.chunk_size, self.chunk_overlap)
                step = "embed"
                index = SimilarityIndex.from_chunks(chunks, self.embedder)
                step = "model"
                settings = backend_settings(model_kind, self.config, model_name, temperature, base_url)
                model = self.model_factory(settings, self.config.request_timeout)
            except Exception as e:
                logger.exception(f"RAG preload failed at '{step}': {e}")
                raise RagPreloadError(step, str(e)) from e

            self._index = index
            self._model = model
            self._loaded = True
            logger.info(f"RAG chain model preloaded successfully! ({len(index)} chunks, {settings.model})")

    def is_loaded(self) -> bool:
        return self._loaded

    def retrieve(self, question: str) -> List[Chunk]:
        query = self.embedder.embed_query(question)
        return [chunk for chunk, _ in self._index.search(query, k=self.top_k)]

    def answer(self, question: str) -> Result:
        """Retrieve context and ask the model. NOT_LOADED before preload."""
        if not self._loaded:
            logger.warning("RAG chain model wasn't loaded!")
            return Result.not_loaded()

        try:
            logger.debug("Getting RAG chain model answer...")
            sources = self.retrieve(question)
            prompt = render_qa_prompt([c.text for c in sources], question)
            text = self._model.invoke(prompt)
            logger.debug("RAG chain model answer generated!")
        except Exception as e:
            logger.exception(f"Error in RagChain.answer: {e}")
            return Result.upstream_error(f"Error answering question: {e}", cause=e)
        return Result.success(RagAnswer(text=text, sources=sources))

    def answer_with_voice(self, question: str, app=None, voice_model: str = speech.DEFAULT_VOICE) -> Result:
        """As answer(), plus speech for the answer exposed on ``app``."""
        answered = self.answer(question)
        if not answered.ok:
            return answered

        logger.debug("Generating voice for RAG chain model answer...")
        voice = speech.generate_voice_url(answered.value.text, app=app, voice=voice_model, config=self.config)
        if not voice.ok:
            logger.warning(f"Voice generation failed, returning text only: {voice.detail}")
            return Result.success(answered.value, detail=voice.detail)
        logger.debug("Voice generated")
        return Result.success(RagAnswer(text=answered.value.text, sources=answered.value.sources, voice_url=voice.value))


def create_rag_chain(
    model_kind: ModelKind,
    document: Union[DocumentRef, Tuple[str, str]],
    model_name: str = "",
    temperature: float = DEFAULT_TEMPERATURE,
    base_url: str = DEFAULT_LOCAL_BASE_URL,
    config: Optional[ProviderConfig] = None,
    **chain_kwargs,
) -> RagChain:
    chain = RagChain(config=config, **chain_kwargs)
    chain.preload(model_kind, document, model_name, temperature, base_url)
    return chain
