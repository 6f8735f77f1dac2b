"""Prompt template for retrieval QA."""
from __future__ import annotations

from typing import List


QA_TEMPLATE = (
    "Use the following pieces of context to answer the question at the end.\n"
    "If you don't know the answer, just say that you don't know, don't try to make up an answer.\n"
    "Use three sentences maximum and keep the answer as concise as possible. Be precise with numbers.\n"
    "{context}\n"
    "Question: {question}\n"
    "Helpful Answer:"
)


def render_ctx_blocks(contexts: List[str]) -> str:
    """Join retrieved chunks into one context block, skipping empties."""
    ctxs = [c.strip() for c in contexts if c and isinstance(c, str)]
    return "\n\n".join(ctxs)


def render_qa_prompt(contexts: List[str], question: str) -> str:
    return QA_TEMPLATE.format(context=render_ctx_blocks(contexts), question=question)
