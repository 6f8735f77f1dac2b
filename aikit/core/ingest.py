"""Document loading for the RAG chain: plain text or PDF (PyMuPDF)."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger("aikit.ingest")


@dataclass(frozen=True)
class DocumentRef:
    """Where a document lives and how to read it ("pdf"; anything else is text)."""
    src: str
    type: str = "txt"


@dataclass
class Document:
    content: str
    source: str
    file_type: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.content)


def clean_pdf_text(s: str) -> str:
    """Undo line-break hyphenation and drop bare page-number lines."""
    if not s:
        return ""
    s = re.sub(r"-\n\s*", "", s)
    s = re.sub(r"\n\s*Page\s+\d+\s*(/\s*\d+)?\s*\n", "\n", s, flags=re.I)
    return s.strip()


def load_text(path: str) -> Document:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        text = f.read()
    return Document(content=text, source=Path(path).name, file_type="txt", metadata={"file_path": str(path)})


def load_pdf(path: str) -> Document:
    try:
        import fitz  # type: ignore
    except Exception as e:
        raise RuntimeError("PDF loading requires PyMuPDF. Install with: pip install pymupdf") from e

    parts = []
    with fitz.open(path) as doc:
        page_count = doc.page_count
        for page in doc:
            page_text = page.get_text("text")
            if page_text:
                parts.append(page_text)
    text = clean_pdf_text("\n".join(parts))
    return Document(
        content=text,
        source=Path(path).name,
        file_type="pdf",
        metadata={"file_path": str(path), "page_count": page_count},
    )


def load_document(ref: DocumentRef) -> Document:
    if ref.type.lower() == "pdf":
        doc = load_pdf(ref.src)
    else:
        doc = load_text(ref.src)
    logger.debug(f"Loaded {doc.file_type} document {doc.source}: {len(doc)} chars")
    return doc
