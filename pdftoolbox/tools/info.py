"""Document information for the ``info`` command and endpoint."""

from __future__ import annotations

from typing import Optional

from ..engines import PypdfEngine
from ..types import DocumentInfo
from ..utils import Source


def get_document_info(
    source: Source,
    *,
    password: Optional[str] = None,
    engine: Optional[PypdfEngine] = None,
) -> DocumentInfo:
    engine = engine or PypdfEngine()
    document = engine.load(source, password=password)
    metadata = engine.metadata(document)
    return DocumentInfo(
        num_pages=engine.get_page_count(document),
        file_size=document.file_size,
        title=metadata.get("/Title"),
        author=metadata.get("/Author"),
        subject=metadata.get("/Subject"),
        creator=metadata.get("/Creator"),
        producer=metadata.get("/Producer"),
        is_encrypted=document.is_encrypted,
    )


__all__ = ["get_document_info"]
