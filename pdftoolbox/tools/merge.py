"""Merge several PDFs into one document."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from ..engines import PypdfEngine
from ..exceptions import ToolOptionError
from ..utils import Source, get_logger

LOGGER = get_logger("pdftoolbox.merge")


def merge_documents(
    sources: Sequence[Source],
    *,
    engine: Optional[PypdfEngine] = None,
    on_progress: Optional[Callable[[float], None]] = None,
) -> bytes:
    """Concatenate every page of ``sources`` in the order given.

    Metadata of the first document is carried over to the result.
    """

    if not sources:
        raise ToolOptionError("At least one PDF must be provided.")

    engine = engine or PypdfEngine()
    documents = []
    for position, source in enumerate(sources, start=1):
        document = engine.load(source)
        LOGGER.debug("Adding %s pages from input %s", document.num_pages, position)
        documents.append(document)
        if on_progress:
            on_progress(position / len(sources) * 100)

    merged = engine.merge_documents(documents)
    LOGGER.info("Merged %d PDFs into %d pages", len(documents), merged.num_pages)
    return engine.serialize(merged)


__all__ = ["merge_documents"]
