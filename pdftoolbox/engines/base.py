"""Document engine protocol consumed by the splitter and the tools."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from ..utils import Source


class EngineDocument:
    """A page-addressable document owned by a document engine."""

    @property
    def num_pages(self) -> int:
        raise NotImplementedError

    @property
    def file_size(self) -> int:
        return 0

    def get_page(self, index: int) -> Any:
        raise NotImplementedError


class DocumentEngine(Protocol):
    """Capability surface for loading, copying and serializing PDFs."""

    def load(self, source: Source, password: str | None = None) -> EngineDocument:
        """Load PDF bytes or a PDF path into a page-addressable document."""

    def get_page_count(self, document: EngineDocument) -> int:
        """Return the number of pages in ``document``."""

    def copy_pages_to_new_document(
        self, source: EngineDocument, page_indices: Sequence[int]
    ) -> EngineDocument:
        """Return a new document holding copies of ``page_indices`` in order."""

    def serialize(self, document: EngineDocument) -> bytes:
        """Return the PDF byte representation of ``document``."""
