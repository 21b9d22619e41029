"""
Custom exceptions for pdftoolbox.

No exception covers malformed range segments. The range parser drops
them instead of raising (see :mod:`pdftoolbox.ranges`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .types import PageGroup


class PDFToolboxError(Exception):
    """Base exception for all pdftoolbox errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown pdftoolbox error occurred."


class EmptyResultError(PDFToolboxError):
    """Raised when there are no page groups to produce."""

    @property
    def default_message(self) -> str:
        return "Enter a valid page range."


class SplitCancelledError(PDFToolboxError):
    """Raised when a split run is abandoned between groups."""

    def __init__(self, message: str = "", *, completed: int = 0) -> None:
        super().__init__(message)
        self.completed = completed

    @property
    def default_message(self) -> str:
        return "Split run was cancelled."


class ToolOptionError(PDFToolboxError):
    """Raised when a tool or setting receives an unusable option."""

    @property
    def default_message(self) -> str:
        return "Invalid tool option."


class DocumentEngineError(PDFToolboxError):
    """Raised when the document engine cannot load, copy or serialize."""

    def __init__(self, message: str = "", *, page_index: Optional[int] = None) -> None:
        super().__init__(message)
        self.page_index = page_index

    @property
    def default_message(self) -> str:
        return "The document engine failed to process the PDF."


class InvalidPDFError(DocumentEngineError):
    """Raised when PDF data is invalid or corrupted."""

    @property
    def default_message(self) -> str:
        return "Invalid or corrupted PDF file."


class EncryptedPDFError(DocumentEngineError):
    """Raised when PDF is encrypted and cannot be processed."""

    @property
    def default_message(self) -> str:
        return "PDF is encrypted and cannot be processed without a password."


class PageIndexError(DocumentEngineError):
    """Raised when a 0-based page index does not exist in the document."""

    @property
    def default_message(self) -> str:
        return "Requested page index is out of bounds."


class SplitGroupError(DocumentEngineError):
    """Raised when producing the document for one page group fails."""

    def __init__(self, group: "PageGroup", cause: DocumentEngineError) -> None:
        self.group = group
        self.cause = cause
        message = f"Failed to produce {group.output_name()} (pages {list(group.pages)}): {cause.message}"
        super().__init__(message, page_index=cause.page_index)


class RendererError(PDFToolboxError):
    """Raised when a page cannot be rasterized."""

    @property
    def default_message(self) -> str:
        return "Failed to render PDF page."


class RendererNotReadyError(RendererError):
    """Raised when a render handle is used before acquire or after release."""

    @property
    def default_message(self) -> str:
        return "Renderer has not been acquired or was already released."
