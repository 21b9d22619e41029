"""pypdf document engine for pdftoolbox."""

from __future__ import annotations

import io
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Sequence, Tuple, Union

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError
from pypdf.generic import NameObject, NumberObject

from ..exceptions import (
    DocumentEngineError,
    EncryptedPDFError,
    InvalidPDFError,
    PageIndexError,
    ToolOptionError,
)
from ..utils import Source, get_logger, read_source
from .base import DocumentEngine, EngineDocument

LOGGER = get_logger("pdftoolbox.engine")

_METADATA_KEYS = ("/Title", "/Author", "/Subject", "/Creator", "/Keywords")


@dataclass
class PypdfDocument(EngineDocument):
    handle: Union[PdfReader, PdfWriter]
    raw_bytes: bytes = b""
    password: str | None = None

    @property
    def num_pages(self) -> int:
        return len(self.handle.pages)

    @property
    def file_size(self) -> int:
        return len(self.raw_bytes)

    @property
    def is_encrypted(self) -> bool:
        return bool(getattr(self.handle, "is_encrypted", False))

    def get_page(self, index: int) -> object:
        return self.handle.pages[index]


class PypdfEngine(DocumentEngine):
    """Document engine that uses `pypdf` under the hood.

    A single engine may be shared between threads; every operation holds the
    engine lock because pypdf readers are not safe for concurrent access.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Core capability surface
    # ------------------------------------------------------------------
    def load(self, source: Source, password: str | None = None) -> PypdfDocument:
        try:
            raw_bytes = read_source(source)
        except OSError as exc:
            raise InvalidPDFError(f"Unable to read PDF file: {source}. Error: {exc}") from exc

        with self._lock:
            reader = self._open_reader(raw_bytes, password)
            num_pages = len(reader.pages)
        if num_pages == 0:
            raise InvalidPDFError("PDF has no pages")

        LOGGER.debug("Loaded PDF with %s pages (%s bytes)", num_pages, len(raw_bytes))
        return PypdfDocument(handle=reader, raw_bytes=raw_bytes, password=password)

    def get_page_count(self, document: PypdfDocument) -> int:
        return document.num_pages

    def copy_pages_to_new_document(
        self, source: PypdfDocument, page_indices: Sequence[int]
    ) -> PypdfDocument:
        indices = list(page_indices)
        self._check_indices(source, indices)

        with self._lock:
            writer = PdfWriter()
            copied: set[int] = set()
            for index in indices:
                try:
                    if index in copied:
                        # pypdf reuses an already cloned page object, so a
                        # repeated page is taken from an independent reader.
                        page = self._fresh_reader(source).pages[index]
                    else:
                        page = source.get_page(index)
                    writer.add_page(page)
                except DocumentEngineError:
                    raise
                except Exception as exc:
                    raise DocumentEngineError(
                        f"Unable to copy page index {index}: {exc}", page_index=index
                    ) from exc
                copied.add(index)
            self._copy_metadata(source, writer)

        LOGGER.debug("Copied page indices %s into a new document", indices)
        return PypdfDocument(handle=writer)

    def serialize(self, document: PypdfDocument) -> bytes:
        handle = document.handle
        if isinstance(handle, PdfReader) and document.raw_bytes and not document.is_encrypted:
            return document.raw_bytes

        with self._lock:
            if isinstance(handle, PdfReader):
                writer = PdfWriter()
                for page in handle.pages:
                    writer.add_page(page)
                self._copy_metadata(document, writer)
                handle = writer
            buffer = io.BytesIO()
            try:
                handle.write(buffer)
            except Exception as exc:
                raise DocumentEngineError(f"Unable to serialize PDF: {exc}") from exc
        return buffer.getvalue()

    # ------------------------------------------------------------------
    # Page organisation
    # ------------------------------------------------------------------
    def rotate_pages(self, document: PypdfDocument, rotations: Mapping[int, int]) -> PypdfDocument:
        """Return a copy of ``document`` with absolute rotations applied."""
        for index, degrees in rotations.items():
            if degrees % 90:
                raise ToolOptionError(f"Rotation must be a multiple of 90 degrees, got {degrees}")
        self._check_indices(document, rotations.keys())

        rotated = self.copy_pages_to_new_document(document, range(document.num_pages))
        with self._lock:
            for index, degrees in rotations.items():
                page = rotated.get_page(index)
                page[NameObject("/Rotate")] = NumberObject(degrees % 360)
        return rotated

    def delete_pages(self, document: PypdfDocument, page_indices: Iterable[int]) -> PypdfDocument:
        doomed = set(page_indices)
        self._check_indices(document, doomed)
        remaining = [index for index in range(document.num_pages) if index not in doomed]
        if not remaining:
            raise ToolOptionError("Cannot delete every page of a document")
        return self.copy_pages_to_new_document(document, remaining)

    def merge_documents(self, documents: Sequence[PypdfDocument]) -> PypdfDocument:
        if not documents:
            raise ToolOptionError("No documents provided to merge")

        with self._lock:
            writer = PdfWriter()
            merged: set[int] = set()
            for document in documents:
                reader = self._fresh_reader(document) if id(document) in merged else document.handle
                for page in reader.pages:
                    writer.add_page(page)
                merged.add(id(document))
            self._copy_metadata(documents[0], writer)
        return PypdfDocument(handle=writer)

    def stamp_pages(self, document: PypdfDocument, stamps: Mapping[int, bytes]) -> PypdfDocument:
        """Merge one-page overlay PDFs on top of the pages named by ``stamps``."""
        self._check_indices(document, stamps.keys())
        stamped = self.copy_pages_to_new_document(document, range(document.num_pages))
        with self._lock:
            for index, overlay in stamps.items():
                try:
                    overlay_page = PdfReader(io.BytesIO(overlay)).pages[0]
                    stamped.get_page(index).merge_page(overlay_page)
                except Exception as exc:
                    raise DocumentEngineError(
                        f"Unable to stamp page index {index}: {exc}", page_index=index
                    ) from exc
        return stamped

    # ------------------------------------------------------------------
    # Inspection helpers
    # ------------------------------------------------------------------
    def page_size(self, document: PypdfDocument, index: int) -> Tuple[float, float]:
        self._check_indices(document, [index])
        box = document.get_page(index).mediabox
        return float(box.width), float(box.height)

    def metadata(self, document: PypdfDocument) -> Dict[str, str]:
        metadata = getattr(document.handle, "metadata", None) or {}
        return {
            str(key): str(value)
            for key, value in metadata.items()
            if value is not None
        }

    # ------------------------------------------------------------------
    def _open_reader(self, raw_bytes: bytes, password: str | None) -> PdfReader:
        try:
            reader = PdfReader(io.BytesIO(raw_bytes))
        except PdfReadError as exc:
            raise InvalidPDFError(f"Corrupted or invalid PDF data. Error: {exc}") from exc
        except Exception as exc:
            raise InvalidPDFError(f"Unexpected error reading PDF. Error: {exc}") from exc

        if reader.is_encrypted:
            if password:
                if reader.decrypt(password) == 0:
                    raise EncryptedPDFError("Failed to decrypt PDF with supplied password.")
            else:
                raise EncryptedPDFError("PDF is encrypted. Supply a password to process this file.")
        return reader

    def _fresh_reader(self, document: PypdfDocument) -> Union[PdfReader, PdfWriter]:
        raw_bytes = document.raw_bytes
        if not raw_bytes:
            buffer = io.BytesIO()
            document.handle.write(buffer)
            raw_bytes = buffer.getvalue()
        return self._open_reader(raw_bytes, document.password)

    @staticmethod
    def _check_indices(document: PypdfDocument, indices: Iterable[int]) -> None:
        total = document.num_pages
        for index in indices:
            if index < 0 or index >= total:
                raise PageIndexError(
                    f"Page index {index} is out of bounds for a {total}-page document.",
                    page_index=index,
                )

    def _copy_metadata(self, source: PypdfDocument, writer: PdfWriter) -> None:
        metadata = self.metadata(source)
        copied = {key: metadata[key] for key in _METADATA_KEYS if metadata.get(key)}
        if copied:
            writer.add_metadata(copied)


__all__ = ["PypdfDocument", "PypdfEngine"]
