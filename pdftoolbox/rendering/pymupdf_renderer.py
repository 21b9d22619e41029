"""PyMuPDF backed page renderer."""

from __future__ import annotations

import hashlib
import io
import threading
from collections import OrderedDict
from contextlib import contextmanager
from typing import Iterator, Optional

import fitz
from PIL import Image

from ..exceptions import RendererError, RendererNotReadyError
from ..utils import get_logger
from .base import PageRenderer, RenderHandle

LOGGER = get_logger("pdftoolbox.render")

DEFAULT_JPEG_QUALITY = 0.92
THUMBNAIL_QUALITY = 0.7
_FORMATS = {"png": "png", "jpeg": "jpeg", "jpg": "jpeg"}


class PymupdfHandle(RenderHandle):
    """Rasterizes PDF pages held as bytes; keeps recently opened documents."""

    def __init__(self, cache_size: int = 4) -> None:
        self._cache_size = max(1, cache_size)
        self._documents: "OrderedDict[str, fitz.Document]" = OrderedDict()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _open(self, data: bytes) -> fitz.Document:
        if self._closed:
            raise RendererNotReadyError()
        key = hashlib.sha1(data).hexdigest()
        document = self._documents.get(key)
        if document is not None:
            self._documents.move_to_end(key)
            return document
        try:
            document = fitz.open(stream=data, filetype="pdf")
        except Exception as exc:
            raise RendererError(f"Unable to open PDF for rendering: {exc}") from exc
        self._documents[key] = document
        if len(self._documents) > self._cache_size:
            _, evicted = self._documents.popitem(last=False)
            evicted.close()
        return document

    def _load_page(self, data: bytes, page_number: int) -> "fitz.Page":
        document = self._open(data)
        if page_number < 1 or page_number > document.page_count:
            raise RendererError(
                f"Page {page_number} is out of bounds. PDF has {document.page_count} pages."
            )
        return document.load_page(page_number - 1)

    def page_count(self, data: bytes) -> int:
        with self._lock:
            return self._open(data).page_count

    def page_size(self, data: bytes, page_number: int, scale: float = 1.0) -> tuple[float, float]:
        with self._lock:
            rect = self._load_page(data, page_number).rect
        return rect.width * scale, rect.height * scale

    def render_page(
        self,
        data: bytes,
        page_number: int,
        *,
        scale: float = 1.0,
        image_format: str = "png",
        quality: Optional[float] = None,
    ) -> bytes:
        fmt = _FORMATS.get(image_format.lower())
        if fmt is None:
            raise RendererError(f"Unsupported image format: {image_format}")
        if scale <= 0:
            raise RendererError(f"Render scale must be positive, got {scale}")

        with self._lock:
            page = self._load_page(data, page_number)
            try:
                pixmap = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
            except Exception as exc:
                raise RendererError(f"Failed to render page {page_number}: {exc}") from exc

        LOGGER.debug("Rendered page %s at scale %.2f as %s", page_number, scale, fmt)
        if fmt == "png":
            return pixmap.tobytes("png")

        image = Image.frombytes("RGB", (pixmap.width, pixmap.height), pixmap.samples)
        buffer = io.BytesIO()
        jpeg_quality = DEFAULT_JPEG_QUALITY if quality is None else quality
        image.save(buffer, format="JPEG", quality=max(1, min(95, round(jpeg_quality * 100))), optimize=True)
        image.close()
        return buffer.getvalue()

    def thumbnail(self, data: bytes, page_number: int = 1, scale: float = 0.3) -> bytes:
        return self.render_page(
            data, page_number, scale=scale, image_format="jpeg", quality=THUMBNAIL_QUALITY
        )

    def close(self) -> None:
        with self._lock:
            for document in self._documents.values():
                document.close()
            self._documents.clear()
            self._closed = True


class PymupdfRenderer(PageRenderer):
    """Renderer lifecycle around :class:`PymupdfHandle`.

    Example:
        >>> with PymupdfRenderer() as handle:
        ...     png = handle.render_page(pdf_bytes, 1, scale=2.0)
    """

    def __init__(self, cache_size: int = 4) -> None:
        self.cache_size = cache_size
        self._handle: Optional[PymupdfHandle] = None

    @property
    def ready(self) -> bool:
        return self._handle is not None

    def acquire(self) -> PymupdfHandle:
        if self._handle is None:
            LOGGER.debug("Acquiring PyMuPDF %s renderer", fitz.VersionBind)
            self._handle = PymupdfHandle(self.cache_size)
        return self._handle

    def release(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            LOGGER.debug("Released PyMuPDF renderer")

    def __enter__(self) -> PymupdfHandle:
        return self.acquire()

    def __exit__(self, *exc_info: object) -> None:
        self.release()


@contextmanager
def render_session(handle: Optional[RenderHandle] = None) -> Iterator[RenderHandle]:
    """Yield ``handle``, or a fresh PyMuPDF handle released on exit."""

    if handle is not None:
        yield handle
        return
    with PymupdfRenderer() as acquired:
        yield acquired


__all__ = ["PymupdfHandle", "PymupdfRenderer", "render_session"]
