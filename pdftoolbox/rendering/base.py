"""Renderer protocol with an explicit acquire/release lifecycle."""

from __future__ import annotations

from typing import Optional, Protocol


class RenderHandle(Protocol):
    """A ready-to-use rasterizer returned by :meth:`PageRenderer.acquire`."""

    def page_count(self, data: bytes) -> int:
        """Return the number of pages in the PDF ``data``."""

    def page_size(self, data: bytes, page_number: int, scale: float = 1.0) -> tuple[float, float]:
        """Return the viewport size of ``page_number`` at ``scale``, in points."""

    def render_page(
        self,
        data: bytes,
        page_number: int,
        *,
        scale: float = 1.0,
        image_format: str = "png",
        quality: Optional[float] = None,
    ) -> bytes:
        """Rasterize the 1-based ``page_number`` and return encoded image bytes."""

    def thumbnail(self, data: bytes, page_number: int = 1, scale: float = 0.3) -> bytes:
        """Return a small JPEG preview of ``page_number``."""


class PageRenderer(Protocol):
    """Owns the rendering backend; hands out handles between acquire and release."""

    def acquire(self) -> RenderHandle:
        """Prepare the backend and return a handle ready for rendering."""

    def release(self) -> None:
        """Free backend resources. Handles stop working afterwards."""
