"""Page rasterization for pdftoolbox."""

from .base import PageRenderer, RenderHandle
from .pymupdf_renderer import PymupdfHandle, PymupdfRenderer, render_session

__all__ = ["PageRenderer", "RenderHandle", "PymupdfHandle", "PymupdfRenderer", "render_session"]
