"""Text watermarks drawn over every page."""

from __future__ import annotations

import io
from typing import Iterator, Optional, Tuple

from reportlab.lib.colors import Color
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from ..engines import PypdfEngine
from ..exceptions import ToolOptionError
from ..utils import Source, get_logger

LOGGER = get_logger("pdftoolbox.watermark")

FONT_NAME = "Helvetica-Bold"
TEXT_GREY = 0.7


def watermark_origins(
    width: float, height: float, text_width: float, *, tiled: bool
) -> Iterator[Tuple[float, float]]:
    """Yield the text origins for one page.

    A single watermark starts at the horizontal centre line offset by half
    the text width; tiled watermarks repeat every ``1.5 * text_width``.
    """

    if not tiled:
        yield (width - text_width) / 2, height / 2
        return

    spacing = text_width * 1.5
    y = 0.0
    while y < height + spacing:
        x = 0.0
        while x < width + spacing:
            yield x, y
            x += spacing
        y += spacing


def _watermark_overlay(
    width: float,
    height: float,
    text: str,
    *,
    opacity: float,
    rotation: float,
    font_size: float,
    tiled: bool,
) -> bytes:
    text_width = stringWidth(text, FONT_NAME, font_size)

    packet = io.BytesIO()
    overlay = canvas.Canvas(packet, pagesize=(width, height))
    overlay.setFont(FONT_NAME, font_size)
    overlay.setFillColor(Color(TEXT_GREY, TEXT_GREY, TEXT_GREY, alpha=opacity))
    for x, y in watermark_origins(width, height, text_width, tiled=tiled):
        overlay.saveState()
        overlay.translate(x, y)
        overlay.rotate(rotation)
        overlay.drawString(0, 0, text)
        overlay.restoreState()
    overlay.save()
    return packet.getvalue()


def add_watermark(
    source: Source,
    text: str,
    *,
    opacity: float = 0.3,
    rotation: float = 45,
    font_size: float = 48,
    tiled: bool = False,
    engine: Optional[PypdfEngine] = None,
) -> bytes:
    if not text or not text.strip():
        raise ToolOptionError("Watermark text cannot be empty")
    if not 0 <= opacity <= 1:
        raise ToolOptionError(f"Opacity must be between 0 and 1, got {opacity}")
    if font_size <= 0:
        raise ToolOptionError(f"Font size must be positive, got {font_size}")

    engine = engine or PypdfEngine()
    document = engine.load(source)

    stamps = {}
    for index in range(engine.get_page_count(document)):
        width, height = engine.page_size(document, index)
        stamps[index] = _watermark_overlay(
            width,
            height,
            text,
            opacity=opacity,
            rotation=rotation,
            font_size=font_size,
            tiled=tiled,
        )

    LOGGER.info("Watermarking %d pages with %r", len(stamps), text)
    return engine.serialize(engine.stamp_pages(document, stamps))


__all__ = ["add_watermark", "watermark_origins"]
