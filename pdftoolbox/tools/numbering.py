"""Stamp page numbers onto a document."""

from __future__ import annotations

import io
from typing import Optional, Tuple

from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from ..engines import PypdfEngine
from ..exceptions import ToolOptionError
from ..utils import Source, get_logger

LOGGER = get_logger("pdftoolbox.numbering")

POSITIONS = (
    "top-left",
    "top-center",
    "top-right",
    "bottom-left",
    "bottom-center",
    "bottom-right",
)
MARGIN = 40
FONT_NAME = "Helvetica"
TEXT_GREY = 0.3


def format_page_number(number_format: str, page_number: int, total_pages: int) -> str:
    return number_format.replace("{n}", str(page_number)).replace("{total}", str(total_pages))


def number_position(
    position: str, width: float, height: float, text_width: float
) -> Tuple[float, float]:
    """Return the baseline origin of the page number text."""

    vertical, horizontal = position.split("-")
    y = height - MARGIN if vertical == "top" else MARGIN
    if horizontal == "left":
        x = MARGIN
    elif horizontal == "center":
        x = (width - text_width) / 2
    else:
        x = width - text_width - MARGIN
    return x, y


def _number_overlay(width: float, height: float, text: str, position: str, font_size: float) -> bytes:
    text_width = stringWidth(text, FONT_NAME, font_size)
    x, y = number_position(position, width, height, text_width)

    packet = io.BytesIO()
    overlay = canvas.Canvas(packet, pagesize=(width, height))
    overlay.setFont(FONT_NAME, font_size)
    overlay.setFillColorRGB(TEXT_GREY, TEXT_GREY, TEXT_GREY)
    overlay.drawString(x, y, text)
    overlay.save()
    return packet.getvalue()


def add_page_numbers(
    source: Source,
    *,
    position: str = "bottom-center",
    font_size: float = 12,
    start_page: int = 1,
    number_format: str = "{n}",
    engine: Optional[PypdfEngine] = None,
) -> bytes:
    """Draw page numbers on every page from ``start_page`` onwards.

    Args:
        source: PDF bytes or path.
        position: One of :data:`POSITIONS`.
        font_size: Font size in points.
        start_page: First 1-based page that receives a number. Earlier pages
            are left untouched; numbering stays absolute.
        number_format: Text template; ``{n}`` is the page number and
            ``{total}`` the page count.
    """

    if position not in POSITIONS:
        raise ToolOptionError(f"Unsupported position: {position}. Choose from {', '.join(POSITIONS)}")
    if font_size <= 0:
        raise ToolOptionError(f"Font size must be positive, got {font_size}")
    if start_page < 1:
        raise ToolOptionError(f"Start page must be >= 1, got {start_page}")

    engine = engine or PypdfEngine()
    document = engine.load(source)
    total_pages = engine.get_page_count(document)

    stamps = {}
    for index in range(start_page - 1, total_pages):
        width, height = engine.page_size(document, index)
        text = format_page_number(number_format, index + 1, total_pages)
        stamps[index] = _number_overlay(width, height, text, position, font_size)

    LOGGER.info("Numbering %d of %d pages", len(stamps), total_pages)
    return engine.serialize(engine.stamp_pages(document, stamps))


__all__ = ["add_page_numbers", "format_page_number", "number_position", "POSITIONS"]
