"""Conversions between PDF pages and JPEG/PNG images."""

from __future__ import annotations

import io
from typing import Callable, List, Optional, Sequence

from PIL import Image, UnidentifiedImageError
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..exceptions import ToolOptionError
from ..rendering import RenderHandle, render_session
from ..types import RenderedImage
from ..utils import Source, get_logger, read_source

LOGGER = get_logger("pdftoolbox.convert")

IMAGE_FORMATS = ("jpeg", "png")
_EMBEDDABLE = {"JPEG", "PNG"}

ProgressCallback = Callable[[float], None]


def _image_size(data: bytes) -> Optional[tuple[int, int]]:
    try:
        with Image.open(io.BytesIO(data)) as image:
            if image.format not in _EMBEDDABLE:
                return None
            return image.size
    except UnidentifiedImageError:
        return None


def images_to_pdf(
    images: Sequence[Source],
    *,
    on_progress: Optional[ProgressCallback] = None,
) -> bytes:
    """Build a PDF with one page per JPEG or PNG image, sized to the image.

    Images in any other format are skipped.
    """

    packet = io.BytesIO()
    document = canvas.Canvas(packet)
    pages = 0
    for position, source in enumerate(images, start=1):
        data = read_source(source)
        size = _image_size(data)
        if size is None:
            LOGGER.warning("Skipping image %s: only JPEG and PNG can be embedded", position)
            continue

        width, height = size
        document.setPageSize((width, height))
        document.drawImage(ImageReader(io.BytesIO(data)), 0, 0, width=width, height=height)
        document.showPage()
        pages += 1

        if on_progress:
            on_progress(position / len(images) * 100)

    if not pages:
        raise ToolOptionError("No JPEG or PNG images to convert.")

    document.save()
    LOGGER.info("Converted %d images to PDF", pages)
    return packet.getvalue()


def pdf_to_images(
    source: Source,
    *,
    dpi: int = 150,
    image_format: str = "png",
    quality: float = 0.92,
    handle: Optional[RenderHandle] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> List[RenderedImage]:
    """Rasterize every page at ``dpi`` as ``page_{n}.{image_format}``."""

    image_format = image_format.lower()
    if image_format not in IMAGE_FORMATS:
        raise ToolOptionError(f"Unsupported image format: {image_format}")
    if dpi <= 0:
        raise ToolOptionError(f"DPI must be positive, got {dpi}")

    data = read_source(source)
    scale = dpi / 72
    results: List[RenderedImage] = []
    with render_session(handle) as renderer:
        total = renderer.page_count(data)
        for page_number in range(1, total + 1):
            encoded = renderer.render_page(
                data, page_number, scale=scale, image_format=image_format, quality=quality
            )
            results.append(RenderedImage(f"page_{page_number}.{image_format}", encoded, page_number))
            if on_progress:
                on_progress(page_number / total * 100)

    LOGGER.info("Rendered %d pages at %d DPI", len(results), dpi)
    return results


__all__ = ["images_to_pdf", "pdf_to_images", "IMAGE_FORMATS"]
