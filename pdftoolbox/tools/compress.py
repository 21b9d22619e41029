"""Compression by re-rendering every page as a JPEG image."""

from __future__ import annotations

import dataclasses
import io
from typing import Callable, Literal, Optional

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..exceptions import ToolOptionError
from ..rendering import RenderHandle, render_session
from ..utils import Source, get_logger, read_source

LOGGER = get_logger("pdftoolbox.compress")

CompressionLevelName = Literal["low", "medium", "high"]


@dataclasses.dataclass(frozen=True)
class CompressionPreset:
    """Rendering settings for one compression level."""

    name: CompressionLevelName
    scale: float
    quality: float
    max_width: float


@dataclasses.dataclass(frozen=True)
class CompressionResult:
    """Represents the outcome of a compression run."""

    data: bytes
    level: CompressionLevelName
    original_size: int

    @property
    def compressed_size(self) -> int:
        return len(self.data)

    @property
    def bytes_saved(self) -> int:
        return max(self.original_size - self.compressed_size, 0)

    @property
    def compression_ratio(self) -> float:
        if self.original_size == 0:
            return 1.0
        return self.compressed_size / self.original_size


PRESETS: dict[str, CompressionPreset] = {
    "low": CompressionPreset("low", scale=1.2, quality=0.75, max_width=1600),
    "medium": CompressionPreset("medium", scale=0.9, quality=0.50, max_width=1200),
    "high": CompressionPreset("high", scale=0.7, quality=0.30, max_width=800),
}


def page_scale(page_width: float, preset: CompressionPreset) -> float:
    """Scale used for a page of ``page_width`` points under ``preset``."""

    viewport_width = page_width * preset.scale
    if viewport_width > preset.max_width:
        return preset.max_width / viewport_width * preset.scale
    return preset.scale


def compress_pdf(
    source: Source,
    level: str = "medium",
    *,
    handle: Optional[RenderHandle] = None,
    on_progress: Optional[Callable[[float], None]] = None,
) -> CompressionResult:
    """Rebuild the document from JPEG renderings of its pages.

    Text becomes part of the page images, so the output is not searchable.
    """

    preset = PRESETS.get(level)
    if preset is None:
        raise ToolOptionError(f"Unsupported compression level: {level}. Choose from {', '.join(PRESETS)}")

    data = read_source(source)
    packet = io.BytesIO()
    document = canvas.Canvas(packet)

    with render_session(handle) as renderer:
        total = renderer.page_count(data)
        for page_number in range(1, total + 1):
            width, _ = renderer.page_size(data, page_number)
            scale = page_scale(width, preset)
            viewport_width, viewport_height = renderer.page_size(data, page_number, scale)
            image = renderer.render_page(
                data, page_number, scale=scale, image_format="jpeg", quality=preset.quality
            )

            document.setPageSize((viewport_width, viewport_height))
            document.drawImage(
                ImageReader(io.BytesIO(image)), 0, 0, width=viewport_width, height=viewport_height
            )
            document.showPage()

            if on_progress:
                on_progress(round(page_number / total * 100))

    document.save()
    result = CompressionResult(data=packet.getvalue(), level=preset.name, original_size=len(data))
    LOGGER.info(
        "Compressed %d pages at %s level: %d -> %d bytes",
        total,
        preset.name,
        result.original_size,
        result.compressed_size,
    )
    return result


__all__ = ["compress_pdf", "page_scale", "CompressionPreset", "CompressionResult", "PRESETS"]
