"""PDF suite operations built on the document engine and the renderer."""

from __future__ import annotations

from .compress import PRESETS, CompressionPreset, CompressionResult, compress_pdf
from .convert import IMAGE_FORMATS, images_to_pdf, pdf_to_images
from .info import get_document_info
from .merge import merge_documents
from .numbering import POSITIONS, add_page_numbers
from .organize import delete_pages, reorder_pages, rotate_pages
from .watermark import add_watermark

__all__ = [
    "compress_pdf",
    "CompressionPreset",
    "CompressionResult",
    "PRESETS",
    "images_to_pdf",
    "pdf_to_images",
    "IMAGE_FORMATS",
    "get_document_info",
    "merge_documents",
    "add_page_numbers",
    "POSITIONS",
    "rotate_pages",
    "delete_pages",
    "reorder_pages",
    "add_watermark",
]
