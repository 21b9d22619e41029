"""
pdftoolbox - PDF editing tools built on a pluggable document engine.

The core turns human-entered page ranges into page groups and drives a
document engine to emit one PDF per group. Around it sit the suite tools:
merge, organize, page numbers, watermark, image conversion and compression.

Quick Start:
    >>> from pdftoolbox import split_document
    >>> results, report = split_document("input.pdf", "1-3, 5, 7-9")
    >>> [result.name for result in results]
    ['pages_1-3.pdf', 'page_5.pdf', 'pages_7-9.pdf']

Main Classes:
    - PageRangeSplitter: Lenient range expression parser
    - SplitDriver: Produces one document per page group
    - PypdfEngine: Document engine backed by pypdf
    - PymupdfRenderer: Page renderer backed by PyMuPDF

For CLI usage, use the 'pdftoolbox' command after installation.
"""

from pdftoolbox.engines import DocumentEngine, EngineDocument, PypdfEngine
from pdftoolbox.exceptions import (
    DocumentEngineError,
    EmptyResultError,
    EncryptedPDFError,
    InvalidPDFError,
    PageIndexError,
    PDFToolboxError,
    RendererError,
    RendererNotReadyError,
    SplitCancelledError,
    SplitGroupError,
    ToolOptionError,
)
from pdftoolbox.ranges import PageRangeSplitter, parse_page_groups, parse_with_report
from pdftoolbox.rendering import PageRenderer, PymupdfRenderer, RenderHandle
from pdftoolbox.splitter import SplitDriver, split_document, write_results, zip_results
from pdftoolbox.types import (
    DocumentInfo,
    PageGroup,
    ParseReport,
    RenderedImage,
    SkippedSegment,
    SplitResult,
)

__version__ = "1.0.0"

__all__ = [
    # Core
    "PageRangeSplitter",
    "parse_page_groups",
    "parse_with_report",
    "SplitDriver",
    "split_document",
    "write_results",
    "zip_results",
    # Engines and renderers
    "DocumentEngine",
    "EngineDocument",
    "PypdfEngine",
    "PageRenderer",
    "RenderHandle",
    "PymupdfRenderer",
    # Data types
    "PageGroup",
    "SplitResult",
    "SkippedSegment",
    "ParseReport",
    "RenderedImage",
    "DocumentInfo",
    # Exceptions
    "PDFToolboxError",
    "EmptyResultError",
    "SplitCancelledError",
    "ToolOptionError",
    "DocumentEngineError",
    "InvalidPDFError",
    "EncryptedPDFError",
    "PageIndexError",
    "SplitGroupError",
    "RendererError",
    "RendererNotReadyError",
    "__version__",
]
