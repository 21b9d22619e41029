"""Document engines for pdftoolbox."""

from .base import DocumentEngine, EngineDocument
from .pypdf_engine import PypdfDocument, PypdfEngine

__all__ = [
    "DocumentEngine",
    "EngineDocument",
    "PypdfDocument",
    "PypdfEngine",
]
