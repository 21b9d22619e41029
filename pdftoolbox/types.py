"""
Type definitions and dataclasses for pdftoolbox.

Page numbers are 1-based everywhere in this module. The document engine
works with 0-based page indices; :meth:`PageGroup.indices` converts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class PageGroup:
    """
    Ordered, non-empty run of page numbers destined for one output document.

    Attributes:
        pages: 1-based page numbers in output order
    """
    pages: Tuple[int, ...]

    def __post_init__(self) -> None:
        pages = tuple(int(page) for page in self.pages)
        if not pages:
            raise ValueError("A page group needs at least one page")
        if any(page < 1 for page in pages):
            raise ValueError("Page numbers must be positive integers")
        object.__setattr__(self, "pages", pages)

    @classmethod
    def span(cls, start: int, end: int) -> "PageGroup":
        return cls(tuple(range(start, end + 1)))

    @property
    def first(self) -> int:
        return self.pages[0]

    @property
    def last(self) -> int:
        return self.pages[-1]

    def indices(self) -> List[int]:
        """Return the 0-based page indices used by the document engine."""
        return [page - 1 for page in self.pages]

    def output_name(self) -> str:
        if len(self.pages) == 1:
            return f"page_{self.first}.pdf"
        return f"pages_{self.first}-{self.last}.pdf"

    def __iter__(self) -> Iterator[int]:
        return iter(self.pages)

    def __len__(self) -> int:
        return len(self.pages)


@dataclass(frozen=True)
class SplitResult:
    """
    One output document of a split run.

    Attributes:
        name: Generated file name, e.g. ``pages_7-9.pdf``
        data: Serialized PDF bytes
        group: The page group the document was built from
    """
    name: str
    data: bytes
    group: PageGroup

    @property
    def page_count(self) -> int:
        return len(self.group)

    def __str__(self) -> str:
        return f"SplitResult(name={self.name!r}, pages={self.page_count}, bytes={len(self.data)})"


@dataclass(frozen=True)
class SkippedSegment:
    """A comma-separated segment the range parser dropped."""

    text: str
    reason: str


@dataclass
class ParseReport:
    """Groups produced by the range parser along with what it skipped."""

    groups: List[PageGroup] = field(default_factory=list)
    skipped: List[SkippedSegment] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.groups


@dataclass(frozen=True)
class RenderedImage:
    """An encoded page image produced by PDF to image conversion."""

    name: str
    data: bytes
    page_number: int


@dataclass
class DocumentInfo:
    """
    PDF document information and metadata.

    Attributes:
        num_pages: Number of pages in the PDF
        file_size: Size of the serialized PDF in bytes
        title: PDF title metadata
        author: PDF author metadata
        subject: PDF subject metadata
        creator: PDF creator application
        producer: PDF producer application
        is_encrypted: Whether the PDF is encrypted
    """
    num_pages: int
    file_size: int
    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    creator: Optional[str] = None
    producer: Optional[str] = None
    is_encrypted: bool = False


__all__ = [
    "PageGroup",
    "SplitResult",
    "SkippedSegment",
    "ParseReport",
    "RenderedImage",
    "DocumentInfo",
]
