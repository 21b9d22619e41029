"""Lenient parsing of human-entered page range expressions.

Expressions look like ``"1-3, 5, 7-9"``. Each comma-separated segment becomes
one :class:`~pdftoolbox.types.PageGroup`. Segments that are malformed, out of
range or reversed are dropped rather than failing the whole expression, so
partial input still yields partial output. :func:`parse_with_report` lists the
dropped segments for callers that want to tell the user about them.

A page number is read up to its first non-digit, so ``"2.5"`` selects page 2
and ``"1-2-3"`` selects pages 1 to 2. Text with no leading digits is malformed.
"""

from __future__ import annotations

import re
from typing import List, Optional

from .types import PageGroup, ParseReport, SkippedSegment
from .utils import get_logger

LOGGER = get_logger("pdftoolbox.ranges")

MALFORMED = "malformed"
OUT_OF_RANGE = "out_of_range"
REVERSED = "reversed"

_LEADING_NUMBER = re.compile(r"\+?[0-9]+")


def _to_page_number(text: str) -> Optional[int]:
    """Read the leading integer of ``text``; trailing characters are ignored."""
    match = _LEADING_NUMBER.match(text.strip())
    if match is None:
        return None
    return int(match.group())


class PageRangeSplitter:
    """Turns range expressions into ordered page groups for a document."""

    @staticmethod
    def default_range(total_pages: int) -> str:
        """Expression selecting every page, used to pre-fill the range input."""
        return f"1-{total_pages}"

    def parse_with_report(self, range_str: str, total_pages: int) -> ParseReport:
        report = ParseReport()
        if not range_str:
            return report

        segments = [segment.strip() for segment in range_str.split(",")]
        for segment in filter(None, segments):
            if "-" in segment:
                start_text, end_text = segment.split("-", 1)
                start = _to_page_number(start_text)
                end = _to_page_number(end_text)
                if start is None or end is None:
                    reason = MALFORMED
                elif start < 1 or end > total_pages:
                    reason = OUT_OF_RANGE
                elif start > end:
                    reason = REVERSED
                else:
                    report.groups.append(PageGroup.span(start, end))
                    continue
            else:
                page = _to_page_number(segment)
                if page is None:
                    reason = MALFORMED
                elif page < 1 or page > total_pages:
                    reason = OUT_OF_RANGE
                else:
                    report.groups.append(PageGroup((page,)))
                    continue

            LOGGER.debug("Skipping %s range segment %r", reason, segment)
            report.skipped.append(SkippedSegment(segment, reason))

        return report

    def parse(self, range_str: str, total_pages: int) -> List[PageGroup]:
        """Parse ``range_str`` against a document of ``total_pages`` pages.

        Groups come back in the order they were written. Overlapping or
        repeated segments each produce their own group.
        """
        return self.parse_with_report(range_str, total_pages).groups


def parse_page_groups(range_str: str, total_pages: int) -> List[PageGroup]:
    return PageRangeSplitter().parse(range_str, total_pages)


def parse_with_report(range_str: str, total_pages: int) -> ParseReport:
    return PageRangeSplitter().parse_with_report(range_str, total_pages)


__all__ = [
    "PageRangeSplitter",
    "parse_page_groups",
    "parse_with_report",
    "MALFORMED",
    "OUT_OF_RANGE",
    "REVERSED",
]
