from __future__ import annotations

import pytest

from pdftoolbox import PageGroup, PageRangeSplitter, parse_page_groups, parse_with_report
from pdftoolbox.ranges import MALFORMED, OUT_OF_RANGE, REVERSED


def _pages(groups: list[PageGroup]) -> list[list[int]]:
    return [list(group) for group in groups]


@pytest.fixture()
def splitter() -> PageRangeSplitter:
    return PageRangeSplitter()


def test_parse_mixed_spans_and_singles(splitter: PageRangeSplitter) -> None:
    groups = splitter.parse("1-3,5,7-9", 10)

    assert _pages(groups) == [[1, 2, 3], [5], [7, 8, 9]]


@pytest.mark.parametrize("total", [0, 1, 10])
def test_empty_input_yields_no_groups(splitter: PageRangeSplitter, total: int) -> None:
    assert splitter.parse("", total) == []


def test_out_of_range_pages_are_dropped(splitter: PageRangeSplitter) -> None:
    assert splitter.parse("0,11", 10) == []


def test_reversed_span_is_rejected_not_swapped(splitter: PageRangeSplitter) -> None:
    assert splitter.parse("5-2", 10) == []


def test_overlapping_segments_are_kept(splitter: PageRangeSplitter) -> None:
    assert _pages(splitter.parse("1-3,2", 5)) == [[1, 2, 3], [2]]


def test_groups_follow_input_order(splitter: PageRangeSplitter) -> None:
    assert _pages(splitter.parse("9, 1-2, 5", 10)) == [[9], [1, 2], [5]]


def test_stray_commas_and_whitespace_are_tolerated(splitter: PageRangeSplitter) -> None:
    groups = splitter.parse(" ,1,, 2 - 3 ,", 5)

    assert _pages(groups) == [[1], [2, 3]]


@pytest.mark.parametrize(
    "segment",
    ["abc", "1-", "-3", "1-x", "--", "x5"],
)
def test_malformed_segments_vanish(splitter: PageRangeSplitter, segment: str) -> None:
    assert splitter.parse(f"{segment},4", 10) == [PageGroup((4,))]


@pytest.mark.parametrize(
    "segment, expected",
    [
        ("2.5", [2]),
        ("3abc", [3]),
        ("+3", [3]),
        ("1-2-3", [1, 2]),
        ("2-4pages", [2, 3, 4]),
        ("5 6", [5]),
    ],
)
def test_numbers_are_read_up_to_the_first_non_digit(
    splitter: PageRangeSplitter, segment: str, expected: list[int]
) -> None:
    assert _pages(splitter.parse(segment, 10)) == [expected]


def test_trailing_text_mixed_input(splitter: PageRangeSplitter) -> None:
    assert _pages(splitter.parse("1-2-3,2.5,3abc", 10)) == [[1, 2], [2], [3]]


def test_span_touching_the_last_page_is_accepted(splitter: PageRangeSplitter) -> None:
    assert _pages(splitter.parse("8-10", 10)) == [[8, 9, 10]]


def test_span_past_the_last_page_is_dropped(splitter: PageRangeSplitter) -> None:
    assert splitter.parse("8-11", 10) == []


def test_single_page_span(splitter: PageRangeSplitter) -> None:
    groups = splitter.parse("4-4", 10)

    assert _pages(groups) == [[4]]
    assert groups[0].output_name() == "page_4.pdf"


@pytest.mark.parametrize(
    "range_str",
    ["1-3,5,7-9", "0-4,2,12", "10,9,8-10", "3-1,1-10", "x,,5-5,7-"],
)
def test_every_page_is_within_bounds(splitter: PageRangeSplitter, range_str: str) -> None:
    total = 10
    for group in splitter.parse(range_str, total):
        assert all(1 <= page <= total for page in group)


def test_report_lists_skip_reasons(splitter: PageRangeSplitter) -> None:
    report = splitter.parse_with_report("1-2, abc, 0, 6-3, 3, 4-99", 10)

    assert _pages(report.groups) == [[1, 2], [3]]
    assert [(skipped.text, skipped.reason) for skipped in report.skipped] == [
        ("abc", MALFORMED),
        ("0", OUT_OF_RANGE),
        ("6-3", REVERSED),
        ("4-99", OUT_OF_RANGE),
    ]
    assert not report.is_empty


def test_report_for_entirely_invalid_input_is_empty(splitter: PageRangeSplitter) -> None:
    report = splitter.parse_with_report("0, 20-30", 10)

    assert report.is_empty
    assert len(report.skipped) == 2


def test_module_level_helpers_match_the_class() -> None:
    assert parse_page_groups("2-4", 5) == PageRangeSplitter().parse("2-4", 5)
    assert parse_with_report("7", 5).skipped[0].reason == OUT_OF_RANGE


def test_default_range_covers_every_page() -> None:
    assert PageRangeSplitter.default_range(12) == "1-12"
    assert _pages(PageRangeSplitter().parse(PageRangeSplitter.default_range(3), 3)) == [[1, 2, 3]]


def test_page_group_naming() -> None:
    assert PageGroup((4,)).output_name() == "page_4.pdf"
    assert PageGroup((7, 8, 9)).output_name() == "pages_7-9.pdf"


def test_page_group_is_immutable_and_validated() -> None:
    group = PageGroup.span(2, 4)

    assert group.pages == (2, 3, 4)
    assert group.indices() == [1, 2, 3]
    with pytest.raises(AttributeError):
        group.pages = (1,)  # type: ignore[misc]
    with pytest.raises(ValueError):
        PageGroup(())
    with pytest.raises(ValueError):
        PageGroup((0, 1))
