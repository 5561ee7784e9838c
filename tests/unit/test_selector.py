"""Tests for pdfsmith.selector module."""

import pytest

from pdfsmith.exceptions import InvalidRangeError, PageIndexError
from pdfsmith.selector import (
    RangeSpec,
    each_page_ranges,
    parse_page_list,
    parse_ranges,
    validate_range,
)


class TestRangeSpec:
    """Test the range value type."""

    def test_indices(self):
        assert RangeSpec(1, 3).indices() == [1, 2, 3]

    def test_length(self):
        assert RangeSpec(2, 2).length == 1

    def test_coerce_tuple(self):
        assert RangeSpec.coerce((0, 4)) == RangeSpec(0, 4)

    def test_coerce_passthrough(self):
        spec = RangeSpec(0, 1)
        assert RangeSpec.coerce(spec) is spec

    def test_describe_uses_text(self):
        assert RangeSpec(0, 2, text="1-3").describe() == "1-3"

    def test_describe_without_text(self):
        # Shown 1-indexed
        assert RangeSpec(0, 2).describe() == "1-3"


class TestValidateRange:
    """Test range bounds checking."""

    def test_valid(self):
        validate_range(RangeSpec(0, 4), 5)

    def test_single_page(self):
        validate_range(RangeSpec(4, 4), 5)

    def test_start_after_end(self):
        with pytest.raises(InvalidRangeError):
            validate_range(RangeSpec(3, 1), 5)

    def test_negative_start(self):
        with pytest.raises(InvalidRangeError):
            validate_range(RangeSpec(-1, 1), 5)

    def test_end_past_last_page(self):
        with pytest.raises(InvalidRangeError, match="Invalid range"):
            validate_range(RangeSpec(0, 5), 5)


class TestParseRanges:
    """Test range text parsing."""

    def test_mixed_list(self):
        ranges = parse_ranges("1-3, 5, 8-10", 10)
        assert [(r.start, r.end) for r in ranges] == [(0, 2), (4, 4), (7, 9)]

    def test_keeps_original_text(self):
        ranges = parse_ranges("1-3, 5", 10)
        assert [r.text for r in ranges] == ["1-3", "5"]

    def test_whitespace_around_dash(self):
        ranges = parse_ranges("2 - 4", 5)
        assert (ranges[0].start, ranges[0].end) == (1, 3)

    def test_empty_parts_skipped(self):
        ranges = parse_ranges("1,,2,", 3)
        assert len(ranges) == 2

    def test_overlapping_allowed(self):
        ranges = parse_ranges("1-3, 2-4", 5)
        assert len(ranges) == 2

    def test_zero_page(self):
        with pytest.raises(InvalidRangeError, match="Invalid range: 0"):
            parse_ranges("0", 5)

    def test_past_end(self):
        with pytest.raises(InvalidRangeError, match="Invalid range: 4-6"):
            parse_ranges("1, 4-6", 5)

    def test_descending(self):
        with pytest.raises(InvalidRangeError, match="Invalid range: 3-1"):
            parse_ranges("3-1", 5)

    def test_not_a_number(self):
        with pytest.raises(InvalidRangeError, match="Invalid range: abc"):
            parse_ranges("abc", 5)

    def test_context_carries_range_text(self):
        with pytest.raises(InvalidRangeError) as exc_info:
            parse_ranges("1, 4-6", 5)
        assert exc_info.value.context == {"range": "4-6", "page_count": 5}

    def test_empty_text(self):
        with pytest.raises(InvalidRangeError, match="No page ranges"):
            parse_ranges(" , ", 5)


class TestEachPageRanges:
    """Test the one-file-per-page mode."""

    def test_one_range_per_page(self):
        assert each_page_ranges(3) == [RangeSpec(0, 0), RangeSpec(1, 1), RangeSpec(2, 2)]

    def test_empty_document(self):
        assert each_page_ranges(0) == []


class TestParsePageList:
    """Test page list parsing used by delete, reorder, rotate and resize."""

    def test_given_order_kept(self):
        assert parse_page_list("3, 1, 2", 3) == [2, 0, 1]

    def test_ranges_expanded(self):
        assert parse_page_list("1, 4-6", 6) == [0, 3, 4, 5]

    def test_descending_range(self):
        assert parse_page_list("3-1", 3) == [2, 1, 0]

    def test_out_of_range(self):
        with pytest.raises(PageIndexError):
            parse_page_list("1, 7", 6)

    def test_zero_is_out_of_range(self):
        with pytest.raises(PageIndexError):
            parse_page_list("0", 6)

    def test_bad_syntax(self):
        with pytest.raises(InvalidRangeError):
            parse_page_list("first", 6)

    def test_empty(self):
        assert parse_page_list("", 6) == []
