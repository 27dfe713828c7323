"""Tests for pi.prompt.layout -- offset/coordinate mapping and layout policies."""

from __future__ import annotations

import pytest

from pi.prompt.layout import (
    LayoutBlock,
    end_position,
    is_scroll_thumb,
    layout_blocks,
    needs_forced_wrap,
    position_of,
    row_count,
    scrollbar_thumb,
)


# ---------------------------------------------------------------------------
# layout_blocks
# ---------------------------------------------------------------------------


class TestLayoutBlocks:
    def test_each_line_is_one_block_including_its_newline(self) -> None:
        assert layout_blocks("ab\ncd", 20) == [LayoutBlock(0, 2), LayoutBlock(3, 5)]

    def test_empty_text_is_one_empty_row(self) -> None:
        assert layout_blocks("", 20) == [LayoutBlock(0, 0)]

    def test_long_line_is_cut_into_width_sized_rows(self) -> None:
        assert layout_blocks("x" * 45, 20) == [
            LayoutBlock(0, 19),
            LayoutBlock(20, 39),
            LayoutBlock(40, 45),
        ]

    def test_line_exactly_as_wide_as_terminal_stays_one_row(self) -> None:
        assert layout_blocks("x" * 20, 20) == [LayoutBlock(0, 20)]

    def test_blocks_are_contiguous(self) -> None:
        text = "0123456\n012345678901234567890123\n01234\n" + "9" * 50
        blocks = layout_blocks(text, 20)
        assert blocks[0].start == 0
        for prev, block in zip(blocks, blocks[1:]):
            assert block.start == prev.end + 1

    def test_wide_characters_count_two_columns(self) -> None:
        # U+4E16 U+754C are both double width
        assert layout_blocks("世界ab", 20) == [LayoutBlock(0, 6)]

    def test_non_positive_width_rejected(self) -> None:
        with pytest.raises(ValueError):
            layout_blocks("abc", 0)


# ---------------------------------------------------------------------------
# position_of
# ---------------------------------------------------------------------------


class TestPositionOf:
    @pytest.mark.parametrize(
        ("text", "cursor", "expected"),
        [
            ("0123456", 3, (3, 0)),
            ("0123456\n0\n01234\n0123456789", 13, (3, 2)),
            ("0123456\n012345678901234567890123\n01234\n0123456789", 13, (5, 1)),
            (
                "0123456\n012345678901234567890123\n01234\n012345678901234567890123",
                13,
                (5, 1),
            ),
            (
                "0123456\n012345678901234567890123\n01234\n012345678901234567890123",
                0,
                (0, 0),
            ),
        ],
    )
    def test_known_layouts(
        self, text: str, cursor: int, expected: tuple[int, int]
    ) -> None:
        assert position_of(cursor, text, 20) == expected

    def test_second_line(self) -> None:
        # "d" in "ab\ncd"
        assert position_of(4, "ab\ncd", 20) == (1, 1)

    @pytest.mark.parametrize(
        "k", [k for k in range(1, 52) if k % 7 not in (0, 6)]
    )
    def test_single_line_wraps_every_width_columns(self, k: int) -> None:
        assert position_of(k, "x" * 52, 7) == (k % 7, k // 7)

    @pytest.mark.parametrize(("k", "row"), [(1, 0), (4, 1), (5, 1)])
    def test_row_counts_newlines_before_offset(self, k: int, row: int) -> None:
        text = "ab\ncde\nf"
        assert text[:k].count("\n") == row
        assert position_of(k, text, 80)[1] == row

    def test_offset_on_wrap_boundary_matches_no_row(self) -> None:
        # 20 is both one past the end of row 0 and the start of row 1
        assert position_of(20, "x" * 45, 20) == (0, 0)

    def test_offset_on_block_end_matches_no_row(self) -> None:
        assert position_of(19, "x" * 45, 20) == (0, 0)
        assert position_of(7, "0123456", 20) == (0, 0)

    def test_offset_past_text_falls_back_to_origin(self) -> None:
        assert position_of(99, "abc", 20) == (0, 0)

    def test_empty_text_is_raw_column_mode(self) -> None:
        assert position_of(45, "", 20) == (5, 2)
        assert position_of(20, "", 20) == (0, 1)
        assert position_of(0, "", 20) == (0, 0)

    def test_non_positive_width_rejected(self) -> None:
        with pytest.raises(ValueError):
            position_of(1, "", 0)


class TestRowCount:
    def test_counts_wrapped_and_hard_rows(self) -> None:
        assert row_count("> select", 20) == 1
        assert row_count("> " + "x" * 30, 20) == 2
        assert row_count("> ab\ncd", 20) == 2


class TestEndPosition:
    def test_single_row(self) -> None:
        assert end_position("> select", 20) == (8, 0)

    def test_each_newline_starts_a_row(self) -> None:
        assert end_position("> ab\ncd", 20) == (2, 1)
        assert end_position("> ab\n", 20) == (0, 1)

    def test_wrapped_row(self) -> None:
        assert end_position("x" * 12, 10) == (2, 1)

    def test_full_row_parks_on_last_column(self) -> None:
        assert end_position("x" * 10, 10) == (10, 0)


# ---------------------------------------------------------------------------
# needs_forced_wrap
# ---------------------------------------------------------------------------


class TestNeedsForcedWrap:
    def test_cursor_on_width_boundary_needs_newline(self) -> None:
        assert needs_forced_wrap(20, 20, platform_wraps=False)
        assert needs_forced_wrap(40, 20, platform_wraps=False)

    def test_cursor_inside_row_needs_nothing(self) -> None:
        assert not needs_forced_wrap(19, 20, platform_wraps=False)
        assert not needs_forced_wrap(21, 20, platform_wraps=False)

    def test_origin_needs_nothing(self) -> None:
        assert not needs_forced_wrap(0, 20, platform_wraps=False)

    def test_eagerly_wrapping_terminal_needs_nothing(self) -> None:
        assert not needs_forced_wrap(20, 20, platform_wraps=True)


# ---------------------------------------------------------------------------
# Scrollbar
# ---------------------------------------------------------------------------


class TestScrollbarThumb:
    def test_small_window_over_long_list(self) -> None:
        assert scrollbar_thumb(5, 20, 0) == (0, 1)

    def test_thumb_moves_with_scroll_offset(self) -> None:
        assert scrollbar_thumb(5, 20, 10) == (2, 1)

    def test_everything_visible_fills_track(self) -> None:
        assert scrollbar_thumb(5, 5, 0) == (0, 5)

    def test_thumb_height_never_below_one(self) -> None:
        assert scrollbar_thumb(3, 1000, 0) == (0, 1)

    def test_zero_suggestions_rejected(self) -> None:
        with pytest.raises(ValueError):
            scrollbar_thumb(5, 0, 0)

    def test_thumb_range_is_inclusive(self) -> None:
        top, height = scrollbar_thumb(3, 10, 4)
        assert (top, height) == (1, 1)
        assert [is_scroll_thumb(row, top, height) for row in range(3)] == [
            False,
            True,
            True,
        ]
