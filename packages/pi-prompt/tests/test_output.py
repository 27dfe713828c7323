"""Tests for pi.prompt.output -- VT100 sequence generation and flushing."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from pi.prompt.colors import Color, DisplayAttribute
from pi.prompt.output import PosixWriter, VT100Writer


def _emit(call) -> str:
    writer = VT100Writer()
    call(writer)
    return writer.buffered


class TestCursorMoves:
    def test_moves(self) -> None:
        assert _emit(lambda w: w.cursor_up(2)) == "\x1b[2A"
        assert _emit(lambda w: w.cursor_down(3)) == "\x1b[3B"
        assert _emit(lambda w: w.cursor_forward(4)) == "\x1b[4C"
        assert _emit(lambda w: w.cursor_backward(5)) == "\x1b[5D"

    def test_zero_moves_are_no_ops(self) -> None:
        writer = VT100Writer()
        writer.cursor_up(0)
        writer.cursor_down(0)
        writer.cursor_forward(0)
        writer.cursor_backward(0)
        assert writer.buffered == ""

    def test_negative_moves_flip_direction(self) -> None:
        assert _emit(lambda w: w.cursor_up(-2)) == "\x1b[2B"
        assert _emit(lambda w: w.cursor_down(-2)) == "\x1b[2A"
        assert _emit(lambda w: w.cursor_backward(-7)) == "\x1b[7C"
        assert _emit(lambda w: w.cursor_forward(-7)) == "\x1b[7D"

    def test_go_to(self) -> None:
        assert _emit(lambda w: w.cursor_go_to(0, 0)) == "\x1b[H"
        assert _emit(lambda w: w.cursor_go_to(3, 4)) == "\x1b[3;4H"


class TestErase:
    def test_erase_line_returns_to_first_column(self) -> None:
        assert _emit(lambda w: w.erase_line()) == "\x1b[2K\r"

    def test_erase_down_and_screen(self) -> None:
        assert _emit(lambda w: w.erase_down()) == "\x1b[J"
        assert _emit(lambda w: w.erase_screen()) == "\x1b[2J"

    def test_partial_erases(self) -> None:
        assert _emit(lambda w: w.erase_up()) == "\x1b[1J"
        assert _emit(lambda w: w.erase_start_of_line()) == "\x1b[1K"
        assert _emit(lambda w: w.erase_end_of_line()) == "\x1b[K"


class TestCursorState:
    def test_visibility(self) -> None:
        assert _emit(lambda w: w.hide_cursor()) == "\x1b[?25l"
        assert _emit(lambda w: w.show_cursor()) == "\x1b[?12l\x1b[?25h"

    def test_save_and_restore(self) -> None:
        assert _emit(lambda w: w.save_cursor()) == "\x1b[s"
        assert _emit(lambda w: w.unsave_cursor()) == "\x1b[u"

    def test_position_report_request(self) -> None:
        assert _emit(lambda w: w.ask_for_cpr()) == "\x1b[6n"

    def test_scrolling(self) -> None:
        assert _emit(lambda w: w.scroll_down()) == "\x1bD"
        assert _emit(lambda w: w.scroll_up()) == "\x1bM"


class TestColors:
    def test_plain_color(self) -> None:
        assert _emit(lambda w: w.set_color(Color.WHITE, Color.CYAN, False)) == "\x1b[0;97;46m"

    def test_bold_color(self) -> None:
        assert _emit(lambda w: w.set_color(Color.BLACK, Color.TURQUOISE, True)) == "\x1b[1;30;106m"

    def test_default_colors(self) -> None:
        assert _emit(lambda w: w.set_color(Color.DEFAULT, Color.DEFAULT, False)) == "\x1b[0;39;49m"

    def test_reverse_attribute(self) -> None:
        assert (
            _emit(
                lambda w: w.set_display_attributes(
                    Color.DEFAULT, Color.DEFAULT, DisplayAttribute.REVERSE
                )
            )
            == "\x1b[7;39;49m"
        )


class TestWrite:
    def test_escape_in_text_is_neutralised(self) -> None:
        assert _emit(lambda w: w.write("a\x1b[2Jb")) == "a?[2Jb"

    def test_write_raw_is_verbatim(self) -> None:
        assert _emit(lambda w: w.write_raw("\x1b[2J")) == "\x1b[2J"

    def test_write_str_is_neutralised_too(self) -> None:
        assert _emit(lambda w: w.write_str("\x1b]2;x\x07")) == "?]2;x\x07"

    def test_title_strips_terminators(self) -> None:
        assert _emit(lambda w: w.set_title("sql\x07>")) == "\x1b]2;sql>\x07"
        assert _emit(lambda w: w.clear_title()) == "\x1b]2;\x07"

    def test_flush_drops_buffer(self) -> None:
        writer = VT100Writer()
        writer.write("abc")
        writer.flush()
        assert writer.buffered == ""


class TestPosixWriter:
    def test_flush_writes_one_batch(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            writer = PosixWriter(write_fd)
            writer.write("> ")
            writer.cursor_backward(2)
            writer.flush()
            assert os.read(read_fd, 1024) == b"> \x1b[2D"
            assert writer.buffered == ""
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_flush_failure_propagates(self) -> None:
        read_fd, write_fd = os.pipe()
        os.close(read_fd)
        os.close(write_fd)
        writer = PosixWriter(write_fd)
        writer.write("x")
        with pytest.raises(OSError):
            writer.flush()

    def test_empty_flush_writes_nothing(self) -> None:
        read_fd, write_fd = os.pipe()
        os.close(read_fd)
        os.close(write_fd)
        PosixWriter(write_fd).flush()

    def test_write_log(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        log_path = tmp_path / "frames.log"
        monkeypatch.setenv("PI_PROMPT_WRITE_LOG", str(log_path))
        read_fd, write_fd = os.pipe()
        try:
            writer = PosixWriter(write_fd)
            writer.write("one")
            writer.flush()
            writer.write("two")
            writer.flush()
        finally:
            os.close(read_fd)
            os.close(write_fd)
        assert log_path.read_text(encoding="utf-8") == "onetwo"
