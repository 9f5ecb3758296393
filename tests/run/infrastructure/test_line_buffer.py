"""Tests for LineBuffer."""

from subagent_runner.run.infrastructure.line_buffer import LineBuffer


class TestFeed:
    def test_complete_lines_are_returned(self) -> None:
        buffer = LineBuffer()
        assert buffer.feed(b"one\ntwo\n") == ["one", "two"]

    def test_partial_line_is_held_until_completed(self) -> None:
        buffer = LineBuffer()
        assert buffer.feed(b'{"type": "mess') == []
        assert buffer.feed(b'age_end"}\nnext') == ['{"type": "message_end"}']

    def test_multibyte_character_split_across_chunks(self) -> None:
        encoded = "héllo\n".encode()
        buffer = LineBuffer()
        assert buffer.feed(encoded[:2]) == []
        assert buffer.feed(encoded[2:]) == ["héllo"]

    def test_empty_lines_are_preserved(self) -> None:
        assert LineBuffer().feed(b"\n\nx\n") == ["", "", "x"]


class TestFlush:
    def test_flush_returns_unterminated_tail(self) -> None:
        buffer = LineBuffer()
        buffer.feed(b"done\ntail")
        assert buffer.flush() == "tail"

    def test_flush_of_whitespace_only_tail_is_none(self) -> None:
        buffer = LineBuffer()
        buffer.feed(b"done\n  ")
        assert buffer.flush() is None

    def test_flush_of_empty_buffer_is_none(self) -> None:
        assert LineBuffer().flush() is None
