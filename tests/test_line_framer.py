"""Tests for newline framing of the device stream."""

import pytest

from heart_monitor.data_acquisition.line_framer import LineFramer, iter_lines

STREAM = "0.1,0.2\n0.3,0.4,72\nStarting calibration...\n0.5,0.6,70,0.05\n\n0.7,0.8"


def _chunks(text: str, size: int):
    return [text[i:i + size] for i in range(0, len(text), size)]


def _frame(chunks):
    framer = LineFramer()
    lines = []
    for chunk in chunks:
        lines.extend(framer.feed(chunk))
    last = framer.flush()
    if last is not None:
        lines.append(last)
    return lines


class TestLineFramer:

    def test_complete_lines_are_emitted_without_delimiter(self):
        framer = LineFramer()
        assert framer.feed("a,b\nc,d\n") == ["a,b", "c,d"]
        assert framer.pending == ""

    def test_partial_line_waits_for_delimiter(self):
        framer = LineFramer()
        assert framer.feed("0.1,0.") == []
        assert framer.feed("2,70\n") == ["0.1,0.2,70"]

    @pytest.mark.parametrize("size", [1, 2, 3, 5, 7, 11, 64, len(STREAM)])
    def test_chunk_size_does_not_change_lines(self, size):
        expected = STREAM.split("\n")
        assert _frame(_chunks(STREAM, size)) == expected

    def test_flush_emits_trailing_partial_once(self):
        framer = LineFramer()
        framer.feed("1,2\n3,4")
        assert framer.flush() == "3,4"
        assert framer.flush() is None

    def test_flush_without_partial_returns_none(self):
        framer = LineFramer()
        framer.feed("1,2\n")
        assert framer.flush() is None

    def test_reset_drops_partial_line(self):
        framer = LineFramer()
        framer.feed("stale,0.")
        framer.reset()
        assert framer.feed("1,2\n") == ["1,2"]

    def test_bytes_are_decoded_across_chunk_boundaries(self):
        framer = LineFramer()
        data = "Gain: 1.0 µV\n".encode("utf-8")
        split = data.index("µ".encode("utf-8")) + 1
        assert framer.feed(data[:split]) == []
        assert framer.feed(data[split:]) == ["Gain: 1.0 µV"]

    def test_invalid_bytes_are_replaced(self):
        framer = LineFramer()
        assert framer.feed(b"1,\xff\n") == ["1,\ufffd"]

    def test_carriage_returns_are_left_for_the_parser(self):
        framer = LineFramer()
        assert framer.feed("1,2\r\n") == ["1,2\r"]

    def test_empty_delimiter_is_rejected(self):
        with pytest.raises(ValueError):
            LineFramer(delimiter="")


class TestIterLines:

    @pytest.mark.asyncio
    async def test_yields_lines_and_flushes_at_end(self):
        async def source():
            for chunk in ["0.1,0.", "2\n0.3", ",0.4"]:
                yield chunk

        lines = [line async for line in iter_lines(source())]
        assert lines == ["0.1,0.2", "0.3,0.4"]
