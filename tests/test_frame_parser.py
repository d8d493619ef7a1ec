"""
Tests for the stream buffer and the frame parser state machine.

Tests cover:
- Complete / Incomplete / Corrupt outcomes
- Heartbeat blank lines before the first block
- CRLF line endings
- Arbitrary fragmentation of the byte stream
- Consumption only on a completed frame
"""
import pytest

from ssdb_client.models import ParseStatus
from ssdb_client.protocol.buffer import StreamBuffer
from ssdb_client.protocol.encoder import encode_values
from ssdb_client.protocol.parser import FrameParser
from ssdb_client.protocol.writer import build_request

OK_ONE = b"2\nok\n1\n1\n\n"


@pytest.fixture
def parser():
    return FrameParser()


def parse_bytes(parser, data):
    buffer = StreamBuffer(data)
    return parser.parse(buffer), buffer


class TestStreamBuffer:

    def test_feed_and_consume(self):
        buffer = StreamBuffer()
        buffer.feed(b"abc")
        buffer.feed(b"def")
        assert len(buffer) == 6

        buffer.consume(4)
        assert bytes(buffer) == b"ef"

    def test_consume_more_than_buffered_is_rejected(self):
        buffer = StreamBuffer(b"ab")
        with pytest.raises(ValueError):
            buffer.consume(3)
        assert bytes(buffer) == b"ab"

    def test_clear(self):
        buffer = StreamBuffer(b"abc")
        buffer.clear()
        assert len(buffer) == 0


class TestCompleteFrames:

    def test_ok_response(self, parser):
        outcome, buffer = parse_bytes(parser, OK_ONE)

        assert outcome.status is ParseStatus.COMPLETE
        assert outcome.blocks == [b"ok", b"1"]
        assert len(buffer) == 0

    def test_crlf_frame_terminator(self, parser):
        outcome, buffer = parse_bytes(parser, b"2\nok\n1\n1\n\r\n")

        assert outcome.blocks == [b"ok", b"1"]
        assert len(buffer) == 0

    def test_crlf_everywhere(self, parser):
        outcome, buffer = parse_bytes(parser, b"2\r\nok\r\n1\r\n1\r\n\r\n")

        assert outcome.blocks == [b"ok", b"1"]
        assert len(buffer) == 0

    def test_single_status_block(self, parser):
        outcome, _ = parse_bytes(parser, b"9\nnot_found\n\n")
        assert outcome.blocks == [b"not_found"]

    def test_zero_length_block(self, parser):
        outcome, _ = parse_bytes(parser, b"2\nok\n0\n\n\n")
        assert outcome.blocks == [b"ok", b""]

    def test_payload_may_contain_newlines(self, parser):
        outcome, _ = parse_bytes(parser, b"2\nok\n4\na\n\nb\n\n")
        assert outcome.blocks == [b"ok", b"a\n\nb"]

    def test_only_first_frame_is_consumed(self, parser):
        outcome, buffer = parse_bytes(parser, OK_ONE + b"2\nok\n")

        assert outcome.blocks == [b"ok", b"1"]
        assert bytes(buffer) == b"2\nok\n"

    def test_encoded_request_parses_back(self, parser):
        args = ["multi_set", b"\x00bin", 12, -3, 2.5, True, None, "ünï"]
        blocks = encode_values(args)

        outcome, _ = parse_bytes(parser, build_request(blocks))

        assert outcome.blocks == blocks


class TestHeartbeats:

    def test_blank_lines_before_first_block_are_skipped(self, parser):
        outcome, buffer = parse_bytes(parser, b"\n\r\n\n" + OK_ONE)

        assert outcome.blocks == [b"ok", b"1"]
        assert len(buffer) == 0

    def test_heartbeat_alone_is_not_an_empty_frame(self, parser):
        outcome, buffer = parse_bytes(parser, b"\n")

        assert outcome.status is ParseStatus.INCOMPLETE
        assert outcome.blocks == []
        assert bytes(buffer) == b"\n"


class TestIncomplete:

    @pytest.mark.parametrize(
        "data",
        [
            b"",
            b"2",
            b"2\n",
            b"2\nok",
            b"2\nok\n",
            b"2\nok\n1\n1",
            b"2\nok\n1\n1\n",
            b"2\r\nok\r",
        ],
    )
    def test_partial_frames_need_more_bytes(self, parser, data):
        outcome, buffer = parse_bytes(parser, data)

        assert outcome.status is ParseStatus.INCOMPLETE
        assert bytes(buffer) == data

    def test_payload_without_trailing_newline_waits(self, parser):
        # n payload bytes present but not the separator after them
        outcome, buffer = parse_bytes(parser, b"2\nok\n3\nabc")

        assert outcome.is_incomplete
        assert len(buffer) == len(b"2\nok\n3\nabc")


class TestCorrupt:

    @pytest.mark.parametrize(
        "header",
        [b"abc", b"-1", b"+2", b" 2", b"2 ", b"1_0", b"0x10", b"\xd9\xa3"],
    )
    def test_malformed_length_header(self, parser, header):
        data = header + b"\nok\n\n"
        outcome, buffer = parse_bytes(parser, data)

        assert outcome.status is ParseStatus.CORRUPT
        assert outcome.reason
        assert bytes(buffer) == data

    def test_corrupt_after_valid_blocks(self, parser):
        data = b"2\nok\nxx\n"
        outcome, buffer = parse_bytes(parser, data)

        assert outcome.is_corrupt
        assert bytes(buffer) == data

    def test_block_longer_than_declared(self, parser):
        outcome, _ = parse_bytes(parser, b"2\nokay\n\n")
        assert outcome.is_corrupt

    def test_carriage_return_not_followed_by_newline(self, parser):
        outcome, _ = parse_bytes(parser, b"2\nok\rx\n\n")
        assert outcome.is_corrupt

    def test_corrupt_is_stable_across_calls(self, parser):
        buffer = StreamBuffer(b"bogus\n")
        assert parser.parse(buffer).is_corrupt
        assert parser.parse(buffer).is_corrupt
        assert bytes(buffer) == b"bogus\n"


class TestFragmentation:

    FRAMES = [
        OK_ONE,
        b"2\nok\n1\n1\n\r\n",
        b"2\r\nok\r\n1\r\n1\r\n\r\n",
        b"\n\n2\nok\n3\nk\nv\n0\n\n\n",
    ]

    @pytest.mark.parametrize("frame", FRAMES)
    def test_every_split_point_yields_same_blocks(self, parser, frame):
        expected = parser.parse(StreamBuffer(frame)).blocks

        for split in range(1, len(frame)):
            buffer = StreamBuffer()
            buffer.feed(frame[:split])
            first = parser.parse(buffer)
            assert first.is_incomplete, split

            buffer.feed(frame[split:])
            second = parser.parse(buffer)
            assert second.blocks == expected, split
            assert len(buffer) == 0

    @pytest.mark.parametrize("frame", FRAMES)
    def test_byte_at_a_time(self, parser, frame):
        buffer = StreamBuffer()
        outcomes = []
        for i in range(len(frame)):
            buffer.feed(frame[i:i + 1])
            outcomes.append(parser.parse(buffer))

        assert all(o.is_incomplete for o in outcomes[:-1])
        assert outcomes[-1].is_complete
        assert outcomes[-1].blocks == parser.parse(StreamBuffer(frame)).blocks

    def test_large_block_over_three_reads(self, parser):
        payload = bytes(range(256)) * 39 + b"x" * 16  # 10000 bytes
        assert len(payload) == 10000
        frame = b"2\nok\n10000\n" + payload + b"\n\n"
        chunks = [frame[:4096], frame[4096:8192], frame[8192:]]

        buffer = StreamBuffer()
        buffer.feed(chunks[0])
        assert parser.parse(buffer).is_incomplete
        buffer.feed(chunks[1])
        assert parser.parse(buffer).is_incomplete
        buffer.feed(chunks[2])
        outcome = parser.parse(buffer)

        assert outcome.blocks == [b"ok", payload]
        assert len(buffer) == 0
