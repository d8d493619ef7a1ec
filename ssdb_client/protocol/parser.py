"""
Frame Parser - Finds one complete response frame in the stream buffer

A response frame is a run of length-prefixed blocks closed by a blank line.
The parser scans from the buffer head and reports one of three outcomes:

- COMPLETE:   a full frame was found; its bytes are consumed from the buffer
- INCOMPLETE: more bytes are needed; nothing is consumed
- CORRUPT:    a length header or block separator is malformed; nothing is
              consumed and the stream can no longer be trusted

Blank lines seen before the first block are heartbeats and are skipped.
Both ``\\n`` and ``\\r\\n`` line endings are accepted.
"""
from typing import List, Optional

import structlog

from ssdb_client.models import ParseOutcome
from ssdb_client.protocol.buffer import StreamBuffer

logger = structlog.get_logger()

_LF = 0x0A
_CR = 0x0D


def _parse_length(line: bytes) -> Optional[int]:
    """Return the block length encoded in a header line, or None if malformed."""
    if line.endswith(b"\r"):
        line = line[:-1]
    # isdigit() on bytes only accepts ASCII digits, which also rules out signs
    if not line or not line.isdigit():
        return None
    return int(line)


class FrameParser:
    """
    Stateless scanner for SSDB response frames.

    All scan state lives in local variables, so one parser instance can be
    shared freely; the buffer is the only thing that changes.
    """

    def parse(self, buffer: StreamBuffer) -> ParseOutcome:
        """
        Scan the buffer for one complete response frame.

        Args:
            buffer: Bytes received so far on the connection

        Returns:
            ParseOutcome with status COMPLETE (blocks set), INCOMPLETE,
            or CORRUPT (reason set)
        """
        data = buffer.data
        size = len(data)
        blocks: List[bytes] = []
        offset = 0

        while True:
            idx = data.find(b"\n", offset)
            if idx == -1:
                return ParseOutcome.incomplete()

            line = bytes(data[offset:idx])
            offset = idx + 1

            if line == b"" or line == b"\r":
                if not blocks:
                    # Heartbeat before any block
                    continue
                buffer.consume(offset)
                return ParseOutcome.complete(blocks)

            length = _parse_length(line)
            if length is None:
                logger.warning(
                    "frame_corrupt",
                    header=line[:32].decode("ascii", "replace"),
                    block_index=len(blocks),
                )
                return ParseOutcome.corrupt(f"Malformed block length header: {line[:32]!r}")

            # Payload plus its trailing separator byte must already be buffered
            if offset + length + 1 > size:
                return ParseOutcome.incomplete()

            block = bytes(data[offset:offset + length])
            offset += length
            separator = data[offset]

            if separator == _LF:
                offset += 1
            elif separator == _CR:
                if offset + 2 > size:
                    return ParseOutcome.incomplete()
                if data[offset + 1] != _LF:
                    logger.warning("frame_corrupt", block_index=len(blocks), separator="\\r")
                    return ParseOutcome.corrupt("Block not followed by a line ending")
                offset += 2
            else:
                logger.warning("frame_corrupt", block_index=len(blocks), separator=hex(separator))
                return ParseOutcome.corrupt("Block not followed by a line ending")

            blocks.append(block)
