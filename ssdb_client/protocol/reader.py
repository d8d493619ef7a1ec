"""
Read Loop - Reads from the socket until one response frame is available
"""
import socket
from typing import List, Optional

import structlog

from ssdb_client.config import settings
from ssdb_client.exceptions import ConnectionClosedError, CorruptFrameError, ReceiveError
from ssdb_client.protocol.buffer import StreamBuffer
from ssdb_client.protocol.parser import FrameParser

logger = structlog.get_logger()

_default_parser = FrameParser()


def read_frame(
    sock: socket.socket,
    buffer: StreamBuffer,
    parser: Optional[FrameParser] = None,
    chunk_size: Optional[int] = None,
) -> List[bytes]:
    """
    Block until exactly one response frame has been read.

    Each iteration performs one recv, appends everything read to the
    buffer and runs the parser over it.

    Args:
        sock: Connected stream socket
        buffer: The connection's stream buffer
        parser: Frame parser (a shared stateless one by default)
        chunk_size: Maximum bytes per recv call

    Returns:
        Block list of the response frame

    Raises:
        ConnectionClosedError: Peer closed the stream mid-frame
        ReceiveError: Socket read failed or timed out
        CorruptFrameError: Malformed frame; the connection is unusable
    """
    parser = parser or _default_parser
    chunk_size = chunk_size or settings.read_chunk_size

    while True:
        try:
            chunk = sock.recv(chunk_size)
        except OSError as e:
            logger.warning(
                "frame_read_failed",
                buffered=len(buffer),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ReceiveError(
                "Failed to read response frame",
                details={"error": str(e), "buffered": len(buffer)},
            ) from e

        if not chunk:
            logger.warning("peer_closed_connection", buffered=len(buffer))
            raise ConnectionClosedError(
                "Connection closed by peer before a full response arrived",
                details={"buffered": len(buffer)},
            )

        buffer.feed(chunk)
        outcome = parser.parse(buffer)

        if outcome.is_complete:
            return outcome.blocks
        if outcome.is_corrupt:
            raise CorruptFrameError(
                outcome.reason or "Corrupt response frame",
                details={"buffered": len(buffer)},
            )
        logger.debug("frame_incomplete", buffered=len(buffer))
