"""
Frame Writer - Serializes blocks into a request frame

Wire layout per block: ``<decimal length>\\n<raw bytes>\\n``; the frame ends
with one extra ``\\n``.
"""
import socket
from typing import Sequence

import structlog

from ssdb_client.exceptions import SendError

logger = structlog.get_logger()

FRAME_DELIMITER = b"\n"


def build_request(blocks: Sequence[bytes]) -> bytes:
    """Serialize an ordered block list into one request frame."""
    out = bytearray()
    for block in blocks:
        out += b"%d\n" % len(block)
        out += block
        out += FRAME_DELIMITER
    out += FRAME_DELIMITER
    return bytes(out)


def write_frame(sock: socket.socket, blocks: Sequence[bytes]) -> int:
    """
    Write a request frame to the socket in a single call.

    Args:
        sock: Connected stream socket
        blocks: Encoded request blocks, command name first

    Returns:
        Number of bytes written

    Raises:
        SendError: On any socket failure. No retry is attempted.
    """
    data = build_request(blocks)
    try:
        sock.sendall(data)
    except OSError as e:
        logger.warning(
            "frame_write_failed",
            data_size=len(data),
            error=str(e),
            error_type=type(e).__name__,
        )
        raise SendError(
            "Failed to send request frame",
            details={"error": str(e), "data_size": len(data)},
        ) from e
    return len(data)
