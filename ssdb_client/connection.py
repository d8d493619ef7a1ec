"""
Connection - One TCP stream to the store plus its stream buffer

Provides:
- Connection setup with address resolution and optional timeouts
- Request send (encode + frame write) and response receive (read loop)
- Broken-connection tracking: after an I/O failure or a corrupt frame the
  connection refuses further traffic and must be recreated

A connection supports one outstanding request at a time and does no
locking of its own.
"""
from __future__ import annotations

import socket
from typing import Any, List, Optional

import structlog

from ssdb_client.config import settings
from ssdb_client.exceptions import (
    ConnectError,
    ConnectTimeoutError,
    CorruptFrameError,
    TransportError,
)
from ssdb_client.protocol.buffer import StreamBuffer
from ssdb_client.protocol.encoder import encode_values
from ssdb_client.protocol.parser import FrameParser
from ssdb_client.protocol.reader import read_frame
from ssdb_client.protocol.writer import write_frame

logger = structlog.get_logger()


class Connection:
    """
    Blocking connection speaking the SSDB frame protocol.

    Unlike higher-level clients, this only moves blocks: it never looks at
    the status token of a response.
    """

    def __init__(
        self,
        sock: socket.socket,
        chunk_size: Optional[int] = None,
        encoding: Optional[str] = None,
    ):
        self._sock: Optional[socket.socket] = sock
        self._buffer = StreamBuffer()
        self._parser = FrameParser()
        self.chunk_size = chunk_size or settings.read_chunk_size
        self.encoding = encoding or settings.encoding
        self._broken: Optional[str] = None

    @classmethod
    def open(
        cls,
        host: Optional[str] = None,
        port: Optional[int] = None,
        connect_timeout: Optional[float] = None,
        read_timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> "Connection":
        """
        Resolve the address and dial the store.

        Raises:
            ConnectTimeoutError: Connect did not finish within connect_timeout
            ConnectError: Resolution or dial failed
        """
        host = host or settings.host
        port = port or settings.port
        if connect_timeout is None:
            connect_timeout = settings.connect_timeout_sec
        if read_timeout is None:
            read_timeout = settings.read_timeout_sec

        try:
            sock = socket.create_connection((host, port), timeout=connect_timeout)
        except socket.timeout as e:
            raise ConnectTimeoutError(
                f"Connection timeout to {host}:{port}",
                details={"timeout_sec": connect_timeout},
            ) from e
        except OSError as e:
            raise ConnectError(
                f"Failed to connect to {host}:{port}: {e}",
                details={"host": host, "port": port, "error": str(e)},
            ) from e

        sock.settimeout(read_timeout)
        logger.debug("connection_opened", host=host, port=port)
        return cls(sock, **kwargs)

    @property
    def connected(self) -> bool:
        return self._sock is not None

    @property
    def usable(self) -> bool:
        return self._sock is not None and self._broken is None

    @property
    def buffered(self) -> int:
        """Bytes received but not yet consumed into a frame."""
        return len(self._buffer)

    def _require_usable(self) -> socket.socket:
        if self._sock is None:
            raise TransportError("Not connected")
        if self._broken is not None:
            raise TransportError(
                "Connection is unusable after a previous failure",
                details={"cause": self._broken},
            )
        return self._sock

    def _mark_broken(self, error: Exception) -> None:
        self._broken = type(error).__name__
        logger.warning("connection_marked_broken", error=str(error), error_type=self._broken)

    def send(self, *args: Any) -> None:
        """Encode args and write them as one request frame."""
        # Encoding errors surface before the socket is touched
        blocks = encode_values(args, self.encoding)
        sock = self._require_usable()
        try:
            write_frame(sock, blocks)
        except TransportError as e:
            self._mark_broken(e)
            raise

    def recv(self) -> List[bytes]:
        """Block until one response frame has been read."""
        sock = self._require_usable()
        try:
            return read_frame(sock, self._buffer, self._parser, self.chunk_size)
        except (TransportError, CorruptFrameError) as e:
            self._mark_broken(e)
            raise

    def request(self, *args: Any) -> List[bytes]:
        """Send one request and read its response frame."""
        self.send(*args)
        return self.recv()

    def close(self) -> None:
        """
        Close the socket and drop buffered bytes.

        Safe to call from another thread while a recv is blocked; the
        pending read fails with a TransportError.

        Raises:
            TransportError: If the underlying close fails
        """
        sock, self._sock = self._sock, None
        self._buffer.clear()
        if sock is None:
            return
        # close() alone does not wake a recv blocked in another thread
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # peer already gone (ENOTCONN)
        try:
            sock.close()
        except OSError as e:
            raise TransportError(
                f"Failed to close connection: {e}",
                details={"error": str(e)},
            ) from e
        logger.debug("connection_closed")

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
