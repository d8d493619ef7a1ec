"""
Custom Exception Hierarchy for the SSDB client

Every error raised by the client inherits from SSDBError and carries a
closed ErrorKind, so callers can branch on the failure category without
matching on message text.
"""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure categories surfaced by the client"""

    CONNECT = "connect"
    IO = "io"
    CORRUPT_FRAME = "corrupt_frame"
    ENCODING = "encoding"
    SHAPE_MISMATCH = "shape_mismatch"


class SSDBError(Exception):
    """
    Base exception for all client errors.

    Subclasses pin ``kind``; ``details`` holds structured context for logs.
    """
    kind: ErrorKind

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# Connection Establishment Errors

class ConnectError(SSDBError):
    """
    Address resolution or dial failure.

    Raised only while opening a connection; never retried.
    """
    kind = ErrorKind.CONNECT


class ConnectTimeoutError(ConnectError):
    """Connection attempt timed out."""
    pass


# Network and Transport Errors

class TransportError(SSDBError):
    """
    Read or write failure on an established socket.

    Fatal to the connection: it must be discarded and recreated.
    """
    kind = ErrorKind.IO


class SendError(TransportError):
    """Failed to write a request frame."""
    pass


class ReceiveError(TransportError):
    """Failed to read a response frame."""
    pass


class ConnectionClosedError(ReceiveError):
    """Peer closed the stream before a full frame arrived."""
    pass


# Response Errors

class BadResponseError(SSDBError):
    """
    Response could not be turned into a result.

    Base class for corrupt framing and unexpected response shapes.
    """
    kind = ErrorKind.SHAPE_MISMATCH


class CorruptFrameError(BadResponseError):
    """
    Malformed length header or block separator.

    The stream position is no longer trustworthy, so the connection is
    unusable afterwards.
    """
    kind = ErrorKind.CORRUPT_FRAME


class ResponseShapeError(BadResponseError):
    """
    Well-formed frame whose blocks do not match the operation.

    The connection stays usable.
    """
    kind = ErrorKind.SHAPE_MISMATCH


# Local Input Errors

class EncodingError(SSDBError):
    """
    Arguments could not be turned into a request.

    Detected before any network activity; safe to retry with corrected input.
    """
    kind = ErrorKind.ENCODING


class UnsupportedTypeError(EncodingError):
    """Argument type has no wire encoding."""
    pass


class NotEnoughParamsError(EncodingError):
    """Multi-key operation called with nothing to send."""
    pass
