"""Wire codec for the SSDB text protocol"""
from ssdb_client.protocol.buffer import StreamBuffer
from ssdb_client.protocol.encoder import encode_values
from ssdb_client.protocol.parser import FrameParser
from ssdb_client.protocol.reader import read_frame
from ssdb_client.protocol.writer import build_request, write_frame

__all__ = [
    "FrameParser",
    "StreamBuffer",
    "build_request",
    "encode_values",
    "read_frame",
    "write_frame",
]
