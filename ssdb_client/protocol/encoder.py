"""
Value Encoder - Converts request arguments into wire blocks

Each argument is classified into one tagged value kind, and every kind has
exactly one canonical byte rendering:

- Text     -> configured text encoding (UTF-8 by default)
- Bytes    -> unchanged
- Integer  -> decimal ASCII, optional leading minus
- Float    -> fixed-point with six fractional digits
- Boolean  -> b"1" / b"0"
- Absent   -> zero-length block
"""
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Union

import structlog

from ssdb_client.config import settings
from ssdb_client.exceptions import EncodingError, UnsupportedTypeError

logger = structlog.get_logger()


@dataclass(frozen=True)
class Text:
    value: str

    def encode(self, encoding: Optional[str] = None) -> bytes:
        return self.value.encode(encoding or settings.encoding)


@dataclass(frozen=True)
class Bytes:
    value: bytes

    def encode(self, encoding: Optional[str] = None) -> bytes:
        return bytes(self.value)


@dataclass(frozen=True)
class Integer:
    value: int

    def encode(self, encoding: Optional[str] = None) -> bytes:
        return b"%d" % self.value


@dataclass(frozen=True)
class Float:
    value: float

    def encode(self, encoding: Optional[str] = None) -> bytes:
        return b"%.6f" % self.value


@dataclass(frozen=True)
class Boolean:
    value: bool

    def encode(self, encoding: Optional[str] = None) -> bytes:
        return b"1" if self.value else b"0"


@dataclass(frozen=True)
class Absent:
    def encode(self, encoding: Optional[str] = None) -> bytes:
        return b""


Value = Union[Text, Bytes, Integer, Float, Boolean, Absent]

_VALUE_KINDS = (Text, Bytes, Integer, Float, Boolean, Absent)


def as_value(obj: Any) -> Value:
    """
    Classify a native Python object into its value kind.

    Args:
        obj: Argument supplied by the caller

    Returns:
        The tagged value (unchanged if it already is one)

    Raises:
        UnsupportedTypeError: If the object has no wire encoding
    """
    if isinstance(obj, _VALUE_KINDS):
        return obj
    if obj is None:
        return Absent()
    # bool is a subclass of int, so it must be tested first
    if isinstance(obj, bool):
        return Boolean(obj)
    if isinstance(obj, int):
        return Integer(obj)
    if isinstance(obj, float):
        return Float(obj)
    if isinstance(obj, str):
        return Text(obj)
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return Bytes(bytes(obj))

    raise UnsupportedTypeError(
        f"Unsupported argument type: {type(obj).__name__}",
        details={"type": type(obj).__name__},
    )


def encode_value(obj: Any, encoding: Optional[str] = None) -> bytes:
    """Encode a single argument into its block bytes."""
    return as_value(obj).encode(encoding)


def encode_values(args: Iterable[Any], encoding: Optional[str] = None) -> List[bytes]:
    """
    Encode an ordered argument list into blocks.

    Either every argument encodes or an UnsupportedTypeError is raised;
    callers never see a partial block list.
    """
    blocks = []
    for position, arg in enumerate(args):
        try:
            blocks.append(encode_value(arg, encoding))
        except UnsupportedTypeError as e:
            e.details["position"] = position
            logger.debug("argument_encoding_failed", position=position, type=e.details.get("type"))
            raise
        except UnicodeEncodeError as e:
            raise EncodingError(
                f"Argument {position} cannot be encoded as {encoding or settings.encoding}",
                details={"position": position, "error": str(e)},
            ) from e
    return blocks
