"""
Command Table - Response validation and decoding per store operation

Every store operation follows the same four steps: encode the arguments,
send/receive one frame, check the block list against the expected shape,
decode the payload. Only the shape check and the decoder vary, so each
operation is one CommandSpec row.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

import structlog

from ssdb_client.config import settings
from ssdb_client.exceptions import ResponseShapeError

logger = structlog.get_logger()

STATUS_OK = b"ok"
STATUS_NOT_FOUND = b"not_found"

Blocks = List[bytes]
ShapeCheck = Callable[[Blocks], bool]
Decoder = Callable[[Blocks, str], Any]


# Shape checks receive the full block list, status token included

def ok_exact(count: int) -> ShapeCheck:
    def check(blocks: Blocks) -> bool:
        return len(blocks) == count and blocks[0] == STATUS_OK
    return check


def ok_count(*counts: int) -> ShapeCheck:
    def check(blocks: Blocks) -> bool:
        return len(blocks) in counts and blocks[0] == STATUS_OK
    return check


def ok_any(blocks: Blocks) -> bool:
    return len(blocks) >= 1 and blocks[0] == STATUS_OK


def ok_pairs(blocks: Blocks) -> bool:
    """Status followed by key/value pairs: an odd block count."""
    return len(blocks) % 2 == 1 and blocks[0] == STATUS_OK


# Decoders receive the payload only (status token stripped)

def as_true(payload: Blocks, encoding: str) -> bool:
    return True


def as_integer(payload: Blocks, encoding: str) -> int:
    return int(payload[0])


def as_text(payload: Blocks, encoding: str) -> str:
    return payload[0].decode(encoding)


def as_flag(payload: Blocks, encoding: str) -> bool:
    return int(payload[0]) == 1


def as_positive(payload: Blocks, encoding: str) -> bool:
    return int(payload[0]) > 0


def as_text_list(payload: Blocks, encoding: str) -> List[str]:
    return [item.decode(encoding) for item in payload]


def as_text_pairs(payload: Blocks, encoding: str) -> List[Tuple[str, str]]:
    return [
        (payload[i].decode(encoding), payload[i + 1].decode(encoding))
        for i in range(0, len(payload), 2)
    ]


def as_text_map(payload: Blocks, encoding: str) -> Dict[str, str]:
    return dict(as_text_pairs(payload, encoding))


def as_score_pairs(payload: Blocks, encoding: str) -> List[Tuple[str, int]]:
    return [
        (payload[i].decode(encoding), int(payload[i + 1]))
        for i in range(0, len(payload), 2)
    ]


def as_score_map(payload: Blocks, encoding: str) -> Dict[str, int]:
    return dict(as_score_pairs(payload, encoding))


@dataclass(frozen=True)
class CommandSpec:
    """One store operation: wire name, expected shape and payload decoder."""

    name: str
    shape: ShapeCheck
    decode: Decoder
    allow_not_found: bool = False


def _spec(name: str, shape: ShapeCheck, decode: Decoder, allow_not_found: bool = False) -> CommandSpec:
    return CommandSpec(name=name, shape=shape, decode=decode, allow_not_found=allow_not_found)


_TABLE = [
    # Key-value
    _spec("set", ok_exact(2), as_true),
    _spec("setx", ok_exact(2), as_true),
    _spec("setnx", ok_exact(2), as_integer),
    _spec("get", ok_exact(2), as_text, allow_not_found=True),
    _spec("getset", ok_exact(2), as_text, allow_not_found=True),
    _spec("del", ok_exact(2), as_true),
    _spec("incr", ok_exact(2), as_integer),
    _spec("decr", ok_exact(2), as_integer),
    _spec("multi_set", ok_exact(2), as_true),
    _spec("multi_get", ok_pairs, as_text_map),
    _spec("multi_del", ok_exact(2), as_integer),
    _spec("scan", ok_pairs, as_text_pairs),
    # Hash map
    _spec("hset", ok_exact(2), as_true),
    _spec("hget", ok_exact(2), as_text, allow_not_found=True),
    _spec("hdel", ok_exact(2), as_true),
    _spec("hincr", ok_exact(2), as_integer),
    _spec("hdecr", ok_exact(2), as_integer),
    _spec("hexists", ok_exact(2), as_flag),
    _spec("hsize", ok_exact(2), as_integer),
    _spec("hlist", ok_any, as_text_list),
    _spec("hkeys", ok_any, as_text_list),
    _spec("hscan", ok_pairs, as_text_pairs),
    _spec("hrscan", ok_pairs, as_text_pairs),
    _spec("hclear", ok_exact(2), as_true),
    _spec("multi_hset", ok_exact(2), as_true),
    _spec("multi_hget", ok_pairs, as_text_map),
    _spec("multi_hdel", ok_exact(2), as_true),
    # Sorted set
    _spec("zset", ok_exact(2), as_true),
    _spec("zget", ok_exact(2), as_integer, allow_not_found=True),
    _spec("zdel", ok_exact(2), as_true),
    _spec("zincr", ok_exact(2), as_integer),
    _spec("zsize", ok_exact(2), as_integer),
    _spec("zexists", ok_exact(2), as_positive),
    _spec("zlist", ok_any, as_text_list),
    _spec("zkeys", ok_any, as_text_list),
    _spec("zscan", ok_pairs, as_score_map),
    _spec("zrscan", ok_pairs, as_score_map),
    _spec("zrank", ok_exact(2), as_integer),
    _spec("zrrank", ok_exact(2), as_integer),
    _spec("zrange", ok_pairs, as_score_pairs),
    _spec("zrrange", ok_pairs, as_score_pairs),
    _spec("zclear", ok_exact(2), as_true),
    _spec("multi_zset", ok_exact(2), as_true),
    _spec("multi_zget", ok_pairs, as_score_map),
    _spec("multi_zdel", ok_exact(2), as_true),
    # Queue
    _spec("qsize", ok_exact(2), as_integer),
    _spec("qclear", ok_exact(2), as_true),
    _spec("qfront", ok_exact(2), as_text),
    _spec("qback", ok_exact(2), as_text),
    _spec("qget", ok_exact(2), as_text, allow_not_found=True),
    _spec("qslice", ok_any, as_text_list),
    _spec("qpush_front", ok_count(1, 2), as_true),
    _spec("qpush_back", ok_count(1, 2), as_true),
    _spec("qpop_front", ok_exact(2), as_text, allow_not_found=True),
    _spec("qpop_back", ok_exact(2), as_text, allow_not_found=True),
]

COMMANDS: Dict[str, CommandSpec] = {spec.name: spec for spec in _TABLE}


def validate(spec: CommandSpec, blocks: Blocks, encoding: Optional[str] = None) -> Any:
    """
    Check a response block list against a command row and decode it.

    Returns:
        Decoded result, or None for an accepted not_found status

    Raises:
        ResponseShapeError: Shape mismatch or undecodable payload
    """
    encoding = encoding or settings.encoding
    status = blocks[0] if blocks else b""

    if spec.allow_not_found and status == STATUS_NOT_FOUND:
        return None

    details = {
        "command": spec.name,
        "status": status.decode(encoding, "replace"),
        "block_count": len(blocks),
    }
    if not spec.shape(blocks):
        logger.debug("response_shape_mismatch", **details)
        raise ResponseShapeError(f"Bad response to {spec.name}", details=details)

    try:
        return spec.decode(blocks[1:], encoding)
    except (ValueError, IndexError) as e:
        # UnicodeDecodeError is a ValueError subclass
        details["error"] = str(e)
        logger.debug("response_decode_failed", **details)
        raise ResponseShapeError(f"Bad response to {spec.name}", details=details) from e


def execute(conn: Any, name: str, *args: Any, encoding: Optional[str] = None) -> Any:
    """
    Run one store operation over a connection.

    Args:
        conn: Object with a ``request(*args) -> List[bytes]`` method
        name: Wire command name (a key of COMMANDS)
        *args: Command arguments

    Raises:
        KeyError: Unknown command name
    """
    spec = COMMANDS[name]
    blocks = conn.request(name, *args)
    return validate(spec, blocks, encoding or getattr(conn, "encoding", None))
