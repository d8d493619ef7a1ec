"""
Client - Typed store operations over one connection

Each method maps to one row of the command table; argument ordering is the
only thing a method adds. Calls are serialised with a lock so that one
request/response exchange finishes before the next begins.
"""
from __future__ import annotations

import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ssdb_client.commands import execute
from ssdb_client.connection import Connection
from ssdb_client.exceptions import NotEnoughParamsError


def _flatten(pairs: Mapping[Any, Any]) -> List[Any]:
    out: List[Any] = []
    for key, value in pairs.items():
        out.append(key)
        out.append(value)
    return out


def _require(name: str, items: Any) -> None:
    if not items:
        raise NotEnoughParamsError(f"{name} needs at least one item", details={"command": name})


class Client:
    """
    SSDB client.

    Example:
        with Client("127.0.0.1", 8888) as db:
            db.set("k", "v")
            db.get("k")  # -> "v"
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        connect_timeout: Optional[float] = None,
        read_timeout: Optional[float] = None,
        encoding: Optional[str] = None,
        connection: Optional[Connection] = None,
    ):
        if connection is None:
            connection = Connection.open(
                host,
                port,
                connect_timeout=connect_timeout,
                read_timeout=read_timeout,
                encoding=encoding,
            )
        self.connection = connection
        self._lock = threading.Lock()

    @classmethod
    def from_connection(cls, connection: Connection) -> "Client":
        return cls(connection=connection)

    # Generic entry points

    def do(self, *args: Any) -> List[bytes]:
        """Send a raw command and return the response blocks unvalidated."""
        with self._lock:
            return self.connection.request(*args)

    def execute(self, name: str, *args: Any) -> Any:
        """Run a command-table operation and return its decoded result."""
        with self._lock:
            return execute(self.connection, name, *args)

    def close(self) -> None:
        """Close the connection, cancelling any call blocked on a read."""
        # Not under the call lock: an in-flight call holds it until its read returns
        self.connection.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # Key-value

    def set(self, key: Any, value: Any) -> bool:
        return self.execute("set", key, value)

    def setx(self, key: Any, value: Any, ttl: int) -> bool:
        return self.execute("setx", key, value, ttl)

    def setnx(self, key: Any, value: Any) -> int:
        return self.execute("setnx", key, value)

    def get(self, key: Any) -> Optional[str]:
        return self.execute("get", key)

    def getset(self, key: Any, value: Any) -> Optional[str]:
        return self.execute("getset", key, value)

    def delete(self, key: Any) -> bool:
        return self.execute("del", key)

    def incr(self, key: Any, num: int = 1) -> int:
        return self.execute("incr", key, num)

    def decr(self, key: Any, num: int = 1) -> int:
        return self.execute("decr", key, num)

    def multi_set(self, pairs: Mapping[Any, Any]) -> bool:
        _require("multi_set", pairs)
        return self.execute("multi_set", *_flatten(pairs))

    def multi_get(self, keys: Iterable[Any]) -> Dict[str, str]:
        keys = list(keys)
        _require("multi_get", keys)
        return self.execute("multi_get", *keys)

    def multi_del(self, keys: Iterable[Any]) -> int:
        keys = list(keys)
        _require("multi_del", keys)
        return self.execute("multi_del", *keys)

    def scan(self, key_start: Any, key_end: Any, limit: int) -> List[Tuple[str, str]]:
        return self.execute("scan", key_start, key_end, limit)

    # Hash map

    def hset(self, name: Any, key: Any, value: Any) -> bool:
        return self.execute("hset", name, key, value)

    def hget(self, name: Any, key: Any) -> Optional[str]:
        return self.execute("hget", name, key)

    def hdel(self, name: Any, key: Any) -> bool:
        return self.execute("hdel", name, key)

    def hincr(self, name: Any, key: Any, num: int = 1) -> int:
        return self.execute("hincr", name, key, num)

    def hdecr(self, name: Any, key: Any, num: int = 1) -> int:
        return self.execute("hdecr", name, key, num)

    def hexists(self, name: Any, key: Any) -> bool:
        return self.execute("hexists", name, key)

    def hsize(self, name: Any) -> int:
        return self.execute("hsize", name)

    def hlist(self, name_start: Any, name_end: Any, limit: int) -> List[str]:
        return self.execute("hlist", name_start, name_end, limit)

    def hkeys(self, name: Any, key_start: Any, key_end: Any, limit: int) -> List[str]:
        return self.execute("hkeys", name, key_start, key_end, limit)

    def hscan(self, name: Any, key_start: Any, key_end: Any, limit: int) -> List[Tuple[str, str]]:
        return self.execute("hscan", name, key_start, key_end, limit)

    def hrscan(self, name: Any, key_start: Any, key_end: Any, limit: int) -> List[Tuple[str, str]]:
        return self.execute("hrscan", name, key_start, key_end, limit)

    def hclear(self, name: Any) -> bool:
        return self.execute("hclear", name)

    def multi_hset(self, name: Any, pairs: Mapping[Any, Any]) -> bool:
        _require("multi_hset", pairs)
        return self.execute("multi_hset", name, *_flatten(pairs))

    def multi_hget(self, name: Any, keys: Iterable[Any]) -> Dict[str, str]:
        keys = list(keys)
        _require("multi_hget", keys)
        return self.execute("multi_hget", name, *keys)

    def multi_hdel(self, name: Any, keys: Iterable[Any]) -> bool:
        keys = list(keys)
        _require("multi_hdel", keys)
        return self.execute("multi_hdel", name, *keys)

    # Sorted set

    def zset(self, name: Any, key: Any, score: int) -> bool:
        return self.execute("zset", name, key, score)

    def zget(self, name: Any, key: Any) -> Optional[int]:
        return self.execute("zget", name, key)

    def zdel(self, name: Any, key: Any) -> bool:
        return self.execute("zdel", name, key)

    def zincr(self, name: Any, key: Any, num: int = 1) -> int:
        return self.execute("zincr", name, key, num)

    def zsize(self, name: Any) -> int:
        return self.execute("zsize", name)

    def zexists(self, name: Any, key: Any) -> bool:
        return self.execute("zexists", name, key)

    def zlist(self, name_start: Any, name_end: Any, limit: int) -> List[str]:
        return self.execute("zlist", name_start, name_end, limit)

    def zkeys(
        self, name: Any, key_start: Any, score_start: Any, score_end: Any, limit: int
    ) -> List[str]:
        return self.execute("zkeys", name, key_start, score_start, score_end, limit)

    def zscan(
        self, name: Any, key_start: Any, score_start: Any, score_end: Any, limit: int
    ) -> Dict[str, int]:
        return self.execute("zscan", name, key_start, score_start, score_end, limit)

    def zrscan(
        self, name: Any, key_start: Any, score_start: Any, score_end: Any, limit: int
    ) -> Dict[str, int]:
        return self.execute("zrscan", name, key_start, score_start, score_end, limit)

    def zrank(self, name: Any, key: Any) -> int:
        return self.execute("zrank", name, key)

    def zrrank(self, name: Any, key: Any) -> int:
        return self.execute("zrrank", name, key)

    def zrange(self, name: Any, offset: int, limit: int) -> List[Tuple[str, int]]:
        return self.execute("zrange", name, offset, limit)

    def zrrange(self, name: Any, offset: int, limit: int) -> List[Tuple[str, int]]:
        return self.execute("zrrange", name, offset, limit)

    def zclear(self, name: Any) -> bool:
        return self.execute("zclear", name)

    def multi_zset(self, name: Any, scores: Mapping[Any, int]) -> bool:
        _require("multi_zset", scores)
        return self.execute("multi_zset", name, *_flatten(scores))

    def multi_zget(self, name: Any, keys: Iterable[Any]) -> Dict[str, int]:
        keys = list(keys)
        _require("multi_zget", keys)
        return self.execute("multi_zget", name, *keys)

    def multi_zdel(self, name: Any, keys: Iterable[Any]) -> bool:
        keys = list(keys)
        _require("multi_zdel", keys)
        return self.execute("multi_zdel", name, *keys)

    # Queue

    def qsize(self, name: Any) -> int:
        return self.execute("qsize", name)

    def qclear(self, name: Any) -> bool:
        return self.execute("qclear", name)

    def qfront(self, name: Any) -> str:
        return self.execute("qfront", name)

    def qback(self, name: Any) -> str:
        return self.execute("qback", name)

    def qget(self, name: Any, index: int) -> Optional[str]:
        return self.execute("qget", name, index)

    def qslice(self, name: Any, begin: int, end: int) -> List[str]:
        return self.execute("qslice", name, begin, end)

    def qpush_front(self, name: Any, item: Any) -> bool:
        return self.execute("qpush_front", name, item)

    def qpush_back(self, name: Any, item: Any) -> bool:
        return self.execute("qpush_back", name, item)

    def qpush(self, name: Any, item: Any) -> bool:
        return self.qpush_back(name, item)

    def qpop_front(self, name: Any) -> Optional[str]:
        return self.execute("qpop_front", name)

    def qpop_back(self, name: Any) -> Optional[str]:
        return self.execute("qpop_back", name)

    def qpop(self, name: Any) -> Optional[str]:
        return self.qpop_front(name)
