"""
SSDB client

Blocking client for the SSDB length-prefixed text protocol.
"""
from ssdb_client.client import Client
from ssdb_client.connection import Connection
from ssdb_client.exceptions import ErrorKind, SSDBError

__all__ = ["Client", "Connection", "ErrorKind", "SSDBError"]
