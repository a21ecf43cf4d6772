"""JSON-RPC access to coin daemons."""

from mnctl.rpc.client import RPCClient, RPCErrorInfo, RPCResponse, next_request_id

__all__ = [
    "RPCClient",
    "RPCErrorInfo",
    "RPCResponse",
    "next_request_id",
]
