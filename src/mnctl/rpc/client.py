"""JSON-RPC 1.0 client for coin daemons.

Coin daemons derived from Bitcoin Core answer JSON-RPC over plain HTTP on
localhost, authenticated with the rpcuser/rpcpassword pair from the coin's
.conf file. Every call is a single POST; no connection is reused.
"""

from __future__ import annotations

import base64
import http.client
import ipaddress
import itertools
import json
import threading
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from mnctl.core.errors import (
    AuthorizationFailedError,
    NoResponseError,
    TransportUnavailableError,
)
from mnctl.core.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_RPC_HOST = "127.0.0.1"
DEFAULT_RPC_TIMEOUT = 10.0

_id_lock = threading.Lock()
_id_counter = itertools.count(1)


def next_request_id() -> int:
    """Process-wide, monotonically increasing request id."""
    with _id_lock:
        return next(_id_counter)


def _single_address(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        ipaddress.ip_address(value)
    except ValueError:
        LOGGER.debug(f"rpcallowip={value} is not a single address, not using it as host")
        return None
    return value


@dataclass(frozen=True)
class RPCErrorInfo:
    """The error object of a JSON-RPC response."""

    code: int
    message: str


@dataclass
class RPCResponse:
    """A decoded JSON-RPC response."""

    id: Any
    result: Any = None
    error: Optional[RPCErrorInfo] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RPCResponse":
        error = payload.get("error")
        error_info = None
        if isinstance(error, Mapping):
            error_info = RPCErrorInfo(
                code=int(error.get("code", 0)),
                message=str(error.get("message", "")),
            )
        elif error is not None:
            error_info = RPCErrorInfo(code=0, message=str(error))
        return cls(id=payload.get("id"), result=payload.get("result"), error=error_info)


class RPCClient:
    """Talks JSON-RPC to one daemon endpoint."""

    def __init__(
        self,
        host: str,
        port: int,
        user: str = "",
        password: str = "",
        timeout: float = DEFAULT_RPC_TIMEOUT,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.timeout = timeout

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, str],
        rpc_port: int,
        timeout: float = DEFAULT_RPC_TIMEOUT,
    ) -> "RPCClient":
        """Build a client from a coin's loaded .conf values.

        The host comes from rpcbind, falling back to rpcallowip when it names
        a single address (not a subnet) and then 127.0.0.1. Credentials come
        from rpcuser and rpcpassword.
        """
        host = (
            config.get("rpcbind")
            or _single_address(config.get("rpcallowip"))
            or DEFAULT_RPC_HOST
        )
        return cls(
            host=host,
            port=rpc_port,
            user=config.get("rpcuser", ""),
            password=config.get("rpcpassword", ""),
            timeout=timeout,
        )

    @property
    def url(self) -> str:
        host = self.host
        if ":" in host and not host.startswith("["):
            host = f"[{host}]"
        return f"http://{host}:{self.port}/"

    def _auth_header(self) -> str:
        token = base64.b64encode(f"{self.user}:{self.password}".encode("utf-8"))
        return f"Basic {token.decode('ascii')}"

    def build_request(self, method: str, params: Optional[List[Any]] = None) -> Dict[str, Any]:
        return {"method": method, "id": next_request_id(), "params": list(params or [])}

    def call(self, method: str, params: Optional[List[Any]] = None) -> RPCResponse:
        """Invoke `method` on the daemon.

        Returns:
            The decoded response; a daemon-side error is reported in
            `response.error`, not raised.

        Raises:
            TransportUnavailableError: The endpoint could not be reached.
            AuthorizationFailedError: The daemon rejected the credentials.
            NoResponseError: The daemon sent an empty or undecodable body.
        """
        body = json.dumps(self.build_request(method, params)).encode("utf-8")
        request = urllib.request.Request(
            self.url,
            data=body,
            headers={
                "Content-Type": "application/json",
                "Authorization": self._auth_header(),
            },
            method="POST",
        )
        LOGGER.debug(f"RPC {method} -> {self.url}")

        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                raw = response.read()
        except urllib.error.HTTPError as e:
            if e.code in (401, 403):
                raise AuthorizationFailedError(
                    f"{self.url} rejected the RPC credentials (HTTP {e.code})"
                ) from e
            # Daemons report JSON-RPC errors with a 500 status and a JSON body
            raw = e.read()
            LOGGER.debug(f"RPC {method} returned HTTP {e.code}")
        except http.client.HTTPException as e:
            raise NoResponseError(f"No valid response from {self.url}: {e}") from e
        except (urllib.error.URLError, OSError) as e:
            raise TransportUnavailableError(f"Unable to reach {self.url}: {e}") from e

        return self._decode(raw)

    def _decode(self, raw: bytes) -> RPCResponse:
        if not raw or not raw.strip():
            raise NoResponseError(f"Empty response from {self.url}")
        try:
            payload = json.loads(raw)
        except ValueError as e:
            raise NoResponseError(f"Unparseable response from {self.url}: {e}") from e
        if not isinstance(payload, dict):
            raise NoResponseError(f"Unexpected response from {self.url}: {payload!r}")
        return RPCResponse.from_payload(payload)
