"""JSON-RPC 2.0 wire-format models.

Pure data — no I/O.  The client encodes one ``JsonRpcRequest`` per call
and decodes whatever the API sends back into a ``JsonRpcResponse``.
"""

from __future__ import annotations

import json
import random
from dataclasses import dataclass, field
from typing import Any

from callr_sdk.errors import DecodingError, EncodingError, RemoteError

JSONRPC_VERSION = "2.0"


def new_request_id() -> int:
    """Random non-negative int64, used for client-side tracing only."""
    return random.getrandbits(63)


# ── Models ───────────────────────────────────────────────────────────
@dataclass(slots=True)
class JsonRpcError:
    """JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            d["data"] = self.data
        return d

    @classmethod
    def from_dict(cls, raw: Any) -> "JsonRpcError":
        if not isinstance(raw, dict):
            raise DecodingError("'error' must be a JSON object")
        code = raw.get("code")
        if not isinstance(code, int) or isinstance(code, bool):
            raise DecodingError("missing or invalid 'error.code' field")
        message = raw.get("message")
        if not isinstance(message, str):
            raise DecodingError("missing or invalid 'error.message' field")
        return cls(code=code, message=message, data=raw.get("data"))


@dataclass(slots=True)
class JsonRpcRequest:
    """Outbound JSON-RPC 2.0 request.

    ``params`` is always a list on the wire, even when empty.
    """

    method: str
    params: list[Any] = field(default_factory=list)
    id: int = field(default_factory=new_request_id)
    jsonrpc: str = JSONRPC_VERSION

    def encode(self) -> bytes:
        """Serialise to UTF-8 JSON — raises ``EncodingError`` on bad input."""
        if not isinstance(self.method, str) or not self.method:
            raise EncodingError("method must be a non-empty string")
        try:
            return json.dumps(
                {"id": self.id, "jsonrpc": self.jsonrpc, "method": self.method, "params": list(self.params)},
                allow_nan=False,
            ).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise EncodingError(f"cannot encode params for {self.method!r}: {exc}") from exc


@dataclass(slots=True)
class JsonRpcResponse:
    """Inbound JSON-RPC 2.0 response: exactly one of ``result``/``error``."""

    id: int | None
    result: Any = None
    error: JsonRpcError | None = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            d["error"] = self.error.to_dict()
        else:
            d["result"] = self.result
        return d

    @classmethod
    def decode(cls, body: bytes | str) -> "JsonRpcResponse":
        """Parse a response body — raises ``DecodingError`` on bad input."""
        try:
            raw = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
            raise DecodingError(f"response is not valid JSON: {exc}") from exc
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: Any) -> "JsonRpcResponse":
        if not isinstance(raw, dict):
            raise DecodingError("response must be a JSON object")
        resp_id = raw.get("id")
        if resp_id is not None and (not isinstance(resp_id, int) or isinstance(resp_id, bool)):
            raise DecodingError("invalid 'id' field")

        has_error = raw.get("error") is not None
        has_result = "result" in raw
        if has_error and has_result and raw["result"] is not None:
            raise DecodingError("response carries both 'result' and 'error'")
        if has_error:
            return cls(
                id=resp_id,
                error=JsonRpcError.from_dict(raw["error"]),
                jsonrpc=raw.get("jsonrpc", JSONRPC_VERSION),
            )
        if not has_result:
            raise DecodingError("response carries neither 'result' nor 'error'")
        return cls(id=resp_id, result=raw["result"], jsonrpc=raw.get("jsonrpc", JSONRPC_VERSION))

    def unwrap(self) -> Any:
        """Return the result, or raise the remote error as ``RemoteError``."""
        if self.error is not None:
            raise RemoteError(self.error.code, self.error.message, self.error.data)
        return self.result
