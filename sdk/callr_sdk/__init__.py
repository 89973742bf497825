"""callr_sdk — JSON-RPC 2.0 client for the Callr API."""

from callr_sdk.auth import ApiKeyAuth, BasicAuth, CallrAuth, LoginAs, LoginAsType
from callr_sdk.client import API_URL, MAX_RETRIES, SDK_VERSION, Api
from callr_sdk.errors import (
    CallrError,
    DecodingError,
    EncodingError,
    HTTPStatusError,
    InvalidConfiguration,
    InvalidLoginAsTarget,
    PoolExhausted,
    RemoteError,
    RetriesExhausted,
    TransportError,
)
from callr_sdk.jsonrpc import JsonRpcError, JsonRpcRequest, JsonRpcResponse

__version__ = SDK_VERSION

__all__ = [
    "Api",
    "API_URL",
    "MAX_RETRIES",
    "SDK_VERSION",
    "CallrAuth",
    "ApiKeyAuth",
    "BasicAuth",
    "LoginAs",
    "LoginAsType",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "JsonRpcError",
    "CallrError",
    "EncodingError",
    "DecodingError",
    "TransportError",
    "HTTPStatusError",
    "RemoteError",
    "RetriesExhausted",
    "PoolExhausted",
    "InvalidConfiguration",
    "InvalidLoginAsTarget",
]
