"""Error taxonomy for Callr API calls.

Only ``TransportError`` and ``HTTPStatusError`` are transient: the
dispatch loop fails over to another URL for those and nothing else.
"""

from __future__ import annotations

from typing import Any

import httpx


class CallrError(Exception):
    """Base class for every error raised by this package."""


class EncodingError(CallrError):
    """The request could not be serialised to JSON."""


class DecodingError(CallrError):
    """A successful HTTP response carried a malformed JSON-RPC envelope."""


class TransportError(CallrError):
    """No HTTP response was obtained from *url*."""

    def __init__(self, url: str, cause: BaseException) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f'url "{url}" error: {cause}')


class HTTPStatusError(CallrError):
    """An HTTP response was obtained but its status was not 200 OK."""

    def __init__(self, code: int, message: str, url: str | None = None) -> None:
        self.code = code
        self.message = message
        self.url = url
        super().__init__(f"[{code}] {message}")

    @classmethod
    def from_response(cls, url: str, response: httpx.Response) -> "HTTPStatusError":
        status_line = f"{response.status_code} {response.reason_phrase}"
        return cls(response.status_code, reason_from_status_line(response.status_code, status_line), url)


class RemoteError(CallrError):
    """JSON-RPC error object returned by the API."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"[{code}] {message}")


class RetriesExhausted(CallrError):
    """Every attempt was consumed without a recorded failure to report."""


class PoolExhausted(RetriesExhausted):
    """No endpoint URL left to try."""


class InvalidConfiguration(CallrError, ValueError):
    """A client setting was rejected at setup time."""


class InvalidLoginAsTarget(InvalidConfiguration):
    """Login-as type is not a known target type, or type/value is empty."""


def reason_from_status_line(code: int, status_line: str) -> str:
    """Strip the leading numeric *code* from *status_line* and trim it."""
    prefix = str(code)
    if status_line.startswith(prefix):
        status_line = status_line[len(prefix):]
    return status_line.strip()


def is_retryable(exc: BaseException) -> bool:
    """Only infrastructure failures are worth trying on another URL."""
    return isinstance(exc, (TransportError, HTTPStatusError))
