"""Callr API client — JSON-RPC 2.0 over HTTPS with multi-URL failover.

* ``Api.with_api_key(key)`` / ``Api.with_basic_auth(login, password)``
* ``await api.call(method, *params)`` → raw ``result`` payload

One logical call encodes its envelope once, then tries at most
``max_retries + 1`` URLs drawn at random (never twice) from the
configured list.  Transport failures and non-200 statuses fail over to
the next URL; a JSON-RPC error or a malformed body ends the call.

Run directly for a quick demo::

    CALLR_API_KEY=... python -m callr_sdk.client system.get_timestamp
"""

from __future__ import annotations

import logging
import platform
import random
import sys
from typing import Any, Callable, Iterable

import httpx
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt, wait_none
from tenacity.stop import stop_base
from tenacity.wait import wait_base

from callr_sdk.auth import ApiKeyAuth, BasicAuth, CallrAuth, LoginAs, LoginAsType
from callr_sdk.errors import (
    DecodingError,
    HTTPStatusError,
    InvalidConfiguration,
    PoolExhausted,
    TransportError,
    is_retryable,
)
from callr_sdk.jsonrpc import JsonRpcRequest, JsonRpcResponse
from callr_sdk.pool import EndpointPool

log = logging.getLogger(__name__)

API_URL = "https://api.callr.com/json-rpc/v1.1/"
SDK_VERSION = "2.0.0"
MAX_RETRIES = 3  # on multiple URLs
DEFAULT_TIMEOUT = 30.0
CONTENT_TYPE = "application/json-rpc; charset=utf-8"
PROXY_SCHEMES = ("http", "https", "socks5")

# Same signature as ``logging.Logger.log``: (level, msg, *args)
LogSink = Callable[..., None]


def _null_sink(level: int, msg: str, *args: Any) -> None:
    pass


def user_agent() -> str:
    return (
        f"sdk=PYTHON; sdk-version={SDK_VERSION}; "
        f"lang-version={platform.python_version()}; platform={sys.platform}"
    )


class _stop_when_pool_empty(stop_base):
    """Stop once every URL of the call's working pool has been tried."""

    def __init__(self, pool: EndpointPool) -> None:
        self.pool = pool

    def __call__(self, retry_state: RetryCallState) -> bool:
        return not self.pool


class Api:
    """Long-lived handle on the Callr API.

    Parameters
    ----------
    auth : CallrAuth
        ``ApiKeyAuth`` or ``BasicAuth``; also carries the login-as target.
    urls : iterable of str
        Candidate endpoint URLs, default the public API URL.
    timeout : float
        Per-request I/O timeout in seconds.
    max_retries : int
        Extra attempts after the first one, each on a different URL.
    wait : tenacity wait strategy
        Delay between attempts, none by default.
    proxy : str
        ``http[s]://[user:password@]host[:port]`` or ``socks5://…``.
    transport : httpx.AsyncBaseTransport
        Custom transport, e.g. ``httpx.MockTransport`` in tests.
    rng : random.Random
        Source used to pick URLs.
    log_sink : callable
        ``(level, msg, *args)``; ``None`` disables logging.

    Configure the handle before sharing it between tasks; calls never
    mutate it.
    """

    def __init__(
        self,
        auth: CallrAuth,
        *,
        urls: Iterable[str] | None = (API_URL,),
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        wait: wait_base | None = None,
        proxy: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        rng: random.Random | None = None,
        log_sink: LogSink | None = log.log,
    ) -> None:
        if max_retries < 0:
            raise InvalidConfiguration("max_retries cannot be negative")
        self.auth = auth
        self.max_retries = max_retries
        self._urls: tuple[str, ...] = ()
        self._timeout = timeout
        self._wait = wait or wait_none()
        self._proxy: str | None = None
        self._transport = transport
        self._rng = rng
        self._client: httpx.AsyncClient | None = None
        self._log: LogSink = _null_sink
        self.set_urls(urls)
        if proxy is not None:
            self.set_proxy(proxy)
        self.set_log_sink(log_sink)

    # -- Constructors --------------------------------------------------

    @classmethod
    def with_api_key(cls, key: str, **options: Any) -> "Api":
        """API key authentication (recommended)."""
        return cls(ApiKeyAuth(key), **options)

    @classmethod
    def with_basic_auth(cls, login: str, password: str, **options: Any) -> "Api":
        """Login/password authentication."""
        return cls(BasicAuth(login, password), **options)

    # -- Lifecycle -----------------------------------------------------

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "Api":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                proxy=self._proxy,
                transport=self._transport,
            )
        return self._client

    # -- Configuration -------------------------------------------------

    @property
    def urls(self) -> tuple[str, ...]:
        return self._urls

    def set_url(self, url: str) -> None:
        self.set_urls([url])

    def set_urls(self, urls: Iterable[str] | None) -> None:
        """Replace the endpoint list; one URL is picked at random per attempt."""
        if urls is None:
            raise InvalidConfiguration("urls cannot be None")
        urls = tuple(urls)
        for url in urls:
            if not isinstance(url, str) or not url.strip():
                raise InvalidConfiguration(f"invalid endpoint URL: {url!r}")
        self._urls = urls

    def set_proxy(self, proxy: str) -> None:
        if self._client is not None:
            raise InvalidConfiguration("proxy must be set before the first call")
        try:
            url = httpx.URL(proxy)
        except (httpx.InvalidURL, TypeError) as exc:
            raise InvalidConfiguration(f"invalid proxy URL: {exc}") from exc
        if url.scheme not in PROXY_SCHEMES or not url.host:
            raise InvalidConfiguration(f"invalid proxy URL: {proxy!r}")
        self._proxy = proxy

    def set_login_as(self, target_type: LoginAsType | str, value: str) -> None:
        """Act on behalf of a sub-account or user of yours."""
        self.auth.login_as = LoginAs.parse(target_type, value)

    def set_login_as_sub_account_ref(self, account_ref: str) -> None:
        """Login-as using the sub-account "ref" field (sometimes called "hash")."""
        self.set_login_as(LoginAsType.ACCOUNT_REF, account_ref)

    def set_login_as_sub_account_login(self, user_login: str) -> None:
        """Login-as using the sub-account user "login" field."""
        self.set_login_as(LoginAsType.USER_LOGIN, user_login)

    def reset_login_as(self) -> None:
        self.auth.login_as = None

    def set_log_sink(self, sink: LogSink | None) -> None:
        self._log = sink if sink is not None else _null_sink

    # -- Internal retry helper -----------------------------------------

    def _get_retrier(self, pool: EndpointPool) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1) | _stop_when_pool_empty(pool),
            wait=self._wait,
            retry=retry_if_exception(is_retryable),
            reraise=True,
        )

    async def _post(self, url: str, body: bytes) -> httpx.Response:
        """One attempt; raises ``TransportError`` or ``HTTPStatusError``.

        A body that fails content decoding raises ``DecodingError``.
        """
        try:
            resp = await self._get_client().post(
                url,
                content=body,
                headers={"Content-Type": CONTENT_TYPE, "User-Agent": user_agent()},
                auth=self.auth,
            )
        except httpx.TransportError as exc:
            self._log(logging.WARNING, 'url "%s" error: %s', url, exc)
            raise TransportError(url, exc) from exc
        except httpx.DecodingError as exc:
            raise DecodingError(f'url "{url}" sent an undecodable body: {exc}') from exc

        if resp.status_code != httpx.codes.OK:
            self._log(logging.WARNING, 'url "%s" response code: %d', url, resp.status_code)
            raise HTTPStatusError.from_response(url, resp)
        return resp

    # -- Unary RPC -----------------------------------------------------

    async def call(self, method: str, *params: Any) -> Any:
        """Call *method* with positional *params* and return its result.

        Raises ``RemoteError`` if the API rejects the call, or the last
        ``TransportError`` / ``HTTPStatusError`` once URLs or attempts
        run out.  Cancellation propagates and is never retried.
        """
        req = JsonRpcRequest(method=method, params=list(params))
        body = req.encode()

        pool = EndpointPool(self._urls, self._rng)
        if not pool:
            raise PoolExhausted("unknown error: no endpoint URL configured")

        self._log(logging.DEBUG, "rpc → %s(id=%s)", method, req.id)

        async for attempt in self._get_retrier(pool):
            with attempt:
                url = pool.select_and_remove()
                resp = await self._post(url, body)

        try_index = attempt.retry_state.attempt_number - 1
        if try_index > 0:
            self._log(logging.INFO, "successful at try: %d, on url: %s", try_index, url)

        response = JsonRpcResponse.decode(resp.content)
        if response.id is not None and response.id != req.id:
            self._log(
                logging.WARNING,
                "response id %s does not match request id %s for %s",
                response.id,
                req.id,
                method,
            )
        return response.unwrap()


# ── Demo entrypoint ──────────────────────────────────────────────────


async def _demo(method: str) -> None:
    import os

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    async with Api.with_api_key(os.environ["CALLR_API_KEY"]) as api:
        print(f"── {method} ──")
        result = await api.call(method)
        print(f"  result: {result}")


if __name__ == "__main__":
    import anyio

    anyio.run(_demo, sys.argv[1] if len(sys.argv) > 1 else "system.get_timestamp")
