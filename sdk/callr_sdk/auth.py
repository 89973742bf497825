"""Authentication for the Callr API.

Each scheme is an ``httpx.Auth`` that sets the ``Authorization`` header
and, when a login-as target is configured, the ``Callr-Login-As``
delegation header.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum
from typing import Generator

import httpx

from callr_sdk.errors import InvalidConfiguration, InvalidLoginAsTarget

LOGIN_AS_HEADER = "Callr-Login-As"


class LoginAsType(str, Enum):
    """Target types accepted by the login-as header."""

    ACCOUNT_ID = "account.id"
    ACCOUNT_REF = "account.hash"
    ACCOUNT_HASH = "account.hash"  # alias of ACCOUNT_REF
    USER_ID = "user.id"
    USER_LOGIN = "user.login"


@dataclass(frozen=True, slots=True)
class LoginAs:
    """Validated delegation target."""

    type: LoginAsType
    value: str

    @classmethod
    def parse(cls, target_type: LoginAsType | str, value: str) -> "LoginAs":
        if not target_type or not value:
            raise InvalidLoginAsTarget("invalid login-as target type or value")
        try:
            parsed = LoginAsType(target_type)
        except ValueError:
            raise InvalidLoginAsTarget(f"invalid login-as target type: {target_type}") from None
        return cls(type=parsed, value=value)

    def header_value(self) -> str:
        return f"{self.type.value} {self.value}"


class CallrAuth(httpx.Auth):
    """Base class: subclasses only provide the ``Authorization`` value."""

    def __init__(self) -> None:
        self.login_as: LoginAs | None = None

    def authorization(self) -> str:
        raise NotImplementedError

    def auth_headers(self) -> dict[str, str]:
        headers = {"Authorization": self.authorization()}
        if self.login_as is not None:
            headers[LOGIN_AS_HEADER] = self.login_as.header_value()
        return headers

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers.update(self.auth_headers())
        yield request


class ApiKeyAuth(CallrAuth):
    """Pre-shared API key (generated from the customer portal)."""

    def __init__(self, key: str) -> None:
        super().__init__()
        if not key or not key.strip():
            raise InvalidConfiguration("API key cannot be empty")
        self._key = key

    def authorization(self) -> str:
        return f"Api-Key {self._key}"


class BasicAuth(CallrAuth):
    """Login + password, sent as ``Basic base64(login:password)``."""

    def __init__(self, login: str, password: str) -> None:
        super().__init__()
        if not login or not password:
            raise InvalidConfiguration("login and password cannot be empty")
        self._token = base64.b64encode(f"{login}:{password}".encode("utf-8")).decode("ascii")

    def authorization(self) -> str:
        return f"Basic {self._token}"
