"""Endpoint pool — random failover without repeats.

The client's configured URL list is never touched: every call takes its
own ``EndpointPool`` copy and draws from it until the call ends.
"""

from __future__ import annotations

import random
from typing import Iterable, Sequence

from callr_sdk.errors import PoolExhausted


def select_and_remove(
    urls: Sequence[str], rng: random.Random | None = None
) -> tuple[str, list[str]]:
    """Pick one URL uniformly at random; return it and the other URLs."""
    if not urls:
        raise PoolExhausted("no endpoint URL left to try")
    index = (rng or random).randrange(len(urls))
    remaining = list(urls)
    url = remaining.pop(index)
    return url, remaining


class EndpointPool:
    """Shrinking working copy of the configured URLs for a single call."""

    def __init__(self, urls: Iterable[str], rng: random.Random | None = None) -> None:
        self._urls = list(urls)
        self._rng = rng

    def select_and_remove(self) -> str:
        url, self._urls = select_and_remove(self._urls, self._rng)
        return url

    def __len__(self) -> int:
        return len(self._urls)

    def __bool__(self) -> bool:
        return bool(self._urls)
