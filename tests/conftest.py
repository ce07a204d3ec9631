from __future__ import annotations

import asyncio
import os
from typing import Callable

import httpx
import pytest

from core.config import AppSettings


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run every test in an empty directory without RRR_* variables."""

    for key in list(os.environ):
        if key.upper().startswith("RRR_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_settings() -> Callable[..., AppSettings]:
    def _make(**overrides) -> AppSettings:
        return AppSettings(**overrides)

    return _make


class FakeWeb:
    """Routes requests to canned responses, keyed by URL.

    Each route is `(status, body, headers)` or an async callable taking the
    request. Unknown URLs fail with a connect error. Tracks how many requests
    are in flight at once.
    """

    def __init__(self, routes: dict[str, object] | None = None, *, delay: float = 0.0) -> None:
        self.routes = dict(routes or {})
        self.delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            route = self.routes.get(url)
            if route is None:
                raise httpx.ConnectError(f"no route to {url}", request=request)
            if callable(route):
                return await route(request)
            if self.delay:
                await asyncio.sleep(self.delay)
            status, body, headers = route
            return httpx.Response(status, content=body, headers=headers)
        finally:
            self.in_flight -= 1

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def fake_web() -> FakeWeb:
    return FakeWeb()
