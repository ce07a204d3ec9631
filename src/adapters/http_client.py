"""httpx client builder.

- One `httpx.AsyncClient` per run, shared by every unit (connection pool).
- Timeouts, headers and pool limits come from `AppSettings`.
- `transport` allows tests to plug an `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    extra_headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` configured for a run.

    The per-phase httpx timeout mirrors the total budget; the executor
    enforces the budget over the whole request/response cycle.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "*/*",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.timeout_seconds),
        limits=httpx.Limits(max_connections=settings.max_connections),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
