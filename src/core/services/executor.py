"""Request executor: one URL, one request, one disposition.

Single attempt, no retries. Every failure is raised as a `UnitError`
subclass; the dispatch loop decides what to do with it.
"""

from __future__ import annotations

import asyncio

import httpx

from core.config import AppSettings
from core.domain.errors import BodyDecodeFailed, RequestFailed
from core.domain.models import Outcome, UnitResult
from core.interfaces.sink import ResponseSink
from core.naming import sha256_hex


async def send(url: str, *, client: httpx.AsyncClient, settings: AppSettings) -> httpx.Response:
    """Issue the request; the timeout covers connect and full body transfer."""

    try:
        return await asyncio.wait_for(
            client.request(settings.method, url),
            timeout=settings.timeout_seconds,
        )
    except asyncio.TimeoutError as exc:
        raise RequestFailed(url, f"timed out after {settings.timeout_ms} ms") from exc
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
        # ValueError covers URLs httpx cannot encode (e.g. lone surrogates).
        raise RequestFailed(url, exc) from exc


def decode_body(url: str, response: httpx.Response) -> str:
    encoding = response.charset_encoding or "utf-8"
    try:
        return response.content.decode(encoding)
    except (UnicodeDecodeError, LookupError) as exc:
        raise BodyDecodeFailed(url, exc) from exc


async def execute(
    url: str,
    *,
    client: httpx.AsyncClient,
    settings: AppSettings,
    sink: ResponseSink,
) -> UnitResult:
    response = await send(url, client=client, settings=settings)

    if response.status_code in settings.ignore:
        return UnitResult(url=url, outcome=Outcome.IGNORED, status_code=response.status_code)

    body = decode_body(url, response)
    digest = sha256_hex(body.encode("utf-8"))
    artifact = await sink.deliver(url, body, digest)

    return UnitResult(
        url=url,
        outcome=Outcome.SAVED if artifact is not None else Outcome.PRINTED,
        status_code=response.status_code,
        artifact=artifact,
    )
