"""Dispatch loop.

Reads the input stream line by line and launches one task per URL as soon
as the line is read. Units run concurrently and complete in any order; the
loop awaits every one of them before computing the `RunSummary`.

Only the error counter is shared between units. A failing unit never stops
the loop; a failure to read the input stream does.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, TextIO

import httpx

from adapters.http_client import build_async_client
from adapters.response_sink import build_sink
from core.config import APP_NAME, AppSettings
from core.domain.errors import InputReadFailed, RrrError
from core.domain.models import Outcome, RunSummary, UnitResult
from core.interfaces.sink import ResponseSink
from core.services.executor import execute

logger = logging.getLogger(f"{APP_NAME}.dispatch")


@dataclass
class DispatchHooks:
    """Optional callbacks for UI layers (progress)."""

    line_read: Callable[[int, str], None] | None = None
    unit_done: Callable[[UnitResult], None] | None = None


class ErrorCounter:
    """Failure count shared by every unit; increments are mutually exclusive."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = asyncio.Lock()

    async def increment(self) -> None:
        async with self._lock:
            self._value += 1

    @property
    def value(self) -> int:
        return self._value


class Dispatcher:
    def __init__(
        self,
        *,
        settings: AppSettings,
        client: httpx.AsyncClient,
        sink: ResponseSink,
        hooks: DispatchHooks | None = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._sink = sink
        self._hooks = hooks or DispatchHooks()
        self._errors = ErrorCounter()
        self._slots = (
            asyncio.Semaphore(settings.max_concurrency) if settings.max_concurrency else None
        )

    async def _read_line(self, stream: TextIO, line_number: int) -> str:
        try:
            return await asyncio.to_thread(stream.readline)
        except (UnicodeDecodeError, OSError) as exc:
            raise InputReadFailed(line_number, exc) from exc

    async def _unit(self, url: str) -> UnitResult:
        try:
            result = await execute(url, client=self._client, settings=self._settings, sink=self._sink)
        except RrrError as exc:
            await self._errors.increment()
            level = logging.WARNING if self._settings.verbose else logging.DEBUG
            logger.log(level, "Error processing %s: %s", url, exc)
            result = UnitResult(url=url, outcome=Outcome.FAILED, error=str(exc))
        finally:
            if self._slots is not None:
                self._slots.release()

        if self._hooks.unit_done:
            self._hooks.unit_done(result)
        return result

    async def run(self, stream: TextIO) -> RunSummary:
        tasks: list[asyncio.Task[UnitResult]] = []
        line_number = 0

        while True:
            line = await self._read_line(stream, line_number + 1)
            if not line:
                break
            url = line.strip()
            if not url:
                continue

            line_number += 1
            if self._hooks.line_read:
                self._hooks.line_read(line_number, url)

            if self._slots is not None:
                await self._slots.acquire()
            tasks.append(asyncio.create_task(self._unit(url)))

        logger.debug("Input exhausted after %d URLs, waiting for pending units", len(tasks))
        results = await asyncio.gather(*tasks, return_exceptions=True)

        counts = {outcome: 0 for outcome in Outcome}
        for url_result in results:
            if isinstance(url_result, BaseException):
                # Anything that escaped the unit boundary still counts as a failure.
                logger.error("Unexpected error in unit: %r", url_result)
                await self._errors.increment()
                continue
            counts[url_result.outcome] += 1

        return RunSummary(
            total=len(tasks),
            failed=self._errors.value,
            ignored=counts[Outcome.IGNORED],
            saved=counts[Outcome.SAVED],
            printed=counts[Outcome.PRINTED],
            directory=None if self._settings.stdout else self._settings.directory,
        )


async def fetch_all(
    stream: TextIO,
    *,
    settings: AppSettings,
    hooks: DispatchHooks | None = None,
    sink: ResponseSink | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RunSummary:
    """Build the client (and the sink, unless given) for `settings`, then drain `stream`."""

    sink = sink or build_sink(settings)
    async with build_async_client(settings, transport=transport) as client:
        dispatcher = Dispatcher(settings=settings, client=client, sink=sink, hooks=hooks)
        return await dispatcher.run(stream)
