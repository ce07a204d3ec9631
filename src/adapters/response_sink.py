"""Response sinks.

- `StdoutSink`: bodies on standard output, newline terminated (pipe friendly).
- `DirectorySink`: content-addressed files under the output directory.

Filesystem calls are blocking, so they run in worker threads and never
stall sibling units.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import TextIO

from core.config import AppSettings
from core.domain.errors import OutputWriteFailed
from core.domain.models import StoredArtifact
from core.interfaces.sink import ResponseSink
from core.naming import artifact_name, host_of


class StdoutSink(ResponseSink):
    """Writes each body followed by a newline."""

    def __init__(self, stream: TextIO | None = None) -> None:
        # Bound at construction: a live spinner may swap sys.stdout later.
        self._stream = stream or sys.stdout

    async def deliver(self, url: str, body: str, digest: str) -> StoredArtifact | None:
        try:
            self._stream.write(body + "\n")
            self._stream.flush()
        except OSError as exc:
            raise OutputWriteFailed(url, exc) from exc
        return None


class DirectorySink(ResponseSink):
    """Stores bodies as `<directory>/<host>_<sha256>.sha256`.

    An existing file with the same name is overwritten: same name, same bytes.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    async def deliver(self, url: str, body: str, digest: str) -> StoredArtifact | None:
        filename = artifact_name(url, digest)
        path = self._directory / filename
        try:
            await asyncio.to_thread(self._directory.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(path.write_bytes, body.encode("utf-8"))
        except OSError as exc:
            raise OutputWriteFailed(url, exc) from exc

        return StoredArtifact(host=host_of(url), digest=digest, filename=filename, path=path)


def build_sink(settings: AppSettings, *, stream: TextIO | None = None) -> ResponseSink:
    if settings.stdout:
        return StdoutSink(stream)
    return DirectorySink(settings.directory)
