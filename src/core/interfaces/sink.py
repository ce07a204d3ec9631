"""Response sink contract.

- `deliver` is async: it may touch the filesystem.
- Returns the stored artifact, or None when the body was not persisted
  (stdout mode).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import StoredArtifact


@runtime_checkable
class ResponseSink(Protocol):
    """Destination for response bodies."""

    async def deliver(self, url: str, body: str, digest: str) -> StoredArtifact | None:
        """Emit `body` fetched from `url`; raise `OutputWriteFailed` on I/O errors."""

        ...
