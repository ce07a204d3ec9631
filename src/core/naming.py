"""Content-derived artifact names.

Format (stable): `<host>_<hex sha256>.sha256`. The name depends only on the
host and the body digest, so identical bodies from the same host share a
name.
"""

from __future__ import annotations

import hashlib
import re
from urllib.parse import urlsplit

SEPARATOR = "_"
SUFFIX = ".sha256"

_DIGEST = re.compile(r"^[0-9a-f]{64}$")


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def host_of(url: str) -> str:
    """Host component of `url`, or "" when it cannot be parsed."""

    try:
        return urlsplit(url.strip()).hostname or ""
    except ValueError:
        return ""


def artifact_name(url: str, digest: str) -> str:
    return f"{host_of(url)}{SEPARATOR}{digest}{SUFFIX}"


def parse_artifact_name(filename: str) -> tuple[str, str]:
    """Split an artifact name back into `(host, digest)`.

    Raises `ValueError` when `filename` is not an artifact name.
    """

    if not filename.endswith(SUFFIX):
        raise ValueError(f"not an artifact name: {filename!r}")
    stem = filename[: -len(SUFFIX)]
    # Hosts may contain "_"; the digest never does.
    host, sep, digest = stem.rpartition(SEPARATOR)
    if not sep or not _DIGEST.match(digest):
        raise ValueError(f"not an artifact name: {filename!r}")
    return host, digest
