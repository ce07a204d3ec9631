"""Run configuration.

- Central `pydantic-settings` model: env vars (`RRR_*`), optional `.env`
  files and CLI overrides end up in one validated, frozen object.
- Built once at startup and shared read-only by every unit of work.
"""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path
from typing import Annotated, Any, Iterable

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from core.domain.errors import InvalidMethod

APP_NAME = "rrr"
APP_VERSION = "0.1.0"

# RFC 9110 token characters; any token is a valid (possibly extension) method.
_METHOD_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def parse_ignore_codes(raw: str | Iterable[Any] | None) -> frozenset[int]:
    """Parse `404,403,500` into a set of status codes.

    Entries that are not integers in the 0..65535 range are dropped silently.
    """

    if raw is None:
        return frozenset()
    parts: Iterable[Any] = raw.split(",") if isinstance(raw, str) else raw

    codes: set[int] = set()
    for part in parts:
        try:
            code = int(str(part).strip())
        except ValueError:
            continue
        if 0 <= code <= 0xFFFF:
            codes.add(code)
    return frozenset(codes)


class AppSettings(BaseSettings):
    """Configuration for a single run.

    Frozen: once built, no unit of work can change it.
    """

    model_config = SettingsConfigDict(
        env_prefix="RRR_",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    method: str = Field(
        default="GET",
        description="HTTP method used for every request.",
    )
    timeout_ms: int = Field(
        default=5000,
        gt=0,
        description="Timeout for the whole request/response cycle (milliseconds).",
    )
    directory: Path = Field(
        default=Path("responses"),
        description="Directory where response bodies are stored.",
    )
    ignore: Annotated[frozenset[int], NoDecode] = Field(
        default_factory=frozenset,
        description="Status codes whose responses are skipped (e.g. 404,403,500).",
    )
    stdout: bool = Field(
        default=False,
        description="Print bodies to standard output instead of storing them.",
    )
    verbose: bool = Field(
        default=False,
        description="Report every failed URL on the diagnostic stream.",
    )
    fail_on_error: bool = Field(
        default=False,
        description="Exit with status 1 when at least one URL failed.",
    )
    max_concurrency: int | None = Field(
        default=None,
        ge=1,
        description="Optional cap on in-flight requests. None means unbounded.",
    )
    max_connections: int | None = Field(
        default=None,
        ge=1,
        description="Size of the HTTP connection pool. None means unbounded.",
    )
    user_agent: str = Field(
        default=f"{APP_NAME}/{APP_VERSION}",
        min_length=1,
        description="User-Agent header sent with every request.",
    )

    @field_validator("method")
    @classmethod
    def _validate_method(cls, value: str) -> str:
        if not _METHOD_TOKEN.fullmatch(value):
            raise InvalidMethod(value)
        return value

    @field_validator("ignore", mode="before")
    @classmethod
    def _parse_ignore(cls, value: Any) -> frozenset[int]:
        return parse_ignore_codes(value)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0
