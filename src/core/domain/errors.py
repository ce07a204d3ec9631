"""Error taxonomy.

Per-unit errors (`InvalidMethod`, `RequestFailed`, `BodyDecodeFailed`,
`OutputWriteFailed`) are caught at the unit boundary and only counted.
`InputReadFailed` is the single fatal error of a run.
"""

from __future__ import annotations


class RrrError(Exception):
    """Base class for every error raised by rrr."""


class InvalidMethod(RrrError):
    """The configured HTTP method is not a valid method token."""

    def __init__(self, method: str) -> None:
        super().__init__(f"invalid HTTP method: {method!r}")
        self.method = method


class UnitError(RrrError):
    """An error bound to a single URL."""

    def __init__(self, url: str, cause: object) -> None:
        super().__init__(str(cause))
        self.url = url
        self.cause = cause


class RequestFailed(UnitError):
    """Connect error, timeout or any other transport failure."""


class BodyDecodeFailed(UnitError):
    """The response body could not be decoded as text."""


class OutputWriteFailed(UnitError):
    """The output directory or file could not be created or written."""


class InputReadFailed(RrrError):
    """A line of the input stream could not be read. Fatal."""

    def __init__(self, line_number: int, cause: object) -> None:
        super().__init__(f"failed to read input line {line_number}: {cause}")
        self.line_number = line_number
        self.cause = cause
