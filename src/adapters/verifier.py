"""Integrity check of a response directory.

Every stored artifact carries the SHA-256 of its bytes in its name, so a
directory can be verified without any manifest.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, Field

from core.naming import SUFFIX, parse_artifact_name, sha256_hex


class VerifyReport(BaseModel):
    directory: Path
    ok: int = 0
    mismatched: list[str] = Field(
        default_factory=list,
        description="Artifacts whose content no longer matches their name.",
    )
    invalid: list[str] = Field(
        default_factory=list,
        description="`*.sha256` files whose name is not an artifact name.",
    )

    @property
    def failed(self) -> int:
        return len(self.mismatched) + len(self.invalid)


def iter_artifacts(directory: Path) -> Iterable[Path]:
    for path in sorted(directory.iterdir()):
        if path.is_file() and path.name.endswith(SUFFIX):
            yield path


def verify_directory(directory: Path) -> VerifyReport:
    """Recompute the digest of every artifact in `directory`.

    Raises `FileNotFoundError` / `NotADirectoryError` when `directory` is not
    a readable directory.
    """

    report = VerifyReport(directory=directory)
    for path in iter_artifacts(directory):
        try:
            _, digest = parse_artifact_name(path.name)
        except ValueError:
            report.invalid.append(path.name)
            continue

        if sha256_hex(path.read_bytes()) == digest:
            report.ok += 1
        else:
            report.mismatched.append(path.name)
    return report
