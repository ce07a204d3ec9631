"""CLI UI components (Rich).

Everything here writes to standard error; standard output belongs to the
response bodies in `--stdout` mode.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.status import Status
from rich.table import Table

from adapters.verifier import VerifyReport
from core.domain.models import RunSummary


class ProgressReporter:
    """Spinner showing `N / ? processing <url>`, then the final tally.

    The total is unknown (`?`) while the input is still being read.
    """

    def __init__(self, console: Console, *, enabled: bool = True) -> None:
        self._console = console
        self._status: Status | None = None
        if enabled:
            self._status = console.status("waiting for input", spinner="dots")

    def start(self) -> None:
        if self._status is not None:
            self._status.start()

    def line_read(self, line_number: int, url: str) -> None:
        if self._status is not None:
            self._status.update(f"{line_number} / ? processing {escape(url)}")

    def stop(self) -> None:
        if self._status is not None:
            self._status.stop()

    def finish(self, summary: RunSummary) -> None:
        self.stop()
        self._console.print(
            f"[green]{summary.succeeded} / {summary.total}[/green] URLs successfully requested!"
        )
        if summary.failed > 0:
            self._console.print(f"[red]{summary.failed} errors[/red] / {summary.total} URLs")
        if summary.directory is not None:
            self._console.print(f"Saved responses in {escape(str(summary.directory))} directory")


def build_verify_table(report: VerifyReport) -> Table:
    table = Table(title=f"Artifacts in {escape(str(report.directory))}")
    table.add_column("File", style="magenta")
    table.add_column("Problem", style="red")
    for name in report.mismatched:
        table.add_row(name, "content does not match digest")
    for name in report.invalid:
        table.add_row(name, "not an artifact name")
    return table
