"""rrr command line.

Examples:
    cat ranges.txt | httpx | rrr -d responses
    cat urls.txt | rrr -i 404,403,500 -o > responses.txt
    cat ranges.txt | daship | httpx | rrr -o | rg "hackme" > interesting.txt
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from adapters.response_sink import build_sink
from adapters.verifier import verify_directory
from cli.logging_setup import configure_logging
from cli.ui_components import ProgressReporter, build_verify_table
from core.config import APP_NAME, APP_VERSION, AppSettings
from core.domain.errors import InputReadFailed, InvalidMethod
from core.services.dispatch import DispatchHooks, fetch_all

app = typer.Typer(
    name=APP_NAME,
    help="rrr (really rapid requestor) rapidly requests every URL read from STDIN.",
    add_completion=False,
)

_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        _console.print(f"{APP_NAME} {APP_VERSION}")
        raise typer.Exit()


def load_settings(overrides: dict[str, Any]) -> AppSettings:
    """Build settings from env/.env plus CLI overrides; exit 2 when invalid."""

    try:
        return AppSettings(**{k: v for k, v in overrides.items() if v is not None})
    except InvalidMethod as exc:
        _console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc
    except ValidationError as exc:
        for err in exc.errors():
            field = ".".join(str(p) for p in err.get("loc", ()))
            _console.print(f"[red]Invalid {escape(field)}:[/red] {escape(str(err.get('msg')))}")
        raise typer.Exit(code=2) from exc


@app.callback(invoke_without_command=True)
def fetch(
    ctx: typer.Context,
    method: Optional[str] = typer.Option(None, "-m", "--method", help="HTTP method to use for requests [default: GET]"),
    timeout: Optional[int] = typer.Option(None, "-t", "--timeout", help="Request timeout in milliseconds [default: 5000]"),
    directory: Optional[Path] = typer.Option(
        None, "-d", "--directory", help="Directory to save response bodies to [default: responses]"
    ),
    ignore: Optional[str] = typer.Option(
        None, "-i", "--ignore", help="HTTP response status codes to ignore e.g. 404,403,500"
    ),
    stdout: bool = typer.Option(False, "-o", "--stdout", help="Print responses to STDOUT"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Report every URL that failed"),
    concurrency: Optional[int] = typer.Option(
        None, "-c", "--concurrency", help="Cap the number of in-flight requests (unbounded by default)"
    ),
    fail_on_error: bool = typer.Option(
        False, "--fail-on-error", help="Exit with status 1 when any URL failed"
    ),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Do not show the progress spinner"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit"
    ),
) -> None:
    """Request every URL read from STDIN and save (or print) the response bodies."""

    if ctx.invoked_subcommand is not None:
        return

    settings = load_settings(
        {
            "method": method,
            "timeout_ms": timeout,
            "directory": directory,
            "ignore": ignore,
            "stdout": stdout or None,
            "verbose": verbose or None,
            "max_concurrency": concurrency,
            "fail_on_error": fail_on_error or None,
        }
    )
    configure_logging(_console, verbose=settings.verbose)

    sink = build_sink(settings, stream=sys.stdout)
    reporter = ProgressReporter(_console, enabled=not quiet)
    hooks = DispatchHooks(line_read=reporter.line_read)

    reporter.start()
    try:
        summary = asyncio.run(fetch_all(sys.stdin, settings=settings, hooks=hooks, sink=sink))
    except InputReadFailed as exc:
        reporter.stop()
        _console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    reporter.finish(summary)

    if settings.fail_on_error and summary.failed > 0:
        raise typer.Exit(code=1)


@app.command()
def verify(
    directory: Path = typer.Argument(Path("responses"), help="Directory holding saved responses"),
) -> None:
    """Check that every saved response still matches the SHA-256 in its name."""

    if not directory.is_dir():
        _console.print(f"[red]Error:[/red] {escape(str(directory))} is not a directory")
        raise typer.Exit(code=1)

    report = verify_directory(directory)
    if report.failed:
        _console.print(build_verify_table(report))
    _console.print(f"OK: {report.ok}")
    _console.print(f"NG: {report.failed}")

    if report.failed:
        raise typer.Exit(code=1)


def run() -> None:
    app(prog_name=APP_NAME)


if __name__ == "__main__":
    run()
