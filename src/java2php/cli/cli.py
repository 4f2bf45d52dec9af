#!/usr/bin/env python3
"""
java2php.cli.cli

Typer-based CLI translating Java sources into PHP through an LLM endpoint.

Examples
--------
Convert a whole tree (the key may also come from ``OPENAI_API_KEY``):

    java2php --api-key sk-... ./legacy-java ./php-out

Convert a single file:

    java2php ./src/Foo.java ./out
"""

from __future__ import annotations

import logging
import traceback
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from java2php import __version__
from java2php.application.options import ConversionOptions
from java2php.application.results import RunSummary
from java2php.errors import ConfigError, Java2PhpError
from java2php.infrastructure.progress import ProgressReporter
from java2php.schemas import DEFAULT_BASE_URL, DEFAULT_MODEL, TranslatorSettings

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="java2php",
    help="Translate Java source files into PHP with an LLM completion endpoint.",
    no_args_is_help=True,
    add_completion=False,
)

err_console = Console(stderr=True)
out_console = Console()


# -----------------------------
# Utilities
# -----------------------------
def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"java2php {__version__}")
        raise typer.Exit()


def _configure_logging(level_name: str) -> None:
    """Install a single rich handler on the root logger."""
    level = logging.getLevelNamesMapping().get(level_name.upper())
    if level is None:
        raise typer.BadParameter(
            f"Unknown log level '{level_name}'.", param_hint="--log-level"
        )
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _print_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly fatal error.

    Parameters
    ----------
    exc : Exception
        Exception that aborted the run.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    err_console.print(
        f"[red]✗ {type(exc).__name__}:[/red] {escape(str(exc))}",
        highlight=False,
        soft_wrap=True,
    )
    if isinstance(exc, BaseExceptionGroup):
        for sub in exc.exceptions:
            err_console.print(
                f"  - {type(sub).__name__}: {escape(str(sub))}",
                highlight=False,
                soft_wrap=True,
            )
    if debug:
        err_console.print("\n[dim]Traceback:[/dim]")
        err_console.print(
            escape("".join(traceback.format_exception(type(exc), exc, exc.__traceback__))),
            highlight=False,
        )
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _build_settings(base_url: str, model: str, timeout: float) -> TranslatorSettings:
    try:
        return TranslatorSettings(base_url=base_url, model=model, timeout=timeout)
    except ValidationError as exc:
        raise ConfigError(f"Invalid translator settings: {exc}") from exc


def _build_options(
    source_ext: str,
    output_ext: str,
    max_concurrency: int | None,
    no_ignore: bool,
    hidden: bool,
) -> ConversionOptions:
    try:
        return ConversionOptions(
            source_extension=source_ext,
            output_extension=output_ext,
            max_concurrency=max_concurrency,
            respect_ignore_files=not no_ignore,
            include_hidden=hidden,
        )
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc


def _print_summary(summary: RunSummary) -> None:
    if summary.mode == "single-file":
        for outcome in summary.outcomes:
            out_console.print(
                f"[green]✓ Saved:[/green] {escape(str(outcome.destination_path))}",
                highlight=False,
                soft_wrap=True,
            )
        return
    line = f"[green]✓ Converted {summary.succeeded}/{summary.total} file(s)[/green]"
    if summary.failed:
        line += f" [red]({summary.failed} failed)[/red]"
    out_console.print(line, highlight=False, soft_wrap=True)


# -----------------------------
# Command
# -----------------------------
@app.command()
def convert(
    source: Path = typer.Argument(..., help="Source file or directory."),
    destination: Path = typer.Argument(..., help="Destination directory."),
    api_key: str = typer.Option(
        ...,
        "--api-key",
        "-k",
        envvar="OPENAI_API_KEY",
        help="API key for the completion endpoint.",
        show_default=False,
    ),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL,
        "--base-url",
        envvar="JAVA2PHP_BASE_URL",
        help="Root URL of an OpenAI-compatible API.",
    ),
    model: str = typer.Option(
        DEFAULT_MODEL, "--model", envvar="JAVA2PHP_MODEL", help="Chat model name."
    ),
    source_ext: str = typer.Option(
        "java", "--source-ext", help="Extension of files to translate."
    ),
    output_ext: str = typer.Option(
        "php", "--output-ext", help="Extension of written files."
    ),
    max_concurrency: int | None = typer.Option(
        None,
        "--max-concurrency",
        min=1,
        envvar="JAVA2PHP_MAX_CONCURRENCY",
        help="Maximum in-flight translations (default: unbounded).",
    ),
    timeout: float = typer.Option(
        120.0, "--timeout", min=0.001, help="HTTP timeout in seconds per request."
    ),
    no_ignore: bool = typer.Option(
        False, "--no-ignore", help="Do not honor .gitignore/.ignore files."
    ),
    hidden: bool = typer.Option(
        False, "--hidden", help="Also walk dot-prefixed files and directories."
    ),
    no_progress: bool = typer.Option(
        False, "--no-progress", help="Do not render the progress bar."
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level", envvar="JAVA2PHP_LOG_LEVEL", help="Logging level."
    ),
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks on error."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Translate SOURCE (a file or a tree) into PHP files under DESTINATION.

    Notes
    -----
    - In tree mode every failed file is printed and the run still exits 0.
    - Configuration and discovery errors abort with a non-zero exit code.
    """
    del version
    _configure_logging(log_level)

    reporter: ProgressReporter | None = None
    try:
        settings = _build_settings(base_url, model, timeout)
        options = _build_options(
            source_ext, output_ext, max_concurrency, no_ignore, hidden
        )
        reporter = (
            ProgressReporter(console=err_console, enabled=not no_progress)
            if source.is_dir() and destination.is_dir()
            else None
        )

        from java2php.api import convert_path

        summary = convert_path(
            source=source,
            destination=destination,
            api_key=api_key,
            settings=settings,
            options=options,
            reporter=reporter,
        )
    except Java2PhpError as exc:
        raise typer.Exit(code=_print_error(exc, debug))
    except Exception as exc:
        logger.debug("unexpected error during conversion", exc_info=True)
        raise typer.Exit(code=_print_error(exc, debug))
    finally:
        if reporter is not None:
            reporter.finish()

    _print_summary(summary)


if __name__ == "__main__":
    app()
