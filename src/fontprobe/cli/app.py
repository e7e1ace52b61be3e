"""Typer application wiring for the fontprobe CLI."""

from __future__ import annotations

import json
import logging
from typing import Annotated

from rich import box
from rich.table import Table
import typer

from fontprobe.config import FontProbeConfig, load_config
from fontprobe.exceptions import FontProbeError, exception_messages
from fontprobe.host import detect_host
from fontprobe.query import FontQuery, create_font_query
from fontprobe.selector import NO_DETECTION_MESSAGE, default_selector
from fontprobe.version import get_version

from .diagnostics import CliEmitter
from .state import CLIState, debug_enabled, emit_error, get_cli_state, set_cli_state


app = typer.Typer(
    help="Detect the font families installed on this system.",
    context_settings={"help_option_names": ["--help", "-h"]},
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(get_version())
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Annotated[
        str | None,
        typer.Option("--config", "-c", help="YAML configuration file."),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Increase diagnostic output."),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Show full tracebacks on errors."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
) -> None:
    set_cli_state(ctx=ctx, verbosity=verbose, debug=debug, config_path=config)
    _silence_library_logging()


def _silence_library_logging() -> None:
    # CliEmitter already renders library diagnostics on stderr.
    package_logger = logging.getLogger("fontprobe")
    if not package_logger.handlers:
        package_logger.addHandler(logging.NullHandler())


def describe_error(exc: BaseException) -> str:
    """Return the message of ``exc`` followed by its root cause, if any."""
    messages = exception_messages(exc)
    if not messages:
        return type(exc).__name__
    if len(messages) == 1:
        return messages[0]
    return f"{messages[0]} ({messages[-1]})"


def _load_config(state: CLIState) -> FontProbeConfig:
    try:
        return load_config(state.config_path)
    except FontProbeError as exc:
        emit_error(describe_error(exc), exception=exc)
        raise typer.Exit(code=1) from exc


def _font_query() -> FontQuery:
    state = get_cli_state()
    config = _load_config(state)
    return create_font_query(config, emitter=CliEmitter(state))


@app.command("list")
def list_command(
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the families as a JSON array."),
    ] = False,
) -> None:
    """List the installed font families."""
    families = _font_query().list_font_families()
    if as_json:
        typer.echo(json.dumps(families, ensure_ascii=False))
        return
    for family in families:
        typer.echo(family)


@app.command("has")
def has_command(
    family: Annotated[str, typer.Argument(help="Font family name, any casing.")],
) -> None:
    """Print FAMILY and exit 0 when it is installed; exit 1 otherwise."""
    found = _font_query().has_font_family(family)
    if not found:
        raise typer.Exit(code=1)
    typer.echo(found)


@app.command("first")
def first_command(
    families: Annotated[list[str], typer.Argument(help="Candidate families, in order.")],
) -> None:
    """Print the first installed family among FAMILIES; exit 1 if none is."""
    found = _font_query().first_font_family(families)
    if not found:
        raise typer.Exit(code=1)
    typer.echo(found)


@app.command("detect")
def detect_command() -> None:
    """Show host capabilities and the detection method that would be used."""
    state = get_cli_state()
    config = _load_config(state)

    host = detect_host(config)
    rule = default_selector(config).match(host)

    table = Table(
        title="Font Detection",
        box=box.SQUARE,
        show_edge=True,
        header_style="bold cyan",
    )
    table.add_column("Property", style="magenta")
    table.add_column("Value")
    for key, value in host.describe().items():
        table.add_row(key, value)
    if config.skip_detection:
        method = "disabled"
    else:
        method = rule.name if rule is not None else NO_DETECTION_MESSAGE
    table.add_row("method", method)
    state.console.print(table)


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - defensive catch-all
        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            emit_error(describe_error(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "describe_error", "main"]
