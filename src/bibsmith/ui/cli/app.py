"""Typer application wiring for the bibsmith CLI."""

from __future__ import annotations

from typing import Annotated

import typer

from bibsmith.version import get_version

from ._options import DebugOption, VerboseOption
from .commands import convert, formats, show, validate
from .state import configure_logging, debug_enabled, emit_error, set_cli_state


app = typer.Typer(
    help="Convert bibliographies between BibTeX, BibLaTeX, RIS, EndNote XML and CSL JSON.",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"bibsmith {get_version()}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show the bibsmith version and exit.",
            callback=_print_version,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Configure diagnostics shared by every sub-command."""
    state = set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)
    configure_logging(state)


app.command()(convert)
app.command()(validate)
app.command()(show)
app.command()(formats)


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
    except Exception as exc:  # pragma: no cover - unexpected failures
        from .state import get_cli_state

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
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
