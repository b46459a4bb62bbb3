"""Typer CLI entrypoint."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as package_version

import typer
from typer.core import TyperGroup

from loudspin.core.config import resolve_request
from loudspin.core.errors import LoudspinError, format_error_chain
from loudspin.core.log_setup import configure_logging
from loudspin.core.model import MatchError, ResolvedRequest
from loudspin.core.service import LoudspinService

SET_COMMAND = "set"


class LoudnessGroup(TyperGroup):
    """Routes a bare LOUDNESS_LEVEL argument to the hidden set command.

    Only visible commands are matched by name, so a level called "set" is
    still a level.
    """

    def resolve_command(self, ctx: typer.Context, args: list[str]):
        if args and not args[0].startswith("-"):
            command = self.get_command(ctx, args[0])
            if command is None or command.hidden:
                return SET_COMMAND, self.get_command(ctx, SET_COMMAND), args
        return super().resolve_command(ctx, args)


app = typer.Typer(
    cls=LoudnessGroup,
    invoke_without_command=True,
    add_completion=False,
    help="Set the acoustic management (AAM) level of hard disks via hdparm.",
)


def _build_service() -> LoudspinService:
    return LoudspinService()


def _report_match_error(error: MatchError) -> None:
    typer.echo(f"failed to list file: {error}", err=True)


def _execute(request: ResolvedRequest) -> None:
    try:
        service = _build_service()
        outcome = service.run(request, on_match_error=_report_match_error)
    except LoudspinError as exc:
        typer.echo(format_error_chain(exc), err=True)
        raise typer.Exit(code=1) from None

    for name, value in outcome.levels:
        typer.echo(f"{name} = {value}")


def _version_callback(value: bool) -> None:
    if not value:
        return
    try:
        typer.echo(f"loudspin {package_version('loudspin')}")
    except PackageNotFoundError:
        typer.echo("loudspin (not installed)")
    raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Set the acoustic management (AAM) level of hard disks via hdparm.

    Run with a LOUDNESS_LEVEL (e.g. `loudspin quiet`) to apply a configured
    level to every device in /etc/loudspin.conf. Without arguments the current
    level is shown.
    """
    configure_logging()
    if ctx.invoked_subcommand is None:
        _execute(resolve_request())


@app.command("show")
def show() -> None:
    """Shows the current state."""
    _execute(resolve_request(show_requested=True))


@app.command("list")
def list_levels() -> None:
    """Lists all configured loudness levels.  Default is loud = 254 and quiet = 128."""
    _execute(resolve_request(list_requested=True))


@app.command(SET_COMMAND, hidden=True)
def set_level(
    loudness: str = typer.Argument(..., metavar="LOUDNESS_LEVEL", help="Configured level name"),
) -> None:
    """Apply a configured loudness level to every device."""
    _execute(resolve_request(loudness))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
