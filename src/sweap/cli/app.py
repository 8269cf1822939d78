"""Main CLI application for the Sweap client."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from sweap import __version__
from sweap.cli import events as events_cmd
from sweap.cli import guests as guests_cmd
from sweap.config import Environment, Settings, get_settings
from sweap.logging import setup_logging

app = typer.Typer(
    name="sweap",
    help="Command line access to the Sweap event and guest management API.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"sweap version {__version__}")
        raise typer.Exit()


def _load_settings(env_file: Path | None, environment: Environment | None) -> Settings:
    if env_file is None:
        settings = get_settings()
    else:
        try:
            settings = Settings.from_env_file(env_file)
        except FileNotFoundError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from None

    if environment is not None:
        settings = settings.model_copy(update={"environment": environment})
    return settings


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-error output (WARNING level).",
        ),
    ] = False,
    env_file: Annotated[
        Path | None,
        typer.Option(
            "--env-file",
            help="Read credentials (CLIENTID, CLIENT_SECRET) from this file.",
        ),
    ] = None,
    environment: Annotated[
        Environment | None,
        typer.Option(
            "--environment",
            "-e",
            help="Sweap deployment to talk to.",
        ),
    ] = None,
) -> None:
    """Sweap - query events and guests, watch guest lists, generate test guests."""
    settings = _load_settings(env_file, environment)
    log_config = settings.logging

    setup_logging(
        level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        wire=settings.debug,
        log_file=Path(log_config.log_file) if log_config.log_file else None,
        rotation=log_config.rotation,
        retention=log_config.retention,
        serialize=log_config.serialize,
    )
    ctx.obj = settings


# Register commands
app.command("check")(events_cmd.check)
app.command("events")(events_cmd.list_events)
app.command("stats")(events_cmd.event_statistics)
app.command("guests")(guests_cmd.list_guests)
app.command("listen")(guests_cmd.listen)
app.command("generate-guests")(guests_cmd.generate_guests)


if __name__ == "__main__":
    app()
