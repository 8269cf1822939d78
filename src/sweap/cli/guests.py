"""Guest commands: listing, watching and load generation."""

import json

import typer
from rich.table import Table

from sweap.cli.common import (
    EventIdArgument,
    GenerationModeOption,
    InvitationStateOption,
    OutputFormat,
    OutputFormatOption,
    UpdatedAfterOption,
    console,
    get_cli_settings,
    parse_date,
    run_async_command,
)
from sweap.client import SweapClient
from sweap.generator import GenerationMode, GenerationResult, GuestGenerator
from sweap.schemas import Guest, GuestSearchParameters, GuestUpdateType


def list_guests(
    ctx: typer.Context,
    event_id: EventIdArgument,
    last_name: str | None = typer.Option(
        None,
        "--last-name",
        help="Exact last name (case insensitive)",
    ),
    name_contains: str | None = typer.Option(
        None,
        "--name-contains",
        help="Part of the last name (case insensitive)",
    ),
    email: str | None = typer.Option(
        None,
        "--email",
        help="Exact e-mail address",
    ),
    invitation_state: InvitationStateOption = None,
    updated_after: UpdatedAfterOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """List the guests of an event.

    Examples:
        sweap guests 8baf13a5-0d6b-4fb2-9d39-4fa4e1b2c6a1
        sweap guests 8baf13a5-0d6b-4fb2-9d39-4fa4e1b2c6a1 --invitation-state ACCEPTED
    """
    settings = get_cli_settings(ctx)
    params = GuestSearchParameters(
        last_name=last_name,
        last_name_contains=name_contains,
        email=email,
        invitation_state=invitation_state,
        updated_after=parse_date(updated_after),
    )

    async def _guests() -> list[Guest]:
        async with SweapClient(settings=settings) as client:
            return [guest async for guest in client.iter_guests(event_id, params)]

    guests = run_async_command(_guests())

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([guest.to_payload() for guest in guests]))
        return

    if not guests:
        console.print("No guests found")
        return

    table = Table(title=f"Guests ({len(guests)})")
    table.add_column("Name", style="cyan")
    table.add_column("E-mail")
    table.add_column("Invitation")
    table.add_column("+", justify="right")
    table.add_column("ID", style="dim")

    for guest in guests:
        table.add_row(
            guest.full_name,
            guest.email or "",
            guest.invitation_state.value,
            str(guest.entourage_count),
            guest.id or "",
        )
    console.print(table)


def listen(
    ctx: typer.Context,
    event_id: EventIdArgument,
    interval: float | None = typer.Option(
        None,
        "--interval",
        "-i",
        min=0.1,
        help="Seconds between polls (default from settings)",
    ),
    include_existing: bool = typer.Option(
        True,
        "--existing/--no-existing",
        help="Report guests already present at start",
    ),
) -> None:
    """Print new and changed guests of an event until interrupted.

    Examples:
        sweap listen 8baf13a5-0d6b-4fb2-9d39-4fa4e1b2c6a1
        sweap listen 8baf13a5-0d6b-4fb2-9d39-4fa4e1b2c6a1 --interval 5 --no-existing
    """
    settings = get_cli_settings(ctx)

    async def _listen() -> None:
        async with SweapClient(settings=settings) as client:
            listener = client.listen(
                event_id,
                poll_interval=interval,
                include_existing=include_existing,
            )
            async with listener:
                console.print(f"[bold]Listening for guests of {event_id}[/bold] (Ctrl+C to stop)")
                async for update in listener:
                    guest = update.guest
                    if update.type is GuestUpdateType.NEW_GUEST:
                        label = "[green]new[/green]    "
                    else:
                        label = "[yellow]changed[/yellow]"
                    console.print(
                        f"{label} {guest.full_name} "
                        f"({guest.invitation_state.value}) [dim]{guest.id}[/dim]"
                    )

    try:
        run_async_command(_listen())
    except KeyboardInterrupt:
        console.print("\nStopped")


def generate_guests(
    ctx: typer.Context,
    event_name: str = typer.Argument(
        ...,
        help="Exact name of the event to populate",
    ),
    count: int = typer.Option(
        100,
        "--count",
        "-c",
        min=1,
        help="Number of guests to generate",
    ),
    workers: int | None = typer.Option(
        None,
        "--workers",
        "-w",
        min=1,
        help="Number of concurrent workers (default from settings)",
    ),
    batch_size: int | None = typer.Option(
        None,
        "--batch-size",
        "-b",
        min=1,
        help="Guests handed to a worker at once (default from settings)",
    ),
    mode: GenerationModeOption = GenerationMode.ONE_BY_ONE,
    seed: int | None = typer.Option(
        None,
        "--seed",
        help="Seed for reproducible guest names",
    ),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Populate an event with random guests (load testing).

    Examples:
        sweap generate-guests "Load Testing 4" --count 1000 --workers 20
        sweap generate-guests "Demo Event" --mode bulk-import --batch-size 100
    """
    settings = get_cli_settings(ctx)
    config = settings.generator.model_copy(
        update={
            key: value
            for key, value in (("num_workers", workers), ("batch_size", batch_size))
            if value is not None
        }
    )

    async def _generate() -> GenerationResult:
        async with SweapClient(settings=settings) as client:
            generator = GuestGenerator(client, config, mode)
            return await generator.run_for_event(event_name, count, seed=seed)

    with console.status(f"Generating {count} guests for {event_name}..."):
        result = run_async_command(_generate(), error_prefix="Generation failed")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result.to_dict()))
        return

    console.print(result.render())
    if result.num_errors:
        console.print(f"[yellow]{result.num_errors} errors during generation[/yellow]")
