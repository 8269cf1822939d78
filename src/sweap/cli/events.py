"""Credential, event and statistics commands."""

import json
from typing import Any

import typer
from rich.table import Table

from sweap.cli.common import (
    EventStateOption,
    OutputFormat,
    OutputFormatOption,
    UpdatedAfterOption,
    console,
    get_cli_settings,
    parse_date,
    run_async_command,
)
from sweap.client import SweapClient
from sweap.schemas import (
    Event,
    EventSearchParameters,
    EventStatistic,
    EventStatisticsSearchParameters,
)


def check(ctx: typer.Context) -> None:
    """Verify that the configured credentials are accepted.

    Examples:
        sweap check
        sweap --env-file .staging-env --environment staging check
    """
    settings = get_cli_settings(ctx)

    async def _check() -> str:
        async with SweapClient(settings=settings) as client:
            await client.check_credentials()
            return client.api_url

    api_url = run_async_command(_check(), error_prefix="Credential check failed")
    console.print(f"[green]Credentials accepted by {api_url}[/green]")


def list_events(
    ctx: typer.Context,
    name: str | None = typer.Option(
        None,
        "--name",
        "-n",
        help="Exact event name (case insensitive)",
    ),
    name_contains: str | None = typer.Option(
        None,
        "--name-contains",
        help="Part of the event name (case insensitive)",
    ),
    state: EventStateOption = None,
    updated_after: UpdatedAfterOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """List events of the account.

    Examples:
        sweap events
        sweap events --name-contains party --state ACTIVE
        sweap events --format json
    """
    settings = get_cli_settings(ctx)
    params = EventSearchParameters(
        name=name,
        name_contains=name_contains,
        state=state,
        updated_after=parse_date(updated_after),
    )

    async def _events() -> list[Event]:
        async with SweapClient(settings=settings) as client:
            return await client.search_events(params)

    events = run_async_command(_events())

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([event.to_payload() for event in events]))
        return

    if not events:
        console.print("No events found")
        return

    table = Table(title=f"Events ({len(events)})")
    table.add_column("Name", style="cyan")
    table.add_column("ID")
    table.add_column("State")
    table.add_column("Start")

    for event in events:
        table.add_row(
            event.name,
            event.id,
            event.state.value if event.state else "",
            event.start_date.strftime("%Y-%m-%d %H:%M") if event.start_date else "",
        )
    console.print(table)


def _statistic_row(statistic: EventStatistic) -> list[str]:
    return [
        statistic.id,
        str(statistic.guest_count),
        str(statistic.accepted_count),
        str(statistic.declined_count),
        str(statistic.no_reply_count),
        str(statistic.checkin_count),
    ]


def event_statistics(
    ctx: typer.Context,
    event_id: str | None = typer.Option(
        None,
        "--event",
        "-e",
        help="Only show the statistics of this event",
    ),
    min_guests: int | None = typer.Option(
        None,
        "--min-guests",
        help="Only events with at least this many guests",
    ),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show guest counters per event.

    Examples:
        sweap stats
        sweap stats --event 8baf13a5-0d6b-4fb2-9d39-4fa4e1b2c6a1
        sweap stats --min-guests 100 --format json
    """
    settings = get_cli_settings(ctx)

    async def _stats() -> list[EventStatistic]:
        async with SweapClient(settings=settings) as client:
            if event_id:
                return [await client.get_event_statistic(event_id)]
            params = EventStatisticsSearchParameters(min_guest_count=min_guests)
            return await client.search_event_statistics(params)

    statistics = run_async_command(_stats())

    if output_format == OutputFormat.JSON:
        result: list[dict[str, Any]] = [s.to_payload() for s in statistics]
        console.print_json(json.dumps(result))
        return

    if not statistics:
        console.print("No event statistics found")
        return

    table = Table(title="Event statistics")
    table.add_column("Event", style="cyan")
    for column in ("Guests", "Accepted", "Declined", "No reply", "Checked in"):
        table.add_column(column, justify="right")
    for statistic in statistics:
        table.add_row(*_statistic_row(statistic))
    console.print(table)
