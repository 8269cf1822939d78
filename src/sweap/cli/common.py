"""Common CLI option types and helpers.

This module centralizes reusable CLI options and provides:
- `run_async_command`: Unified async execution with error handling for CLI commands
- `get_cli_settings`: Settings resolved by the global options
- `parse_date`: Date option parsing
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, TypeVar

import typer
from rich.console import Console

from sweap.config import Settings, get_settings
from sweap.generator import GenerationMode
from sweap.schemas import EventState, InvitationState

# Shared console instance for CLI output
console = Console()

T = TypeVar("T")


class OutputFormat(StrEnum):
    """Output format for CLI commands."""

    TEXT = "text"
    """Human-readable table output."""

    JSON = "json"
    """Machine-readable JSON output."""


def run_async_command(
    coro: Coroutine[object, object, T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute async code from synchronous CLI command with unified error handling.

    Catches exceptions, prints a red error message and exits with code 1.

    Example:
        async def _check() -> bool:
            async with SweapClient(settings=settings) as client:
                return await client.check_credentials()

        run_async_command(_check(), error_prefix="Credential check failed")
    """
    try:
        return asyncio.run(coro)
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]{error_prefix}:[/red] {e}")
        raise typer.Exit(1) from None


def get_cli_settings(ctx: typer.Context) -> Settings:
    """Settings prepared by the global options, or the process defaults."""
    root = ctx.find_root()
    if isinstance(root.obj, Settings):
        return root.obj
    return get_settings()


def parse_date(date_str: str | None) -> datetime | None:
    """Parse a date option into an aware datetime.

    Supports YYYY-MM-DD, YYYY-MM-DDTHH:MM:SS and ISO format with timezone.
    Values without timezone are taken as UTC.

    Raises:
        typer.BadParameter: If the date string is invalid
    """
    if date_str is None:
        return None

    formats = [
        "%Y-%m-%d",
        "%Y-%m-%dT%H:%M:%S",
        "%Y-%m-%dT%H:%M:%SZ",
        "%Y-%m-%dT%H:%M:%S%z",
    ]

    for fmt in formats:
        try:
            dt = datetime.strptime(date_str, fmt)
        except ValueError:
            continue
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return dt

    raise typer.BadParameter(
        f"Invalid date format: {date_str}. Use YYYY-MM-DD or YYYY-MM-DDTHH:MM:SS format."
    )


# Option metadata lives in Annotated aliases so command signatures keep
# plain default values.

OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
    ),
]
"""Output format option type for CLI commands.

Usage:
    def command(output_format: OutputFormatOption = OutputFormat.TEXT):
"""

EventIdArgument = Annotated[
    str,
    typer.Argument(
        help="Sweap event id",
    ),
]

UpdatedAfterOption = Annotated[
    str | None,
    typer.Option(
        "--updated-after",
        help="Only entries updated after this date (YYYY-MM-DD or ISO format)",
    ),
]

EventStateOption = Annotated[
    EventState | None,
    typer.Option(
        "--state",
        "-s",
        help="Event state: DRAFT, ACTIVE or CLOSED",
    ),
]

InvitationStateOption = Annotated[
    InvitationState | None,
    typer.Option(
        "--invitation-state",
        "-s",
        help="NONE, NO_REPLY, ACCEPTED or DECLINED",
    ),
]

GenerationModeOption = Annotated[
    GenerationMode,
    typer.Option(
        "--mode",
        "-m",
        help="Create guests one by one or upload them through bulk imports",
    ),
]
