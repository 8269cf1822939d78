"""Bulk guest generation pipeline.

Three stages connected by a bounded queue:

    reader --batches--> worker pool --ProcessedBatch--> combiner

The reader splits the guest list into batches. Each worker either creates
its guests one request at a time or uploads its batches into its own guest
bulk import. The combiner folds the worker reports into a GenerationResult
as the workers finish.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence
from enum import StrEnum
from typing import TYPE_CHECKING

from sweap.config import GeneratorConfig
from sweap.exceptions import SweapError, SweapLibraryError
from sweap.logging import bind_worker, get_logger
from sweap.schemas import EventSearchParameters, Guest, GuestBulkImport

from .guests import generate_guests
from .results import GenerationResult, ProcessedBatch

if TYPE_CHECKING:
    from sweap.client import SweapClient

logger = get_logger(__name__)

# Queue item telling a worker that no more batches follow
_DONE = None


class GenerationMode(StrEnum):
    """How workers hand guests to the API."""

    ONE_BY_ONE = "one-by-one"
    BULK_IMPORT = "bulk-import"


class GuestGenerator:
    """Populate an event with guests using a pool of concurrent workers.

    Usage:
        async with SweapClient() as client:
            generator = GuestGenerator(client, GeneratorConfig(num_workers=20))
            result = await generator.run(event_id, generate_guests(event_id, 1000))
            print(result.render())
    """

    def __init__(
        self,
        client: SweapClient,
        config: GeneratorConfig | None = None,
        mode: GenerationMode | str = GenerationMode.ONE_BY_ONE,
    ) -> None:
        self._client = client
        self._config = config or GeneratorConfig()
        self._mode = GenerationMode(mode)

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    @property
    def mode(self) -> GenerationMode:
        return self._mode

    async def run(
        self,
        event_id: str,
        guests: Sequence[Guest],
        *,
        event_name: str = "",
    ) -> GenerationResult:
        """Send ``guests`` to the API and report what happened.

        API failures are counted per message and never stop the run.

        Args:
            event_id: Event receiving the guests
            guests: Guests to create
            event_name: Name shown in the result

        Returns:
            GenerationResult with run parameters and aggregated outcome
        """
        if not event_id:
            raise SweapLibraryError("no event ID given")

        config = self._config
        result = GenerationResult(
            workers=config.num_workers,
            batch_size=config.batch_size,
            inter_row_delay_ms=config.inter_row_delay_ms,
            batch_delay_ms=config.batch_delay_ms,
            mode=self._mode.value,
            guests_requested=len(guests),
            event_name=event_name,
        )

        queue: asyncio.Queue[list[Guest] | None] = asyncio.Queue(maxsize=config.num_workers)
        logger.info(
            "Generating {} guests with {} workers ({})",
            len(guests),
            config.num_workers,
            self._mode.value,
        )

        start_time = time.monotonic()
        reader = asyncio.create_task(self._read(guests, queue))
        workers = [
            asyncio.create_task(self._work(number, event_id, queue))
            for number in range(config.num_workers)
        ]

        try:
            for finished in asyncio.as_completed(workers):
                result.add(await finished)
            await reader
        finally:
            for task in [reader, *workers]:
                if not task.done():
                    task.cancel()

        result.execution_seconds = time.monotonic() - start_time
        logger.info(
            "Processed {} guests in {:.1f}s ({} errors)",
            result.num_rows,
            result.execution_seconds,
            result.num_errors,
        )
        return result

    async def run_for_event(
        self,
        event_name: str,
        count: int,
        *,
        seed: int | None = None,
    ) -> GenerationResult:
        """Look up an event by name and populate it with ``count`` random guests.

        Raises:
            SweapLibraryError: If no event has the given name
        """
        events = await self._client.search_events(EventSearchParameters(name=event_name))
        if not events:
            raise SweapLibraryError(f"no event matching name {event_name!r} found")

        event = events[0]
        logger.info("Will populate event {}", event)
        guests = generate_guests(event.id, count, seed=seed)
        return await self.run(event.id, guests, event_name=event.name)

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------
    async def _read(self, guests: Sequence[Guest], queue: asyncio.Queue[list[Guest] | None]) -> None:
        """Split guests into batches and queue them, then stop every worker."""
        size = self._config.batch_size
        for start in range(0, len(guests), size):
            await queue.put(list(guests[start : start + size]))
        for _ in range(self._config.num_workers):
            await queue.put(_DONE)

    async def _work(
        self,
        number: int,
        event_id: str,
        queue: asyncio.Queue[list[Guest] | None],
    ) -> ProcessedBatch:
        if self._mode is GenerationMode.BULK_IMPORT:
            return await self._bulk_import_worker(number, event_id, queue)
        return await self._one_by_one_worker(number, event_id, queue)

    async def _one_by_one_worker(
        self,
        number: int,
        event_id: str,
        queue: asyncio.Queue[list[Guest] | None],
    ) -> ProcessedBatch:
        log = bind_worker(number, event_id)
        processed = ProcessedBatch(worker=number)
        row_delay = self._config.inter_row_delay_ms / 1000
        batch_delay = self._config.batch_delay_ms / 1000
        worker_start = time.monotonic()

        while (batch := await queue.get()) is not _DONE:
            processed.batches += 1
            batch_start = time.monotonic()
            rows_before = processed.num_rows

            for guest in batch:
                try:
                    await self._client.create_guest(guest)
                except SweapError as e:
                    processed.record_error(e)
                    log.warning("{}", e)
                processed.record_row(guest.first_name, guest.last_name)
                if row_delay:
                    await asyncio.sleep(row_delay)

            log.info(
                "{} guests in batch {} ({:.1f}/s, mean {:.1f}/s)",
                processed.num_rows - rows_before,
                processed.batches,
                _rate(processed.num_rows - rows_before, batch_start),
                _rate(processed.num_rows, worker_start),
            )
            if batch_delay:
                await asyncio.sleep(batch_delay)

        return processed

    async def _bulk_import_worker(
        self,
        number: int,
        event_id: str,
        queue: asyncio.Queue[list[Guest] | None],
    ) -> ProcessedBatch:
        log = bind_worker(number, event_id)
        processed = ProcessedBatch(worker=number)

        bulk_import: GuestBulkImport | None = None
        try:
            bulk_import = await self._client.create_bulk_import(
                GuestBulkImport(name=f"Worker {number} created", event_id=event_id)
            )
        except SweapError as e:
            processed.record_error(e)
            log.warning("Could not create bulk import: {}", e)

        while (batch := await queue.get()) is not _DONE:
            processed.batches += 1
            if bulk_import is None or not bulk_import.id:
                processed.record_error("no guest bulk import to upload into")
            else:
                try:
                    await self._client.upload_bulk_import_batch(bulk_import.id, batch)
                    log.info("Uploaded batch {}", processed.batches)
                except SweapError as e:
                    processed.record_error(e)
                    log.warning("{}", e)
            for guest in batch:
                processed.record_row(guest.first_name, guest.last_name)

        if bulk_import is not None and bulk_import.id and processed.batches:
            try:
                await self._client.finish_bulk_import_upload(bulk_import.id)
                log.info("Finished upload after {} batches", processed.batches)
            except SweapError as e:
                processed.record_error(e)
                log.warning("{}", e)

        return processed


def _rate(rows: int, since: float) -> float:
    elapsed = time.monotonic() - since
    return rows / elapsed if elapsed > 0 else 0.0
