"""Guest change listener.

Polls the guest list of one event and reports guests that appeared or
changed since the previous poll. Updates are buffered in a bounded queue;
when the consumer falls behind, polling pauses until there is room again.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import TYPE_CHECKING

from sweap.exceptions import SweapError, SweapLibraryError
from sweap.logging import bind_event
from sweap.schemas import Guest, GuestUpdate, GuestUpdateType

if TYPE_CHECKING:
    from sweap.client import SweapClient


class GuestListener:
    """Background poller emitting ``GuestUpdate`` notifications.

    Usage:
        async with client.listen(event_id, poll_interval=30) as listener:
            async for update in listener:
                if update.type is GuestUpdateType.NEW_GUEST:
                    print("New guest", update.guest.full_name)

    Or driven manually:
        listener = client.listen(event_id)
        await listener.start()
        update = await listener.get()
        await listener.stop()
    """

    def __init__(
        self,
        client: SweapClient,
        event_id: str,
        *,
        poll_interval: float = 15.0,
        buffer_size: int = 256,
        include_existing: bool = True,
    ) -> None:
        """Initialize the listener.

        Args:
            client: Client used for the guest polls
            event_id: Event whose guests to watch
            poll_interval: Seconds between two polls
            buffer_size: Maximum number of undelivered updates
            include_existing: Report guests present at start as new guests
        """
        if not event_id:
            raise SweapLibraryError("no event ID given")
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if buffer_size < 1:
            raise ValueError("buffer_size must be at least 1")

        self._client = client
        self._event_id = event_id
        self._poll_interval = poll_interval
        self._buffer_size = buffer_size
        self._include_existing = include_existing

        self._snapshot: dict[str, Guest] = {}
        self._queue: asyncio.Queue[GuestUpdate] | None = None
        self._task: asyncio.Task[None] | None = None
        self._polls = 0
        self._failed_polls = 0
        self._logger = bind_event(event_id)

    @property
    def event_id(self) -> str:
        return self._event_id

    @property
    def is_running(self) -> bool:
        """Whether the polling task is alive."""
        return self._task is not None and not self._task.done()

    @property
    def pending(self) -> int:
        """Number of updates waiting to be consumed."""
        return self._queue.qsize() if self._queue is not None else 0

    @property
    def polls(self) -> int:
        """Number of completed polls, including the initial one."""
        return self._polls

    @property
    def failed_polls(self) -> int:
        return self._failed_polls

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------
    async def start(self) -> None:
        """Fetch the initial snapshot and start polling.

        Raises:
            SweapError: If the initial fetch fails. No task is started then.
        """
        if self.is_running:
            return

        guests = await self._fetch()
        self._snapshot = {}
        initial = self.diff(guests)
        if not self._include_existing:
            initial = []

        self._queue = asyncio.Queue(maxsize=self._buffer_size)
        self._task = asyncio.create_task(self._run(initial))
        self._logger.info(
            "Listening for guest changes ({} guests, every {}s)",
            len(self._snapshot),
            self._poll_interval,
        )

    async def stop(self) -> None:
        """Cancel the polling task. Buffered updates stay available.

        A task that already died is not raised again; its error was handed
        to the iterating consumer and is logged here.
        """
        if self._task is None:
            return
        if not self._task.done():
            self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            self._logger.warning("Polling had stopped with {!r}", e)
        self._logger.info("Stopped listening after {} polls", self._polls)

    async def __aenter__(self) -> GuestListener:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.stop()

    # -------------------------------------------------------------------------
    # Consumption
    # -------------------------------------------------------------------------
    async def get(self) -> GuestUpdate:
        """Wait for the next update."""
        if self._queue is None:
            raise RuntimeError("listener has not been started")
        return await self._queue.get()

    def __aiter__(self) -> GuestListener:
        return self

    async def __anext__(self) -> GuestUpdate:
        """Next update; iteration ends once the listener is stopped and drained."""
        if self._queue is None:
            raise RuntimeError("listener has not been started")
        if not self._queue.empty():
            return self._queue.get_nowait()
        if self._task is None or self._task.done():
            self._raise_task_error()
            raise StopAsyncIteration

        getter = asyncio.ensure_future(self._queue.get())
        try:
            await asyncio.wait({getter, self._task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            if not getter.done():
                getter.cancel()

        if getter.done() and not getter.cancelled():
            return getter.result()
        self._raise_task_error()
        raise StopAsyncIteration

    def _raise_task_error(self) -> None:
        if self._task is not None and self._task.done() and not self._task.cancelled():
            error = self._task.exception()
            if error is not None:
                raise error

    # -------------------------------------------------------------------------
    # Polling
    # -------------------------------------------------------------------------
    async def _fetch(self) -> list[Guest]:
        guests = await self._client.get_guests(self._event_id)
        self._polls += 1
        return guests

    async def _publish(self, updates: Iterable[GuestUpdate]) -> None:
        if self._queue is None:
            raise RuntimeError("listener has not been started")
        for update in updates:
            await self._queue.put(update)

    async def _run(self, initial: list[GuestUpdate]) -> None:
        await self._publish(initial)
        while True:
            await asyncio.sleep(self._poll_interval)
            try:
                guests = await self._fetch()
            except SweapError as e:
                self._failed_polls += 1
                self._logger.warning("Polling guests failed: {}", e)
                continue

            updates = self.diff(guests)
            if updates:
                self._logger.debug("{} guest updates", len(updates))
            await self._publish(updates)

    def diff(self, guests: Iterable[Guest]) -> list[GuestUpdate]:
        """Compare ``guests`` against the previous snapshot and replace it.

        Guests without an id are ignored. Guests missing from ``guests``
        are dropped from the snapshot without a notification.

        Returns:
            NEW_GUEST updates for unseen ids, UPDATE_GUEST updates for known
            ids whose version or update timestamp changed
        """
        updates: list[GuestUpdate] = []
        snapshot: dict[str, Guest] = {}
        for guest in guests:
            if not guest.id:
                continue
            snapshot[guest.id] = guest
            previous = self._snapshot.get(guest.id)
            if previous is None:
                updates.append(GuestUpdate(type=GuestUpdateType.NEW_GUEST, guest=guest))
            elif previous.version != guest.version or previous.updated_at != guest.updated_at:
                updates.append(GuestUpdate(type=GuestUpdateType.UPDATE_GUEST, guest=guest))
        self._snapshot = snapshot
        return updates
