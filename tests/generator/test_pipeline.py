"""Tests for the guest generation pipeline."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from sweap.config import GeneratorConfig
from sweap.exceptions import StatusCodeError, SweapLibraryError
from sweap.generator import GenerationMode, GuestGenerator, generate_guests
from sweap.schemas import Event, GuestBulkImport, InvitationState
from tests.conftest import EVENT_ID
from tests.factories import make_new_guest

FAST = GeneratorConfig(num_workers=3, batch_size=2, inter_row_delay_ms=0, batch_delay_ms=0)


@pytest.fixture
def mock_client():
    """Client double with the calls the generator uses."""
    client = MagicMock()
    client.create_guest = AsyncMock(side_effect=lambda guest: guest)
    client.create_bulk_import = AsyncMock(
        side_effect=lambda gbi: gbi.model_copy(update={"id": f"gbi-{gbi.name}"})
    )
    client.upload_bulk_import_batch = AsyncMock(return_value=None)
    client.finish_bulk_import_upload = AsyncMock(return_value=None)
    client.search_events = AsyncMock(return_value=[Event(id=EVENT_ID, name="Load Testing")])
    return client


class TestGenerateGuests:
    """Tests for random guest data."""

    def test_count_and_event(self):
        guests = generate_guests(EVENT_ID, 25, seed=1)

        assert len(guests) == 25
        assert all(g.event_id == EVENT_ID for g in guests)
        assert all(g.id is None for g in guests)
        assert all(g.first_name and g.last_name for g in guests)
        assert all(g.invitation_state is InvitationState.NONE for g in guests)

    def test_seed_reproducible(self):
        first = [g.full_name for g in generate_guests(EVENT_ID, 10, seed=42)]
        second = [g.full_name for g in generate_guests(EVENT_ID, 10, seed=42)]

        assert first == second


class TestOneByOne:
    """Tests for one-by-one creation."""

    async def test_every_guest_created_once(self, mock_client):
        guests = [make_new_guest(f"First{i}", f"Last{i}") for i in range(7)]
        generator = GuestGenerator(mock_client, FAST)

        result = await generator.run(EVENT_ID, guests, event_name="Load Testing")

        assert mock_client.create_guest.await_count == 7
        created = {call.args[0].first_name for call in mock_client.create_guest.await_args_list}
        assert created == {f"First{i}" for i in range(7)}
        assert result.num_rows == 7
        assert result.people_count == 7
        assert result.num_errors == 0
        assert result.guests_requested == 7
        assert result.mode == "one-by-one"
        assert result.event_name == "Load Testing"

    async def test_errors_counted_not_raised(self, mock_client):
        failure = StatusCodeError(429, "429 Too Many Requests")
        calls = {"n": 0}

        async def flaky(guest):
            calls["n"] += 1
            if calls["n"] % 2 == 0:
                raise failure
            return guest

        mock_client.create_guest = AsyncMock(side_effect=flaky)
        guests = [make_new_guest(f"F{i}", "Same") for i in range(6)]

        result = await GuestGenerator(mock_client, FAST).run(EVENT_ID, guests)

        assert result.num_rows == 6
        assert result.num_errors == 3
        assert result.errors == {"sweap server error: 429 Too Many Requests": 3}

    async def test_common_name(self, mock_client):
        guests = [
            make_new_guest("Ada", "Lovelace"),
            make_new_guest("Ada", "Byron"),
            make_new_guest("Grace", "Hopper"),
            make_new_guest("Ada", "Lovelace"),
        ]

        result = await GuestGenerator(mock_client, FAST).run(EVENT_ID, guests)

        assert result.common_name == "Ada"
        assert result.common_name_count == 3
        assert result.people_count == 3

    async def test_no_guests(self, mock_client):
        result = await GuestGenerator(mock_client, FAST).run(EVENT_ID, [])

        assert result.num_rows == 0
        mock_client.create_guest.assert_not_awaited()

    async def test_event_id_required(self, mock_client):
        with pytest.raises(SweapLibraryError):
            await GuestGenerator(mock_client, FAST).run("", [make_new_guest()])


class TestBulkImport:
    """Tests for bulk-import mode."""

    async def test_batches_uploaded_and_finished(self, mock_client):
        guests = [make_new_guest(f"F{i}", f"L{i}") for i in range(5)]
        config = FAST.model_copy(update={"num_workers": 1})
        generator = GuestGenerator(mock_client, config, GenerationMode.BULK_IMPORT)

        result = await generator.run(EVENT_ID, guests)

        created = mock_client.create_bulk_import.await_args.args[0]
        assert isinstance(created, GuestBulkImport)
        assert created.event_id == EVENT_ID
        assert created.name == "Worker 0 created"

        batch_sizes = [len(c.args[1]) for c in mock_client.upload_bulk_import_batch.await_args_list]
        assert batch_sizes == [2, 2, 1]
        mock_client.finish_bulk_import_upload.assert_awaited_once_with("gbi-Worker 0 created")
        mock_client.create_guest.assert_not_awaited()
        assert result.num_rows == 5
        assert result.mode == "bulk-import"

    async def test_failed_creation_still_drains_batches(self, mock_client):
        mock_client.create_bulk_import = AsyncMock(side_effect=StatusCodeError(500, "500"))
        guests = [make_new_guest(f"F{i}", f"L{i}") for i in range(4)]

        result = await GuestGenerator(mock_client, FAST, "bulk-import").run(EVENT_ID, guests)

        assert result.num_rows == 4
        # one creation failure per worker plus one per batch without an import
        assert result.num_errors == 3 + 2
        mock_client.upload_bulk_import_batch.assert_not_awaited()
        mock_client.finish_bulk_import_upload.assert_not_awaited()

    async def test_idle_workers_do_not_finish(self, mock_client):
        guests = [make_new_guest()]

        await GuestGenerator(mock_client, FAST, GenerationMode.BULK_IMPORT).run(EVENT_ID, guests)

        assert mock_client.create_bulk_import.await_count == 3
        assert mock_client.finish_bulk_import_upload.await_count == 1


class TestRunForEvent:
    async def test_looks_up_event_by_name(self, mock_client):
        result = await GuestGenerator(mock_client, FAST).run_for_event(
            "Load Testing", 4, seed=3
        )

        params = mock_client.search_events.await_args.args[0]
        assert params.name == "Load Testing"
        assert result.event_name == "Load Testing"
        assert result.num_rows == 4

    async def test_unknown_event(self, mock_client):
        mock_client.search_events = AsyncMock(return_value=[])

        with pytest.raises(SweapLibraryError, match="no event matching"):
            await GuestGenerator(mock_client, FAST).run_for_event("Missing", 4)
