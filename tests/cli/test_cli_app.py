"""Tests for the sweap command line interface."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from sweap import __version__
from sweap.cli.app import app
from sweap.exceptions import SweapAuthenticationError
from sweap.generator import GenerationMode, GenerationResult
from sweap.schemas import Event, EventState, EventStatistic, Guest
from tests.factories import make_event_dict, make_guest_dict, make_statistic_dict

runner = CliRunner()


@pytest.fixture(autouse=True)
def _reset_logging(reset_loguru):
    """Every invocation reconfigures loguru."""
    yield


@pytest.fixture
def env_file(tmp_path):
    path = tmp_path / "sweap.env"
    path.write_text("CLIENTID=cli-client\nCLIENT_SECRET=cli-secret\n")
    return path


def make_client_mock() -> MagicMock:
    """SweapClient double usable as an async context manager."""
    client = MagicMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=None)
    client.api_url = "https://api.sweap.test/core/v1/"
    return client


@pytest.fixture
def events_client():
    client = make_client_mock()
    with patch("sweap.cli.events.SweapClient", return_value=client) as client_class:
        client.client_class = client_class
        yield client


@pytest.fixture
def guests_client():
    client = make_client_mock()
    with patch("sweap.cli.guests.SweapClient", return_value=client) as client_class:
        client.client_class = client_class
        yield client


class TestGlobalOptions:
    """Tests for options on the root command."""

    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("check", "events", "stats", "guests", "listen", "generate-guests"):
            assert command in result.output

    def test_help_shows_verbose_flag(self):
        result = runner.invoke(app, ["--help"])

        assert "--verbose" in result.output
        assert "--quiet" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"sweap version {__version__}" in result.output

    def test_missing_env_file(self, tmp_path, events_client):
        result = runner.invoke(app, ["--env-file", str(tmp_path / "missing.env"), "check"])

        assert result.exit_code == 1
        assert "Error" in result.output
        events_client.client_class.assert_not_called()

    def test_env_file_and_environment(self, env_file, events_client):
        events_client.check_credentials = AsyncMock(return_value=True)

        result = runner.invoke(
            app, ["--env-file", str(env_file), "--environment", "staging", "check"]
        )

        assert result.exit_code == 0
        settings = events_client.client_class.call_args.kwargs["settings"]
        assert settings.client_id == "cli-client"
        assert settings.client_secret == "cli-secret"
        assert settings.environment == "staging"


class TestCheckCommand:
    def test_accepted(self, env_file, events_client):
        events_client.check_credentials = AsyncMock(return_value=True)

        result = runner.invoke(app, ["--env-file", str(env_file), "check"])

        assert result.exit_code == 0
        assert "Credentials accepted" in result.output
        events_client.check_credentials.assert_awaited_once()

    def test_rejected(self, env_file, events_client):
        events_client.__aenter__ = AsyncMock(
            side_effect=SweapAuthenticationError("authorization failed. Check credentials")
        )

        result = runner.invoke(app, ["--env-file", str(env_file), "check"])

        assert result.exit_code == 1
        assert "Credential check failed" in result.output


class TestEventsCommand:
    """Tests for 'sweap events'."""

    def test_json_output(self, env_file, events_client):
        events_client.search_events = AsyncMock(
            return_value=[Event.model_validate(make_event_dict(name="Gala"))]
        )

        result = runner.invoke(
            app, ["-q", "--env-file", str(env_file), "events", "--name", "Gala", "--format", "json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data[0]["name"] == "Gala"
        params = events_client.search_events.await_args.args[0]
        assert params.name == "Gala"

    def test_table_output(self, env_file, events_client):
        events_client.search_events = AsyncMock(
            return_value=[Event.model_validate(make_event_dict(name="Gala"))]
        )

        result = runner.invoke(app, ["--env-file", str(env_file), "events"])

        assert result.exit_code == 0
        assert "Events (1)" in result.output
        assert "Gala" in result.output

    def test_no_events(self, env_file, events_client):
        events_client.search_events = AsyncMock(return_value=[])

        result = runner.invoke(app, ["--env-file", str(env_file), "events"])

        assert result.exit_code == 0
        assert "No events found" in result.output

    def test_invalid_date(self, env_file, events_client):
        result = runner.invoke(
            app, ["--env-file", str(env_file), "events", "--updated-after", "yesterday"]
        )

        assert result.exit_code != 0
        events_client.client_class.assert_not_called()


class TestStatsCommand:
    def test_single_event(self, env_file, events_client):
        statistic = EventStatistic.model_validate(make_statistic_dict())
        events_client.get_event_statistic = AsyncMock(return_value=statistic)

        result = runner.invoke(
            app, ["-q", "--env-file", str(env_file), "stats", "--event", statistic.id, "-f", "json"]
        )

        assert result.exit_code == 0
        assert json.loads(result.output)[0]["id"] == statistic.id
        events_client.get_event_statistic.assert_awaited_once_with(statistic.id)


class TestGuestsCommand:
    def test_json_output(self, env_file, guests_client):
        guests = [Guest.model_validate(make_guest_dict(id=f"g{i}")) for i in range(3)]

        async def iter_guests(event_id, params=None):
            for guest in guests:
                yield guest

        guests_client.iter_guests = iter_guests

        result = runner.invoke(
            app, ["-q", "--env-file", str(env_file), "guests", "e-1", "--format", "json"]
        )

        assert result.exit_code == 0
        assert [g["id"] for g in json.loads(result.output)] == ["g0", "g1", "g2"]


class TestGenerateGuestsCommand:
    """Tests for 'sweap generate-guests'."""

    @pytest.fixture
    def generator(self, guests_client):
        result = GenerationResult(workers=2, batch_size=5, mode="one-by-one", event_name="Gala")
        result.num_rows = 10
        with patch("sweap.cli.guests.GuestGenerator") as generator_class:
            generator_class.return_value.run_for_event = AsyncMock(return_value=result)
            yield generator_class

    def test_json_output(self, env_file, generator):
        result = runner.invoke(
            app,
            [
                "-q",
                "--env-file",
                str(env_file),
                "generate-guests",
                "Gala",
                "--count",
                "10",
                "--workers",
                "2",
                "--batch-size",
                "5",
                "--format",
                "json",
            ],
        )

        assert result.exit_code == 0
        data = json.loads(result.output[result.output.index("{") :])
        assert data["num_rows"] == 10
        assert data["event_name"] == "Gala"

        config = generator.call_args.args[1]
        assert config.num_workers == 2
        assert config.batch_size == 5
        generator.return_value.run_for_event.assert_awaited_once_with("Gala", 10, seed=None)

    def test_text_output(self, env_file, generator):
        result = runner.invoke(app, ["--env-file", str(env_file), "generate-guests", "Gala"])

        assert result.exit_code == 0
        assert "Result:" in result.output
        assert "Num Rows: 10" in result.output


class TestEnumOptions:
    """Options with enum values reach the client converted."""

    def test_event_state(self, env_file, events_client):
        events_client.search_events = AsyncMock(return_value=[])

        result = runner.invoke(app, ["--env-file", str(env_file), "events", "--state", "ACTIVE"])

        assert result.exit_code == 0
        assert events_client.search_events.await_args.args[0].state is EventState.ACTIVE

    def test_invalid_event_state(self, env_file, events_client):
        result = runner.invoke(app, ["--env-file", str(env_file), "events", "-s", "OPEN"])

        assert result.exit_code != 0
        events_client.client_class.assert_not_called()

    def test_generation_mode(self, env_file, guests_client):
        with patch("sweap.cli.guests.GuestGenerator") as generator_class:
            generator_class.return_value.run_for_event = AsyncMock(
                return_value=GenerationResult(mode="bulk-import")
            )

            result = runner.invoke(
                app,
                ["--env-file", str(env_file), "generate-guests", "Gala", "-m", "bulk-import"],
            )

        assert result.exit_code == 0
        assert generator_class.call_args.args[2] is GenerationMode.BULK_IMPORT
