"""Tests for the CLI commands."""

import json
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from eventswiper.cli import main
from eventswiper.config import Config
from eventswiper.core.errors import NetworkError
from eventswiper.workflows import get_store


@pytest.fixture
def config(tmp_path):
    return Config(state_dir=str(tmp_path / "state"), export_dir=str(tmp_path / "exports"))


@pytest.fixture
def source():
    source = MagicMock()
    source.fetch_events.return_value = {
        "entities": [
            {"eventId": "e1", "title": "Opening Keynote", "dateIso": "2025-10-26",
             "startTime": "0900", "endTime": "1000", "eventVenue": "Main Stage"},
            {"eventId": "e2", "title": "Payments Panel", "dateIso": "2025-10-26",
             "startTime": "1100", "endTime": "1200"},
        ]
    }
    source.fetch_speakers.return_value = {"entities": []}
    return source


@pytest.fixture
def runner(config, source):
    with patch("eventswiper.cli.load_config", return_value=config), \
            patch("eventswiper.workflows.HttpEventSource", return_value=source):
        yield CliRunner()


class TestSwipe:
    def test_accept_reject_quit(self, runner, config):
        result = runner.invoke(main, ["swipe"], input="a\nr\nq\n")

        assert result.exit_code == 0, result.output
        assert "Opening Keynote" in result.output
        assert "No more events" in result.output
        store = get_store(config)
        assert [e.event_id for e in store.selections] == ["e1"]
        assert store.processed_ids == {"e1", "e2"}

    def test_undo(self, runner, config):
        result = runner.invoke(main, ["swipe"], input="a\nu\nq\n")

        assert result.exit_code == 0, result.output
        store = get_store(config)
        assert store.selections == []
        assert store.processed_ids == set()

    def test_resume_skips_decided(self, runner, config):
        runner.invoke(main, ["swipe"], input="r\nq\n")
        result = runner.invoke(main, ["swipe"], input="q\n")

        assert "Payments Panel" in result.output
        assert "Opening Keynote" not in result.output

    def test_ingestion_failure(self, runner, source):
        source.fetch_events.side_effect = NetworkError("down")

        result = runner.invoke(main, ["swipe"])

        assert result.exit_code == 1
        assert "No connectivity" in result.output


class TestSelectedAndExport:
    def test_selected_empty(self, runner):
        result = runner.invoke(main, ["selected"])
        assert "No events selected yet." in result.output

    def test_selected_json(self, runner):
        runner.invoke(main, ["swipe"], input="a\nq\n")
        result = runner.invoke(main, ["selected", "--json"])

        data = json.loads(result.output)
        assert [e["eventId"] for e in data] == ["e1"]

    def test_export(self, runner, tmp_path):
        runner.invoke(main, ["swipe"], input="a\na\nq\n")
        result = runner.invoke(main, ["export"])

        assert result.exit_code == 0, result.output
        assert "Exported 2 events." in result.output
        files = list((tmp_path / "exports").glob("eventswiper-events-*.ics"))
        assert len(files) == 1
        assert files[0].read_bytes().count(b"BEGIN:VEVENT") == 2

    def test_export_output_option(self, runner, tmp_path):
        runner.invoke(main, ["swipe"], input="a\nq\n")
        result = runner.invoke(main, ["export", "-o", str(tmp_path / "elsewhere")])

        assert result.exit_code == 0, result.output
        assert list((tmp_path / "elsewhere").glob("*.ics"))

    def test_export_nothing_selected(self, runner):
        result = runner.invoke(main, ["export"])
        assert result.exit_code == 1
        assert "No events to export!" in result.output


class TestResetAndStatus:
    def test_reset(self, runner, config):
        runner.invoke(main, ["swipe"], input="a\nq\n")
        result = runner.invoke(main, ["reset", "--yes"])

        assert "All selections cleared." in result.output
        assert get_store(config).selections == []

    def test_reset_declined(self, runner, config):
        runner.invoke(main, ["swipe"], input="a\nq\n")
        runner.invoke(main, ["reset"], input="n\n")

        assert len(get_store(config).selections) == 1

    def test_status(self, runner):
        runner.invoke(main, ["swipe"], input="a\nq\n")
        result = runner.invoke(main, ["status"])

        assert "Selected:  1" in result.output
        assert "Remaining: 1" in result.output
        assert "(fresh)" in result.output

    def test_refresh(self, runner, source):
        result = runner.invoke(main, ["refresh"])

        assert result.exit_code == 0, result.output
        assert "2 undecided" in result.output
        source.fetch_events.assert_called_once()
