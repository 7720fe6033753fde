"""Tests for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from weightcal import service
from weightcal.cli import app
from weightcal.config import Settings, set_settings
from weightcal.store import Record

runner = CliRunner()


class TestMainCommands:
    """Tests for top-level help and argument checking."""

    def test_help(self):
        """Test that --help works."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "weight" in result.output.lower()

    def test_add_requires_args(self):
        result = runner.invoke(app, ["add"])
        assert result.exit_code != 0

    def test_sync_help(self):
        result = runner.invoke(app, ["sync", "--help"])
        assert result.exit_code == 0
        assert "export" in result.output.lower()


class TestRecordCommands:
    """Tests for add/edit/delete/list."""

    def test_add_writes_record_and_exports(self, settings):
        result = runner.invoke(app, ["add", "180.5", "2000", "--date", "2025-01-05"])

        assert result.exit_code == 0, result.output
        assert service.load_records() == [Record("2025-01-05", "180.5", "2000")]
        export_dir = settings.sync.folder / "Export"
        assert (export_dir / "LATEST").exists()

    def test_add_normalizes_date(self, settings):
        result = runner.invoke(app, ["add", "180", "2000", "-d", "1/5/2025"])
        assert result.exit_code == 0, result.output
        assert service.load_records()[0].date == "2025-01-05"

    def test_add_defaults_to_today(self, settings):
        from datetime import date

        runner.invoke(app, ["add", "180", "2000"])
        assert service.load_records()[0].date == date.today().isoformat()

    def test_add_rejects_non_number(self, settings):
        result = runner.invoke(app, ["add", "heavy", "2000"])
        assert result.exit_code == 1
        assert "not a number" in result.output
        assert service.load_records() == []

    def test_add_rejects_delimiter(self, settings):
        result = runner.invoke(app, ["add", "180", "1,850"])
        assert result.exit_code == 1
        assert service.load_records() == []

    def test_add_rejects_bad_date(self, settings):
        result = runner.invoke(app, ["add", "180", "2000", "--date", "someday"])
        assert result.exit_code == 1

    def test_add_rejects_bare_number_as_date(self, settings):
        result = runner.invoke(app, ["add", "180", "2000", "--date", "180.4"])
        assert result.exit_code == 1
        assert service.load_records() == []

    def test_add_rejects_underscore_number(self, settings):
        result = runner.invoke(app, ["add", "1_000", "2000"])
        assert result.exit_code == 1
        assert service.load_records() == []

    def test_add_json(self, settings):
        result = runner.invoke(app, ["add", "180", "2000", "-d", "2025-01-05", "--json"])
        data = json.loads(result.stdout)
        assert data["success"] is True
        assert data["data"]["date"] == "2025-01-05"
        assert data["data"]["export"]["ok"] is True

    def test_edit(self, settings):
        service.append_record(Record("2025-01-05", "180", "2000"))

        result = runner.invoke(app, ["edit", "2025-01-05", "179", "1900"])

        assert result.exit_code == 0, result.output
        assert service.load_records() == [Record("2025-01-05", "179", "1900")]

    def test_edit_unknown_date(self, settings):
        result = runner.invoke(app, ["edit", "2025-01-05", "179", "1900"])
        assert result.exit_code == 1
        assert "No record" in result.output

    def test_delete(self, settings):
        service.append_record(Record("2025-01-05", "180", "2000"))
        service.append_record(Record("2025-01-06", "179", "1900"))

        result = runner.invoke(app, ["delete", "2025-01-05", "--yes"])

        assert result.exit_code == 0, result.output
        assert service.load_records() == [Record("2025-01-06", "179", "1900")]

    def test_delete_declined(self, settings):
        service.append_record(Record("2025-01-05", "180", "2000"))

        result = runner.invoke(app, ["delete", "2025-01-05"], input="n\n")

        assert result.exit_code != 0
        assert len(service.load_records()) == 1

    def test_delete_unknown_date(self, settings):
        result = runner.invoke(app, ["delete", "2025-01-05", "--yes"])
        assert result.exit_code == 1

    def test_list_empty(self, settings):
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "No records found" in result.output

    def test_list_json(self, settings):
        service.append_record(Record("2025-01-05", "180", "2000"))

        result = runner.invoke(app, ["list", "--json"])

        data = json.loads(result.stdout)
        assert data["data"]["entries"] == [
            {"date": "2025-01-05", "weight": "180", "calorie": "2000"}
        ]


class TestAnalysisCommands:
    """Tests for stats and trend."""

    def test_stats(self, settings):
        for d, w, c in (("2025-01-01", "80", "2000"), ("2025-01-02", "78", "1800"), ("2025-01-03", "76", "1900")):
            service.append_record(Record(d, w, c))

        result = runner.invoke(app, ["stats"])

        assert result.exit_code == 0
        assert "2.00 lbs" in result.output
        assert "1900.00 cal" in result.output

    def test_stats_not_available(self, settings):
        result = runner.invoke(app, ["stats", "--json"])
        data = json.loads(result.stdout)
        assert data["data"]["average_weight_loss"] is None
        assert data["data"]["average_calories"] is None

    def test_trend_json(self, settings):
        for d, w in (("2025-01-03", "74"), ("2025-01-01", "70"), ("2025-01-02", "72")):
            service.append_record(Record(d, w, "2000"))

        result = runner.invoke(app, ["trend", "--json"])

        data = json.loads(result.stdout)["data"]
        assert data["labels"] == ["01/01/2025", "01/02/2025", "01/03/2025"]
        assert data["weights"] == [70.0, 72.0, 74.0]
        assert data["trend"] == [70.0, 72.0, 74.0]

    def test_trend_empty(self, settings):
        result = runner.invoke(app, ["trend"])
        assert result.exit_code == 0
        assert "No weight entries" in result.output


class TestSyncCommands:
    """Tests for sync export/import."""

    def test_import_with_nothing_published(self, settings):
        result = runner.invoke(app, ["sync", "import"])
        assert result.exit_code == 0
        assert "no complete snapshot" in result.output

    def test_export_then_import(self, settings):
        service.append_record(Record("2025-01-05", "180", "2000"))
        assert runner.invoke(app, ["sync", "export"]).exit_code == 0

        settings.store.path.write_text("", encoding="utf-8")
        result = runner.invoke(app, ["sync", "import", "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["success"] is True
        assert service.load_records() == [Record("2025-01-05", "180", "2000")]

    def test_export_disabled(self, settings):
        settings.sync.folder = None
        service.reset()

        result = runner.invoke(app, ["sync", "export"])

        assert result.exit_code == 1
        assert "not configured" in result.output

    def test_mutation_with_sync_disabled_still_succeeds(self, settings):
        settings.sync.folder = None
        service.reset()

        result = runner.invoke(app, ["add", "180", "2000"])

        assert result.exit_code == 0
        assert "Export failed" not in result.output

    def test_import_on_startup(self, settings):
        service.append_record(Record("2025-01-05", "180", "2000"))
        service.export_snapshot()
        settings.store.path.unlink()
        settings.sync.import_on_startup = True

        result = runner.invoke(app, ["list", "--json"])

        entries = json.loads(result.stdout)["data"]["entries"]
        assert entries == [{"date": "2025-01-05", "weight": "180", "calorie": "2000"}]


class TestConfigCommands:
    """Tests for config show/init."""

    def test_show(self, settings):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "store:" in result.output

    def test_init_writes_file(self, settings, tmp_path):
        target = tmp_path / "config.yaml"

        result = runner.invoke(
            app, ["config", "init", "--path", str(target), "--sync-folder", str(tmp_path / "drive")]
        )

        assert result.exit_code == 0, result.output
        loaded = Settings.load(target)
        assert loaded.sync.folder == tmp_path / "drive"

    def test_init_refuses_overwrite(self, settings, tmp_path):
        target = tmp_path / "config.yaml"
        target.write_text("{}", encoding="utf-8")

        result = runner.invoke(app, ["config", "init", "--path", str(target)])

        assert result.exit_code == 1
        assert target.read_text(encoding="utf-8") == "{}"

    def test_unknown_log_level_does_not_block_commands(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        config = tmp_path / ".weightcal" / "config.yaml"
        config.parent.mkdir()
        config.write_text("logging:\n  level: LOUD\n", encoding="utf-8")
        set_settings(None)
        service.reset()
        try:
            result = runner.invoke(app, ["config", "show"])
            assert result.exit_code == 0, result.output
            assert "WARNING" in result.output
        finally:
            set_settings(None)
            service.reset()
