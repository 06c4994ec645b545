"""Tests for the ccc CLI: traits, backends, matrix and config commands."""

import json

from typer.testing import CliRunner

from ccc.cli.app import app
from ccc.cli.config import app as config_app

runner = CliRunner()


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "ccc 0.1.0" in result.output

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert "traits" in result.output
        assert "backends" in result.output


class TestTraits:
    def test_json(self):
        result = runner.invoke(app, ["traits", "--json"])
        assert result.exit_code == 0
        rows = json.loads(result.output)
        names = {row["trait"] for row in rows}
        assert {"entry", "handle", "push", "equal_range", "reserve"} <= names
        entry = next(row for row in rows if row["trait"] == "entry")
        assert entry["required_for"] == ["ENTRY"]

    def test_filter_by_capability(self):
        result = runner.invoke(app, ["traits", "--capability", "priority", "--json"])
        assert result.exit_code == 0
        names = {row["trait"] for row in json.loads(result.output)}
        assert {"push", "pop", "update", "increase", "decrease"} <= names
        assert "entry" not in names

    def test_unknown_capability(self):
        result = runner.invoke(app, ["traits", "-c", "teleport"])
        assert result.exit_code == 1

    def test_table(self):
        result = runner.invoke(app, ["traits"])
        assert result.exit_code == 0
        assert "swap_entry" in result.output


class TestBackends:
    def test_json(self):
        result = runner.invoke(app, ["backends", "--json"])
        assert result.exit_code == 0
        rows = {row["backend"]: row for row in json.loads(result.output)}
        assert set(rows) >= {
            "Buffer",
            "HashMap",
            "OrderedMap",
            "HandleOrderedMap",
            "DoublyLinkedList",
            "PriorityQueue",
        }
        assert rows["PriorityQueue"]["capabilities"] == ["PRIORITY", "MEMORY", "STATE"]
        assert rows["HashMap"]["module"] == "ccc.containers.hash_map"
        assert rows["HashMap"]["traits"] > 0

    def test_table(self):
        result = runner.invoke(app, ["backends"])
        assert result.exit_code == 0
        assert "HandleOrderedMap" in result.output


class TestMatrix:
    def test_json(self):
        result = runner.invoke(app, ["matrix", "--json"])
        assert result.exit_code == 0
        rows = {row["backend"]: row for row in json.loads(result.output)}
        assert rows["OrderedMap"]["equal_range"] is True
        assert rows["HashMap"]["equal_range"] is False
        assert rows["PriorityQueue"]["begin"] is False
        assert rows["Buffer"]["push_back"] is True

    def test_table(self):
        result = runner.invoke(app, ["matrix"])
        assert result.exit_code == 0
        assert "equal_range" in result.output


class TestConfig:
    def test_show_json(self):
        result = runner.invoke(app, ["config", "show", "--format", "json"])
        assert result.exit_code == 0
        assert "initial_capacity" in result.output

    def test_show_env(self, monkeypatch):
        monkeypatch.setenv("CCC_GROWTH_FACTOR", "1.5")
        result = runner.invoke(app, ["config", "show", "--format", "env"])
        assert result.exit_code == 0
        assert "CCC_GROWTH_FACTOR=1.5" in result.output

    def test_show_table(self):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "max_load_factor" in result.output

    def test_validate_ok(self):
        result = runner.invoke(app, ["config", "validate"])
        assert result.exit_code == 0
        assert "valid" in result.output

    def test_validate_bad_env(self, monkeypatch):
        """The config sub-app reports invalid settings without a traceback."""
        monkeypatch.setenv("CCC_MAX_LOAD_FACTOR", "1.5")
        result = runner.invoke(config_app, ["validate"])
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
