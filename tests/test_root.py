"""Tests de la raíz del árbol y de la CLI."""

import yaml
from typer.testing import CliRunner

from arc.cli.app import app
from arc.core import aaa, msg
from arc.mock import cloud

from conftest import DOCUMENT


class TestRun:
    def test_no_params_shows_help_and_fails(self, call, capsys):
        assert call() == 1
        assert "The commands are" in capsys.readouterr().out

    def test_help_and_config_skip_load(self, call):
        assert call("help") == 0
        assert call("config") == 0
        assert cloud.calls == []

    def test_test_flag_skips_load(self, call):
        assert call("network", "create", "test") == 0
        assert cloud.calls == []

    def test_unknown_top_fails(self, call):
        assert call("galaxy", "info") == 1

    def test_info_after_load(self, call, capsys):
        assert call("info") == 0
        out = capsys.readouterr().out
        assert "Test datacenter" in out
        assert any(c[0] == "load" for c in cloud.calls)

    def test_verb_without_handler(self, call):
        assert call("create") == 1

    def test_audit_walks_every_subtree(self, call):
        assert call("audit") == 0
        for name in ("Instance", "Subnet", "Dns Record", "Database"):
            assert aaa.get_audit(name) is not None, name

    def test_missing_subtree(self, make_arc, document):
        del document["dns"]
        assert make_arc(document).run(["dns", "create"]) == 1
        assert any("Dns not defined" in e for e in msg.last_errors())


class TestCli:
    def test_version(self):
        result = CliRunner().invoke(app, ["version"])
        assert result.exit_code == 0
        assert "arc 1.0.0" in result.output

    def test_datacenter_without_params_fails(self):
        result = CliRunner().invoke(app, ["dc1"])
        assert result.exit_code == 1
        assert "The commands are" in result.output

    def test_help(self):
        result = CliRunner().invoke(app, ["help"])
        assert result.exit_code == 0
        assert "The commands are" in result.output

    def test_missing_document(self):
        result = CliRunner().invoke(app, ["nowhere", "info"])
        assert result.exit_code == 1
        assert "Cannot find the configuration" in result.output

    def test_runs_request_against_document(self, tmp_path):
        directory = tmp_path / "etc" / "arc"
        directory.mkdir(parents=True)
        (directory / "dc1.yaml").write_text(yaml.safe_dump(DOCUMENT))

        result = CliRunner().invoke(app, ["dc1", "db", "create"])
        assert result.exit_code == 0, result.output
        assert cloud.get("database", "orders") is not None
        assert (tmp_path / "latest" / "arc.log").exists()
