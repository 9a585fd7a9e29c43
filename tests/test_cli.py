"""Tests for CLI entry point."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from cosmos_explorer import __main__ as cli_module
from cosmos_explorer.__main__ import cli
from tests.conftest import DOCDB_CONNECTION, TABLE_CONNECTION, FakeSecretStore


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "cosmos-explorer.toml"
    path.write_text(
        f"""
[state]
path = "{tmp_path / 'state.json'}"

[logging]
path = "{tmp_path / 'logs' / 'explorer.log'}"
"""
    )
    return path


@pytest.fixture
def store(monkeypatch):
    secret_store = FakeSecretStore()
    monkeypatch.setattr(cli_module, "load_secret_store", lambda enabled=True: secret_store)
    return secret_store


def _invoke(config_file, *args):
    return CliRunner().invoke(cli, ["--config", str(config_file), *args])


class TestCLI:
    """Test CLI commands."""

    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "attached database accounts" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.3.0" in result.output

    def test_list_empty(self, config_file, store):
        result = _invoke(config_file, "list")
        assert result.exit_code == 0
        assert "No attached database accounts." in result.output

    def test_attach_list_detach(self, config_file, store):
        result = _invoke(
            config_file, "attach", "--api", "documentdb",
            "--connection-string", DOCDB_CONNECTION,
        )
        assert result.exit_code == 0, result.output
        assert "Attached." in result.output

        result = _invoke(config_file, "list")
        assert result.exit_code == 0
        assert "foo.example:443\tSQL\tfoo.example:443 (SQL)" in result.output

        result = _invoke(config_file, "detach", "foo.example:443")
        assert result.exit_code == 0
        assert "Detached foo.example:443." in result.output
        assert store.secrets == {}

    def test_attach_duplicate_warns(self, config_file, store):
        args = ("attach", "--api", "table", "--connection-string", TABLE_CONNECTION)
        assert _invoke(config_file, *args).exit_code == 0
        result = _invoke(config_file, *args)
        assert result.exit_code == 0
        assert "Database Account 'tables.example' is already attached." in result.output
        assert store.set_calls == ["tables.example"]

    def test_attach_invalid_connection_string(self, config_file, store):
        result = _invoke(
            config_file, "attach", "--api", "graph", "--connection-string", "garbage",
        )
        assert result.exit_code == 1
        assert "AccountEndpoint=...;AccountKey=..." in result.output

    def test_attach_requires_both_options(self, config_file, store):
        result = _invoke(config_file, "attach", "--api", "graph")
        assert result.exit_code == 2

    def test_attach_emulator(self, config_file, store):
        result = _invoke(config_file, "attach-emulator", "--api", "documentdb")
        assert result.exit_code == 0
        assert "Attached." in result.output
        result = _invoke(config_file, "list")
        assert "localhost:8081\tSQL\tSQL Emulator  (emulator)" in result.output

    def test_detach_unknown(self, config_file, store):
        result = _invoke(config_file, "detach", "nope")
        assert result.exit_code == 1
        assert "No attached account with id nope." in result.output

    def test_no_secret_store_warns(self, config_file, monkeypatch):
        monkeypatch.setattr(cli_module, "load_secret_store", lambda enabled=True: None)
        result = _invoke(config_file, "list")
        assert result.exit_code == 0
        assert "this session only" in result.output

    def test_bad_config(self, tmp_path):
        path = tmp_path / "cosmos-explorer.toml"
        path.write_text("[state\n")
        result = CliRunner().invoke(cli, ["--config", str(path), "list"])
        assert result.exit_code == 1
        assert "Configuration error" in result.output
