"""Tests for the root CLI group."""

from __future__ import annotations

from click.testing import CliRunner

from strata import __version__
from strata.cli import cli


class TestRootGroup:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_subcommand_shows_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        for name in ("init", "layer", "widget", "preview"):
            assert name in result.output

    def test_help_does_not_create_database(self, cli_runner: CliRunner, tmp_path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(cli, ["layer", "--help"])
        assert result.exit_code == 0
        assert not (tmp_path / ".strata").exists()

    def test_explicit_config(self, cli_runner: CliRunner, tmp_path) -> None:
        config = tmp_path / "elsewhere.toml"
        config.write_text('[site]\nname = "remote"\n')
        result = cli_runner.invoke(cli, ["-c", str(config), "--json", "layer", "list"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / ".strata" / "strata.db").is_file()
