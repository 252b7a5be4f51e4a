"""Tests for the root CLI group."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from hafrag import __version__
from hafrag.cli import cli


class TestCli:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    @pytest.mark.usefixtures("_isolated_project")
    def test_no_subcommand_shows_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "assemble" in result.output
        assert "members" in result.output

    @pytest.mark.parametrize(
        "args",
        [["assemble"], ["export"], ["members"], ["members", "list"], ["members", "retract"]],
    )
    @pytest.mark.usefixtures("_isolated_project")
    def test_examples(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, [*args, "--examples"])
        assert result.exit_code == 0, result.output
        assert "Examples for" in result.output
        assert "hafrag" in result.output

    @pytest.mark.usefixtures("_isolated_project")
    def test_help_lists_global_flags(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for flag in ("--json", "--quiet", "--verbose", "--log-json", "--config"):
            assert flag in result.output

    @pytest.mark.usefixtures("_isolated_project")
    def test_root_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--examples"])
        assert result.exit_code == 0
        assert "hafrag assemble site.toml --dry-run" in result.output

    def test_project_dir(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        project = tmp_path / "lb"
        (project / "sub").mkdir(parents=True)
        (project / "hafrag.toml").write_text(
            f'[paths]\ndefault_config_file = "{project / "out.cfg"}"\n'
        )
        manifest = project / "site.toml"
        manifest.write_text('[[listen]]\nname = "web"\nports = "80"\n')
        result = cli_runner.invoke(
            cli, ["-C", str(project / "sub"), "assemble", str(manifest)]
        )
        assert result.exit_code == 0, result.output
        assert "listen web" in (project / "out.cfg").read_text()

    def test_missing_config_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["-c", str(tmp_path / "nope.toml"), "members", "list"])
        assert result.exit_code == 1
        assert "Config file not found" in result.output
