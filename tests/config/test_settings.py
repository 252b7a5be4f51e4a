"""Tests for HafragSettings — TOML, env, and CLI layering."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from hafrag.config.models import AssemblyConfig, ListenConfig, PathsConfig, StoreConfig
from hafrag.config.settings import HafragSettings


class TestDefaults:
    def test_code_defaults(self, tmp_path: Path) -> None:
        settings = HafragSettings.from_cli(project_root=tmp_path)
        assert settings.paths == PathsConfig()
        assert settings.listen.default_instance == "haproxy"
        assert settings.listen.default_ipaddress == "*"
        assert settings.assembly.require_nonempty is False
        assert settings.config_path is None

    def test_store_path_relative_to_root(self, tmp_path: Path) -> None:
        settings = HafragSettings.from_cli(project_root=tmp_path)
        assert settings.store_path == tmp_path / ".hafrag" / "store.db"

    def test_absolute_store_path(self, tmp_path: Path) -> None:
        settings = HafragSettings.from_cli(
            project_root=tmp_path, store=StoreConfig(path="/var/lib/hafrag/store.db")
        )
        assert settings.store_path == Path("/var/lib/hafrag/store.db")


class TestTomlLayer:
    def test_sparse_overrides(self, tmp_path: Path) -> None:
        (tmp_path / "hafrag.toml").write_text(
            '[listen]\ndefault_instance = "edge"\n\n[assembly]\nrequire_nonempty = true\n'
        )
        settings = HafragSettings.from_cli(project_root=tmp_path)
        assert settings.listen.default_instance == "edge"
        assert settings.listen.sort_options_alphabetic is True
        assert settings.assembly.require_nonempty is True
        assert settings.config_path == tmp_path.resolve() / "hafrag.toml"

    def test_walk_up_sets_project_root(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "hafrag.toml").write_text('[store]\npath = "members.db"\n')
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = HafragSettings.from_cli()
        assert settings.project_root == tmp_path.resolve()
        assert settings.store_path == tmp_path.resolve() / "members.db"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        config = tmp_path / "custom.toml"
        config.write_text('[paths]\ndefault_config_file = "/srv/lb.cfg"\n')
        settings = HafragSettings.from_cli(config_path=str(config), project_root=tmp_path)
        assert settings.paths.default_config_file == "/srv/lb.cfg"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "hafrag.toml").write_text("[listen\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            HafragSettings.from_cli(project_root=tmp_path)


class TestPriority:
    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "hafrag.toml").write_text('[listen]\ndefault_instance = "edge"\n')
        monkeypatch.setenv("HAFRAG_LISTEN__DEFAULT_INSTANCE", "core")
        settings = HafragSettings.from_cli(project_root=tmp_path)
        assert settings.listen.default_instance == "core"

    def test_cli_beats_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HAFRAG_QUIET", "false")
        settings = HafragSettings.from_cli(project_root=tmp_path, quiet=True)
        assert settings.quiet is True


class TestModels:
    def test_frozen_sections(self) -> None:
        for model in (PathsConfig(), StoreConfig(), ListenConfig(), AssemblyConfig()):
            assert model.model_config.get("frozen") is True


class TestStrictConfig:
    def test_unknown_section(self, tmp_path: Path) -> None:
        (tmp_path / "hafrag.toml").write_text('[listn]\ndefault_instance = "edge"\n')
        with pytest.raises(click.ClickException, match="listn"):
            HafragSettings.from_cli(project_root=tmp_path)

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="not found"):
            HafragSettings.from_cli(config_path=str(tmp_path / "nope.toml"))

    def test_search_from_uses_config_dir_as_root(self, tmp_path: Path) -> None:
        (tmp_path / "hafrag.toml").write_text("")
        nested = tmp_path / "deep"
        nested.mkdir()
        settings = HafragSettings.from_cli(search_from=nested)
        assert settings.project_root == tmp_path.resolve()

    def test_search_from_without_config(self, tmp_path: Path) -> None:
        settings = HafragSettings.from_cli(search_from=tmp_path)
        assert settings.project_root == tmp_path
