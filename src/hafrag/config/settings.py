"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``HAFRAG_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``hafrag.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from hafrag.config.discovery import find_config, resolve_project_root
from hafrag.config.models import AssemblyConfig, ListenConfig, PathsConfig, StoreConfig

TOML_SECTIONS = frozenset({"paths", "store", "listen", "assembly"})


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read the ``[paths]``, ``[store]``, ``[listen]`` and ``[assembly]`` tables.

    Unknown top-level keys are rejected so a typo such as ``[listn]`` does
    not silently fall back to defaults.
    """

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path is None:
            return
        try:
            self._data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {toml_path}: {exc}"
            raise click.ClickException(msg) from exc
        unknown = sorted(set(self._data) - TOML_SECTIONS)
        if unknown:
            msg = f"Unknown section(s) in {toml_path}: {', '.join(unknown)}"
            raise click.ClickException(msg)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class HafragSettings(BaseSettings):
    """Unified settings for the hafrag CLI.

    Attributes:
        project_root: Directory holding ``hafrag.toml`` (or CWD if none).
        config_path: The config file actually loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "HAFRAG_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    paths: PathsConfig = Field(default_factory=PathsConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    listen: ListenConfig = Field(default_factory=ListenConfig)
    assembly: AssemblyConfig = Field(default_factory=AssemblyConfig)

    @property
    def store_path(self) -> Path:
        """Absolute location of the exported-member database."""
        path = Path(self.store.path)
        return path if path.is_absolute() else self.project_root / path

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        search_from: Path | None = None,
        **cli_flags: Any,
    ) -> HafragSettings:
        """Construct settings from a CLI invocation.

        ``hafrag.toml`` is *config_path* when given, otherwise the first one
        found walking up from *search_from* (or *project_root*, or the cwd).
        Without an explicit *project_root* the config file's directory is
        the root. CLI flags are merged as highest-priority overrides.

        Raises:
            click.ClickException: *config_path* does not exist, or the
                config file is not valid.
        """
        if config_path:
            toml_path: Path | None = Path(config_path)
            if not toml_path.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.ClickException(msg)
        else:
            toml_path = find_config(search_from or project_root)

        resolved_root = project_root or resolve_project_root(toml_path, search_from)

        _tls.toml_path = toml_path
        try:
            return cls(project_root=resolved_root, config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None
