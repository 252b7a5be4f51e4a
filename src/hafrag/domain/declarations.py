"""Typed declaration models for listening services, defaults groups and members.

Raw manifest tables are turned into these models by
:mod:`hafrag.services.validator`; the models themselves only enforce shape.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from hafrag.domain.binding import Binding, normalize_ports
from hafrag.domain.errors import InvalidDeclaration
from hafrag.domain.types import Mode

DEFAULT_INSTANCE = "haproxy"

OptionValue = str | int | float | list[str | int | float]


def _as_str_tuple(value: Any) -> Any:
    """Accept a single string where a list of strings is expected."""
    if isinstance(value, str):
        return (value,)
    return value


def _check_absolute(path: Path | None) -> Path | None:
    if path is not None and not path.is_absolute():
        msg = f"config_file must be an absolute path, got {str(path)!r}"
        raise ValueError(msg)
    return path


class ListenDeclaration(BaseModel):
    """A validated ``listen`` section."""

    model_config = {"frozen": True, "extra": "forbid"}

    name: str = Field(min_length=1)
    section_name: str | None = None
    binding: Binding
    mode: Mode | None = None
    options: dict[str, OptionValue] = Field(default_factory=dict)
    sort_options_alphabetic: bool = True
    collect_exported: bool = False
    defaults: str | None = None
    config_file: Path | None = None
    instance: str = Field(default=DEFAULT_INSTANCE, min_length=1)

    @field_validator("mode", mode="before")
    @classmethod
    def _unset_mode(cls, value: Any) -> Any:
        return None if value in ("", "unset") else value

    @field_validator("config_file")
    @classmethod
    def _absolute_config_file(cls, value: Path | None) -> Path | None:
        return _check_absolute(value)

    @property
    def section(self) -> str:
        """Rendered section name (falls back to ``name``)."""
        return self.section_name or self.name


class DefaultsDeclaration(BaseModel):
    """A validated ``defaults`` group that listening services can join."""

    model_config = {"frozen": True, "extra": "forbid"}

    name: str = Field(min_length=1)
    options: dict[str, OptionValue] = Field(default_factory=dict)
    sort_options_alphabetic: bool = True
    config_file: Path | None = None
    instance: str = Field(default=DEFAULT_INSTANCE, min_length=1)

    @field_validator("config_file")
    @classmethod
    def _absolute_config_file(cls, value: Path | None) -> Path | None:
        return _check_absolute(value)


class MemberDeclaration(BaseModel):
    """One backend member of a listening service.

    ``server_names`` and ``ipaddresses`` pair up positionally; every pair
    renders one ``server`` line per port.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    name: str = Field(min_length=1)
    listening_service: str = Field(min_length=1)
    server_names: tuple[str, ...] = ()
    ipaddresses: tuple[str, ...]
    ports: tuple[str, ...] = ()
    options: tuple[str, ...] = ()
    define_cookies: bool = False
    instance: str = Field(default=DEFAULT_INSTANCE, min_length=1)

    @field_validator("server_names", "ipaddresses", "options", mode="before")
    @classmethod
    def _single_string(cls, value: Any) -> Any:
        return _as_str_tuple(value)

    @field_validator("ports", mode="before")
    @classmethod
    def _ports(cls, value: Any) -> tuple[str, ...]:
        try:
            return normalize_ports(value)
        except InvalidDeclaration as exc:
            raise ValueError(exc.message) from exc

    @model_validator(mode="before")
    @classmethod
    def _default_server_names(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("server_names"):
            return {**data, "server_names": data.get("name")}
        return data

    @model_validator(mode="after")
    def _pairs_match(self) -> MemberDeclaration:
        if not self.ipaddresses:
            msg = "ipaddresses must not be empty"
            raise ValueError(msg)
        if len(self.server_names) != len(self.ipaddresses):
            msg = (
                f"server_names ({len(self.server_names)}) and ipaddresses "
                f"({len(self.ipaddresses)}) must have the same length"
            )
            raise ValueError(msg)
        return self

    def servers(self) -> list[tuple[str, str]]:
        """``(server_name, ipaddress)`` pairs in declaration order."""
        return list(zip(self.server_names, self.ipaddresses, strict=True))
