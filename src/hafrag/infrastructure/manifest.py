"""Load declaration manifests from TOML.

A manifest holds arrays of tables, one per declaration kind::

    [[defaults]]
    name = "prod"

    [[listen]]
    name = "api"
    defaults = "prod"
    bind = { "10.0.0.2:443" = ["ssl"] }
    collect_exported = true

    [[member]]
    name = "web01"
    listening_service = "api"
    ipaddresses = "10.0.1.1"
    ports = "8080"

Tables are returned raw; validation happens in the service layer so every
error carries its declaration's position.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from hafrag.domain.errors import InvalidDeclaration

_KINDS = ("defaults", "listen", "member")


@dataclass(frozen=True)
class Manifest:
    """Raw declaration tables in file order, grouped by kind."""

    source: str = "<memory>"
    defaults: list[dict[str, Any]] = field(default_factory=list)
    listen: list[dict[str, Any]] = field(default_factory=list)
    member: list[dict[str, Any]] = field(default_factory=list)

    @property
    def declaration_count(self) -> int:
        return len(self.defaults) + len(self.listen) + len(self.member)


def parse_manifest(data: dict[str, Any], *, source: str = "<memory>") -> Manifest:
    """Build a :class:`Manifest` from already-decoded TOML data."""
    unknown = sorted(set(data) - set(_KINDS))
    if unknown:
        msg = f"Unknown manifest tables in {source}: {', '.join(unknown)}"
        raise InvalidDeclaration(msg, source=source, tables=unknown)

    tables: dict[str, list[dict[str, Any]]] = {}
    for kind in _KINDS:
        entries = data.get(kind, [])
        if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
            msg = f"[[{kind}]] in {source} must be an array of tables"
            raise InvalidDeclaration(msg, source=source, kind=kind)
        tables[kind] = [dict(e) for e in entries]
    return Manifest(source=source, **tables)


def load_manifest(path: Path) -> Manifest:
    """Read and parse a manifest file.

    Raises:
        InvalidDeclaration: The file is missing, not valid TOML, or has an
            unexpected shape.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read manifest {path}: {exc.strerror or exc}"
        raise InvalidDeclaration(msg, source=str(path)) from exc
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise InvalidDeclaration(msg, source=str(path)) from exc
    return parse_manifest(data, source=str(path))
