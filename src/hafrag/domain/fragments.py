"""Fragment — one named, ordered piece of a configuration file.

INVARIANT: Fragments are immutable. A changed declaration produces a
replacement fragment under the same name.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from hafrag.domain.types import FragmentKind


@dataclass(frozen=True)
class Fragment:
    """A rendered fragment bound to one target file."""

    name: str
    kind: FragmentKind
    section: str
    order_key: str
    target_file: Path
    content: str

    @property
    def sort_key(self) -> tuple[str, str]:
        """Assembly position: order key first, name breaks ties."""
        return (self.order_key, self.name)


def listen_fragment_name(instance: str, section_name: str) -> str:
    """``haproxy::web``"""
    return f"{instance}::{section_name}"


def defaults_fragment_name(instance: str, name: str) -> str:
    """``haproxy::defaults::prod``"""
    return f"{instance}::defaults::{name}"


def member_fragment_name(instance: str, listening_service: str, member_name: str) -> str:
    """``haproxy::api::web01``"""
    return f"{instance}::{listening_service}::{member_name}"
