"""Tests for FragmentRegistry and RegistrySet."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from hafrag.domain.errors import NameConflict
from hafrag.domain.fragments import Fragment
from hafrag.domain.types import FragmentKind
from hafrag.services.registry import FragmentRegistry, RegistrySet

TARGET = Path("/etc/haproxy/haproxy.cfg")


def _fragment(
    name: str,
    kind: FragmentKind = FragmentKind.LISTEN,
    *,
    section: str = "web",
    content: str = "listen web\n",
) -> Fragment:
    return Fragment(
        name=name,
        kind=kind,
        section=section,
        order_key=f"20-{section}-00",
        target_file=TARGET,
        content=content,
    )


class TestFragmentRegistry:
    def test_register_and_get(self) -> None:
        registry = FragmentRegistry(TARGET)
        fragment = _fragment("haproxy::web")
        registry.register(fragment)
        assert len(registry) == 1
        assert "haproxy::web" in registry
        assert registry.get("haproxy::web") is fragment
        assert registry.section_owner("web") is FragmentKind.LISTEN

    def test_same_kind_replaces(self) -> None:
        registry = FragmentRegistry(TARGET)
        registry.register(_fragment("haproxy::web", content="old\n"))
        registry.register(_fragment("haproxy::web", content="new\n"))
        assert len(registry) == 1
        fragment = registry.get("haproxy::web")
        assert fragment is not None
        assert fragment.content == "new\n"

    def test_replacement_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = FragmentRegistry(TARGET)
        registry.register(_fragment("haproxy::web", content="old\n"))
        with caplog.at_level(logging.DEBUG, logger="hafrag"):
            registry.register(_fragment("haproxy::web", content="new\n"))
        assert "changed" in caplog.text

    def test_name_held_by_other_kind(self) -> None:
        registry = FragmentRegistry(TARGET)
        registry.register(_fragment("shared", FragmentKind.LISTEN))
        with pytest.raises(NameConflict):
            registry.register(_fragment("shared", FragmentKind.MEMBER))

    @pytest.mark.parametrize(
        ("first", "second"),
        [
            (FragmentKind.DEFAULTS, FragmentKind.LISTEN),
            (FragmentKind.LISTEN, FragmentKind.DEFAULTS),
        ],
    )
    def test_section_conflict_either_order(
        self, first: FragmentKind, second: FragmentKind
    ) -> None:
        registry = FragmentRegistry(TARGET)
        registry.register(_fragment(f"a::{first.value}", first))
        with pytest.raises(NameConflict) as exc_info:
            registry.register(_fragment(f"b::{second.value}", second))
        assert exc_info.value.detail["section"] == "web"
        assert len(registry) == 1

    def test_member_does_not_claim_section(self) -> None:
        registry = FragmentRegistry(TARGET)
        registry.register(_fragment("haproxy::web"))
        registry.register(_fragment("haproxy::web::web01", FragmentKind.MEMBER))
        assert registry.section_owner("web") is FragmentKind.LISTEN
        assert len(registry) == 2

    def test_check_section_same_kind_ok(self) -> None:
        registry = FragmentRegistry(TARGET)
        registry.register(_fragment("haproxy::web"))
        registry.check_section("web", FragmentKind.LISTEN)

    def test_fragments_snapshot(self) -> None:
        registry = FragmentRegistry(TARGET)
        registry.register(_fragment("haproxy::web"))
        snapshot = registry.fragments()
        snapshot.clear()
        assert len(registry) == 1


class TestRegistrySet:
    def test_for_file_reuses_registry(self) -> None:
        registries = RegistrySet()
        assert registries.for_file(TARGET) is registries.for_file(TARGET)
        assert len(registries) == 1

    def test_iteration_sorted_by_path(self) -> None:
        registries = RegistrySet()
        registries.for_file(Path("/b.cfg"))
        registries.for_file(Path("/a.cfg"))
        assert [r.target_file for r in registries] == [Path("/a.cfg"), Path("/b.cfg")]

    def test_files_are_independent(self) -> None:
        registries = RegistrySet()
        registries.for_file(Path("/a.cfg")).register(_fragment("haproxy::web"))
        other = registries.for_file(Path("/b.cfg"))
        other.register(_fragment("haproxy::web::defaults", FragmentKind.DEFAULTS))
        assert other.section_owner("web") is FragmentKind.DEFAULTS
