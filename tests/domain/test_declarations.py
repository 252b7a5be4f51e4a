"""Tests for declaration models and fragment naming."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from hafrag.domain.binding import BindBinding, PortsBinding
from hafrag.domain.declarations import (
    DefaultsDeclaration,
    ListenDeclaration,
    MemberDeclaration,
)
from hafrag.domain.fragments import (
    Fragment,
    defaults_fragment_name,
    listen_fragment_name,
    member_fragment_name,
)
from hafrag.domain.types import FragmentKind, Mode


def _ports(ip: str = "10.0.0.1", *ports: str) -> PortsBinding:
    return PortsBinding(ipaddress=ip, ports=ports or ("80",))


class TestListenDeclaration:
    def test_section_defaults_to_name(self) -> None:
        decl = ListenDeclaration(name="web", binding=_ports())
        assert decl.section == "web"
        assert decl.instance == "haproxy"

    def test_section_name_override(self) -> None:
        decl = ListenDeclaration(name="web", section_name="www", binding=_ports())
        assert decl.section == "www"

    def test_binding_from_dict(self) -> None:
        decl = ListenDeclaration.model_validate(
            {"name": "api", "binding": {"style": "bind", "addresses": {":443": ["ssl"]}}}
        )
        assert isinstance(decl.binding, BindBinding)

    @pytest.mark.parametrize("raw", ["", "unset"])
    def test_unset_mode(self, raw: str) -> None:
        decl = ListenDeclaration(name="web", binding=_ports(), mode=raw)
        assert decl.mode is None

    def test_mode(self) -> None:
        decl = ListenDeclaration(name="web", binding=_ports(), mode="http")
        assert decl.mode is Mode.HTTP

    def test_invalid_mode(self) -> None:
        with pytest.raises(ValidationError):
            ListenDeclaration(name="web", binding=_ports(), mode="udp")

    def test_relative_config_file_rejected(self) -> None:
        with pytest.raises(ValidationError, match="absolute"):
            ListenDeclaration(name="web", binding=_ports(), config_file=Path("lb.cfg"))

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ListenDeclaration.model_validate(
                {"name": "web", "binding": _ports(), "frontend": True}
            )

    def test_frozen(self) -> None:
        decl = ListenDeclaration(name="web", binding=_ports())
        with pytest.raises(ValidationError):
            decl.name = "other"  # type: ignore[misc]


class TestDefaultsDeclaration:
    def test_minimal(self) -> None:
        decl = DefaultsDeclaration(name="prod")
        assert decl.options == {}
        assert decl.sort_options_alphabetic is True

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DefaultsDeclaration(name="")


class TestMemberDeclaration:
    def test_server_names_default_to_name(self) -> None:
        member = MemberDeclaration(name="web01", listening_service="api", ipaddresses="10.0.1.1")
        assert member.server_names == ("web01",)
        assert member.servers() == [("web01", "10.0.1.1")]

    def test_ports_normalized(self) -> None:
        member = MemberDeclaration(
            name="web01", listening_service="api", ipaddresses="10.0.1.1", ports="8080, 8443"
        )
        assert member.ports == ("8080", "8443")

    def test_bad_ports(self) -> None:
        with pytest.raises(ValidationError):
            MemberDeclaration(
                name="web01", listening_service="api", ipaddresses="10.0.1.1", ports=[True]
            )

    def test_length_mismatch(self) -> None:
        with pytest.raises(ValidationError, match="same length"):
            MemberDeclaration(
                name="pool",
                listening_service="api",
                server_names=["a", "b"],
                ipaddresses=["10.0.1.1"],
            )

    def test_empty_ipaddresses(self) -> None:
        with pytest.raises(ValidationError):
            MemberDeclaration(name="web01", listening_service="api", ipaddresses=[])

    def test_json_round_trip_preserves_servers(self) -> None:
        member = MemberDeclaration(
            name="pool",
            listening_service="api",
            server_names=["a", "b"],
            ipaddresses=["10.0.1.1", "10.0.1.2"],
            options="check",
        )
        restored = MemberDeclaration.model_validate_json(member.model_dump_json())
        assert restored == member


class TestFragmentNames:
    def test_listen(self) -> None:
        assert listen_fragment_name("haproxy", "web") == "haproxy::web"

    def test_defaults(self) -> None:
        assert defaults_fragment_name("haproxy", "prod") == "haproxy::defaults::prod"

    def test_member(self) -> None:
        assert member_fragment_name("haproxy", "api", "web01") == "haproxy::api::web01"

    def test_sort_key_breaks_ties_by_name(self) -> None:
        common = {
            "kind": FragmentKind.LISTEN,
            "section": "s",
            "order_key": "20-s-00",
            "target_file": Path("/tmp/x.cfg"),
            "content": "",
        }
        a = Fragment(name="a", **common)
        b = Fragment(name="b", **common)
        assert sorted([b, a], key=lambda f: f.sort_key) == [a, b]

    def test_member_kind_owns_no_section(self) -> None:
        assert FragmentKind.LISTEN.owns_section
        assert FragmentKind.DEFAULTS.owns_section
        assert not FragmentKind.MEMBER.owns_section
