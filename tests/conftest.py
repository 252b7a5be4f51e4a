"""Shared pytest fixtures and test helpers for hafrag tests."""

from __future__ import annotations

import logging
from collections.abc import Generator, Sequence
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from hafrag.config.models import PathsConfig
from hafrag.config.settings import HafragSettings
from hafrag.domain.declarations import MemberDeclaration
from hafrag.infrastructure.renderer import TemplateRenderer
from hafrag.infrastructure.store import ExportedMember, SqlMemberStore


class InMemoryMemberStore:
    """MemberStore double keyed like the SQL store, with call counting."""

    def __init__(self) -> None:
        self._members: dict[tuple[str, str], ExportedMember] = {}
        self.collect_calls: list[str] = []

    def declare(self, member: MemberDeclaration, *, host: str) -> None:
        self._members[(member.listening_service, member.name)] = ExportedMember(
            member=member, host=host, declared_at="2026-01-01T00:00:00+00:00"
        )

    def declare_many(self, members: Sequence[MemberDeclaration], *, host: str) -> None:
        for member in members:
            self.declare(member, host=host)

    def collect_for(self, section_name: str) -> list[MemberDeclaration]:
        self.collect_calls.append(section_name)
        return [entry.member for entry in self.list_members(section_name)]

    def list_members(self, section_name: str | None = None) -> list[ExportedMember]:
        return [
            self._members[key]
            for key in sorted(self._members)
            if section_name is None or key[0] == section_name
        ]

    def retract(self, section_name: str, name: str) -> bool:
        return self._members.pop((section_name, name), None) is not None


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer HAFRAG_* variables out of the tests."""
    monkeypatch.delenv("HAFRAG_CONFIG", raising=False)
    monkeypatch.delenv("HAFRAG_PROJECT_ROOT", raising=False)


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Generator[None]:
    """Drop handlers installed by ``configure_logging`` during CLI runs."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
    logging.getLogger("hafrag").setLevel(logging.NOTSET)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> HafragSettings:
    """Settings whose target files all live under ``tmp_path/etc``."""
    return HafragSettings.from_cli(
        project_root=tmp_path,
        paths=PathsConfig(
            default_config_file=str(tmp_path / "etc" / "haproxy.cfg"),
            instance_config_file=str(tmp_path / "etc" / "haproxy-{instance}.cfg"),
        ),
    )


@pytest.fixture
def renderer() -> TemplateRenderer:
    """Renderer backed by the packaged templates only."""
    return TemplateRenderer.for_project()


@pytest.fixture
def memory_store() -> InMemoryMemberStore:
    return InMemoryMemberStore()


@pytest.fixture
def sql_store(tmp_path: Path) -> Generator[SqlMemberStore]:
    """SQLite store in a temp directory."""
    store = SqlMemberStore.open(tmp_path / ".hafrag" / "store.db")
    try:
        yield store
    finally:
        store.close()


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """CWD becomes a temp project whose hafrag.toml points target files into it.

    Use via ``@pytest.mark.usefixtures("_isolated_project")``.
    """
    etc = tmp_path / "etc"
    (tmp_path / "hafrag.toml").write_text(
        "[paths]\n"
        f'default_config_file = "{etc / "haproxy.cfg"}"\n'
        f'instance_config_file = "{etc / "haproxy-{instance}.cfg"}"\n'
    )
    monkeypatch.chdir(tmp_path)
