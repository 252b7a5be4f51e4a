"""Collaborator contracts consumed by the assembly core.

The core never imports a concrete renderer or store; services receive
objects satisfying these protocols.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hafrag.domain.declarations import (
        DefaultsDeclaration,
        ListenDeclaration,
        MemberDeclaration,
    )
    from hafrag.infrastructure.store import ExportedMember


class Renderer(Protocol):
    """Turns a declaration into literal configuration text.

    Implementations raise :class:`~hafrag.domain.errors.RenderError`.
    """

    def render_listen(self, declaration: ListenDeclaration) -> str: ...

    def render_defaults(self, declaration: DefaultsDeclaration) -> str: ...

    def render_member(self, declaration: MemberDeclaration) -> str: ...


class MemberStore(Protocol):
    """Export/collect substrate for members declared on other hosts.

    ``collect_for`` is a blocking call; retries belong to the implementation.
    ``declare_many`` stores all of its members or none of them. Failures
    raise :class:`~hafrag.domain.errors.StoreError`.
    """

    def declare(self, member: MemberDeclaration, *, host: str) -> None: ...

    def declare_many(self, members: Sequence[MemberDeclaration], *, host: str) -> None: ...

    def collect_for(self, section_name: str) -> list[MemberDeclaration]: ...

    def list_members(self, section_name: str | None = None) -> list[ExportedMember]: ...

    def retract(self, section_name: str, name: str) -> bool: ...
