"""Collector — merge exported members into a listening service's registry.

The store is asked for everything declared under the section name. Members
of another instance are skipped, so two instances that each run a listening
service of the same name only collect their own members. Each remaining
member is rendered locally and registered next to the section block.
Re-collecting produces the same fragment names and content, so the
registry state does not change.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hafrag.domain.fragments import Fragment, member_fragment_name
from hafrag.domain.order import member_order_key
from hafrag.domain.types import FragmentKind

if TYPE_CHECKING:
    from hafrag.domain.declarations import ListenDeclaration, MemberDeclaration
    from hafrag.services.ports import MemberStore, Renderer
    from hafrag.services.registry import FragmentRegistry

logger = logging.getLogger(__name__)


def build_member_fragment(
    member: MemberDeclaration,
    *,
    renderer: Renderer,
    registry: FragmentRegistry,
    instance: str,
    defaults_group: str | None = None,
) -> Fragment:
    """Render *member* into a fragment positioned after its section block."""
    return Fragment(
        name=member_fragment_name(instance, member.listening_service, member.name),
        kind=FragmentKind.MEMBER,
        section=member.listening_service,
        order_key=member_order_key(member.listening_service, member.name, defaults_group),
        target_file=registry.target_file,
        content=renderer.render_member(member),
    )


class Collector:
    """Resolves collect requests against a :class:`MemberStore`."""

    def __init__(self, store: MemberStore, renderer: Renderer) -> None:
        self._store = store
        self._renderer = renderer

    def collect(self, registry: FragmentRegistry, listen: ListenDeclaration) -> list[Fragment]:
        """Register every member exported for *listen*'s section.

        Only members declared for *listen*'s instance are taken. Returns
        the collected fragments in store order. An empty list means no
        member has been declared yet and is not an error.

        Raises:
            NameConflict: a collected name is held by a local fragment of
                another kind.
            RenderError: a member could not be rendered.
        """
        members = [
            member
            for member in self._store.collect_for(listen.section)
            if member.instance == listen.instance
        ]
        fragments = [
            build_member_fragment(
                member,
                renderer=self._renderer,
                registry=registry,
                instance=listen.instance,
                defaults_group=listen.defaults,
            )
            for member in members
        ]
        for fragment in fragments:
            registry.register(fragment)
        logger.debug("Collected %d member(s) for %s", len(fragments), listen.section)
        return fragments
