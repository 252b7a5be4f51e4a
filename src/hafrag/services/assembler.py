"""Assembler — deterministic ordering of a registry's fragments."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hafrag.domain.errors import EmptyTargetFile

if TYPE_CHECKING:
    from hafrag.domain.fragments import Fragment
    from hafrag.services.registry import FragmentRegistry


def ordered_fragments(registry: FragmentRegistry) -> list[Fragment]:
    """Fragments sorted by order key, ties broken by fragment name."""
    return sorted(registry.fragments(), key=lambda f: f.sort_key)


def assemble(registry: FragmentRegistry, *, require_nonempty: bool = False) -> list[str]:
    """Content blocks of *registry* in final file order, unaltered.

    Raises:
        EmptyTargetFile: *require_nonempty* is set and nothing is registered.
    """
    if require_nonempty and len(registry) == 0:
        msg = f"No fragments declared for {registry.target_file}"
        raise EmptyTargetFile(msg, target_file=str(registry.target_file))
    return [fragment.content for fragment in ordered_fragments(registry)]
