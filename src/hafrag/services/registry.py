"""Fragment registries — one per target file, owned by one assembly run.

INVARIANT: Registrations into a registry are serialized. The section and
name checks are check-then-act against the registry's own state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hafrag.domain.errors import NameConflict

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from hafrag.domain.fragments import Fragment
    from hafrag.domain.types import FragmentKind

logger = logging.getLogger(__name__)


class FragmentRegistry:
    """Fragments of one target file, keyed by unique fragment name.

    Insertion order is irrelevant; the assembler orders by order key.
    """

    def __init__(self, target_file: Path) -> None:
        self.target_file = target_file
        self._fragments: dict[str, Fragment] = {}
        self._sections: dict[str, FragmentKind] = {}

    def __len__(self) -> int:
        return len(self._fragments)

    def __contains__(self, name: object) -> bool:
        return name in self._fragments

    def get(self, name: str) -> Fragment | None:
        return self._fragments.get(name)

    def section_owner(self, section: str) -> FragmentKind | None:
        """The kind that owns *section* in this file, if any."""
        return self._sections.get(section)

    def check_section(self, section: str, kind: FragmentKind) -> None:
        """Fail if *section* is owned by a kind other than *kind*.

        Raises:
            NameConflict: e.g. a ``defaults`` group and a ``listen`` both named
                ``web`` in the same file.
        """
        owner = self._sections.get(section)
        if owner is not None and owner is not kind:
            msg = (
                f"Section {section!r} is already declared as {owner.value} "
                f"in {self.target_file}; cannot declare it as {kind.value}"
            )
            raise NameConflict(
                msg,
                section=section,
                existing_kind=owner.value,
                kind=kind.value,
                target_file=str(self.target_file),
            )

    def register(self, fragment: Fragment) -> None:
        """Add *fragment*, replacing a previous fragment of the same name and kind.

        Raises:
            NameConflict: the name is held by a fragment of another kind, or
                the fragment's section is owned by another kind.
        """
        existing = self._fragments.get(fragment.name)
        if existing is not None and existing.kind is not fragment.kind:
            msg = (
                f"Fragment {fragment.name!r} already exists as {existing.kind.value} "
                f"in {self.target_file}; cannot register it as {fragment.kind.value}"
            )
            raise NameConflict(
                msg,
                name=fragment.name,
                existing_kind=existing.kind.value,
                kind=fragment.kind.value,
                target_file=str(self.target_file),
            )

        if fragment.kind.owns_section:
            self.check_section(fragment.section, fragment.kind)
            self._sections[fragment.section] = fragment.kind

        if existing is not None:
            logger.debug(
                "Replacing fragment %s (content %s)",
                fragment.name,
                "unchanged" if existing.content == fragment.content else "changed",
            )
        self._fragments[fragment.name] = fragment

    def fragments(self) -> list[Fragment]:
        """Snapshot of all registered fragments, unordered."""
        return list(self._fragments.values())


class RegistrySet:
    """All registries of one assembly run, keyed by target file.

    Created at run start and passed explicitly; there is no shared
    process-wide registry.
    """

    def __init__(self) -> None:
        self._registries: dict[Path, FragmentRegistry] = {}

    def for_file(self, target_file: Path) -> FragmentRegistry:
        """The registry for *target_file*, created on first use."""
        registry = self._registries.get(target_file)
        if registry is None:
            registry = FragmentRegistry(target_file)
            self._registries[target_file] = registry
        return registry

    def __iter__(self) -> Iterator[FragmentRegistry]:
        return iter(sorted(self._registries.values(), key=lambda r: str(r.target_file)))

    def __len__(self) -> int:
        return len(self._registries)
