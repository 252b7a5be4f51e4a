"""AssemblyService — one manifest in, one ordered file per target out.

A run fails fast: the first fatal error aborts it and nothing is written.

Pipeline per declaration::

    validate -> resolve target file -> check section ownership
             -> derive order key -> render -> register
             -> (listen with collect_exported) collect members
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from hafrag.domain.errors import HafragError, InvalidDeclaration
from hafrag.domain.fragments import Fragment, defaults_fragment_name, listen_fragment_name
from hafrag.domain.order import defaults_order_key, derive_order_key
from hafrag.domain.types import FragmentKind
from hafrag.infrastructure.paths import resolve_target_file
from hafrag.infrastructure.writer import compose_file, write_config
from hafrag.services.assembler import assemble
from hafrag.services.base import BaseService
from hafrag.services.collector import Collector, build_member_fragment
from hafrag.services.contracts import AssembleResultData, dump_validated
from hafrag.services.registry import FragmentRegistry, RegistrySet
from hafrag.services.result import ServiceError, ServiceResult
from hafrag.services.validator import (
    ensure_section_available,
    validate_defaults,
    validate_listen,
    validate_member,
)

if TYPE_CHECKING:
    from hafrag.config.settings import HafragSettings
    from hafrag.domain.declarations import ListenDeclaration
    from hafrag.infrastructure.manifest import Manifest
    from hafrag.services.ports import MemberStore, Renderer

logger = logging.getLogger(__name__)


@dataclass
class AssemblyRun:
    """Registries and bookkeeping produced by :meth:`AssemblyService.build`."""

    registries: RegistrySet = field(default_factory=RegistrySet)
    warnings: list[str] = field(default_factory=list)
    collected: int = 0
    listens: dict[tuple[str, str], tuple[ListenDeclaration, FragmentRegistry]] = field(
        default_factory=dict
    )


class AssemblyService(BaseService):
    """Build registries from a manifest and materialize them."""

    def __init__(
        self,
        settings: HafragSettings,
        *,
        store: MemberStore | None = None,
        renderer: Renderer | None = None,
    ) -> None:
        super().__init__(settings, store=store)
        if renderer is None:
            from hafrag.infrastructure.renderer import TemplateRenderer

            renderer = TemplateRenderer.for_project(settings.project_root)
        self._renderer = renderer

    # ------------------------------------------------------------------
    # Core pipeline (raises HafragError)
    # ------------------------------------------------------------------

    def _target_file(self, instance: str, override: Path | None) -> Path:
        return resolve_target_file(
            instance,
            override,
            paths=self._settings.paths,
            listen=self._settings.listen,
        )

    def build(self, manifest: Manifest) -> AssemblyRun:
        """Process every declaration of *manifest* into a fresh :class:`AssemblyRun`.

        Raises:
            HafragError: the first validation, conflict, render or store error.
        """
        run = AssemblyRun()
        listen_config = self._settings.listen

        for raw in manifest.defaults:
            defaults = validate_defaults(raw, listen_config=listen_config)
            registry = run.registries.for_file(
                self._target_file(defaults.instance, defaults.config_file)
            )
            ensure_section_available(registry, defaults.name, FragmentKind.DEFAULTS)
            registry.register(
                Fragment(
                    name=defaults_fragment_name(defaults.instance, defaults.name),
                    kind=FragmentKind.DEFAULTS,
                    section=defaults.name,
                    order_key=defaults_order_key(defaults.name),
                    target_file=registry.target_file,
                    content=self._renderer.render_defaults(defaults),
                )
            )

        for raw in manifest.listen:
            listen, warnings = validate_listen(raw, listen_config=listen_config)
            run.warnings.extend(warnings)
            self._register_listen(run, listen)

        for raw in manifest.member:
            member = validate_member(raw, listen_config=listen_config)
            owner = run.listens.get((member.instance, member.listening_service))
            if owner is None:
                msg = (
                    f"member {member.name!r} refers to listening service "
                    f"{member.listening_service!r}, which is not declared for "
                    f"instance {member.instance!r}"
                )
                raise InvalidDeclaration(
                    msg,
                    member=member.name,
                    listening_service=member.listening_service,
                    instance=member.instance,
                )
            listen, registry = owner
            registry.register(
                build_member_fragment(
                    member,
                    renderer=self._renderer,
                    registry=registry,
                    instance=listen.instance,
                    defaults_group=listen.defaults,
                )
            )

        return run

    def _register_listen(self, run: AssemblyRun, listen: ListenDeclaration) -> None:
        registry = run.registries.for_file(self._target_file(listen.instance, listen.config_file))
        ensure_section_available(registry, listen.section, FragmentKind.LISTEN)
        registry.register(
            Fragment(
                name=listen_fragment_name(listen.instance, listen.section),
                kind=FragmentKind.LISTEN,
                section=listen.section,
                order_key=derive_order_key(listen.section, listen.defaults),
                target_file=registry.target_file,
                content=self._renderer.render_listen(listen),
            )
        )
        run.listens[(listen.instance, listen.section)] = (listen, registry)

        if listen.collect_exported:
            collected = Collector(self.store, self._renderer).collect(registry, listen)
            run.collected += len(collected)

    # ------------------------------------------------------------------
    # Service boundary (returns ServiceResult)
    # ------------------------------------------------------------------

    def assemble(
        self,
        manifest: Manifest,
        *,
        write: bool = True,
        require_nonempty: bool | None = None,
    ) -> ServiceResult:
        """Assemble every target file of *manifest*.

        With ``write=False`` nothing touches disk and each file's content is
        returned in the payload instead.
        """
        op = "assemble"
        if require_nonempty is None:
            require_nonempty = self._settings.assembly.require_nonempty

        warnings: list[str] = []
        try:
            run = self.build(manifest)
            warnings = run.warnings
            if require_nonempty and len(run.registries) == 0:
                run.registries.for_file(
                    self._target_file(self._settings.listen.default_instance, None)
                )
            rendered: list[tuple[FragmentRegistry, str]] = []
            for registry in run.registries:
                blocks = assemble(registry, require_nonempty=require_nonempty)
                content = compose_file(blocks, header=self._settings.assembly.header)
                rendered.append((registry, content))
        except HafragError as exc:
            logger.debug("Assembly of %s aborted: %s", manifest.source, exc.message)
            return ServiceResult.failure(op, exc, warnings=warnings)

        files: list[dict[str, Any]] = []
        for registry, content in rendered:
            entry: dict[str, Any] = {
                "path": str(registry.target_file),
                "fragments": len(registry),
                "written": False,
            }
            if write:
                try:
                    entry["written"] = write_config(registry.target_file, content)
                except OSError as exc:
                    return ServiceResult(
                        ok=False,
                        op=op,
                        warnings=warnings,
                        error=ServiceError(
                            code="WRITE_FAILED",
                            message=f"Cannot write {registry.target_file}: {exc}",
                            detail={"path": str(registry.target_file)},
                        ),
                    )
            else:
                entry["content"] = content
            files.append(entry)

        data = dump_validated(
            AssembleResultData,
            {
                "source": manifest.source,
                "fragment_count": sum(f["fragments"] for f in files),
                "collected": run.collected,
                "files": files,
            },
        )
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)
