"""Jinja2-backed renderer for listen, defaults, and member fragments.

Line assembly (bind specs, option expansion, server lines) happens here;
the templates only lay the lines out, so an override can change layout
without re-implementing option handling.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import TemplateError

from hafrag.domain.binding import BindBinding
from hafrag.domain.errors import RenderError
from hafrag.infrastructure.templates import build_template_environment

if TYPE_CHECKING:
    from jinja2 import Environment

    from hafrag.domain.declarations import (
        DefaultsDeclaration,
        ListenDeclaration,
        MemberDeclaration,
        OptionValue,
    )

logger = logging.getLogger(__name__)


def option_lines(options: Mapping[str, OptionValue], *, alphabetic: bool = True) -> list[str]:
    """Expand an options mapping into ``key value`` lines.

    List values produce one line per element, in list order. Empty string
    values render the bare key.

    Examples:
        >>> option_lines({"option": ["tcplog", "redispatch"], "balance": "roundrobin"})
        ['balance roundrobin', 'option tcplog', 'option redispatch']
    """
    keys = sorted(options) if alphabetic else list(options)
    lines: list[str] = []
    for key in keys:
        value = options[key]
        values = value if isinstance(value, list) else [value]
        for item in values:
            text = str(item)
            lines.append(f"{key} {text}" if text else key)
    return lines


def bind_lines(declaration: ListenDeclaration) -> list[str]:
    """``bind`` arguments for a listening service, one entry per line."""
    binding = declaration.binding
    if isinstance(binding, BindBinding):
        return [" ".join([address, *opts]) for address, opts in binding.addresses.items()]
    return [
        " ".join([f"{binding.ipaddress}:{port}", *binding.bind_options])
        for port in binding.ports
    ]


def server_lines(declaration: MemberDeclaration) -> list[str]:
    """``server`` arguments for a member, one per server and port."""
    ports: tuple[str | None, ...] = declaration.ports or (None,)
    lines: list[str] = []
    for server_name, ipaddress in declaration.servers():
        for port in ports:
            address = f"{ipaddress}:{port}" if port is not None else ipaddress
            parts = [server_name, address]
            if declaration.define_cookies:
                parts.extend(["cookie", server_name])
            parts.extend(declaration.options)
            lines.append(" ".join(parts))
    return lines


class TemplateRenderer:
    """Render declarations through the ``fragments`` template group."""

    def __init__(self, env: Environment) -> None:
        self._env = env

    @classmethod
    def for_project(cls, project_root: Path | None = None) -> TemplateRenderer:
        """Renderer honoring ``.hafrag/templates`` overrides under *project_root*."""
        return cls(build_template_environment("fragments", project_root=project_root))

    def render_listen(self, declaration: ListenDeclaration) -> str:
        return self._render(
            "listen.j2",
            subject=declaration.section,
            section=declaration.section,
            bind_lines=bind_lines(declaration),
            mode=declaration.mode.value if declaration.mode else None,
            option_lines=option_lines(
                declaration.options, alphabetic=declaration.sort_options_alphabetic
            ),
        )

    def render_defaults(self, declaration: DefaultsDeclaration) -> str:
        return self._render(
            "defaults.j2",
            subject=declaration.name,
            name=declaration.name,
            option_lines=option_lines(
                declaration.options, alphabetic=declaration.sort_options_alphabetic
            ),
        )

    def render_member(self, declaration: MemberDeclaration) -> str:
        return self._render(
            "member.j2",
            subject=f"{declaration.listening_service}/{declaration.name}",
            server_lines=server_lines(declaration),
        )

    def _render(self, template_name: str, *, subject: str, **context: Any) -> str:
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except TemplateError as exc:
            logger.debug("Template %s failed for %s", template_name, subject, exc_info=True)
            msg = f"Failed to render {template_name} for {subject!r}: {exc}"
            raise RenderError(msg, template=template_name, subject=subject) from exc
