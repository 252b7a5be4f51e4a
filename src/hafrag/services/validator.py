"""Validator — raw declaration tables to typed declarations.

Binding exclusivity is decided here, before a model exists, so a
:class:`~hafrag.domain.declarations.ListenDeclaration` can only ever hold
one binding variant. Section ownership is checked against the target
registry in :func:`ensure_section_available`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from hafrag.domain.binding import parse_binding
from hafrag.domain.declarations import DefaultsDeclaration, ListenDeclaration, MemberDeclaration
from hafrag.domain.errors import InvalidDeclaration

if TYPE_CHECKING:
    from hafrag.config.models import ListenConfig
    from hafrag.domain.types import FragmentKind
    from hafrag.services.registry import FragmentRegistry

logger = logging.getLogger(__name__)

_BINDING_FIELDS = ("ports", "ipaddress", "bind", "bind_options")


def _validate[T: BaseModel](model_cls: type[T], data: Mapping[str, Any], what: str) -> T:
    try:
        return model_cls.model_validate(dict(data))
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        ]
        msg = f"Invalid {what}: {'; '.join(errors)}"
        raise InvalidDeclaration(msg, declaration=what, errors=errors) from exc


def _bind_options(raw: Any, name: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return tuple(raw.split())
    if isinstance(raw, list) and all(isinstance(o, str) for o in raw):
        return tuple(raw)
    msg = f"bind_options of listen {name!r} must be a list of strings"
    raise InvalidDeclaration(msg, name=name)


def validate_listen(
    raw: Mapping[str, Any],
    *,
    listen_config: ListenConfig,
) -> tuple[ListenDeclaration, list[str]]:
    """Validate one ``[[listen]]`` table.

    Returns the declaration and any non-fatal warnings.

    Raises:
        ConflictingBinding: ``bind`` combined with ``ports`` or ``ipaddress``.
        MissingBinding: no binding field populated.
        MalformedBind: ``bind`` is not an address to options mapping.
        InvalidDeclaration: any other schema violation.
    """
    name = str(raw.get("name", ""))
    warnings: list[str] = []

    bind_options = _bind_options(raw.get("bind_options"), name)
    if bind_options:
        warning = f"listen {name!r}: bind_options is deprecated, use bind instead"
        logger.warning("Deprecated field bind_options on listen %s", name)
        warnings.append(warning)

    binding = parse_binding(
        ports=raw.get("ports"),
        ipaddress=raw.get("ipaddress"),
        bind=raw.get("bind"),
        bind_options=bind_options,
        default_ipaddress=listen_config.default_ipaddress,
    )

    data: dict[str, Any] = {
        "instance": listen_config.default_instance,
        "sort_options_alphabetic": listen_config.sort_options_alphabetic,
    }
    data.update({k: v for k, v in raw.items() if k not in _BINDING_FIELDS})
    data["binding"] = binding
    return _validate(ListenDeclaration, data, f"listen {name!r}"), warnings


def validate_defaults(
    raw: Mapping[str, Any],
    *,
    listen_config: ListenConfig,
) -> DefaultsDeclaration:
    """Validate one ``[[defaults]]`` table."""
    data: dict[str, Any] = {
        "instance": listen_config.default_instance,
        "sort_options_alphabetic": listen_config.sort_options_alphabetic,
        **raw,
    }
    return _validate(DefaultsDeclaration, data, f"defaults {raw.get('name', '')!r}")


def validate_member(
    raw: Mapping[str, Any],
    *,
    listen_config: ListenConfig,
) -> MemberDeclaration:
    """Validate one ``[[member]]`` table."""
    data: dict[str, Any] = {"instance": listen_config.default_instance, **raw}
    return _validate(MemberDeclaration, data, f"member {raw.get('name', '')!r}")


def ensure_section_available(
    registry: FragmentRegistry,
    section: str,
    kind: FragmentKind,
) -> None:
    """Section-ownership step of validation, run after target-file resolution.

    Raises:
        NameConflict: *section* is owned by a different kind in *registry*.
    """
    if kind.owns_section:
        registry.check_section(section, kind)
