"""Binding styles for a listening service.

A listening service binds either through ``ports`` on one ``ipaddress``
or through an explicit ``bind`` mapping of address specs to options.
The two styles are modelled as a tagged variant so a declaration can
never carry both or neither.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from hafrag.domain.errors import (
    ConflictingBinding,
    InvalidDeclaration,
    MalformedBind,
    MissingBinding,
)


class PortsBinding(BaseModel):
    """``bind <ipaddress>:<port>`` for every port."""

    model_config = {"frozen": True}

    style: Literal["ports"] = "ports"
    ipaddress: str
    ports: tuple[str, ...] = ()
    bind_options: tuple[str, ...] = ()


class BindBinding(BaseModel):
    """``bind <address> <options>`` for every address spec."""

    model_config = {"frozen": True}

    style: Literal["bind"] = "bind"
    addresses: dict[str, tuple[str, ...]]


Binding = Annotated[PortsBinding | BindBinding, Field(discriminator="style")]


def normalize_ports(ports: Any) -> tuple[str, ...]:
    """Normalize a port spec to a tuple of strings.

    Accepts a comma-separated string or a list of strings/ints. Ranges
    such as ``"8000-8010"`` pass through untouched.

    Examples:
        >>> normalize_ports("80, 443")
        ('80', '443')
        >>> normalize_ports([80, "8000-8010"])
        ('80', '8000-8010')
    """
    if ports is None:
        return ()
    if isinstance(ports, str):
        items: Sequence[Any] = ports.split(",")
    elif isinstance(ports, Sequence):
        items = ports
    else:
        msg = f"ports must be a string or a list, got {type(ports).__name__}"
        raise InvalidDeclaration(msg, ports=repr(ports))

    result: list[str] = []
    for item in items:
        if isinstance(item, bool) or not isinstance(item, (str, int)):
            msg = f"Invalid port entry: {item!r}"
            raise InvalidDeclaration(msg, ports=repr(ports))
        text = str(item).strip()
        if text:
            result.append(text)
    return tuple(result)


def _options_tuple(value: Any) -> tuple[str, ...] | None:
    """Coerce bind options to a tuple, or None when the shape is wrong."""
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(value.split())
    if isinstance(value, Sequence) and all(isinstance(v, str) for v in value):
        return tuple(value)
    return None


def parse_bind(bind: Any) -> dict[str, tuple[str, ...]]:
    """Validate and normalize a ``bind`` mapping.

    Raises:
        MalformedBind: *bind* is not a mapping of address strings to a
            string or a list of strings.
    """
    if not isinstance(bind, Mapping):
        msg = f"bind must be a mapping of address to options, got {type(bind).__name__}"
        raise MalformedBind(msg, bind=repr(bind))

    addresses: dict[str, tuple[str, ...]] = {}
    for address, options in bind.items():
        if not isinstance(address, str) or not address.strip():
            msg = f"bind address must be a non-empty string, got {address!r}"
            raise MalformedBind(msg, bind=repr(bind))
        parsed = _options_tuple(options)
        if parsed is None:
            msg = f"bind options for {address!r} must be a string or a list of strings"
            raise MalformedBind(msg, address=address, options=repr(options))
        addresses[address.strip()] = parsed
    return addresses


def _populated(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (Mapping, list, tuple)):
        return len(value) > 0
    return True


def parse_binding(
    *,
    ports: Any = None,
    ipaddress: str | None = None,
    bind: Any = None,
    bind_options: Sequence[str] = (),
    default_ipaddress: str = "*",
) -> PortsBinding | BindBinding:
    """Build the binding variant from raw declaration fields.

    ``ipaddress`` values such as ``""``, ``"*"`` and ``"0.0.0.0"`` all mean
    "bind all" and are passed through as given. A ports binding without an
    ``ipaddress`` binds on *default_ipaddress*.

    Raises:
        ConflictingBinding: ``bind`` is combined with ``ports`` or ``ipaddress``.
        MissingBinding: none of ``ports``, ``ipaddress``, ``bind`` is set.
        MalformedBind: ``bind`` has the wrong shape. Only an empty mapping
            counts as an unset ``bind``; an empty list is still malformed.
    """
    if bind is not None and not isinstance(bind, Mapping):
        parse_bind(bind)
    has_bind = _populated(bind)
    has_ports = _populated(ports) if not isinstance(ports, str) else bool(ports.strip())
    has_ip = ipaddress is not None

    if has_bind and has_ports:
        msg = "ports and bind are mutually exclusive"
        raise ConflictingBinding(msg, ports=repr(ports), bind=repr(bind))
    if has_bind and has_ip:
        msg = "ipaddress and bind are mutually exclusive"
        raise ConflictingBinding(msg, ipaddress=ipaddress, bind=repr(bind))
    if not (has_bind or has_ports or has_ip):
        msg = "one of ports, ipaddress or bind is required"
        raise MissingBinding(msg)

    if has_bind:
        return BindBinding(addresses=parse_bind(bind))
    if ipaddress is not None and not isinstance(ipaddress, str):
        msg = f"ipaddress must be a string, got {type(ipaddress).__name__}"
        raise InvalidDeclaration(msg, ipaddress=repr(ipaddress))
    return PortsBinding(
        ipaddress=default_ipaddress if ipaddress is None else ipaddress,
        ports=normalize_ports(ports),
        bind_options=tuple(bind_options),
    )
