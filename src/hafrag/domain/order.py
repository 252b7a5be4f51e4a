"""Order-key derivation.

Keys have the shape ``<band>-[<group>-]<section>-<suffix>`` and are compared
as plain strings. The two-digit band is a contract with the rest of the
configuration file:

- ``00``-``10``: global settings (not produced here)
- ``20``: standalone sections
- ``25``: defaults groups and the sections grouped on them
- ``30`` and up: other section kinds

A defaults group key (``25-prod``) is a prefix of every key grouped on it,
so the group block always precedes its sections.
"""

from __future__ import annotations

STANDALONE_BAND = "20"
GROUPED_BAND = "25"

SECTION_SUFFIX = "00"
MEMBER_SUFFIX = "01"


def derive_order_key(section_name: str, defaults_group: str | None = None) -> str:
    """Order key of a listening-service block.

    Examples:
        >>> derive_order_key("web")
        '20-web-00'
        >>> derive_order_key("web", "prod")
        '25-prod-web-00'
    """
    if defaults_group:
        return f"{GROUPED_BAND}-{defaults_group}-{section_name}-{SECTION_SUFFIX}"
    return f"{STANDALONE_BAND}-{section_name}-{SECTION_SUFFIX}"


def defaults_order_key(name: str) -> str:
    """Order key of a ``defaults`` block."""
    return f"{GROUPED_BAND}-{name}"


def member_order_key(
    section_name: str,
    member_name: str,
    defaults_group: str | None = None,
) -> str:
    """Order key of a member line, placed right after its section block.

    Examples:
        >>> member_order_key("api", "web01")
        '20-api-01-web01'
        >>> member_order_key("api", "web01", "prod")
        '25-prod-api-01-web01'
    """
    section_key = derive_order_key(section_name, defaults_group)
    base = section_key.removesuffix(f"-{SECTION_SUFFIX}")
    return f"{base}-{MEMBER_SUFFIX}-{member_name}"
