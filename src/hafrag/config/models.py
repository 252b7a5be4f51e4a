"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, hafrag.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel

# --- hafrag.toml sections ---


class PathsConfig(BaseModel):
    """[paths] section.

    ``instance_config_file`` is formatted with ``{instance}`` for every
    instance other than the default one.
    """

    model_config = {"frozen": True}

    default_config_file: str = "/etc/haproxy/haproxy.cfg"
    instance_config_file: str = "/etc/haproxy-{instance}/haproxy-{instance}.cfg"


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    path: str = ".hafrag/store.db"


class ListenConfig(BaseModel):
    """[listen] section."""

    model_config = {"frozen": True}

    default_instance: str = "haproxy"
    default_ipaddress: str = "*"
    sort_options_alphabetic: bool = True


class AssemblyConfig(BaseModel):
    """[assembly] section."""

    model_config = {"frozen": True}

    require_nonempty: bool = False
    header: str = "# This file is managed by hafrag. Local changes will be overwritten."
