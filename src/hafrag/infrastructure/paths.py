"""Target-file resolution for declarations.

An explicit ``config_file`` always wins. Otherwise the default instance
writes to the global config file and every named instance gets its own
instance-scoped file.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hafrag.config.models import ListenConfig, PathsConfig


def resolve_target_file(
    instance: str,
    override: Path | None,
    *,
    paths: PathsConfig,
    listen: ListenConfig,
) -> Path:
    """Resolve the absolute target file for *instance*.

    Examples (with default settings):
        - ``("haproxy", None)`` -> ``/etc/haproxy/haproxy.cfg``
        - ``("edge", None)`` -> ``/etc/haproxy-edge/haproxy-edge.cfg``
        - ``("edge", Path("/srv/lb.cfg"))`` -> ``/srv/lb.cfg``
    """
    if override is not None:
        return override
    if instance == listen.default_instance:
        return Path(paths.default_config_file)
    return Path(paths.instance_config_file.format(instance=instance))
