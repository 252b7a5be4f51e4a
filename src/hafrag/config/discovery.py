"""Config file discovery.

Walk-up finder locates hafrag.toml the way git finds .git/. The directory
holding the file becomes the project root, which anchors the member store
and template overrides. HAFRAG_CONFIG and --config take precedence.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "hafrag.toml"
CONFIG_ENV_VAR = "HAFRAG_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for hafrag.toml.

    Returns the path to the config file, or None if not found.
    An HAFRAG_CONFIG pointing at a missing file disables discovery.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_project_root(config_path: Path | None, default: Path | None = None) -> Path:
    """Project root: the config file's directory, else *default* or the cwd."""
    if config_path is None:
        return default or Path.cwd()
    return config_path.resolve().parent
