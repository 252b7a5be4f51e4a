"""Materialize assembled fragment content to disk."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)


def compose_file(blocks: Sequence[str], *, header: str = "") -> str:
    """Join assembled blocks under an optional header comment."""
    parts: list[str] = []
    if header:
        parts.append(header if header.endswith("\n") else f"{header}\n")
    parts.extend(blocks)
    return "".join(parts)


def write_config(path: Path, content: str) -> bool:
    """Atomically replace *path* with *content*.

    Creates parent directories. Returns False when the file already held
    exactly *content* and was left untouched.
    """
    if path.is_file() and path.read_text(encoding="utf-8") == content:
        logger.debug("Unchanged: %s", path)
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        Path(tmp_name).replace(path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Wrote %s (%d bytes)", path, len(content))
    return True
