"""Shared service-layer helper functions."""

from __future__ import annotations

import socket
from datetime import UTC, datetime


def now_iso() -> str:
    """Current UTC time as standard ISO 8601 (for store audit columns)."""
    return datetime.now(UTC).isoformat()


def local_host() -> str:
    """Fully qualified name of this host, used as the default exporter."""
    return socket.getfqdn()
