"""Fragment kinds, listening modes, and error classification enums."""

from __future__ import annotations

from enum import StrEnum


class Mode(StrEnum):
    """HAProxy proxy modes accepted on a listening service."""

    TCP = "tcp"
    HTTP = "http"
    HEALTH = "health"


class FragmentKind(StrEnum):
    """The declaration kind a fragment was produced from."""

    LISTEN = "listen"
    DEFAULTS = "defaults"
    MEMBER = "member"

    @property
    def owns_section(self) -> bool:
        """Whether fragments of this kind claim their section name in a file.

        Members attach to the section of their listening service instead.
        """
        return self is not FragmentKind.MEMBER


class ErrorKind(StrEnum):
    """Stable error codes surfaced in ``ServiceError.code``."""

    CONFLICTING_BINDING = "CONFLICTING_BINDING"
    MISSING_BINDING = "MISSING_BINDING"
    MALFORMED_BIND = "MALFORMED_BIND"
    NAME_CONFLICT = "NAME_CONFLICT"
    RENDER_ERROR = "RENDER_ERROR"
    EMPTY_TARGET_FILE = "EMPTY_TARGET_FILE"
    INVALID_DECLARATION = "INVALID_DECLARATION"
    STORE_ERROR = "STORE_ERROR"
