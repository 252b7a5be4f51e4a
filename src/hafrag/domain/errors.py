"""Exception hierarchy raised by the assembly core.

Every error carries an :class:`ErrorKind` so the service layer can turn it
into a ``ServiceError`` without inspecting the concrete class.
"""

from __future__ import annotations

from typing import Any, ClassVar

from hafrag.domain.types import ErrorKind


class HafragError(Exception):
    """Base class for all fatal assembly errors."""

    kind: ClassVar[ErrorKind] = ErrorKind.INVALID_DECLARATION

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail


class InvalidDeclaration(HafragError):
    """A declaration does not match its schema."""

    kind = ErrorKind.INVALID_DECLARATION


class ConflictingBinding(HafragError):
    """Both binding styles were populated on one listening service."""

    kind = ErrorKind.CONFLICTING_BINDING


class MissingBinding(HafragError):
    """No binding style was populated on a listening service."""

    kind = ErrorKind.MISSING_BINDING


class MalformedBind(HafragError):
    """The ``bind`` field is not an address-spec to options mapping."""

    kind = ErrorKind.MALFORMED_BIND


class NameConflict(HafragError):
    """Two fragments of different kinds claim the same name or section."""

    kind = ErrorKind.NAME_CONFLICT


class RenderError(HafragError):
    """The renderer failed to produce text for a declaration."""

    kind = ErrorKind.RENDER_ERROR


class EmptyTargetFile(HafragError):
    """A target file was required to be non-empty but has no fragments."""

    kind = ErrorKind.EMPTY_TARGET_FILE


class StoreError(HafragError):
    """The member store could not be opened, read or written."""

    kind = ErrorKind.STORE_ERROR
