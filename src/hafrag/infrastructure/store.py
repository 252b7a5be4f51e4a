"""SqlMemberStore — exported members shared between hosts.

Hosts *declare* the members they run for a listening service; the host
that owns the listening service *collects* them. The store is keyed by
``(listening_service, name)`` so re-declaring a member replaces it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from hafrag.domain.declarations import MemberDeclaration
from hafrag.domain.errors import InvalidDeclaration, StoreError
from hafrag.infrastructure.database.engine import init_database
from hafrag.infrastructure.database.schema import exported_members
from hafrag.services._helpers import now_iso

if TYPE_CHECKING:
    from sqlalchemy import Row
    from sqlalchemy.dialects.sqlite import Insert
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportedMember:
    """A stored member together with where and when it was declared."""

    member: MemberDeclaration
    host: str
    declared_at: str

    def to_dict(self) -> dict[str, str]:
        return {
            "listening_service": self.member.listening_service,
            "name": self.member.name,
            "host": self.host,
            "declared_at": self.declared_at,
        }


class SqlMemberStore:
    """SQLite-backed implementation of the ``MemberStore`` contract.

    Database failures (an unreadable file, a lock held past the busy
    timeout) surface as :class:`StoreError`.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def open(cls, db_path: Path) -> SqlMemberStore:
        """Open (creating if needed) the store at *db_path*."""
        with _store_errors("open", db_path=str(db_path)):
            try:
                return cls(init_database(db_path))
            except OSError as exc:
                msg = f"Cannot create member store at {db_path}: {exc}"
                raise StoreError(msg, db_path=str(db_path)) from exc

    def close(self) -> None:
        self._engine.dispose()

    def declare(self, member: MemberDeclaration, *, host: str) -> None:
        """Insert or replace *member* under its listening service."""
        self.declare_many([member], host=host)

    def declare_many(self, members: Sequence[MemberDeclaration], *, host: str) -> None:
        """Declare *members* in one transaction; a failure stores none of them."""
        if not members:
            return
        declared_at = now_iso()
        with _store_errors("declare"), self._engine.begin() as conn:
            for member in members:
                conn.execute(_upsert(member, host=host, declared_at=declared_at))
        for member in members:
            logger.debug(
                "Declared member %s/%s from %s", member.listening_service, member.name, host
            )

    def collect_for(self, section_name: str) -> list[MemberDeclaration]:
        """All members declared for *section_name*, ordered by name."""
        return [entry.member for entry in self.list_members(section_name)]

    def list_members(self, section_name: str | None = None) -> list[ExportedMember]:
        """Stored members, optionally restricted to one listening service."""
        stmt = select(exported_members).order_by(
            exported_members.c.listening_service, exported_members.c.name
        )
        if section_name is not None:
            stmt = stmt.where(exported_members.c.listening_service == section_name)
        with _store_errors("read"), self._engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [self._to_exported(row) for row in rows]

    def retract(self, section_name: str, name: str) -> bool:
        """Remove one member. Returns False if it was not declared."""
        stmt = delete(exported_members).where(
            exported_members.c.listening_service == section_name,
            exported_members.c.name == name,
        )
        with _store_errors("retract"), self._engine.begin() as conn:
            result = conn.execute(stmt)
        return result.rowcount > 0

    @staticmethod
    def _to_exported(row: Row) -> ExportedMember:
        try:
            member = MemberDeclaration.model_validate_json(row.payload)
        except ValidationError as exc:
            msg = f"Stored member {row.listening_service}/{row.name} is invalid"
            raise InvalidDeclaration(
                msg, listening_service=row.listening_service, name=row.name
            ) from exc
        return ExportedMember(member=member, host=row.host, declared_at=row.declared_at)


def _upsert(member: MemberDeclaration, *, host: str, declared_at: str) -> Insert:
    stmt = sqlite_insert(exported_members).values(
        listening_service=member.listening_service,
        name=member.name,
        host=host,
        payload=member.model_dump_json(),
        declared_at=declared_at,
    )
    return stmt.on_conflict_do_update(
        index_elements=["listening_service", "name"],
        set_={k: stmt.excluded[k] for k in ("host", "payload", "declared_at")},
    )


@contextmanager
def _store_errors(action: str, **detail: str) -> Iterator[None]:
    """Re-raise SQLAlchemy failures as :class:`StoreError`."""
    try:
        yield
    except SQLAlchemyError as exc:
        reason = exc.orig if isinstance(exc, DBAPIError) and exc.orig is not None else exc
        msg = f"Member store {action} failed: {reason}"
        raise StoreError(msg, action=action, **detail) from exc
