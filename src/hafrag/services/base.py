"""BaseService — shared foundation for hafrag services.

Every service receives the run's :class:`HafragSettings`. The member store
is opened lazily so commands that never collect or export never touch the
database file; :meth:`BaseService.close` releases a store the service
opened itself.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hafrag.config.settings import HafragSettings
    from hafrag.infrastructure.store import SqlMemberStore
    from hafrag.services.ports import MemberStore

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class AssemblyService(BaseService):
            def assemble(self, manifest: Manifest) -> ServiceResult:
                ...
                members = self.store.collect_for("api")

    An injected store belongs to the caller and is left open by
    :meth:`close`.
    """

    def __init__(self, settings: HafragSettings, *, store: MemberStore | None = None) -> None:
        self._settings = settings
        self._store = store
        self._opened: SqlMemberStore | None = None

    @property
    def store(self) -> MemberStore:
        """The member store (opened on first access).

        Raises:
            StoreError: the store file cannot be opened.
        """
        if self._store is None:
            from hafrag.infrastructure.store import SqlMemberStore

            logger.debug("Opening member store at %s", self._settings.store_path)
            self._opened = SqlMemberStore.open(self._settings.store_path)
            self._store = self._opened
        return self._store

    def close(self) -> None:
        """Dispose of the store engine if this service opened it."""
        if self._opened is not None:
            self._opened.close()
            self._opened = None
            self._store = None
