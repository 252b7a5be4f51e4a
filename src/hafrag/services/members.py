"""MemberService — export members to the store and inspect what is there."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hafrag.domain.errors import HafragError
from hafrag.services._helpers import local_host
from hafrag.services.base import BaseService
from hafrag.services.contracts import ExportResultData, MemberListData, dump_validated
from hafrag.services.result import ServiceError, ServiceResult
from hafrag.services.validator import validate_member

if TYPE_CHECKING:
    from hafrag.infrastructure.manifest import Manifest

logger = logging.getLogger(__name__)


class MemberService(BaseService):
    """Declare, list, and retract exported members."""

    def export(self, manifest: Manifest, *, host: str | None = None) -> ServiceResult:
        """Declare every ``[[member]]`` of *manifest* into the store.

        All members are validated before the first one is declared and are
        then declared in one transaction, so an invalid manifest or a store
        failure leaves the store untouched.
        """
        op = "export"
        host = host or local_host()
        try:
            members = [
                validate_member(raw, listen_config=self._settings.listen)
                for raw in manifest.member
            ]
        except HafragError as exc:
            return ServiceResult.failure(op, exc)

        warnings: list[str] = []
        if not members:
            warnings.append(f"No [[member]] tables in {manifest.source}")
        else:
            try:
                self.store.declare_many(members, host=host)
            except HafragError as exc:
                return ServiceResult.failure(op, exc)
        logger.debug("Exported %d member(s) from %s", len(members), host)

        data = dump_validated(
            ExportResultData,
            {
                "source": manifest.source,
                "host": host,
                "count": len(members),
                "members": [f"{m.listening_service}/{m.name}" for m in members],
            },
        )
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def list_members(self, section: str | None = None) -> ServiceResult:
        """Stored members, optionally for one listening service."""
        try:
            items = [entry.to_dict() for entry in self.store.list_members(section)]
        except HafragError as exc:
            return ServiceResult.failure("list_members", exc)
        data = dump_validated(MemberListData, {"count": len(items), "items": items})
        return ServiceResult(ok=True, op="list_members", data=data)

    def retract(self, section: str, name: str) -> ServiceResult:
        """Remove one exported member."""
        try:
            retracted = self.store.retract(section, name)
        except HafragError as exc:
            return ServiceResult.failure("retract", exc)
        if not retracted:
            return ServiceResult(
                ok=False,
                op="retract",
                error=ServiceError(
                    code="NOT_FOUND",
                    message=f"No member {name!r} exported for {section!r}",
                    detail={"listening_service": section, "name": name},
                ),
            )
        return ServiceResult(
            ok=True,
            op="retract",
            data={"listening_service": section, "name": name},
        )
