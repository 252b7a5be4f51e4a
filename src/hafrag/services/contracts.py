"""Typed payload contracts for service and CLI boundaries.

These models validate operation payload shapes before they leave the
service layer so key regressions fail fast in tests.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


def dump_validated[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python", exclude_none=True)


class AssembledFile(BaseModel):
    """One target file produced by an assembly run."""

    path: str
    fragments: int
    written: bool
    content: str | None = None


class AssembleResultData(BaseModel):
    """Payload contract for ``AssemblyService.assemble``."""

    source: str
    fragment_count: int
    collected: int
    files: list[AssembledFile]


class ExportResultData(BaseModel):
    """Payload contract for ``MemberService.export``."""

    source: str
    host: str
    count: int
    members: list[str]


class MemberItem(BaseModel):
    """One stored member row."""

    listening_service: str
    name: str
    host: str
    declared_at: str


class MemberListData(BaseModel):
    """Payload contract for ``MemberService.list_members``."""

    count: int
    items: list[MemberItem]
