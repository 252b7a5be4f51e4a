"""SQLAlchemy Core table definitions for the exported-member store."""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text, UniqueConstraint

metadata = MetaData()

exported_members = Table(
    "exported_members",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("listening_service", Text, nullable=False),
    Column("name", Text, nullable=False),
    Column("host", Text, nullable=False),
    Column("payload", Text, nullable=False),  # JSON MemberDeclaration
    Column("declared_at", Text, nullable=False),
    UniqueConstraint("listening_service", "name"),
)

Index("ix_exported_members_service", exported_members.c.listening_service)
