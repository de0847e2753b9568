"""Key-value rows backing the persisted planner datasets."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar

from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KeyValueEntry(SQLModel, table=True):
    """One JSON document stored under a logical key."""

    __tablename__: ClassVar[str] = "kv_entry"

    key: str = Field(primary_key=True, max_length=64)
    value: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)
