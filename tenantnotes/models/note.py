"""Note model — tenant-scoped text note with soft delete."""

import uuid
from datetime import datetime
from enum import StrEnum

from pydantic import field_validator, model_validator
from sqlalchemy import JSON, Index, Text
from sqlmodel import Column, Field, SQLModel

from tenantnotes.models.base import ActiveFlagMixin, TimestampMixin, new_uuid
from tenantnotes.models.user import UserRef

TITLE_MAX_LENGTH = 255
CONTENT_MAX_LENGTH = 10_000


class Note(TimestampMixin, ActiveFlagMixin, SQLModel, table=True):
    __tablename__ = "notes"
    __table_args__ = (
        Index("ix_notes_tenant_created_at", "tenant_id", "created_at"),
        Index("ix_notes_tenant_created_by", "tenant_id", "created_by"),
        Index("ix_notes_tenant_is_active", "tenant_id", "is_active"),
    )

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    # Set once at creation, never reassigned
    tenant_id: uuid.UUID = Field(foreign_key="tenants.id", nullable=False)
    created_by: uuid.UUID = Field(foreign_key="users.id", nullable=False)
    updated_by: uuid.UUID | None = Field(default=None, foreign_key="users.id")

    title: str = Field(max_length=TITLE_MAX_LENGTH, nullable=False)
    content: str = Field(sa_column=Column(Text, nullable=False))
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))


def normalize_tags(tags: list[str]) -> list[str]:
    """Trim, lowercase and de-duplicate tags, keeping first-seen order."""
    seen: dict[str, None] = {}
    for tag in tags:
        cleaned = tag.strip().lower()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


# ── Pydantic schemas ─────────────────────────────────────────

class NoteSortField(StrEnum):
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    TITLE = "title"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


class NoteCreate(SQLModel):
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str = Field(min_length=1, max_length=CONTENT_MAX_LENGTH)
    tags: list[str] = Field(default_factory=list)

    @field_validator("title", "content", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        return normalize_tags(value)


class NoteUpdate(SQLModel):
    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str | None = Field(default=None, min_length=1, max_length=CONTENT_MAX_LENGTH)
    tags: list[str] | None = None

    @field_validator("title", "content", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str] | None) -> list[str] | None:
        return normalize_tags(value) if value is not None else None

    @model_validator(mode="after")
    def _at_least_one_field(self) -> "NoteUpdate":
        if not self.model_dump(exclude_none=True):
            raise ValueError("At least one field must be provided")
        return self


class NoteRead(SQLModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    title: str
    content: str
    tags: list[str]
    created_by: UserRef
    updated_by: UserRef | None
    created_at: datetime
    updated_at: datetime
