"""Tenant model — top-level isolation boundary."""

import uuid
from enum import StrEnum

from sqlmodel import Field, SQLModel

from tenantnotes.models.base import TimestampMixin, new_uuid


class SubscriptionTier(StrEnum):
    FREE = "free"
    PRO = "pro"


class Tenant(TimestampMixin, SQLModel, table=True):
    __tablename__ = "tenants"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    name: str = Field(max_length=255, nullable=False)
    # Globally unique and immutable after provisioning
    slug: str = Field(max_length=100, unique=True, nullable=False, index=True)
    subscription: SubscriptionTier = Field(default=SubscriptionTier.FREE)


# ── Pydantic schemas ─────────────────────────────────────────

class TenantRead(SQLModel):
    id: uuid.UUID
    name: str
    slug: str
    subscription: SubscriptionTier


class TenantDetail(TenantRead):
    notes_limit: int | None
    current_notes_count: int
    can_create_notes: bool
