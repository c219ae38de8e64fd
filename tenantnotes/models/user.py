"""User model — belongs to exactly one tenant."""

import uuid
from enum import StrEnum

from sqlalchemy import event
from sqlmodel import Field, SQLModel

from tenantnotes.models.base import ActiveFlagMixin, TimestampMixin, new_uuid


class UserRole(StrEnum):
    ADMIN = "admin"
    MEMBER = "member"


class User(TimestampMixin, ActiveFlagMixin, SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    tenant_id: uuid.UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    email: str = Field(max_length=320, unique=True, nullable=False, index=True)
    password_hash: str = Field(nullable=False)
    role: UserRole = Field(default=UserRole.MEMBER)


def normalize_email(email: str) -> str:
    return email.strip().lower()


@event.listens_for(User, "before_insert")
@event.listens_for(User, "before_update")
def _normalize_email_on_write(_mapper, _connection, target: User) -> None:
    # Lookups at login use the same normalization
    target.email = normalize_email(target.email)


# ── Pydantic schemas ─────────────────────────────────────────

class UserRead(SQLModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    email: str
    role: UserRole
    is_active: bool


class UserRef(SQLModel):
    """Author summary embedded in note payloads."""
    id: uuid.UUID
    email: str
    role: UserRole
