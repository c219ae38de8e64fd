"""Import all models so SQLModel.metadata picks them up."""

from tenantnotes.models.note import (
    Note,
    NoteCreate,
    NoteRead,
    NoteSortField,
    NoteUpdate,
    SortOrder,
)
from tenantnotes.models.tenant import SubscriptionTier, Tenant, TenantDetail, TenantRead
from tenantnotes.models.user import User, UserRead, UserRef, UserRole

__all__ = [
    "Note",
    "NoteCreate",
    "NoteRead",
    "NoteSortField",
    "NoteUpdate",
    "SortOrder",
    "SubscriptionTier",
    "Tenant",
    "TenantDetail",
    "TenantRead",
    "User",
    "UserRead",
    "UserRef",
    "UserRole",
]
