"""
Repository interfaces for tenants, users and notes.

The isolation engine depends on these protocols, never on a concrete store.
Production code uses the SQLModel implementations in ``repositories.sql``;
tests plug in in-memory fakes.
"""

import uuid
from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from tenantnotes.models.note import Note, NoteSortField, SortOrder
from tenantnotes.models.tenant import Tenant
from tenantnotes.models.user import User


@runtime_checkable
class TenantRepository(Protocol):
    async def get(self, tenant_id: uuid.UUID) -> Tenant | None:
        ...

    async def get_by_slug(self, slug: str) -> Tenant | None:
        ...

    async def save(self, tenant: Tenant) -> Tenant:
        ...


@runtime_checkable
class UserRepository(Protocol):
    async def get(self, user_id: uuid.UUID) -> User | None:
        ...

    async def get_by_email(self, email: str) -> User | None:
        ...

    async def get_many(
        self, tenant_id: uuid.UUID, user_ids: Iterable[uuid.UUID]
    ) -> Sequence[User]:
        """Users of ``tenant_id`` whose id is in ``user_ids``. Other tenants' users are skipped."""
        ...


@runtime_checkable
class NoteRepository(Protocol):
    """
    Note persistence. Every lookup takes the tenant id as a mandatory filter.
    """

    async def get(self, tenant_id: uuid.UUID, note_id: uuid.UUID) -> Note | None:
        """
        Return the active note with ``note_id`` inside ``tenant_id``.

        Soft-deleted notes and notes owned by other tenants come back as None.
        """
        ...

    async def get_any(self, note_id: uuid.UUID) -> Note | None:
        """Resolve a note by id regardless of tenant or active flag (audit only)."""
        ...

    async def count_active(
        self, tenant_id: uuid.UUID, created_by: uuid.UUID | None = None
    ) -> int:
        ...

    async def list_active(
        self,
        tenant_id: uuid.UUID,
        *,
        offset: int,
        limit: int,
        sort: NoteSortField,
        order: SortOrder,
    ) -> Sequence[Note]:
        ...

    async def add(self, note: Note) -> Note:
        ...

    async def save(self, note: Note) -> Note:
        ...
