"""SQLModel-backed repositories over an async session."""

import uuid
from collections.abc import Iterable, Sequence

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from tenantnotes.models.note import Note, NoteSortField, SortOrder
from tenantnotes.models.tenant import Tenant
from tenantnotes.models.user import User


class SqlRepository:
    """Common session handling for the concrete repositories."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _persist(self, obj):
        self._session.add(obj)
        await self._session.commit()
        await self._session.refresh(obj)
        return obj


class SqlTenantRepository(SqlRepository):
    async def get(self, tenant_id: uuid.UUID) -> Tenant | None:
        return await self._session.get(Tenant, tenant_id)

    async def get_by_slug(self, slug: str) -> Tenant | None:
        result = await self._session.execute(select(Tenant).where(Tenant.slug == slug))
        return result.scalar_one_or_none()

    async def save(self, tenant: Tenant) -> Tenant:
        return await self._persist(tenant)


class SqlUserRepository(SqlRepository):
    async def get(self, user_id: uuid.UUID) -> User | None:
        return await self._session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self._session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_many(
        self, tenant_id: uuid.UUID, user_ids: Iterable[uuid.UUID]
    ) -> Sequence[User]:
        ids = set(user_ids)
        if not ids:
            return []
        stmt = select(User).where(User.tenant_id == tenant_id, User.id.in_(ids))  # type: ignore[attr-defined]
        result = await self._session.execute(stmt)
        return result.scalars().all()


_SORT_COLUMNS = {
    NoteSortField.CREATED_AT: Note.created_at,
    NoteSortField.UPDATED_AT: Note.updated_at,
    NoteSortField.TITLE: Note.title,
}


class SqlNoteRepository(SqlRepository):
    async def get(self, tenant_id: uuid.UUID, note_id: uuid.UUID) -> Note | None:
        stmt = select(Note).where(
            Note.id == note_id,
            Note.tenant_id == tenant_id,
            Note.is_active.is_(True),  # type: ignore[union-attr]
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_any(self, note_id: uuid.UUID) -> Note | None:
        return await self._session.get(Note, note_id)

    async def count_active(
        self, tenant_id: uuid.UUID, created_by: uuid.UUID | None = None
    ) -> int:
        stmt = select(func.count()).select_from(Note).where(
            Note.tenant_id == tenant_id,
            Note.is_active.is_(True),  # type: ignore[union-attr]
        )
        if created_by is not None:
            stmt = stmt.where(Note.created_by == created_by)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def list_active(
        self,
        tenant_id: uuid.UUID,
        *,
        offset: int,
        limit: int,
        sort: NoteSortField,
        order: SortOrder,
    ) -> Sequence[Note]:
        column = _SORT_COLUMNS[sort]
        ordering = column.desc() if order == SortOrder.DESC else column.asc()  # type: ignore[attr-defined]
        stmt = (
            select(Note)
            .where(
                Note.tenant_id == tenant_id,
                Note.is_active.is_(True),  # type: ignore[union-attr]
            )
            .order_by(ordering, Note.id)
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def add(self, note: Note) -> Note:
        return await self._persist(note)

    async def save(self, note: Note) -> Note:
        return await self._persist(note)
