"""
Tenant isolation and subscription quota enforcement.

Sits between authentication and data access. Every note operation is scoped to
the tenant resolved from the authenticated user's own record; client-supplied
tenant slugs are only ever compared against it, never used to look data up.

Quota enforcement is check-then-act: the active-note count and the insert are
two separate store calls. Two concurrent creations against a free tenant that
sits exactly one below the limit can both pass the check, leaving the tenant
transiently over quota. Strict enforcement would need a single conditional
store operation.
"""

import logging
import math
import uuid
from collections.abc import Sequence
from dataclasses import dataclass

from pydantic import BaseModel

from tenantnotes.core.exceptions import (
    AlreadyProError,
    ForbiddenError,
    NotFoundError,
    QuotaExceededError,
    TenantMissingError,
    UnauthenticatedError,
    ValidationError,
)
from tenantnotes.core.security import InvalidToken, verify_access_token, verify_password
from tenantnotes.models.base import utcnow
from tenantnotes.models.note import Note, NoteCreate, NoteSortField, NoteUpdate, SortOrder
from tenantnotes.models.tenant import SubscriptionTier, Tenant, TenantDetail
from tenantnotes.models.user import User, UserRole, normalize_email
from tenantnotes.repositories.interfaces import NoteRepository, TenantRepository, UserRepository
from tenantnotes.services.authorization import require_roles

logger = logging.getLogger(__name__)

FREE_NOTE_LIMIT = 3
MAX_PAGE_SIZE = 100


class Principal:
    """Authenticated user plus the tenant resolved from their record."""

    __slots__ = ("user", "tenant")

    def __init__(self, user: User, tenant: Tenant) -> None:
        self.user = user
        self.tenant = tenant


@dataclass
class NotePage:
    items: Sequence[Note]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)

    @property
    def has_more(self) -> bool:
        return self.page * self.limit < self.total


# ── Response schemas ─────────────────────────────────────────

class QuotaSummary(BaseModel):
    subscription: SubscriptionTier
    notes_limit: int | None
    current_count: int


class SubscriptionStatus(BaseModel):
    plan: SubscriptionTier
    notes_limit: int | None
    current_notes_count: int
    can_create_notes: bool
    can_upgrade: bool


class NoteStats(BaseModel):
    total_notes: int
    user_notes: int
    notes_limit: int | None
    remaining_notes: int | None
    subscription: SubscriptionTier
    can_create_notes: bool


class NoteIsolationService:
    """Tenant-scoped note operations with quota and modify-rights checks."""

    def __init__(
        self,
        tenants: TenantRepository,
        users: UserRepository,
        notes: NoteRepository,
        free_note_limit: int = FREE_NOTE_LIMIT,
    ) -> None:
        self.tenants = tenants
        self.users = users
        self.notes = notes
        self.free_note_limit = free_note_limit

    # ── Identity ─────────────────────────────────────────────

    async def resolve_tenant(self, user: User) -> Tenant:
        tenant = await self.tenants.get(user.tenant_id)
        if tenant is None:
            logger.error(
                "Integrity fault: user %s references missing tenant %s",
                user.id,
                user.tenant_id,
            )
            raise TenantMissingError(user_id=str(user.id), tenant_id=str(user.tenant_id))
        return tenant

    async def authenticate(self, token: str) -> Principal:
        """Turn a bearer token into a Principal, or raise UnauthenticatedError."""
        verified = verify_access_token(token)
        if isinstance(verified, InvalidToken):
            raise UnauthenticatedError("Invalid token.", details={"reason": verified.reason})

        user = await self.users.get(verified.user_id)
        if user is None or not user.is_active:
            raise UnauthenticatedError("Invalid token. User not found or inactive.")

        return Principal(user=user, tenant=await self.resolve_tenant(user))

    async def login(self, email: str, password: str) -> Principal:
        """Check credentials. Unknown, inactive and wrong-password all look the same."""
        user = await self.users.get_by_email(normalize_email(email))
        if user is None or not user.is_active or not verify_password(password, user.password_hash):
            raise UnauthenticatedError("Invalid email or password")

        tenant = await self.resolve_tenant(user)
        logger.info("User %s logged in to tenant %s", user.id, tenant.slug)
        return Principal(user=user, tenant=tenant)

    # ── Decisions ────────────────────────────────────────────

    @staticmethod
    def authorize_tenant_access(tenant: Tenant, requested_slug: str) -> None:
        if tenant.slug != requested_slug:
            raise ForbiddenError("Access denied to this tenant")

    def notes_limit(self, tenant: Tenant) -> int | None:
        if tenant.subscription == SubscriptionTier.FREE:
            return self.free_note_limit
        return None

    def quota_check(self, tenant: Tenant, current_active_count: int) -> None:
        limit = self.notes_limit(tenant)
        if limit is not None and current_active_count >= limit:
            logger.info(
                "Quota exceeded for tenant %s (%d/%d)", tenant.slug, current_active_count, limit
            )
            raise QuotaExceededError(
                current=current_active_count,
                limit=limit,
                subscription=str(tenant.subscription),
            )

    @staticmethod
    def can_modify(note: Note, user: User) -> bool:
        return note.created_by == user.id or user.role == UserRole.ADMIN

    # ── Notes ────────────────────────────────────────────────

    async def create_note(self, principal: Principal, data: NoteCreate) -> Note:
        tenant = principal.tenant
        current = await self.notes.count_active(tenant.id)
        self.quota_check(tenant, current)

        note = Note(
            tenant_id=tenant.id,
            created_by=principal.user.id,
            updated_by=principal.user.id,
            title=data.title,
            content=data.content,
            tags=list(data.tags),
        )
        return await self.notes.add(note)

    async def get_note(self, principal: Principal, note_id: uuid.UUID) -> Note:
        note = await self.notes.get(principal.tenant.id, note_id)
        if note is None:
            raise NotFoundError("note")
        return note

    async def _get_modifiable(self, principal: Principal, note_id: uuid.UUID, verb: str) -> Note:
        note = await self.get_note(principal, note_id)
        if not self.can_modify(note, principal.user):
            raise ForbiddenError(f"Access denied. You can only {verb} your own notes.")
        return note

    async def update_note(
        self, principal: Principal, note_id: uuid.UUID, data: NoteUpdate
    ) -> Note:
        note = await self._get_modifiable(principal, note_id, "edit")

        for field, value in data.model_dump(exclude_none=True).items():
            setattr(note, field, value)
        note.updated_by = principal.user.id
        note.updated_at = utcnow()
        return await self.notes.save(note)

    async def soft_delete(self, principal: Principal, note_id: uuid.UUID) -> Note:
        note = await self._get_modifiable(principal, note_id, "delete")

        note.is_active = False
        note.updated_by = principal.user.id
        note.updated_at = utcnow()
        return await self.notes.save(note)

    async def note_authors(self, tenant: Tenant, notes: Sequence[Note]) -> dict[uuid.UUID, User]:
        """Creators and last editors of ``notes``, looked up inside ``tenant`` only."""
        ids = {n.created_by for n in notes} | {n.updated_by for n in notes if n.updated_by}
        users = await self.users.get_many(tenant.id, ids)
        return {u.id: u for u in users}

    async def list_notes(
        self,
        tenant: Tenant,
        page: int = 1,
        limit: int = 10,
        sort: NoteSortField = NoteSortField.CREATED_AT,
        order: SortOrder = SortOrder.DESC,
    ) -> NotePage:
        if page < 1:
            raise ValidationError("page must be at least 1", details={"field": "page"})
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError(
                f"limit must be between 1 and {MAX_PAGE_SIZE}", details={"field": "limit"}
            )

        items = await self.notes.list_active(
            tenant.id,
            offset=(page - 1) * limit,
            limit=limit,
            sort=sort,
            order=order,
        )
        total = await self.notes.count_active(tenant.id)
        return NotePage(items=items, total=total, page=page, limit=limit)

    async def quota_summary(self, tenant: Tenant, current_count: int | None = None) -> QuotaSummary:
        if current_count is None:
            current_count = await self.notes.count_active(tenant.id)
        return QuotaSummary(
            subscription=tenant.subscription,
            notes_limit=self.notes_limit(tenant),
            current_count=current_count,
        )

    async def note_stats(self, principal: Principal) -> NoteStats:
        tenant = principal.tenant
        total = await self.notes.count_active(tenant.id)
        own = await self.notes.count_active(tenant.id, created_by=principal.user.id)
        limit = self.notes_limit(tenant)
        return NoteStats(
            total_notes=total,
            user_notes=own,
            notes_limit=limit,
            remaining_notes=max(0, limit - total) if limit is not None else None,
            subscription=tenant.subscription,
            can_create_notes=limit is None or total < limit,
        )

    # ── Tenants ──────────────────────────────────────────────

    async def tenant_detail(self, principal: Principal, slug: str) -> TenantDetail:
        self.authorize_tenant_access(principal.tenant, slug)
        tenant = principal.tenant
        count = await self.notes.count_active(tenant.id)
        limit = self.notes_limit(tenant)
        return TenantDetail(
            id=tenant.id,
            name=tenant.name,
            slug=tenant.slug,
            subscription=tenant.subscription,
            notes_limit=limit,
            current_notes_count=count,
            can_create_notes=limit is None or count < limit,
        )

    async def subscription_status(self, principal: Principal, slug: str) -> SubscriptionStatus:
        self.authorize_tenant_access(principal.tenant, slug)
        tenant = principal.tenant
        count = await self.notes.count_active(tenant.id)
        limit = self.notes_limit(tenant)
        return SubscriptionStatus(
            plan=tenant.subscription,
            notes_limit=limit,
            current_notes_count=count,
            can_create_notes=limit is None or count < limit,
            can_upgrade=(
                tenant.subscription == SubscriptionTier.FREE
                and principal.user.role == UserRole.ADMIN
            ),
        )

    async def upgrade(self, tenant: Tenant) -> Tenant:
        """One-way free -> pro transition. Callers must check role and tenant first."""
        if tenant.subscription == SubscriptionTier.PRO:
            raise AlreadyProError(tenant.slug)

        tenant.subscription = SubscriptionTier.PRO
        tenant.updated_at = utcnow()
        tenant = await self.tenants.save(tenant)
        logger.info("Tenant %s upgraded to pro", tenant.slug)
        return tenant

    async def upgrade_tenant(self, principal: Principal, slug: str) -> Tenant:
        require_roles(principal.user, {UserRole.ADMIN})
        self.authorize_tenant_access(principal.tenant, slug)
        return await self.upgrade(principal.tenant)
