"""Notes CRUD — every query scoped to the caller's own tenant."""

import uuid

from fastapi import APIRouter, Query, status
from pydantic import BaseModel

from tenantnotes.api.deps import Auth, Service
from tenantnotes.models.note import Note, NoteCreate, NoteRead, NoteSortField, NoteUpdate, SortOrder
from tenantnotes.models.user import User, UserRef
from tenantnotes.services.isolation import MAX_PAGE_SIZE, NoteStats, QuotaSummary

router = APIRouter(prefix="/notes", tags=["notes"])


# ── Schemas ──────────────────────────────────────────────────

class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_notes: int
    has_more: bool


class NoteListResponse(BaseModel):
    notes: list[NoteRead]
    pagination: Pagination
    tenant: QuotaSummary


class NoteDeleted(BaseModel):
    message: str
    note_id: uuid.UUID


def _to_read(note: Note, authors: dict[uuid.UUID, User]) -> NoteRead:
    editor = authors.get(note.updated_by) if note.updated_by else None
    return NoteRead(
        id=note.id,
        tenant_id=note.tenant_id,
        title=note.title,
        content=note.content,
        tags=note.tags,
        created_by=UserRef.model_validate(authors[note.created_by]),
        updated_by=UserRef.model_validate(editor) if editor else None,
        created_at=note.created_at,
        updated_at=note.updated_at,
    )


# ── Routes ───────────────────────────────────────────────────

@router.post("", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def create_note(body: NoteCreate, auth: Auth, service: Service) -> NoteRead:
    """Create a note. Free-tier tenants are capped at their active-note limit."""
    note = await service.create_note(auth, body)
    return _to_read(note, await service.note_authors(auth.tenant, [note]))


@router.get("", response_model=NoteListResponse)
async def list_notes(
    auth: Auth,
    service: Service,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=MAX_PAGE_SIZE),
    sort: NoteSortField = NoteSortField.CREATED_AT,
    order: SortOrder = SortOrder.DESC,
) -> NoteListResponse:
    result = await service.list_notes(auth.tenant, page=page, limit=limit, sort=sort, order=order)
    authors = await service.note_authors(auth.tenant, result.items)
    return NoteListResponse(
        notes=[_to_read(n, authors) for n in result.items],
        pagination=Pagination(
            current_page=result.page,
            total_pages=result.total_pages,
            total_notes=result.total,
            has_more=result.has_more,
        ),
        tenant=await service.quota_summary(auth.tenant, current_count=result.total),
    )


@router.get("/stats/overview", response_model=NoteStats)
async def notes_overview(auth: Auth, service: Service) -> NoteStats:
    """Tenant-wide and per-user note counts against the plan limit."""
    return await service.note_stats(auth)


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(note_id: uuid.UUID, auth: Auth, service: Service) -> NoteRead:
    note = await service.get_note(auth, note_id)
    return _to_read(note, await service.note_authors(auth.tenant, [note]))


@router.put("/{note_id}", response_model=NoteRead)
async def update_note(
    note_id: uuid.UUID,
    body: NoteUpdate,
    auth: Auth,
    service: Service,
) -> NoteRead:
    """Only the note's creator or a tenant admin may edit it."""
    note = await service.update_note(auth, note_id, body)
    return _to_read(note, await service.note_authors(auth.tenant, [note]))


@router.delete("/{note_id}", response_model=NoteDeleted)
async def delete_note(note_id: uuid.UUID, auth: Auth, service: Service) -> NoteDeleted:
    """Soft delete: the note stops counting toward the quota and disappears from listings."""
    note = await service.soft_delete(auth, note_id)
    return NoteDeleted(message="Note deleted successfully", note_id=note.id)
