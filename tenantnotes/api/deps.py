"""FastAPI dependencies for authentication and tenant resolution."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from tenantnotes.core.config import get_settings
from tenantnotes.core.database import get_session
from tenantnotes.core.exceptions import UnauthenticatedError
from tenantnotes.repositories.sql import SqlNoteRepository, SqlTenantRepository, SqlUserRepository
from tenantnotes.services.isolation import NoteIsolationService, Principal

# Missing headers are reported through UnauthenticatedError (401), not FastAPI's 403.
bearer_scheme = HTTPBearer(auto_error=False)

Session = Annotated[AsyncSession, Depends(get_session)]


def get_isolation_service(session: Session) -> NoteIsolationService:
    """Build a per-request engine bound to this request's session."""
    return NoteIsolationService(
        tenants=SqlTenantRepository(session),
        users=SqlUserRepository(session),
        notes=SqlNoteRepository(session),
        free_note_limit=get_settings().free_note_limit,
    )


Service = Annotated[NoteIsolationService, Depends(get_isolation_service)]


async def get_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    service: Service,
) -> Principal:
    """Resolve ``Authorization: Bearer <token>`` to the user and their tenant."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthenticatedError("Access denied. No token provided.")
    return await service.authenticate(credentials.credentials)


# Typed shorthand for use in route signatures
Auth = Annotated[Principal, Depends(get_principal)]
