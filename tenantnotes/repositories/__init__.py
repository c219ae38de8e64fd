"""Tenant, user and note repositories."""

from tenantnotes.repositories.interfaces import NoteRepository, TenantRepository, UserRepository
from tenantnotes.repositories.sql import SqlNoteRepository, SqlTenantRepository, SqlUserRepository

__all__ = [
    "NoteRepository",
    "SqlNoteRepository",
    "SqlTenantRepository",
    "SqlUserRepository",
    "TenantRepository",
    "UserRepository",
]
