"""V1 API router aggregation."""

from fastapi import APIRouter

from tenantnotes.api.v1.auth import router as auth_router
from tenantnotes.api.v1.notes import router as notes_router
from tenantnotes.api.v1.tenants import router as tenants_router

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(auth_router)
v1_router.include_router(notes_router)
v1_router.include_router(tenants_router)
