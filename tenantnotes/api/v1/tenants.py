"""Tenant endpoints — addressed by slug, checked against the caller's own tenant."""

from fastapi import APIRouter
from pydantic import BaseModel

from tenantnotes.api.deps import Auth, Service
from tenantnotes.models.tenant import TenantDetail, TenantRead
from tenantnotes.services.isolation import SubscriptionStatus

router = APIRouter(prefix="/tenants", tags=["tenants"])


class UpgradeResponse(BaseModel):
    message: str
    tenant: TenantRead
    notes_limit: int | None


@router.get("/{slug}", response_model=TenantDetail)
async def get_tenant(slug: str, auth: Auth, service: Service) -> TenantDetail:
    return await service.tenant_detail(auth, slug)


@router.post("/{slug}/upgrade", response_model=UpgradeResponse)
async def upgrade_tenant(slug: str, auth: Auth, service: Service) -> UpgradeResponse:
    """Move the tenant from free to pro. Admins only, own tenant only."""
    tenant = await service.upgrade_tenant(auth, slug)
    return UpgradeResponse(
        message="Tenant successfully upgraded to Pro plan",
        tenant=TenantRead.model_validate(tenant),
        notes_limit=service.notes_limit(tenant),
    )


@router.get("/{slug}/subscription", response_model=SubscriptionStatus)
async def get_subscription(slug: str, auth: Auth, service: Service) -> SubscriptionStatus:
    return await service.subscription_status(auth, slug)
