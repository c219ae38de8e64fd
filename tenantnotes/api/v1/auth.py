"""Authentication endpoints — login, current user, logout."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from tenantnotes.api.deps import Auth, Service
from tenantnotes.core.security import issue_access_token
from tenantnotes.models.tenant import TenantRead
from tenantnotes.models.user import UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


# ── Schemas ──────────────────────────────────────────────────

class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=6)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
    tenant: TenantRead


class MeResponse(BaseModel):
    user: UserRead
    tenant: TenantRead


class LogoutResponse(BaseModel):
    message: str


class TokenValidationResponse(BaseModel):
    valid: bool
    user: UserRead


# ── Routes ───────────────────────────────────────────────────

@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, service: Service) -> LoginResponse:
    """Authenticate with email + password, receive a JWT."""
    principal = await service.login(body.email, body.password)
    return LoginResponse(
        access_token=issue_access_token(principal.user.id),
        user=UserRead.model_validate(principal.user),
        tenant=TenantRead.model_validate(principal.tenant),
    )


@router.get("/me", response_model=MeResponse)
async def get_me(auth: Auth) -> MeResponse:
    """Return the current authenticated user and their tenant."""
    return MeResponse(
        user=UserRead.model_validate(auth.user),
        tenant=TenantRead.model_validate(auth.tenant),
    )


@router.post("/logout", response_model=LogoutResponse)
async def logout(auth: Auth) -> LogoutResponse:
    """Client-side logout. Tokens are stateless and stay valid until they expire."""
    return LogoutResponse(message="Logout successful")


@router.post("/validate-token", response_model=TokenValidationResponse)
async def validate_token(auth: Auth) -> TokenValidationResponse:
    return TokenValidationResponse(valid=True, user=UserRead.model_validate(auth.user))
