"""Application error taxonomy.

Every error raised by the isolation engine or the API layer derives from
``TenantNotesError``. Exception handlers registered in ``main.py`` turn them
into ``{"error": code, "message": ..., "details": ...}`` payloads with the
class's ``status_code``. Store-level failures never reach the client as-is.
"""

from typing import Any


class TenantNotesError(Exception):
    """Base exception for all application errors."""

    status_code: int = 500
    default_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(TenantNotesError):
    """Malformed or oversized input."""

    status_code = 400
    default_code = "validation_error"


class UnauthenticatedError(TenantNotesError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    default_code = "unauthenticated"

    def __init__(self, message: str = "Authentication required", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class ForbiddenError(TenantNotesError):
    """Authenticated, but not entitled to the resource or operation."""

    status_code = 403
    default_code = "forbidden"

    def __init__(self, message: str = "Access denied", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class QuotaExceededError(ForbiddenError):
    """The tenant's subscription does not admit another active note."""

    default_code = "quota_exceeded"

    def __init__(self, current: int, limit: int, subscription: str) -> None:
        super().__init__(
            "Notes limit reached for current subscription plan",
            details={
                "current": current,
                "limit": limit,
                "subscription": subscription,
                "hint": "Upgrade to Pro for unlimited notes",
            },
        )
        self.current = current
        self.limit = limit


class NotFoundError(TenantNotesError):
    """Resource absent, soft-deleted, or owned by another tenant.

    The three cases share one message so callers cannot test for the
    existence of other tenants' data.
    """

    status_code = 404
    default_code = "not_found"

    def __init__(self, resource: str = "resource") -> None:
        super().__init__(f"{resource.capitalize()} not found", details={"resource": resource})


class AlreadyProError(TenantNotesError):
    """Upgrade requested for a tenant that is already on the pro plan."""

    status_code = 400
    default_code = "already_pro"

    def __init__(self, slug: str) -> None:
        super().__init__("Tenant is already on Pro plan", details={"slug": slug})


class TenantMissingError(TenantNotesError):
    """A user's tenant reference does not resolve. Data-integrity fault."""

    status_code = 500
    default_code = "tenant_missing"

    def __init__(self, user_id: str, tenant_id: str) -> None:
        # Identifiers go to the log only, not to the response payload.
        super().__init__("Internal data integrity error")
        self.user_id = user_id
        self.tenant_id = tenant_id
