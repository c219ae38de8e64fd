"""Role-based authorization predicate.

Role checks never replace tenant checks: privileged operations such as a
subscription upgrade must pass both independently.
"""

from collections.abc import Collection

from tenantnotes.core.exceptions import ForbiddenError
from tenantnotes.models.user import User, UserRole


def authorize(user: User, required_roles: Collection[UserRole]) -> bool:
    return user.role in required_roles


def require_roles(user: User, required_roles: Collection[UserRole]) -> None:
    """Raise ForbiddenError unless the user holds one of ``required_roles``."""
    if not authorize(user, required_roles):
        raise ForbiddenError(
            "Access denied. Insufficient permissions.",
            details={
                "required_roles": sorted(str(r) for r in required_roles),
                "user_role": str(user.role),
            },
        )
