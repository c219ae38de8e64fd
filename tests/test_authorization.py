"""Role predicate."""

import uuid

import pytest

from tenantnotes.core.exceptions import ForbiddenError
from tenantnotes.models.user import User, UserRole
from tenantnotes.services.authorization import authorize, require_roles


def _user(role: UserRole) -> User:
    return User(tenant_id=uuid.uuid4(), email=f"{role}@x.test", password_hash="x", role=role)


def test_authorize_is_set_membership():
    admin, member = _user(UserRole.ADMIN), _user(UserRole.MEMBER)

    assert authorize(admin, {UserRole.ADMIN})
    assert not authorize(member, {UserRole.ADMIN})
    assert authorize(member, {UserRole.ADMIN, UserRole.MEMBER})
    assert not authorize(admin, set())


def test_require_roles_raises_forbidden():
    with pytest.raises(ForbiddenError) as exc_info:
        require_roles(_user(UserRole.MEMBER), {UserRole.ADMIN})

    assert exc_info.value.details == {"required_roles": ["admin"], "user_role": "member"}
    require_roles(_user(UserRole.ADMIN), {UserRole.ADMIN})
