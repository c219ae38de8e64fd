"""Shared test fixtures — async SQLite in-memory DB, test client, in-memory repositories."""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-not-for-production"
os.environ["LOG_LEVEL"] = "WARNING"

import uuid  # noqa: E402
from collections.abc import AsyncGenerator, Sequence  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

# Import all models so metadata is populated
import tenantnotes.models  # noqa: F401, E402
from tenantnotes.core.database import get_session  # noqa: E402
from tenantnotes.core.security import hash_password  # noqa: E402
from tenantnotes.main import app  # noqa: E402
from tenantnotes.models.note import Note, NoteSortField, SortOrder  # noqa: E402
from tenantnotes.models.tenant import SubscriptionTier, Tenant  # noqa: E402
from tenantnotes.models.user import User, UserRole  # noqa: E402
from tenantnotes.services.isolation import NoteIsolationService, Principal  # noqa: E402

PASSWORD = "password"
_PASSWORD_HASH = hash_password(PASSWORD)


# ── In-memory repositories ───────────────────────────────────

class InMemoryTenantRepository:
    def __init__(self) -> None:
        self.rows: dict[uuid.UUID, Tenant] = {}

    async def get(self, tenant_id: uuid.UUID) -> Tenant | None:
        return self.rows.get(tenant_id)

    async def get_by_slug(self, slug: str) -> Tenant | None:
        return next((t for t in self.rows.values() if t.slug == slug), None)

    async def save(self, tenant: Tenant) -> Tenant:
        self.rows[tenant.id] = tenant
        return tenant


class InMemoryUserRepository:
    def __init__(self) -> None:
        self.rows: dict[uuid.UUID, User] = {}

    async def get(self, user_id: uuid.UUID) -> User | None:
        return self.rows.get(user_id)

    async def get_by_email(self, email: str) -> User | None:
        return next((u for u in self.rows.values() if u.email == email), None)

    async def get_many(self, tenant_id: uuid.UUID, user_ids) -> list[User]:
        ids = set(user_ids)
        return [u for u in self.rows.values() if u.id in ids and u.tenant_id == tenant_id]

    def put(self, user: User) -> User:
        self.rows[user.id] = user
        return user


class InMemoryNoteRepository:
    def __init__(self) -> None:
        self.rows: dict[uuid.UUID, Note] = {}

    def _active(self, tenant_id: uuid.UUID) -> list[Note]:
        return [n for n in self.rows.values() if n.tenant_id == tenant_id and n.is_active]

    async def get(self, tenant_id: uuid.UUID, note_id: uuid.UUID) -> Note | None:
        note = self.rows.get(note_id)
        if note is None or note.tenant_id != tenant_id or not note.is_active:
            return None
        return note

    async def get_any(self, note_id: uuid.UUID) -> Note | None:
        return self.rows.get(note_id)

    async def count_active(
        self, tenant_id: uuid.UUID, created_by: uuid.UUID | None = None
    ) -> int:
        notes = self._active(tenant_id)
        if created_by is not None:
            notes = [n for n in notes if n.created_by == created_by]
        return len(notes)

    async def list_active(
        self,
        tenant_id: uuid.UUID,
        *,
        offset: int,
        limit: int,
        sort: NoteSortField,
        order: SortOrder,
    ) -> Sequence[Note]:
        notes = sorted(
            self._active(tenant_id),
            key=lambda n: getattr(n, sort.value),
            reverse=order == SortOrder.DESC,
        )
        return notes[offset:offset + limit]

    async def add(self, note: Note) -> Note:
        assert note.id not in self.rows
        self.rows[note.id] = note
        return note

    async def save(self, note: Note) -> Note:
        self.rows[note.id] = note
        return note


class World:
    """Two tenants (acme, globex), each with an admin and a member."""

    def __init__(self) -> None:
        self.tenants = InMemoryTenantRepository()
        self.users = InMemoryUserRepository()
        self.notes = InMemoryNoteRepository()
        self.service = NoteIsolationService(self.tenants, self.users, self.notes)

        self.acme = Tenant(name="Acme Corporation", slug="acme")
        self.globex = Tenant(name="Globex Corporation", slug="globex")
        for tenant in (self.acme, self.globex):
            self.tenants.rows[tenant.id] = tenant

        self.acme_admin = self._user(self.acme, "admin@acme.test", UserRole.ADMIN)
        self.acme_member = self._user(self.acme, "user@acme.test", UserRole.MEMBER)
        self.acme_member2 = self._user(self.acme, "user2@acme.test", UserRole.MEMBER)
        self.globex_admin = self._user(self.globex, "admin@globex.test", UserRole.ADMIN)

    def _user(self, tenant: Tenant, email: str, role: UserRole) -> User:
        return self.users.put(User(
            tenant_id=tenant.id,
            email=email,
            password_hash=_PASSWORD_HASH,
            role=role,
        ))

    def principal(self, user: User) -> Principal:
        return Principal(user=user, tenant=self.tenants.rows[user.tenant_id])


@pytest.fixture
def world() -> World:
    return World()


# ── Database + HTTP client ───────────────────────────────────

@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as sess:
        yield sess
        await sess.rollback()


@pytest.fixture
async def seeded(session) -> dict[str, Tenant]:
    """Tenants acme and globex on the free plan, each with admin@ and user@ accounts."""
    tenants = {}
    for name, slug in (("Acme Corporation", "acme"), ("Globex Corporation", "globex")):
        tenant = Tenant(name=name, slug=slug, subscription=SubscriptionTier.FREE)
        session.add(tenant)
        await session.flush()
        session.add(User(
            tenant_id=tenant.id,
            email=f"admin@{slug}.test",
            password_hash=_PASSWORD_HASH,
            role=UserRole.ADMIN,
        ))
        session.add(User(
            tenant_id=tenant.id,
            email=f"user@{slug}.test",
            password_hash=_PASSWORD_HASH,
            role=UserRole.MEMBER,
        ))
        tenants[slug] = tenant
    await session.commit()
    return tenants


@pytest.fixture
async def client(session) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX async test client with DB session override."""

    async def _override_session():
        yield session

    app.dependency_overrides[get_session] = _override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def login(client: AsyncClient, email: str, password: str = PASSWORD) -> dict[str, str]:
    """Log in and return the Authorization header for the session."""
    resp = await client.post("/v1/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def login_as(client):
    async def _login(email: str, password: str = PASSWORD) -> dict[str, str]:
        return await login(client, email, password)
    return _login
