"""Provision the demo tenants and users.

Run with ``python -m tenantnotes.seed``. Existing users and tenants are
removed first, so never point this at a production database.
"""

import asyncio
import logging

from sqlalchemy import delete

import tenantnotes.models  # noqa: F401
from tenantnotes.core.database import async_session_factory, init_db
from tenantnotes.core.security import hash_password
from tenantnotes.models.note import Note
from tenantnotes.models.tenant import SubscriptionTier, Tenant
from tenantnotes.models.user import User, UserRole

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password"

TENANTS = [
    ("Acme Corporation", "acme"),
    ("Globex Corporation", "globex"),
]


async def seed() -> None:
    await init_db()

    async with async_session_factory() as session:
        # Notes reference users and tenants, so they go first.
        for model in (Note, User, Tenant):
            await session.execute(delete(model))

        password_hash = hash_password(DEMO_PASSWORD)
        for name, slug in TENANTS:
            tenant = Tenant(name=name, slug=slug, subscription=SubscriptionTier.FREE)
            session.add(tenant)
            await session.flush()  # populate tenant.id

            for role, local in ((UserRole.ADMIN, "admin"), (UserRole.MEMBER, "user")):
                session.add(User(
                    tenant_id=tenant.id,
                    email=f"{local}@{slug}.test",
                    password_hash=password_hash,
                    role=role,
                ))
            logger.info("Seeded tenant %s (%s)", slug, tenant.id)

        await session.commit()

    logger.info(
        "Seeding complete: %d tenants on the free plan, password '%s' for every account",
        len(TENANTS),
        DEMO_PASSWORD,
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    asyncio.run(seed())
