"""
Backfill the default roles into every existing organization.

New organizations get the default roles when they are created; run this
after adding a role to DEFAULT_ROLES so older organizations get it too.
Existing roles are never modified.

Usage:
    python -m scripts.seed_roles
"""
import asyncio
from sqlalchemy import select

from app.core.database.engine import AsyncSessionLocal, init_db
from app.features.organizations.models import Organization
from app.features.permissions.defaults import DEFAULT_ROLES
from app.features.permissions.dependencies import seed_default_roles
from app.utils import get_logger


log = get_logger(__name__)


async def main():
    log.info("Starting role seeding...")
    await init_db()
    
    async with AsyncSessionLocal() as db:
        try:
            org_ids = (await db.scalars(select(Organization.id))).all()
            for org_id in org_ids:
                await seed_default_roles(db, org_id)
            await db.commit()
        except Exception as e:
            log.error("Error seeding roles: %s", e, exc_info=True)
            await db.rollback()
            raise
    
    log.info("Seeded %d organizations with roles: %s", len(org_ids), ", ".join(DEFAULT_ROLES))


if __name__ == "__main__":
    asyncio.run(main())
