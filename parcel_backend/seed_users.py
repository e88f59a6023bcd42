"""
Database seeding script for the first admin.

Roles are never granted at sign-in and only an admin can grant admin, so a
fresh deployment needs one admin created out of band.

Usage:
    python -m parcel_backend.seed_users admin@example.com
"""

import asyncio
import sys

from sqlalchemy import select

from parcel_backend.app.db.session import AsyncSessionLocal, engine, Base
from parcel_backend.app.models.user import User
from parcel_backend.app.models.enums import UserRole


async def seed_admin(email: str):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("🌱 Starting admin seeding...")

        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user and user.role == UserRole.ADMIN:
            print(f"ℹ️  {email} is already an admin, skipping seeding")
            return

        if user:
            user.role = UserRole.ADMIN
            print(f"✅ Promoted {email} to admin")
        else:
            db.add(User(email=email, name="Admin", role=UserRole.ADMIN))
            print(f"✅ Created admin user {email}")

        await db.commit()

    await engine.dispose()


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python -m parcel_backend.seed_users <email>")
        sys.exit(1)
    asyncio.run(seed_admin(sys.argv[1]))
