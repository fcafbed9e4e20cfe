"""
Database setup script - tables plus demo accounts
"""
import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.database import engine, create_tables
from backend.models.user import User, UserRole
from backend.api.auth import get_password_hash

DEMO_USERS = [
    {"email": "admin@smartmeal.org", "role": UserRole.ADMIN},
    {
        "email": "kitchen@spiceroute.in",
        "role": UserRole.RESTAURANT,
        "restaurant_name": "Spice Route",
        "gst_number": "29ABCDE1234F1Z5",
    },
    {"email": "hello@helpinghands.org", "role": UserRole.NGO, "aadhar_number": "1234-5678-9012"},
]
DEMO_PASSWORD = "smartmeal123"


async def setup_database():
    """Create tables and seed demo users (skips existing emails)"""
    print("Creating database tables...")
    await create_tables()
    print("Tables created")

    AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession)
    async with AsyncSessionLocal() as session:
        for fields in DEMO_USERS:
            existing = await session.execute(select(User).where(User.email == fields["email"]))
            if existing.scalar_one_or_none():
                continue
            session.add(User(password_hash=get_password_hash(DEMO_PASSWORD), **fields))
        await session.commit()
        print("Seed data created")

    await engine.dispose()
    print("\nDatabase setup complete!")
    print("\nDemo logins (password: %s):" % DEMO_PASSWORD)
    for fields in DEMO_USERS:
        print(f"  {fields['role'].value:<11} {fields['email']}")


if __name__ == "__main__":
    asyncio.run(setup_database())
