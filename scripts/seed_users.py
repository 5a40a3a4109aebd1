#!/usr/bin/env python3
"""Create profile rows for a customer, an approved technician and an admin.

Prints their ids and ready-made bearer tokens for local testing.
"""

import asyncio

from sqlalchemy import select

from techcare.core.security import create_access_token
from techcare.database import AsyncSessionLocal
from techcare.models.user import TechnicianDetails, User

SEED_USERS = [
    ("customer@techcare.rw", "Aline Uwase", "CUSTOMER"),
    ("technician@techcare.rw", "Jean Habimana", "TECHNICIAN"),
    ("admin@techcare.rw", "TechCare Admin", "ADMIN"),
]


async def seed_users(available: bool = True) -> None:
    """Create the seed users if they don't exist."""
    async with AsyncSessionLocal() as session:
        for email, full_name, role in SEED_USERS:
            result = await session.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()

            if user:
                user.role = role
                user.is_active = True
                print(f"Updated existing user: {email}")
            else:
                user = User(
                    email=email,
                    full_name=full_name,
                    phone_number="+250 788 123 456",
                    role=role,
                    is_active=True,
                )
                session.add(user)
                await session.flush()
                print(f"Created user: {email}")

            if role == "TECHNICIAN":
                result = await session.execute(
                    select(TechnicianDetails).where(TechnicianDetails.user_id == user.id)
                )
                details = result.scalar_one_or_none()
                if not details:
                    details = TechnicianDetails(user_id=user.id, specialization="Computers")
                    session.add(details)
                details.approval_status = "APPROVED"
                details.is_available = available

            print(f"  id:    {user.id}")
            print(f"  token: {create_access_token(str(user.id), role=role, email=email)}")

        await session.commit()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Seed local users")
    parser.add_argument("--unavailable", action="store_true", help="Seed the technician as unavailable")

    args = parser.parse_args()

    asyncio.run(seed_users(available=not args.unavailable))
