#!/usr/bin/env python3
"""
Create the tables and a verified admin account so bulk uploads can be run.

Usage: python create_admin.py "Admin Name" admin@example.com 9000000000 'Str0ng!Pass'
"""
import asyncio
import sys

from app.core.security import get_password_hash
from app.db.base import Base
from app.db.database import engine, AsyncSessionLocal
from app.models import UserRole
from app.repositories.user_repo import create_user, get_user_by_email_or_phone


async def create_admin(full_name: str, email: str, phone: str, password: str):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        existing = await get_user_by_email_or_phone(db, email.lower(), phone)
        if existing:
            print(f"User with email/phone already exists (id={existing.id})")
            return False
        user = await create_user(
            db,
            full_name=full_name,
            email=email.lower(),
            phone=phone,
            password_hash=get_password_hash(password),
            role=UserRole.admin,
            is_verified=True
        )
        print(f"Created admin {user.full_name} (id={user.id})")
        return True


if __name__ == "__main__":
    if len(sys.argv) != 5:
        print(__doc__)
        sys.exit(1)
    ok = asyncio.run(create_admin(*sys.argv[1:]))
    sys.exit(0 if ok else 1)
