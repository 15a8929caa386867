from typing import List, Optional, Tuple

from sqlalchemy.future import select
from sqlalchemy import func, or_
from sqlalchemy.orm import selectinload
from app.models.user import User, UserRole

DETAIL_LOADERS = (
    selectinload(User.profile),
    selectinload(User.education_details),
    selectinload(User.employment_details),
)


async def get_user_by_email(db, email: str):
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()

async def get_user_by_id(db, user_id: int):
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()

async def get_user_with_details(db, user_id: int):
    """User with profile, education and employment rows loaded"""
    result = await db.execute(select(User).options(*DETAIL_LOADERS).where(User.id == user_id))
    return result.scalar_one_or_none()

async def get_user_by_email_or_phone(db, email: str, phone: str):
    result = await db.execute(
        select(User).where(or_(User.email == email, User.phone == phone)).limit(1)
    )
    return result.scalar_one_or_none()

async def find_conflicting_user(db, email: Optional[str], phone: Optional[str], exclude_id: int):
    """Id of another user already holding this email or phone"""
    conditions = []
    if email:
        conditions.append(User.email == email)
    if phone:
        conditions.append(User.phone == phone)
    if not conditions:
        return None
    result = await db.execute(
        select(User.id).where(or_(*conditions), User.id != exclude_id).limit(1)
    )
    return result.scalar_one_or_none()

async def create_user(db, full_name: str, email: str, phone: str, password_hash: str,
                      role=UserRole.member, is_verified: bool = False) -> User:
    """Create a new user and commit to DB."""
    new_user = User(
        full_name=full_name,
        email=email,
        phone=phone,
        password_hash=password_hash,
        role=role,
        is_verified=is_verified
    )
    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)
    return new_user

async def update_user(db, user: User, changes: dict) -> User:
    for field, value in changes.items():
        setattr(user, field, value)
    await db.commit()
    await db.refresh(user)
    return user

async def mark_verified(db, user: User) -> User:
    user.is_verified = True
    await db.commit()
    await db.refresh(user)
    return user

async def list_members(db, offset: int = 0, limit: int = 20, search: Optional[str] = None,
                       sort_by: str = "recent") -> Tuple[int, List[User]]:
    """Page of members (role=member) matching search on name or email, plus the total count"""
    filters = [User.role == UserRole.member]
    if search:
        pattern = f"%{search}%"
        filters.append(or_(User.full_name.ilike(pattern), User.email.ilike(pattern)))

    total = (await db.execute(select(func.count()).select_from(User).where(*filters))).scalar_one()

    if sort_by == "name":
        order = (User.full_name.asc(), User.id.asc())
    else:
        order = (User.created_at.desc(), User.id.desc())
    result = await db.execute(
        select(User).options(*DETAIL_LOADERS).where(*filters)
        .order_by(*order).offset(offset).limit(limit)
    )
    return total, result.scalars().all()
