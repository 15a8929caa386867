"""
User Service - member lookup, self-service account updates and the
member directory.
"""
import logging
import math
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User, UserRole
from app.repositories.user_repo import (
    find_conflicting_user, get_user_by_id, get_user_with_details, list_members, update_user
)

logger = logging.getLogger(__name__)

# Roles allowed to read and edit other members' accounts
STAFF_ROLES = (UserRole.admin, UserRole.moderator)


def is_staff(user: User) -> bool:
    return user.role in STAFF_ROLES


def member_summary(user: User) -> Dict[str, Any]:
    """Flatten a member with their profile and latest education / employment for the directory"""
    profile = user.profile
    education = user.education_details[0] if user.education_details else None
    employment = user.employment_details[0] if user.employment_details else None
    location = None
    if profile is not None:
        location = profile.district or profile.mandal or profile.village
    return {
        "id": user.id,
        "name": user.full_name,
        "email": user.email,
        "phone": user.phone,
        "avatar": profile.photo_url if profile else None,
        "location": location,
        "title": employment.role if employment else None,
        "company": employment.company_name if employment else None,
        "education": education.degree if education else None,
        "institution": education.institution if education else None,
        "year_of_passing": education.year_of_passing if education else None,
        "grade": education.grade if education else None,
        "years_of_experience": employment.years_of_experience if employment else None,
        "currently_working": bool(employment.currently_working) if employment else False,
        "village": profile.village if profile else None,
        "mandal": profile.mandal if profile else None,
        "district": profile.district if profile else None,
        "native_place": profile.native_place if profile else None,
        "caste": profile.caste if profile else None,
        "subcaste": profile.subcaste if profile else None,
        "joined_date": user.created_at,
    }


class UserService:
    def _authorize_self_or_staff(self, current_user: User, user_id: int) -> None:
        if current_user.id != user_id and not is_staff(current_user):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    async def get_user(self, db: AsyncSession, current_user: User, user_id: int) -> User:
        self._authorize_self_or_staff(current_user, user_id)
        user = await get_user_with_details(db, user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user

    async def update_user(self, db: AsyncSession, current_user: User, user_id: int,
                          data: Dict[str, Any]) -> Dict[str, str]:
        self._authorize_self_or_staff(current_user, user_id)
        actor_id = current_user.id
        may_change_role = current_user.role == UserRole.admin

        user = await get_user_by_id(db, user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        email, phone = data.get("email"), data.get("phone")
        if (email or phone) and await find_conflicting_user(db, email, phone, exclude_id=user_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Email or phone already in use")

        changes = {name: data[name] for name in ("full_name", "email", "phone") if data.get(name)}
        if data.get("role"):
            if not may_change_role:
                raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only admins can change roles")
            changes["role"] = data["role"]

        await update_user(db, user, changes)
        logger.info(f"User {user_id} updated by {actor_id}: {sorted(changes)}")
        return {"message": "User updated"}

    async def list_members(self, db: AsyncSession, page: int = 1, limit: int = 20,
                           search: Optional[str] = None, sort_by: str = "recent") -> Dict[str, Any]:
        total, users = await list_members(
            db, offset=(page - 1) * limit, limit=limit, search=search, sort_by=sort_by
        )
        return {
            "members": [member_summary(user) for user in users],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit) if limit else 0,
            },
        }
