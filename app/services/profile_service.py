"""
Profile Service - the caller's own profile, created on first read.
Staff may read another member's profile by user id.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.profile import Profile
from app.models.user import User
from app.repositories.profile_repo import create_profile, get_profile_by_user_id, update_profile
from app.repositories.user_repo import get_user_by_id
from app.services.user_service import is_staff

logger = logging.getLogger(__name__)


class ProfileService:
    async def get_profile(self, db: AsyncSession, current_user: User,
                          user_id: Optional[int] = None) -> Profile:
        target_id = current_user.id
        if user_id is not None and is_staff(current_user) and user_id != target_id:
            if not await get_user_by_id(db, user_id):
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
            target_id = user_id

        profile = await get_profile_by_user_id(db, target_id)
        if profile is None:
            profile = await create_profile(db, target_id, {})
            logger.info(f"Created empty profile for user {target_id}")
        return profile

    async def create_profile(self, db: AsyncSession, current_user: User, data: Dict[str, Any]) -> Profile:
        user_id = current_user.id
        if await get_profile_by_user_id(db, user_id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Profile already exists")
        return await create_profile(db, user_id, data)

    async def update_profile(self, db: AsyncSession, current_user: User, data: Dict[str, Any]) -> Profile:
        """Apply the given fields, creating the profile if the user has none yet"""
        user_id = current_user.id
        profile = await get_profile_by_user_id(db, user_id)
        if profile is None:
            return await create_profile(db, user_id, data)
        return await update_profile(db, profile, data)
