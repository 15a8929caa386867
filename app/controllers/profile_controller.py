from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.database import get_db
from app.schemas.profile_schema import ProfileCreate, ProfileResponse, ProfileUpdate
from app.services.auth.auth_service import get_current_user
from app.services.profile_service import ProfileService

router = APIRouter()
service = ProfileService()


@router.get("", response_model=ProfileResponse)
async def get_profile(
    user_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user)
):
    """The caller's profile; staff may pass user_id to read another member's."""
    return await service.get_profile(db, current_user, user_id)


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(
    data: ProfileCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user)
):
    return await service.create_profile(db, current_user, data.model_dump())


@router.put("", response_model=ProfileResponse)
async def update_profile(
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user)
):
    return await service.update_profile(db, current_user, data.model_dump(exclude_unset=True))
