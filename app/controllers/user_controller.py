from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.database import get_db
from app.schemas.user_schema import MemberListResponse, UserDetail, UserUpdate
from app.services.auth.auth_service import get_current_user
from app.services.user_service import UserService

router = APIRouter()
service = UserService()


@router.get("/members", response_model=MemberListResponse)
async def list_members(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = None,
    sort_by: str = Query("recent", pattern="^(recent|name)$"),
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user)
):
    """Member directory, newest first or by name."""
    return await service.list_members(db, page=page, limit=limit, search=search, sort_by=sort_by)


@router.get("/{user_id}", response_model=UserDetail)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user)
):
    return await service.get_user(db, current_user, user_id)


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    data: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user)
):
    return await service.update_user(db, current_user, user_id, data.model_dump(exclude_unset=True))
