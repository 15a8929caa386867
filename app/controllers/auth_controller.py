from fastapi import APIRouter, Depends, HTTPException, status
from app.services.auth.AuthInterface import IAuthService
from app.services.auth.auth_service import AuthService, get_current_user
import app.schemas.user_schema as user_schema
from app.db.database import get_db
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter()
auth_service: IAuthService = AuthService()

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(data: user_schema.UserRegister, db: AsyncSession = Depends(get_db)):
    try:
        return await auth_service.register(data.model_dump(), db)
    except HTTPException as e:
        raise e

@router.post("/verify-otp")
async def verify_otp(data: user_schema.OTPVerify, db: AsyncSession = Depends(get_db)):
    return await auth_service.verify_otp(data.email, data.otp, db)

@router.post("/resend-otp")
async def resend_otp(data: user_schema.OTPResend, db: AsyncSession = Depends(get_db)):
    return await auth_service.resend_otp(data.email, db)

@router.post("/login")
async def login(data: user_schema.UserLogin, db: AsyncSession = Depends(get_db)):
    try:
        return await auth_service.login(data.email, data.password, db)
    except HTTPException as e:
        raise e

@router.get("/me", response_model=user_schema.UserPublic)
async def read_current_user(current_user=Depends(get_current_user)):
    """Get current user information"""
    return current_user
