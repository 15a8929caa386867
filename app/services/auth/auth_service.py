from app.models.user import User, UserRole
from app.core.security import verify_password, get_password_hash, decode_token, create_user_token
from app.repositories.user_repo import (
    get_user_by_email, get_user_by_email_or_phone, create_user, mark_verified
)
from fastapi import HTTPException, status, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import re
import html
from app.db.database import get_db
from app.services.auth.AuthInterface import IAuthService
from app.services.auth.otp_service import OTPService, get_otp_service

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


def user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "full_name": user.full_name,
        "email": user.email,
        "phone": user.phone,
        "role": user.role.value if hasattr(user.role, "value") else user.role,
        "is_verified": user.is_verified,
    }


class AuthService(IAuthService):
    def __init__(self, otp_service: OTPService = None):
        self._otp_service = otp_service

    @property
    def otp_service(self) -> OTPService:
        return self._otp_service or get_otp_service()

    def _sanitize_input(self, text: str) -> str:
        """Sanitize input to prevent XSS and injection attacks"""
        if not text:
            return ""
        # HTML escape
        sanitized = html.escape(text.strip())
        # Remove potentially dangerous characters
        sanitized = re.sub(r'[<>"\']', '', sanitized)
        return sanitized

    def _validate_email_format(self, email: str) -> str:
        """Additional email validation and sanitization"""
        if not email:
            raise HTTPException(status_code=400, detail="Email is required")

        # Basic email pattern validation
        email_pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        if not re.match(email_pattern, email.strip()):
            raise HTTPException(status_code=400, detail="Invalid email format")

        # Convert to lowercase and strip
        return email.lower().strip()

    async def _get_user_or_404(self, email: str, db) -> User:
        user = await get_user_by_email(db, email)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user

    async def register(self, data: dict, db):
        email = self._validate_email_format(data.get("email", ""))
        full_name = self._sanitize_input(data.get("full_name", ""))
        phone = (data.get("phone") or "").strip()
        password = data.get("password", "")

        if not full_name or not phone or not password:
            raise HTTPException(status_code=400, detail="All fields are required")

        existing = await get_user_by_email_or_phone(db, email, phone)
        if existing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Email or phone already registered")

        user = await create_user(
            db,
            full_name=full_name,
            email=email,
            phone=phone,
            password_hash=get_password_hash(password),
            role=UserRole.member,
            is_verified=False
        )
        self.otp_service.issue(email)
        logger.info(f"Registered user {user.id}, awaiting OTP verification")
        return {
            "message": "Registration successful. OTP sent to email.",
            "user_id": user.id,
            "expires_in": self.otp_service.expires_in
        }

    async def verify_otp(self, email: str, otp: str, db):
        email = self._validate_email_format(email)
        if not otp or not str(otp).strip():
            raise HTTPException(status_code=400, detail="Email and OTP are required")
        user = await self._get_user_or_404(email, db)

        verified, message = self.otp_service.verify(email, otp)
        if not verified:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

        user = await mark_verified(db, user)
        logger.info(f"User {user.id} verified")
        return {"message": "User verified successfully", "user": user_to_dict(user)}

    async def resend_otp(self, email: str, db):
        email = self._validate_email_format(email)
        user = await self._get_user_or_404(email, db)
        if user.is_verified:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User is already verified")
        self.otp_service.issue(email)
        return {"message": "OTP resent successfully", "expires_in": self.otp_service.expires_in}

    async def login(self, email: str, password: str, db):
        email = self._validate_email_format(email)

        if not password or not password.strip():
            raise HTTPException(status_code=400, detail="Password is required")

        user = await get_user_by_email(db, email)
        if not user or not verify_password(password, user.password_hash):
            logger.info(f"Login failed for {email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
        if not user.is_verified:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User not verified")

        token = create_user_token(user)
        return {"token": token, "user": user_to_dict(user)}


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
):
    payload = decode_token(token)
    if not payload or "sub" not in payload:
        raise HTTPException(
            status_code=401, detail="Invalid authentication credentials")
    user = await get_user_by_email(db, payload["sub"])
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
