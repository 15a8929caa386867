from datetime import datetime
from pydantic import BaseModel, EmailStr, field_validator, Field
from typing import List, Optional
from app.models.user import UserRole
from app.schemas.profile_schema import ProfileResponse
import re

class UserPublic(BaseModel):
    id: int
    full_name: str
    email: str
    phone: str
    role: UserRole
    is_verified: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=255)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return v.lower().strip()

class UserRegister(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=150)
    email: EmailStr
    phone: str = Field(..., min_length=7, max_length=20)
    password: str = Field(..., min_length=8, max_length=255)

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, v):
        if not v or not v.strip():
            raise ValueError('Name cannot be empty')
        # Remove extra spaces and limit to alphanumeric + basic punctuation
        sanitized = re.sub(r'[^\w\s\-\.]', '', v.strip())
        sanitized = re.sub(r'\s+', ' ', sanitized)
        if len(sanitized) < 2:
            raise ValueError('Name must be at least 2 characters long')
        return sanitized

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return v.lower().strip()

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        phone = v.strip()
        if not re.match(r'^\+?[\d\s\-]{7,20}$', phone):
            raise ValueError('Invalid phone number')
        return phone

class OTPVerify(BaseModel):
    email: EmailStr
    otp: str = Field(..., min_length=1, max_length=12)

class OTPResend(BaseModel):
    email: EmailStr

class UserUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=2, max_length=150)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=7, max_length=20)
    role: Optional[UserRole] = None

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return v.lower().strip() if v else v

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        if v is None:
            return v
        phone = v.strip()
        if not re.match(r'^\+?[\d\s\-]{7,20}$', phone):
            raise ValueError('Invalid phone number')
        return phone

class EducationOut(BaseModel):
    degree: str
    institution: str
    year_of_passing: int
    grade: Optional[str] = None

    class Config:
        from_attributes = True

class EmploymentOut(BaseModel):
    company_name: str
    role: str
    years_of_experience: Optional[float] = None
    currently_working: Optional[bool] = None

    class Config:
        from_attributes = True

class UserDetail(UserPublic):
    """User with profile and newest-first education / employment history"""
    profile: Optional[ProfileResponse] = None
    education_details: List[EducationOut] = []
    employment_details: List[EmploymentOut] = []

class MemberSummary(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    avatar: Optional[str] = None
    location: Optional[str] = None
    title: Optional[str] = None
    company: Optional[str] = None
    education: Optional[str] = None
    institution: Optional[str] = None
    year_of_passing: Optional[int] = None
    grade: Optional[str] = None
    years_of_experience: Optional[float] = None
    currently_working: bool = False
    village: Optional[str] = None
    mandal: Optional[str] = None
    district: Optional[str] = None
    native_place: Optional[str] = None
    caste: Optional[str] = None
    subcaste: Optional[str] = None
    joined_date: Optional[datetime] = None

class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

class MemberListResponse(BaseModel):
    members: List[MemberSummary]
    pagination: Pagination
