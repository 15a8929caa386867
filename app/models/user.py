from sqlalchemy import Column, Integer, String, Boolean, Enum as SqlEnum, DateTime, func
from sqlalchemy.orm import relationship
from app.db.base import Base
import enum

class UserRole(enum.Enum):
    admin = "admin"
    moderator = "moderator"
    member = "member"

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(150), nullable=False)
    email = Column(String(150), unique=True, nullable=False, index=True)
    phone = Column(String(20), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(SqlEnum(UserRole), nullable=False, default=UserRole.member)
    is_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    profile = relationship("Profile", back_populates="user", uselist=False)
    # Newest first
    education_details = relationship(
        "EducationDetail", back_populates="user", order_by="EducationDetail.id.desc()")
    employment_details = relationship(
        "EmploymentDetail", back_populates="user", order_by="EmploymentDetail.id.desc()")
    family_members = relationship("FamilyMember", back_populates="user")
