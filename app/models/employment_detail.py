from sqlalchemy import Column, Integer, String, Float, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import Base


class EmploymentDetail(Base):
    __tablename__ = "employment_details"
    __table_args__ = (
        UniqueConstraint("user_id", "company_name", "role", name="uq_employment_user_company_role"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    company_name = Column(String(200), nullable=False)
    role = Column(String(150), nullable=False)
    years_of_experience = Column(Float, nullable=True)
    currently_working = Column(Boolean, default=False)

    user = relationship("User", back_populates="employment_details")
