from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import Base


class EducationDetail(Base):
    __tablename__ = "education_details"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "degree", "institution", "year_of_passing",
            name="uq_education_user_degree_institution_year",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    degree = Column(String(150), nullable=False)
    institution = Column(String(200), nullable=False)
    year_of_passing = Column(Integer, nullable=False)
    grade = Column(String(20), nullable=True)

    user = relationship("User", back_populates="education_details")
