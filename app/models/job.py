from sqlalchemy import Column, Integer, String, Float, Text, DateTime, ForeignKey, func
from app.db.base import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    # Nullable, so (title, posted_by, location) is enforced by the import pre-check only
    posted_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    skills_required = Column(Text, nullable=True)
    job_type = Column(String(50), nullable=False)
    salary_range = Column(String(100), nullable=True)
    location = Column(String(200), nullable=True)
    map_lat = Column(Float, nullable=True)
    map_lng = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
