from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from app.db.base import Base


class BulkUploadLog(Base):
    """Append-only audit row, one per upload invocation"""
    __tablename__ = "bulk_upload_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uploaded_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    filename = Column(String(255), nullable=False)
    model = Column(String(50), nullable=False)
    total_records = Column(Integer, nullable=False, default=0)
    success_count = Column(Integer, nullable=False, default=0)
    failure_count = Column(Integer, nullable=False, default=0)
    skipped_count = Column(Integer, nullable=False, default=0)
    upload_time = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
