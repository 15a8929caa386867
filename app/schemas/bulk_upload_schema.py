from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from datetime import datetime


class BulkUploadLogSchema(BaseModel):
    id: int
    uploaded_by: Optional[int] = None
    filename: str
    model: str
    total_records: int
    success_count: int
    failure_count: int
    skipped_count: int
    upload_time: Optional[datetime] = None

    class Config:
        from_attributes = True


class BulkUploadResponse(BaseModel):
    message: str
    log: BulkUploadLogSchema
    success: int
    failure: int
    skipped: int
    # One entry per failed or skipped row, in file order:
    # {"row": n, <identifying fields>, "error": "..."}
    errors: List[Dict[str, Any]]
