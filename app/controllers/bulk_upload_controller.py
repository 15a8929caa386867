from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.database import get_db
from app.schemas.bulk_upload_schema import BulkUploadLogSchema, BulkUploadResponse
from app.services.auth.auth_service import get_current_user
from app.services.bulk_upload_service import BulkUploadService

router = APIRouter()
service = BulkUploadService()


async def _read_upload(file: Optional[UploadFile]):
    if file is None:
        return None, None
    return file.filename, await file.read()


@router.post("/bulk-upload", response_model=BulkUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_bulk(
    file: Optional[UploadFile] = File(None),
    model: Optional[str] = Form(None),
    model_query: Optional[str] = Query(None, alias="model"),
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user)
):
    """Import one entity type from a CSV, XLSX or JSON file (admin only)."""
    filename, content = await _read_upload(file)
    return await service.handle_upload(db, current_user, filename, content, model or model_query)


@router.post("/bulk-upload-users", response_model=BulkUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_bulk_users(
    file: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user)
):
    """Create users with profile, education, employment and family rows from one sheet."""
    filename, content = await _read_upload(file)
    return await service.handle_user_upload(db, current_user, filename, content)


@router.get("/bulk-upload-logs", response_model=List[BulkUploadLogSchema])
async def list_bulk_upload_logs(
    skip: int = 0,
    limit: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user)
):
    return await service.list_logs(db, current_user, skip=skip, limit=limit)


@router.get("/bulk-upload/template")
async def download_template(
    model: Optional[str] = None,
    fmt: str = Query("csv", alias="format"),
    current_user=Depends(get_current_user)
):
    content, media_type, filename = service.get_template(current_user, model, fmt)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
