"""
Bulk Upload Service - orchestrates one upload request:
authorize, validate the request, parse, dispatch to the entity handler and
write the BulkUploadLog audit row.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import MalformedInputError, UnsupportedFormatError
from app.models.user import User, UserRole
from app.repositories.bulk_upload_repo import BulkUploadRepository
from app.services.bulk_upload.composite_importer import import_full_users
from app.services.bulk_upload.entity_config import (
    COMPOSITE_USERS, ENTITY_CONFIGS, composite_columns, get_entity_config
)
from app.services.bulk_upload.importer import ImportResult, import_records
from app.services.bulk_upload.parser import SUPPORTED_EXTENSIONS, get_extension, parse_records
from app.services.bulk_upload.templates import build_template

logger = logging.getLogger(__name__)

COMPOSITE_EXTENSIONS = (".csv", ".xlsx")
TEMPLATE_FORMATS = ("csv", "xlsx")


class BulkUploadService:
    def _authorize(self, current_user: User) -> None:
        if current_user is None or current_user.role != UserRole.admin:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    def _validate_file(self, filename: Optional[str], content: Optional[bytes], allowed) -> None:
        if not filename or content is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
        if get_extension(filename) not in allowed:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid file type. Allowed: {', '.join(allowed)}"
            )

    def _parse(self, content: bytes, filename: str) -> List[Dict[str, Any]]:
        try:
            return parse_records(content, filename)
        except (UnsupportedFormatError, MalformedInputError) as e:
            logger.warning(f"Rejected upload {filename}: {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    async def _write_log(self, db: AsyncSession, uploaded_by: int, filename: str,
                         model: str, total: int, result: ImportResult):
        return await BulkUploadRepository(db).create_log({
            "uploaded_by": uploaded_by,
            "filename": filename,
            "model": model,
            "total_records": total,
            "success_count": result.success,
            "failure_count": result.failure,
            "skipped_count": result.skipped,
        })

    async def handle_upload(self, db: AsyncSession, current_user: User, filename: Optional[str],
                            content: Optional[bytes], model: Optional[str]) -> Dict[str, Any]:
        self._authorize(current_user)
        self._validate_file(filename, content, SUPPORTED_EXTENSIONS)
        config = get_entity_config(model) if model else None
        if config is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or missing model type")

        # A failed record rolls the session back and expires loaded instances
        uploader_id = current_user.id
        records = self._parse(content, filename)
        logger.info(f"Bulk upload of {len(records)} {model} records from {filename} by user {uploader_id}")
        result = await import_records(db, records, config)
        log = await self._write_log(db, uploader_id, filename, model, len(records), result)
        return {"message": "Bulk upload processed", "log": log, **result.to_dict()}

    async def handle_user_upload(self, db: AsyncSession, current_user: User, filename: Optional[str],
                                 content: Optional[bytes]) -> Dict[str, Any]:
        self._authorize(current_user)
        self._validate_file(filename, content, COMPOSITE_EXTENSIONS)

        uploader_id = current_user.id
        records = self._parse(content, filename)
        logger.info(f"Composite user upload of {len(records)} records from {filename} by user {uploader_id}")
        result = await import_full_users(db, records)
        log = await self._write_log(db, uploader_id, filename, COMPOSITE_USERS, len(records), result)
        return {"message": "Bulk user upload processed", "log": log, **result.to_dict()}

    async def list_logs(self, db: AsyncSession, current_user: User, skip: int = 0, limit: Optional[int] = None):
        self._authorize(current_user)
        return await BulkUploadRepository(db).list_logs(skip=skip, limit=limit)

    def get_template(self, current_user: User, model: Optional[str], fmt: str = "csv"):
        self._authorize(current_user)
        if fmt not in TEMPLATE_FORMATS:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid template format")
        if model == COMPOSITE_USERS:
            columns = composite_columns()
        elif model in ENTITY_CONFIGS:
            columns = ENTITY_CONFIGS[model].columns
        else:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or missing model type")
        return build_template(model, columns, fmt)
