"""
Bulk Upload Repository - Data Access Layer
Existence checks, inserts and audit rows for the ingestion pipeline
"""
from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import and_, or_
from app.models.bulk_upload_log import BulkUploadLog
import logging

logger = logging.getLogger(__name__)


class BulkUploadRepository:
    """Repository shared by every entity handler of the bulk importer"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_existing(self, model, criteria: Dict[str, Any], match_any: bool = False) -> Optional[Any]:
        """Return the id of a row matching the natural key, or None.

        With match_any the criteria are OR-ed (e.g. email OR phone), otherwise AND-ed.
        """
        conditions = [getattr(model, field) == value for field, value in criteria.items()]
        clause = or_(*conditions) if match_any else and_(*conditions)
        result = await self.db.execute(select(model.id).where(clause).limit(1))
        return result.scalar_one_or_none()

    async def add_and_commit(self, instance) -> None:
        """Insert one row (and anything cascaded from it) in its own transaction.

        Rolls back and re-raises on any error so the session stays usable for the next record.
        """
        self.db.add(instance)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

    async def rollback(self) -> None:
        await self.db.rollback()

    async def create_log(self, data: dict) -> BulkUploadLog:
        log = BulkUploadLog(**data)
        self.db.add(log)
        await self.db.commit()
        await self.db.refresh(log)
        return log

    async def list_logs(self, skip: int = 0, limit: Optional[int] = None) -> List[BulkUploadLog]:
        query = (
            select(BulkUploadLog)
            .order_by(BulkUploadLog.upload_time.desc(), BulkUploadLog.id.desc())
            .offset(skip)
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return result.scalars().all()
