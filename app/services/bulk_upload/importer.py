"""
Generic per-entity import routine.

Records are processed strictly in file order, one persistence round-trip at a
time, so a natural key repeated inside one file is caught by the existence
check of the later row.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    DuplicateRecordError, PersistenceError, RecordError, RecordValidationError
)
from app.core.validators import is_blank
from app.repositories.bulk_upload_repo import BulkUploadRepository
from app.services.bulk_upload.entity_config import EntityConfig

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing required fields"

# Raised by the driver for values it cannot bind, e.g. integers wider than the column
PERSISTENCE_ERRORS = (SQLAlchemyError, OverflowError, TypeError, ValueError)


@dataclass
class ImportResult:
    success: int = 0
    failure: int = 0
    skipped: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success + self.failure + self.skipped

    def record_error(self, row: int, identifying: Dict[str, Any], error: RecordError) -> None:
        if isinstance(error, DuplicateRecordError):
            self.skipped += 1
        else:
            self.failure += 1
        self.errors.append({"row": row, **identifying, "error": error.message})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "failure": self.failure,
            "skipped": self.skipped,
            "errors": self.errors,
        }


def identifying_values(record: Dict[str, Any], fields) -> Dict[str, Any]:
    return {name: record.get(name) for name in fields}


def check_required(record: Dict[str, Any], required_fields, message: str = MISSING_FIELDS_MESSAGE) -> None:
    if any(is_blank(record.get(name)) for name in required_fields):
        raise RecordValidationError(message)


def coerce_fields(record: Dict[str, Any], fields) -> Dict[str, Any]:
    """Convert the declared columns; unknown columns in the record are ignored."""
    values = {}
    for name, coerce in fields.items():
        try:
            values[name] = coerce(record.get(name))
        except RecordValidationError as e:
            raise RecordValidationError(f"{name}: {e.message}")
    return values


class EntityImporter:
    """Runs one batch of records through a single EntityConfig"""

    def __init__(self, db: AsyncSession, config: EntityConfig):
        self.config = config
        self.repo = BulkUploadRepository(db)

    async def _find_duplicate(self, values: Dict[str, Any]):
        criteria = {name: values.get(name) for name in self.config.dedup_fields}
        return await self.repo.find_existing(
            self.config.model, criteria, match_any=self.config.dedup_match_any
        )

    async def _check_duplicate(self, values: Dict[str, Any]) -> None:
        try:
            existing = await self._find_duplicate(values)
        except PERSISTENCE_ERRORS as e:
            await self.repo.rollback()
            raise PersistenceError(str(e))
        if existing:
            raise self._duplicate_error()

    def _duplicate_error(self) -> DuplicateRecordError:
        return DuplicateRecordError(f"Duplicate ({self.config.duplicate_label})")

    async def _insert(self, values: Dict[str, Any]) -> None:
        try:
            instance = self.config.model(**self.config.to_model_kwargs(values))
            await self.repo.add_and_commit(instance)
        except IntegrityError as e:
            # A concurrent request may have inserted the same key after our check
            if await self._find_duplicate(values):
                raise self._duplicate_error()
            raise PersistenceError(str(e.orig) if e.orig is not None else str(e))
        except PERSISTENCE_ERRORS as e:
            await self.repo.rollback()
            raise PersistenceError(str(e))

    async def import_record(self, record: Dict[str, Any]) -> None:
        check_required(record, self.config.required_fields)
        values = coerce_fields(record, self.config.fields)
        await self._check_duplicate(values)
        await self._insert(values)

    async def run(self, records: List[Dict[str, Any]]) -> ImportResult:
        result = ImportResult()
        for row, record in enumerate(records, start=1):
            try:
                await self.import_record(record)
                result.success += 1
            except RecordError as e:
                logger.debug(f"{self.config.name} row {row} not imported: {e.message}")
                result.record_error(
                    row, identifying_values(record, self.config.identifying_fields), e
                )
        logger.info(
            f"Imported {self.config.name}: success={result.success} "
            f"failure={result.failure} skipped={result.skipped}"
        )
        return result


async def import_records(db: AsyncSession, records: List[Dict[str, Any]], config: EntityConfig) -> ImportResult:
    return await EntityImporter(db, config).run(records)
