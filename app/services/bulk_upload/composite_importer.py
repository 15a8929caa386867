"""
Composite user importer.

One input row creates a verified member together with its profile and up to
three numbered education, employment and family sub-records. Each row is
committed as a single transaction: either every part lands or none does.
"""
import logging
from functools import partial
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DuplicateRecordError, PersistenceError, RecordError
from app.core.security import get_password_hash
from app.core.validators import FieldCoercer, is_blank
from app.models import User, UserRole, Profile, EducationDetail, EmploymentDetail, FamilyMember
from app.repositories.bulk_upload_repo import BulkUploadRepository
from app.services.bulk_upload.entity_config import (
    USER_FIELDS, PROFILE_FIELDS, NESTED_GROUP_COUNT
)
from app.services.bulk_upload.importer import (
    PERSISTENCE_ERRORS, ImportResult, check_required, coerce_fields, identifying_values
)

logger = logging.getLogger(__name__)

USER_REQUIRED = ("full_name", "email", "phone", "password")
IDENTIFYING_FIELDS = ("email", "phone")

PROFILE_COERCERS = {
    name: partial(FieldCoercer.to_str, max_length=500 if name == "photo_url" else 100)
    for name in PROFILE_FIELDS if name != "dob"
}

EDUCATION_COERCERS = {
    "degree": FieldCoercer.to_str,
    "institution": FieldCoercer.to_str,
    "year_of_passing": FieldCoercer.to_int,
    "grade": FieldCoercer.to_str,
}
EMPLOYMENT_COERCERS = {
    "company_name": FieldCoercer.to_str,
    "role": FieldCoercer.to_str,
    "years_of_experience": FieldCoercer.to_float,
    "currently_working": FieldCoercer.to_bool,
}
FAMILY_COERCERS = {
    "name": FieldCoercer.to_str,
    "relation": FieldCoercer.to_str,
    "education": FieldCoercer.to_str,
    "profession": FieldCoercer.to_str,
}


def _numbered(record: Dict[str, Any], prefix: str, index: int, names) -> Dict[str, Any]:
    return {name: record.get(f"{prefix}_{name}_{index}") for name in names}


def _nested_rows(record: Dict[str, Any], prefix: str, coercers: Dict, required) -> List[Dict[str, Any]]:
    """Collect the numbered groups (``<prefix>_<field>_<n>``) whose required fields are all present"""
    rows = []
    for index in range(1, NESTED_GROUP_COUNT + 1):
        raw = _numbered(record, prefix, index, coercers)
        if any(is_blank(raw[name]) for name in required):
            continue
        rows.append(coerce_fields(raw, coercers))
    return rows


def _parse_dob(value: Any):
    # An unparseable date of birth is dropped rather than failing the row
    try:
        return FieldCoercer.to_date(value)
    except RecordError:
        return None


def build_profile(record: Dict[str, Any]) -> Optional[Profile]:
    values = coerce_fields(record, PROFILE_COERCERS)
    values["dob"] = _parse_dob(record.get("dob"))
    if all(value is None for value in values.values()):
        return None
    return Profile(**values)


def build_composite_user(record: Dict[str, Any], values: Dict[str, Any]) -> User:
    """Build the full object graph for one row; nothing touches the session here."""
    user = User(
        full_name=values["full_name"],
        email=values["email"],
        phone=values["phone"],
        password_hash=get_password_hash(values["password"]),
        role=UserRole.member,
        is_verified=True,
    )
    user.profile = build_profile(record)
    for education in _nested_rows(record, "education", EDUCATION_COERCERS,
                                  ("degree", "institution", "year_of_passing")):
        user.education_details.append(EducationDetail(**education))
    for employment in _nested_rows(record, "employment", EMPLOYMENT_COERCERS,
                                   ("company_name", "role")):
        employment["currently_working"] = bool(employment["currently_working"])
        user.employment_details.append(EmploymentDetail(**employment))
    for member in _nested_rows(record, "family", FAMILY_COERCERS, ("name", "relation")):
        user.family_members.append(FamilyMember(**member))
    return user


class CompositeUserImporter:
    def __init__(self, db: AsyncSession):
        self.repo = BulkUploadRepository(db)

    async def _find_duplicate(self, email: Optional[str], phone: Optional[str]):
        return await self.repo.find_existing(User, {"email": email, "phone": phone}, match_any=True)

    async def import_record(self, record: Dict[str, Any]) -> None:
        check_required(record, USER_REQUIRED, message="Missing required user fields")
        values = coerce_fields(record, USER_FIELDS)
        try:
            existing = await self._find_duplicate(values["email"], values["phone"])
        except PERSISTENCE_ERRORS as e:
            await self.repo.rollback()
            raise PersistenceError(str(e))
        if existing:
            raise DuplicateRecordError("Duplicate (email/phone)")
        user = build_composite_user(record, values)
        try:
            await self.repo.add_and_commit(user)
        except IntegrityError as e:
            if await self._find_duplicate(values["email"], values["phone"]):
                raise DuplicateRecordError("Duplicate (email/phone)")
            raise PersistenceError(str(e.orig) if e.orig is not None else str(e))
        except PERSISTENCE_ERRORS as e:
            await self.repo.rollback()
            raise PersistenceError(str(e))

    async def run(self, records: List[Dict[str, Any]]) -> ImportResult:
        result = ImportResult()
        for row, record in enumerate(records, start=1):
            try:
                await self.import_record(record)
                result.success += 1
            except RecordError as e:
                logger.debug(f"composite user row {row} not imported: {e.message}")
                result.record_error(row, identifying_values(record, IDENTIFYING_FIELDS), e)
        logger.info(
            f"Imported composite users: success={result.success} "
            f"failure={result.failure} skipped={result.skipped}"
        )
        return result


async def import_full_users(db: AsyncSession, records: List[Dict[str, Any]]) -> ImportResult:
    return await CompositeUserImporter(db).run(records)
