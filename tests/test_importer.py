"""
Tests for the generic per-entity import routine.

Covers success / failure / skipped accounting, duplicate handling, row ordering, format
equivalence and isolation of persistence failures.
"""
from datetime import datetime

import pytest
from sqlalchemy import select, func

from app.models import User, Skill, EducationDetail, Job, JobApplication, Payment
from app.core.security import verify_password
from app.services.bulk_upload.entity_config import ENTITY_CONFIGS
from app.services.bulk_upload.importer import EntityImporter, import_records
from app.services.bulk_upload.parser import parse_records
from helpers import create_test_user, rows_to_file

pytestmark = pytest.mark.asyncio


async def count(db, model):
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


class TestUserImport:
    async def test_valid_missing_and_duplicate_rows(self, db_session):
        content = (
            b"full_name,email,phone,password\n"
            b"Alice,alice@example.com,9100000001,Secret#123\n"
            b"Bob,bob@example.com,,Secret#123\n"
            b"Alice Again,alice@example.com,9100000009,Secret#123\n"
        )
        records = parse_records(content, "users.csv")

        result = await import_records(db_session, records, ENTITY_CONFIGS["users"])

        assert (result.success, result.failure, result.skipped) == (1, 1, 1)
        assert len(result.errors) == 2
        assert result.errors[0]["row"] == 2
        assert result.errors[0]["error"] == "Missing required fields"
        assert result.errors[0]["email"] == "bob@example.com"
        assert result.errors[1]["row"] == 3
        assert result.errors[1]["error"] == "Duplicate (email/phone)"
        assert result.total == len(records)

    async def test_imported_user_is_verified_member_with_hashed_password(self, db_session):
        records = [{"full_name": "Alice", "email": "Alice@Example.com", "phone": "9100000001", "password": "Secret#123"}]

        await import_records(db_session, records, ENTITY_CONFIGS["users"])

        user = (await db_session.execute(select(User))).scalar_one()
        assert user.email == "alice@example.com"
        assert user.role.value == "member"
        assert user.is_verified is True
        assert user.password_hash != "Secret#123"
        assert verify_password("Secret#123", user.password_hash)

    async def test_duplicate_by_phone_only(self, db_session):
        await create_test_user(db_session, email="existing@example.com", phone="9100000001")
        records = [{"full_name": "New", "email": "new@example.com", "phone": "9100000001", "password": "x"}]

        result = await import_records(db_session, records, ENTITY_CONFIGS["users"])

        assert result.skipped == 1
        assert result.success == 0

    async def test_invalid_role_is_a_failure(self, db_session):
        records = [{"full_name": "Al", "email": "al@example.com", "phone": "91", "password": "x", "role": "owner"}]

        result = await import_records(db_session, records, ENTITY_CONFIGS["users"])

        assert result.failure == 1
        assert result.errors[0]["error"].startswith("role:")


class TestChildEntityImport:
    async def test_rerunning_batch_skips_everything(self, db_session):
        user = await create_test_user(db_session, email="u@example.com", phone="9100000001")
        records = [
            {"user_id": user.id, "degree": "BSc", "institution": "Osmania", "year_of_passing": 2015},
            {"user_id": user.id, "degree": "MSc", "institution": "JNTU", "year_of_passing": 2017},
        ]
        config = ENTITY_CONFIGS["education_details"]

        first = await import_records(db_session, records, config)
        second = await import_records(db_session, records, config)

        assert (first.success, first.skipped) == (2, 0)
        assert (second.success, second.skipped, second.failure) == (0, 2, 0)
        assert all(e["error"] == "Duplicate (user_id/degree/institution/year_of_passing)" for e in second.errors)
        assert await count(db_session, EducationDetail) == 2

    async def test_duplicate_within_same_file(self, db_session):
        user = await create_test_user(db_session, email="u@example.com", phone="9100000001")
        records = [
            {"user_id": user.id, "skill_name": "Python"},
            {"user_id": str(user.id), "skill_name": "Python"},
        ]

        result = await import_records(db_session, records, ENTITY_CONFIGS["skills"])

        assert (result.success, result.skipped) == (1, 1)
        assert result.errors == [
            {"row": 2, "user_id": str(user.id), "skill_name": "Python", "error": "Duplicate (user_id/skill_name)"}
        ]

    async def test_errors_follow_row_order(self, db_session):
        user = await create_test_user(db_session, email="u@example.com", phone="9100000001")
        records = [
            {"user_id": user.id, "skill_name": ""},
            {"user_id": user.id, "skill_name": "Go"},
            {"user_id": "abc", "skill_name": "Rust"},
            {"user_id": user.id, "skill_name": "Go"},
            {"skill_name": "Java"},
        ]

        result = await import_records(db_session, records, ENTITY_CONFIGS["skills"])

        assert [e["row"] for e in result.errors] == [1, 3, 4, 5]
        assert (result.success, result.failure, result.skipped) == (1, 3, 1)

    async def test_coercion_failure_counts_as_failure(self, db_session):
        user = await create_test_user(db_session, email="u@example.com", phone="9100000001")
        records = [{"user_id": user.id, "degree": "BSc", "institution": "Osmania", "year_of_passing": "twenty"}]

        result = await import_records(db_session, records, ENTITY_CONFIGS["education_details"])

        assert result.failure == 1
        assert "year_of_passing" in result.errors[0]["error"]

    async def test_persistence_error_does_not_block_other_rows(self, db_session):
        user = await create_test_user(db_session, email="u@example.com", phone="9100000001")
        other = await create_test_user(db_session, email="o@example.com", phone="9100000002")
        job = Job(title="Driver", job_type="full-time", posted_by=user.id)
        db_session.add(job)
        await db_session.commit()
        records = [
            {"job_id": job.id, "user_id": user.id},
            {"job_id": 9999, "user_id": user.id},
            {"job_id": job.id, "user_id": other.id, "status": "shortlisted"},
        ]

        result = await import_records(db_session, records, ENTITY_CONFIGS["job_applications"])

        assert (result.success, result.failure, result.skipped) == (2, 1, 0)
        assert result.errors[0]["row"] == 2
        assert "FOREIGN KEY" in result.errors[0]["error"]
        assert await count(db_session, JobApplication) == 2

    async def test_jobs_dedup_on_title_poster_location(self, db_session):
        records = [
            {"title": "Driver", "job_type": "full-time", "location": "Hyderabad"},
            {"title": "Driver", "job_type": "part-time", "location": "Hyderabad"},
            {"title": "Driver", "job_type": "full-time", "location": "Warangal"},
            {"title": "Cook", "location": "Warangal"},
        ]

        result = await import_records(db_session, records, ENTITY_CONFIGS["jobs"])

        assert (result.success, result.failure, result.skipped) == (2, 1, 1)
        assert await count(db_session, Job) == 2

    async def test_payments(self, db_session):
        user = await create_test_user(db_session, email="u@example.com", phone="9100000001")
        records = [
            {"user_id": user.id, "amount": "500.00", "payment_method": "upi", "transaction_id": "TX1"},
            {"user_id": user.id, "amount": "500.00", "payment_method": "upi", "transaction_id": "TX1"},
            {"user_id": user.id, "amount": "", "payment_method": "card", "transaction_id": "TX2"},
        ]

        result = await import_records(db_session, records, ENTITY_CONFIGS["payments"])

        assert (result.success, result.failure, result.skipped) == (1, 1, 1)
        payment = (await db_session.execute(select(Payment))).scalar_one()
        assert payment.payment_status == "pending"

    async def test_constraint_violation_after_check_is_reported_as_duplicate(self, db_session, monkeypatch):
        user = await create_test_user(db_session, email="u@example.com", phone="9100000001")
        db_session.add(Skill(user_id=user.id, skill_name="Python"))
        await db_session.commit()

        original = EntityImporter._find_duplicate
        calls = {"count": 0}

        async def stale_first_check(self, values):
            # Simulates another request inserting between our check and our insert
            calls["count"] += 1
            if calls["count"] == 1:
                return None
            return await original(self, values)

        monkeypatch.setattr(EntityImporter, "_find_duplicate", stale_first_check)

        result = await import_records(
            db_session, [{"user_id": user.id, "skill_name": "Python"}], ENTITY_CONFIGS["skills"]
        )

        assert (result.success, result.failure, result.skipped) == (0, 0, 1)
        assert result.errors[0]["error"] == "Duplicate (user_id/skill_name)"
        assert await count(db_session, Skill) == 1


@pytest.mark.parametrize("fmt", ["csv", "xlsx", "json"])
async def test_same_dataset_same_tallies_in_every_format(db_session, fmt):
    user = await create_test_user(db_session, email="u@example.com", phone="9100000001")
    rows = [
        {"user_id": user.id, "degree": "BSc", "institution": "Osmania", "year_of_passing": 2015, "grade": "A"},
        {"user_id": None, "degree": None, "institution": None, "year_of_passing": None, "grade": None},
        {"user_id": user.id, "degree": None, "institution": "JNTU", "year_of_passing": 2017, "grade": None},
        {"user_id": user.id, "degree": "BSc", "institution": "Osmania", "year_of_passing": 2015, "grade": "B"},
        {"user_id": user.id, "degree": "MBA", "institution": "ISB", "year_of_passing": 2019, "grade": None},
    ]
    records = parse_records(rows_to_file(rows, fmt), f"education.{fmt}")
    assert len(records) == 4

    result = await import_records(db_session, records, ENTITY_CONFIGS["education_details"])

    assert (result.success, result.failure, result.skipped) == (2, 1, 1)
    assert [e["row"] for e in result.errors] == [2, 3]


async def test_out_of_range_integer_fails_only_its_row(db_session):
    user = await create_test_user(db_session, email="u@example.com", phone="9100000001")
    records = [
        {"user_id": "99999999999999999999", "skill_name": "Python"},
        {"user_id": user.id, "skill_name": "Go"},
    ]

    result = await import_records(db_session, records, ENTITY_CONFIGS["skills"])

    assert (result.success, result.failure, result.skipped) == (1, 1, 0)
    assert result.errors[0]["row"] == 1
    assert await count(db_session, Skill) == 1


async def test_payment_time_stored_or_defaulted(db_session):
    user = await create_test_user(db_session, email="u@example.com", phone="9100000001")
    records = [
        {"user_id": user.id, "amount": 250, "payment_method": "upi",
         "transaction_id": "TX10", "payment_time": "2024-03-01 10:30"},
        {"user_id": user.id, "amount": 250, "payment_method": "upi",
         "transaction_id": "TX11", "payment_time": None},
        {"user_id": user.id, "amount": 250, "payment_method": "upi",
         "transaction_id": "TX12", "payment_time": "someday"},
    ]

    result = await import_records(db_session, records, ENTITY_CONFIGS["payments"])

    assert (result.success, result.failure) == (2, 1)
    assert result.errors[0]["error"].startswith("payment_time:")
    query = select(Payment).order_by(Payment.id).execution_options(populate_existing=True)
    payments = (await db_session.execute(query)).scalars().all()
    assert payments[0].payment_time.replace(tzinfo=None) == datetime(2024, 3, 1, 10, 30)
    assert payments[1].payment_time is not None
