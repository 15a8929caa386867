"""
Declarative configuration for the per-entity bulk import handlers.

Every entity kind runs through the same import routine; only the columns,
required fields, natural key and target model differ.
"""
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Dict, Optional, Tuple

from app.core.security import get_password_hash
from app.core.validators import FieldCoercer
from app.models import (
    User, UserRole, FamilyMember, EducationDetail, EmploymentDetail,
    Skill, Job, JobApplication, Payment
)

Coercer = Callable[[Any], Any]

COMPOSITE_USERS = "composite_users"


@dataclass(frozen=True)
class EntityConfig:
    name: str
    model: type
    fields: Dict[str, Coercer]
    required_fields: Tuple[str, ...]
    dedup_fields: Tuple[str, ...]
    identifying_fields: Tuple[str, ...]
    # OR the natural key columns instead of AND-ing them
    dedup_match_any: bool = False
    build: Optional[Callable[[Dict[str, Any]], Dict[str, Any]]] = field(default=None)

    @property
    def columns(self) -> Tuple[str, ...]:
        return tuple(self.fields)

    @property
    def duplicate_label(self) -> str:
        return "/".join(self.dedup_fields)

    def to_model_kwargs(self, values: Dict[str, Any]) -> Dict[str, Any]:
        kwargs = self.build(values) if self.build else dict(values)
        # Let column defaults apply instead of inserting explicit NULLs
        return {key: value for key, value in kwargs.items() if value is not None}


def build_user(values: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(values)
    data["password_hash"] = get_password_hash(data.pop("password"))
    data["role"] = data.get("role") or UserRole.member
    data["is_verified"] = True
    return data


USER_FIELDS = {
    "full_name": partial(FieldCoercer.to_str, max_length=150),
    "email": FieldCoercer.to_email,
    "phone": partial(FieldCoercer.to_str, max_length=20),
    "password": FieldCoercer.to_str,
    "role": partial(FieldCoercer.to_enum, UserRole),
}

ENTITY_CONFIGS: Dict[str, EntityConfig] = {
    "users": EntityConfig(
        name="users",
        model=User,
        fields=USER_FIELDS,
        required_fields=("full_name", "email", "phone", "password"),
        dedup_fields=("email", "phone"),
        identifying_fields=("email", "phone"),
        dedup_match_any=True,
        build=build_user,
    ),
    "family_members": EntityConfig(
        name="family_members",
        model=FamilyMember,
        fields={
            "user_id": FieldCoercer.to_int,
            "name": FieldCoercer.to_str,
            "relation": FieldCoercer.to_str,
            "education": FieldCoercer.to_str,
            "profession": FieldCoercer.to_str,
        },
        required_fields=("user_id", "name", "relation"),
        dedup_fields=("user_id", "name", "relation"),
        identifying_fields=("user_id", "name", "relation"),
    ),
    "education_details": EntityConfig(
        name="education_details",
        model=EducationDetail,
        fields={
            "user_id": FieldCoercer.to_int,
            "degree": FieldCoercer.to_str,
            "institution": FieldCoercer.to_str,
            "year_of_passing": FieldCoercer.to_int,
            "grade": FieldCoercer.to_str,
        },
        required_fields=("user_id", "degree", "institution", "year_of_passing"),
        dedup_fields=("user_id", "degree", "institution", "year_of_passing"),
        identifying_fields=("user_id", "degree", "institution"),
    ),
    "employment_details": EntityConfig(
        name="employment_details",
        model=EmploymentDetail,
        fields={
            "user_id": FieldCoercer.to_int,
            "company_name": FieldCoercer.to_str,
            "role": FieldCoercer.to_str,
            "years_of_experience": FieldCoercer.to_float,
            "currently_working": FieldCoercer.to_bool,
        },
        required_fields=("user_id", "company_name", "role"),
        dedup_fields=("user_id", "company_name", "role"),
        identifying_fields=("user_id", "company_name", "role"),
    ),
    "skills": EntityConfig(
        name="skills",
        model=Skill,
        fields={
            "user_id": FieldCoercer.to_int,
            "skill_name": FieldCoercer.to_str,
            "endorsed_by": FieldCoercer.to_int,
        },
        required_fields=("user_id", "skill_name"),
        dedup_fields=("user_id", "skill_name"),
        identifying_fields=("user_id", "skill_name"),
    ),
    "jobs": EntityConfig(
        name="jobs",
        model=Job,
        fields={
            "posted_by": FieldCoercer.to_int,
            "title": FieldCoercer.to_str,
            "description": FieldCoercer.to_str,
            "skills_required": FieldCoercer.to_str,
            "job_type": FieldCoercer.to_str,
            "salary_range": FieldCoercer.to_str,
            "location": FieldCoercer.to_str,
            "map_lat": FieldCoercer.to_float,
            "map_lng": FieldCoercer.to_float,
        },
        required_fields=("title", "job_type"),
        dedup_fields=("title", "posted_by", "location"),
        identifying_fields=("title", "posted_by", "location"),
    ),
    "job_applications": EntityConfig(
        name="job_applications",
        model=JobApplication,
        fields={
            "job_id": FieldCoercer.to_int,
            "user_id": FieldCoercer.to_int,
            "status": FieldCoercer.to_str,
        },
        required_fields=("job_id", "user_id"),
        dedup_fields=("job_id", "user_id"),
        identifying_fields=("job_id", "user_id"),
    ),
    "payments": EntityConfig(
        name="payments",
        model=Payment,
        fields={
            "user_id": FieldCoercer.to_int,
            "amount": FieldCoercer.to_float,
            "payment_method": FieldCoercer.to_str,
            "payment_status": FieldCoercer.to_str,
            "transaction_id": FieldCoercer.to_str,
            "payment_time": FieldCoercer.to_datetime,
        },
        required_fields=("user_id", "amount", "payment_method"),
        dedup_fields=("user_id", "transaction_id"),
        identifying_fields=("user_id", "transaction_id"),
    ),
}

# Columns of the composite user sheet: user, profile, then up to 3 numbered
# education / employment / family groups
PROFILE_FIELDS = (
    "photo_url", "dob", "gender", "village", "mandal", "district", "pincode",
    "caste", "subcaste", "marital_status", "native_place",
)
NESTED_GROUP_COUNT = 3
EDUCATION_FIELDS = ("degree", "institution", "year_of_passing", "grade")
EMPLOYMENT_FIELDS = ("company_name", "role", "years_of_experience", "currently_working")
FAMILY_FIELDS = ("name", "relation", "education", "profession")


def composite_columns() -> Tuple[str, ...]:
    columns = ["full_name", "email", "phone", "password", *PROFILE_FIELDS]
    for prefix, group in (("education", EDUCATION_FIELDS),
                          ("employment", EMPLOYMENT_FIELDS),
                          ("family", FAMILY_FIELDS)):
        for index in range(1, NESTED_GROUP_COUNT + 1):
            columns.extend(f"{prefix}_{name}_{index}" for name in group)
    return tuple(columns)


def get_entity_config(model_name: str) -> Optional[EntityConfig]:
    return ENTITY_CONFIGS.get(model_name)
