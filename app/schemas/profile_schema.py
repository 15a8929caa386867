from datetime import date
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from app.core.exceptions import RecordValidationError
from app.core.validators import FieldCoercer


class ProfileBase(BaseModel):
    photo_url: Optional[str] = Field(None, max_length=500)
    dob: Optional[date] = None
    gender: Optional[str] = Field(None, max_length=20)
    village: Optional[str] = Field(None, max_length=100)
    mandal: Optional[str] = Field(None, max_length=100)
    district: Optional[str] = Field(None, max_length=100)
    pincode: Optional[str] = Field(None, max_length=10)
    caste: Optional[str] = Field(None, max_length=100)
    subcaste: Optional[str] = Field(None, max_length=100)
    marital_status: Optional[str] = Field(None, max_length=20)
    native_place: Optional[str] = Field(None, max_length=100)

    @field_validator('dob', mode='before')
    @classmethod
    def normalize_dob(cls, v):
        # An unparseable date of birth is stored as empty, like in bulk imports
        try:
            return FieldCoercer.to_date(v)
        except RecordValidationError:
            return None


class ProfileCreate(ProfileBase):
    pass


class ProfileUpdate(ProfileBase):
    pass


class ProfileResponse(ProfileBase):
    id: int
    user_id: int

    class Config:
        from_attributes = True
