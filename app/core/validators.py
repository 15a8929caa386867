"""
Field coercion for imported records

Parsed records carry whatever the file format produced (CSV gives strings,
XLSX gives numbers and timestamps, JSON gives either). These helpers turn a
raw cell into the column type, raising RecordValidationError on bad input.
"""
import re
import enum
from datetime import date, datetime
from typing import Any, Optional, Type

import pandas as pd

from app.core.exceptions import RecordValidationError

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'

TRUE_VALUES = {"true", "1", "yes", "y"}
FALSE_VALUES = {"false", "0", "no", "n"}


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return not value
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


class FieldCoercer:
    """Centralized conversion of raw cell values"""

    @staticmethod
    def to_str(value: Any, max_length: Optional[int] = None) -> Optional[str]:
        if is_blank(value):
            return None
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        text = str(value).strip()
        if max_length and len(text) > max_length:
            raise RecordValidationError(f"Value '{text[:20]}...' exceeds {max_length} characters")
        return text

    @staticmethod
    def to_int(value: Any) -> Optional[int]:
        if is_blank(value):
            return None
        if isinstance(value, bool):
            raise RecordValidationError(f"Invalid integer value '{value}'")
        if isinstance(value, int):
            return value
        text = str(value).strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            raise RecordValidationError(f"Invalid integer value '{value}'")
        if not number.is_integer():
            raise RecordValidationError(f"Invalid integer value '{value}'")
        return int(number)

    @staticmethod
    def to_float(value: Any) -> Optional[float]:
        if is_blank(value):
            return None
        if isinstance(value, bool):
            raise RecordValidationError(f"Invalid number '{value}'")
        try:
            return float(str(value).strip())
        except ValueError:
            raise RecordValidationError(f"Invalid number '{value}'")

    @staticmethod
    def to_bool(value: Any) -> Optional[bool]:
        if is_blank(value):
            return None
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return False
        raise RecordValidationError(f"Invalid boolean value '{value}'")

    @staticmethod
    def to_date(value: Any) -> Optional[date]:
        if is_blank(value):
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        parsed = pd.to_datetime(str(value).strip(), errors="coerce")
        if pd.isna(parsed):
            raise RecordValidationError(f"Invalid date '{value}'")
        return parsed.date()

    @staticmethod
    def to_datetime(value: Any) -> Optional[datetime]:
        if is_blank(value):
            return None
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, datetime.min.time())
        parsed = pd.to_datetime(str(value).strip(), errors="coerce")
        if pd.isna(parsed):
            raise RecordValidationError(f"Invalid date-time '{value}'")
        return parsed.to_pydatetime()

    @staticmethod
    def to_email(value: Any) -> Optional[str]:
        if is_blank(value):
            return None
        email = str(value).strip().lower()
        if not re.match(EMAIL_PATTERN, email):
            raise RecordValidationError(f"Invalid email format '{value}'")
        return email

    @staticmethod
    def to_enum(enum_cls: Type[enum.Enum], value: Any) -> Optional[enum.Enum]:
        if is_blank(value):
            return None
        try:
            return enum_cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(member.value for member in enum_cls)
            raise RecordValidationError(f"Invalid value '{value}', expected one of: {allowed}")
