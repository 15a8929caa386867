"""
File parser for bulk uploads

Turns an uploaded CSV, XLSX or JSON buffer into an ordered list of flat
records (column name -> scalar). Pure transformation, no I/O beyond the
buffer handed in.
"""
import io
import json
import os
from typing import Any, Dict, List

import pandas as pd

from app.core.exceptions import MalformedInputError, UnsupportedFormatError

SUPPORTED_EXTENSIONS = (".csv", ".xlsx", ".json")

Record = Dict[str, Any]


def get_extension(filename: str) -> str:
    return os.path.splitext(filename or "")[1].lower()


def clean_value(value: Any) -> Any:
    """Normalize one cell: blanks become None, numpy scalars become Python ones"""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, (list, dict, bool)):
        return value
    if pd.isna(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if hasattr(value, "item"):
        value = value.item()
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _clean_record(row: Dict[Any, Any]) -> Record:
    return {str(key).strip(): clean_value(value) for key, value in row.items()}


def _parse_csv(content: bytes) -> List[Record]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise MalformedInputError(f"CSV file is not valid UTF-8: {e}")
    if not text.strip():
        return []
    try:
        df = pd.read_csv(
            io.StringIO(text), dtype=str, keep_default_na=False, skip_blank_lines=True
        )
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError as e:
        raise MalformedInputError(f"Error reading CSV: {e}")
    return [_clean_record(row) for row in df.to_dict(orient="records")]


def _parse_xlsx(content: bytes) -> List[Record]:
    try:
        # First worksheet only
        df = pd.read_excel(io.BytesIO(content), sheet_name=0, dtype=object, engine="openpyxl")
    except Exception as e:
        raise MalformedInputError(f"Error reading Excel: {e}")
    df = df.dropna(how="all")
    return [_clean_record(row) for row in df.to_dict(orient="records")]


def _parse_json(content: bytes) -> List[Record]:
    try:
        data = json.loads(content.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedInputError(f"Invalid JSON: {e}")
    if not isinstance(data, list):
        raise MalformedInputError("JSON root must be an array of objects")
    records = []
    for index, item in enumerate(data, start=1):
        if not isinstance(item, dict):
            raise MalformedInputError(f"JSON array element {index} is not an object")
        records.append(_clean_record(item))
    return records


PARSERS = {
    ".csv": _parse_csv,
    ".xlsx": _parse_xlsx,
    ".json": _parse_json,
}


def parse_records(content: bytes, filename: str) -> List[Record]:
    """Parse an uploaded file into records, in file order (header excluded)"""
    ext = get_extension(filename)
    parser = PARSERS.get(ext)
    if parser is None:
        raise UnsupportedFormatError(
            f"Unsupported file type '{ext or filename}'. Allowed: {', '.join(SUPPORTED_EXTENSIONS)}"
        )
    # Rows with no values at all (",," in CSV, an empty sheet row, {} in JSON) are not records
    return [record for record in parser(content) if not all(value is None for value in record.values())]
