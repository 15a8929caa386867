"""Header-only sample files for each upload target"""
import io
from typing import Sequence, Tuple

import pandas as pd

CSV_MEDIA_TYPE = "text/csv"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def build_template(model_name: str, columns: Sequence[str], fmt: str = "csv") -> Tuple[bytes, str, str]:
    """Return (content, media type, download filename)"""
    df = pd.DataFrame(columns=list(columns))
    if fmt == "xlsx":
        buffer = io.BytesIO()
        df.to_excel(buffer, index=False, engine="openpyxl")
        return buffer.getvalue(), XLSX_MEDIA_TYPE, f"{model_name}_template.xlsx"
    return df.to_csv(index=False).encode("utf-8"), CSV_MEDIA_TYPE, f"{model_name}_template.csv"
