from __future__ import annotations

import io
from typing import Sequence

import pandas as pd

from .model import Student

EXPORT_COLUMNS = ["Roll No", "Name", "Email", "Year", "Branch", "Phone", "LinkedIn", "GitHub", "QR ID"]


def students_to_frame(students: Sequence[Student]) -> pd.DataFrame:
    rows = [
        [s.roll_no, s.name, s.email, s.year, s.branch, s.phone_no, s.linkedin, s.github, s.qr_id]
        for s in students
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def export_students_xlsx(students: Sequence[Student]) -> io.BytesIO:
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        students_to_frame(students).to_excel(writer, index=False, sheet_name="Students")
    out.seek(0)
    return out


def read_students_csv(path) -> list[dict]:
    """Read a roster CSV as strings, blanks as empty strings."""
    df = pd.read_csv(path, dtype=str, skip_blank_lines=True).fillna("")
    return df.to_dict(orient="records")
