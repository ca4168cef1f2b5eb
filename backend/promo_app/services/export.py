from __future__ import annotations

import base64
import io
from datetime import datetime, timezone
from typing import Iterable

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

SHEET_TITLE = "Promo Codes"

# (header, width)
COLUMNS = [
    ("Generated Promo Code", 30),
    ("Generation Date", 25),
    ("User", 20),
]


def build_workbook(codes: Iterable[str], user: str, generated_at: datetime) -> bytes:
    """Write one row per code, stamped with the batch timestamp and operator."""
    # openpyxl rejects tz-aware datetimes.
    if generated_at.tzinfo is not None:
        generated_at = generated_at.astimezone(timezone.utc).replace(tzinfo=None)

    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = SHEET_TITLE
    worksheet.append([header for header, _ in COLUMNS])
    for index, (_, width) in enumerate(COLUMNS):
        worksheet.column_dimensions[get_column_letter(index + 1)].width = width

    for code in codes:
        worksheet.append([code, generated_at, user])
        worksheet.cell(row=worksheet.max_row, column=2).number_format = "yyyy-mm-dd hh:mm:ss"

    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()


def encode_workbook(codes: Iterable[str], user: str, generated_at: datetime) -> str:
    return base64.b64encode(build_workbook(codes, user, generated_at)).decode("ascii")


def _date_stamp(generated_at: datetime) -> str:
    if generated_at.tzinfo is not None:
        generated_at = generated_at.astimezone(timezone.utc)
    return generated_at.date().isoformat()


def partial_file_name(part: int, generated_at: datetime) -> str:
    return f"promo-codes-part-{part}-{_date_stamp(generated_at)}.xlsx"


def final_file_name(generated_at: datetime) -> str:
    return f"promo-codes-final-{_date_stamp(generated_at)}.xlsx"


def cancelled_file_name(generated_at: datetime) -> str:
    return f"promo-codes-cancelled-{_date_stamp(generated_at)}.xlsx"


def failed_file_name(generated_at: datetime) -> str:
    return f"promo-codes-failed-{_date_stamp(generated_at)}.xlsx"
