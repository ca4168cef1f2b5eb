from __future__ import annotations

import base64
import io
from datetime import datetime, timedelta, timezone

from openpyxl import load_workbook

from promo_app.services.export import (
    build_workbook,
    cancelled_file_name,
    encode_workbook,
    final_file_name,
    partial_file_name,
)


GENERATED_AT = datetime(2024, 3, 9, 14, 30, 5, tzinfo=timezone.utc)


def test_workbook_layout():
    content = build_workbook(["CODE1", "CODE2"], "Ilan", GENERATED_AT)
    worksheet = load_workbook(io.BytesIO(content)).active

    assert worksheet.title == "Promo Codes"
    rows = list(worksheet.iter_rows(values_only=True))
    assert rows[0] == ("Generated Promo Code", "Generation Date", "User")
    assert [row[0] for row in rows[1:]] == ["CODE1", "CODE2"]
    assert [row[2] for row in rows[1:]] == ["Ilan", "Ilan"]
    for row in rows[1:]:
        assert abs(row[1] - datetime(2024, 3, 9, 14, 30, 5)) < timedelta(seconds=1)
    assert len(rows) == 3
    assert worksheet.column_dimensions["A"].width == 30
    assert worksheet.column_dimensions["B"].width == 25
    assert worksheet.column_dimensions["C"].width == 20


def test_encode_workbook_is_base64_xlsx():
    encoded = encode_workbook(["ONLY"], "Xavier", GENERATED_AT)
    worksheet = load_workbook(io.BytesIO(base64.b64decode(encoded))).active
    assert worksheet["A2"].value == "ONLY"
    assert worksheet["C2"].value == "Xavier"


def test_file_names_use_batch_date():
    assert partial_file_name(2, GENERATED_AT) == "promo-codes-part-2-2024-03-09.xlsx"
    assert final_file_name(GENERATED_AT) == "promo-codes-final-2024-03-09.xlsx"
    assert cancelled_file_name(GENERATED_AT) == "promo-codes-cancelled-2024-03-09.xlsx"
