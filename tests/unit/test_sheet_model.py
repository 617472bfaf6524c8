"""Unit tests for the row store domain model"""
from datetime import datetime, timezone

import pytest

from shared.domain.sheets import SHEET_HEADERS, SheetName
from sheet_gateway.domain.model import InvalidCellError, Sheet, to_cell
from sheet_gateway.domain.events import RowAppended

STAMP = datetime(2024, 1, 15, 8, 30, tzinfo=timezone.utc)


def duty_sheet():
    return Sheet(SheetName.DUTY_CHART.value, SHEET_HEADERS[SheetName.DUTY_CHART])


def test_new_sheet_has_headers_and_no_rows():
    sheet = duty_sheet()

    assert sheet.headers == ["Timestamp", "DoctorName", "StartDate", "EndDate", "Ward", "Shift"]
    assert sheet.records() == []
    assert sheet.events == []


def test_append_stamps_server_timestamp_over_client_value():
    sheet = duty_sheet()

    saved = sheet.append(
        {"Timestamp": "1999-01-01", "DoctorName": "Dr. Bello", "StartDate": "2024-01-15",
         "EndDate": "2024-01-16", "Ward": "ICU", "Shift": "Night"},
        STAMP,
    )

    assert saved["Timestamp"] == "2024-01-15T08:30:00.000Z"
    assert sheet.records()[0]["Timestamp"] == "2024-01-15T08:30:00.000Z"


def test_append_fills_missing_headers_with_empty_cells():
    sheet = duty_sheet()

    sheet.append({"DoctorName": "Dr. Bello", "Ward": "ICU"}, STAMP)

    row = sheet.records()[0]
    assert row["StartDate"] == ""
    assert row["EndDate"] == ""
    assert row["Shift"] == ""


def test_append_ignores_fields_without_a_header():
    sheet = duty_sheet()

    saved = sheet.append({"DoctorName": "Dr. Bello", "Notes": "extra"}, STAMP)

    assert "Notes" not in sheet.records()[0]
    # The echo still carries what the client sent
    assert saved["Notes"] == "extra"


def test_append_generates_row_appended_event():
    sheet = duty_sheet()

    sheet.append({"DoctorName": "Dr. Bello", "StartDate": "2024-01-15",
                  "EndDate": "2024-01-16", "Ward": "ICU"}, STAMP)

    assert len(sheet.events) == 1
    event = sheet.events[0]
    assert isinstance(event, RowAppended)
    assert event.sheet_name == "DutyChart"
    assert event.stamped_at == STAMP
    assert event.missing_fields == ["Shift"]


def test_records_keep_insertion_order():
    sheet = duty_sheet()

    for name in ["Dr. A", "Dr. B", "Dr. C"]:
        sheet.append({"DoctorName": name}, STAMP)

    assert [row["DoctorName"] for row in sheet.records()] == ["Dr. A", "Dr. B", "Dr. C"]


def test_to_cell_keeps_scalars_and_zero():
    assert to_cell(0) == 0
    assert to_cell("Ward") == "Ward"
    assert to_cell(None) == ""
    assert to_cell({"a": 1}) == '{"a": 1}'


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), [1.0, float("nan")]])
def test_to_cell_rejects_non_finite_numbers(value):
    with pytest.raises(InvalidCellError):
        to_cell(value)


def test_append_with_non_finite_value_leaves_sheet_unchanged():
    sheet = duty_sheet()

    with pytest.raises(InvalidCellError):
        sheet.append({"DoctorName": "Dr. Bello", "Ward": float("nan")}, STAMP)

    assert sheet.records() == []
    assert sheet.events == []
