"""Unit tests for the ward-records command line."""
import json
from unittest.mock import patch

import pytest

from shared.domain.sheets import SheetName
from ward_forms.entrypoints import cli


@pytest.fixture
def patched_client(fake_sheets_client):
    with patch("ward_forms.entrypoints.cli.HTTPSheetsClient", return_value=fake_sheets_client):
        yield fake_sheets_client


def test_valid_patient_is_saved(patched_client, capsys):
    exit_code = cli.main([
        "patient",
        "--set", "PatientName=Amina Yusuf",
        "--set", "Age=45",
        "--set", "Gender=Female",
        "--set", "Diagnosis=Pre-eclampsia",
        "--set", "DateOfAdmission=2024-01-15",
        "--set", "Ward=Labour Ward",
    ])

    assert exit_code == 0
    assert "[success] Patient record saved successfully!" in capsys.readouterr().out
    [saved] = patched_client.sheets[SheetName.PATIENTS]
    assert saved["Ward"] == "Labour Ward"
    assert saved["DateOfAdmission"] == "2024-01-15T00:00:00.000Z"


def test_invalid_patient_exits_non_zero(patched_client, capsys):
    exit_code = cli.main(["patient", "--set", "PatientName=Amina", "--set", "Age=200"])

    out = capsys.readouterr().out
    assert exit_code == 1
    assert "[error]" in out
    assert "Age: Age must be between 0 and 120" in out
    assert patched_client.calls == []


def test_unknown_field_is_a_usage_error(patched_client):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["equipment", "--set", "Colour=red"])

    assert exc_info.value.code == 2


def test_duty_prints_refreshed_chart(patched_client, capsys):
    exit_code = cli.main([
        "duty",
        "--set", "DoctorName=Dr. Okafor",
        "--set", "StartDate=2024-01-15",
        "--set", "EndDate=2024-01-21",
        "--set", "Ward=Casualty",
        "--set", "Shift=Night",
    ])

    lines = capsys.readouterr().out.splitlines()
    assert exit_code == 0
    assert json.loads(lines[-1])["DoctorName"] == "Dr. Okafor"


def test_list_rejects_unknown_sheet(patched_client, capsys):
    assert cli.main(["list", "foo"]) == 1
    assert "Invalid sheet name" in capsys.readouterr().out


def test_report_prints_statistics(patched_client, capsys):
    patched_client.sheets[SheetName.DUTY_CHART] = [{"DoctorName": "Dr. Bello"}]

    exit_code = cli.main(["report", "--month", "2024-01"])

    report = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert report["month"] == "2024-01"
    assert report["doctor_workload"] == {"Dr. Bello": 1}


def test_report_failure_exits_non_zero(patched_client, capsys):
    patched_client.read_errors[SheetName.PATIENTS] = "Network error: timeout"

    assert cli.main(["report", "--month", "2024-01"]) == 1
    assert "Error fetching patients: Network error: timeout" in capsys.readouterr().out
