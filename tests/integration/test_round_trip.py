"""
End-to-end flow inside one process: form session -> HTTP sheets client ->
proxy relay -> sheet gateway -> in-memory row store, and back for reads.
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from proxy_relay.adapters.gateway_relay import AbstractGatewayRelay, RelayedResponse
from proxy_relay.entrypoints.proxy_api import app as proxy_app, get_relay
from shared.domain.sheets import SheetName
from ward_forms.adapters.sheets_client import HTTPSheetsClient
from ward_forms.domain.records import PatientDraft
from ward_forms.service_layer import submission
from ward_forms.service_layer.reports import monthly_report


class InProcessRelay(AbstractGatewayRelay):
    """Relay that forwards into the gateway TestClient instead of the network."""

    def __init__(self, gateway_client):
        self.gateway_client = gateway_client

    def forward(self, method, sheet, body=None):
        params = {"sheet": sheet} if sheet is not None else None
        response = self.gateway_client.request(method, "/", params=params, content=body)
        return RelayedResponse(
            status_code=response.status_code,
            content=response.content,
            media_type=response.headers.get("content-type", "application/json"),
        )


class RequestsResponse:
    """The slice of requests.Response the sheets client relies on."""

    def __init__(self, response):
        self._response = response
        self.status_code = response.status_code
        self.ok = response.status_code < 400

    def json(self):
        return self._response.json()


@pytest.fixture
def sheets_client(gateway_client):
    proxy_app.dependency_overrides[get_relay] = lambda: InProcessRelay(gateway_client)
    proxy = TestClient(proxy_app)

    def request(method, url, params=None, json=None, timeout=None):
        return RequestsResponse(proxy.request(method, "/api", params=params, json=json))

    with patch("ward_forms.adapters.sheets_client.requests.request", side_effect=request):
        yield HTTPSheetsClient(base_url="http://proxy.test/api")

    proxy_app.dependency_overrides.clear()


def fill(session, **values):
    for name, value in values.items():
        session = submission.edit(session, name, value)
    return session


def test_patient_submission_round_trip(sheets_client):
    admitted = datetime.now(timezone.utc) - timedelta(days=2)
    session = fill(
        submission.FormSession.open(PatientDraft),
        PatientName="Amina Yusuf",
        Age="45",
        Gender="Female",
        Diagnosis="Pre-eclampsia",
        DateOfAdmission=admitted,
        Ward="ICU",
    )
    submitted = session.draft.to_payload()

    result = submission.submit(session, sheets_client)

    assert result.state is submission.SubmissionState.SUCCEEDED
    assert result.draft == PatientDraft()

    [row] = sheets_client.read_sheet(SheetName.PATIENTS)
    stamped = datetime.fromisoformat(row.pop("Timestamp"))
    assert abs(datetime.now(timezone.utc) - stamped) < timedelta(minutes=1)
    # Unset dates are left out of the payload and stored as empty cells
    assert row == {**submitted, "PredictedDischarge": "", "ActualDischarge": ""}


def test_rejected_draft_never_reaches_the_gateway(sheets_client):
    session = fill(
        submission.FormSession.open(PatientDraft),
        PatientName="A",
        Age="200",
        Gender="Female",
        Diagnosis="x",
        DateOfAdmission=datetime.now(timezone.utc),
        Ward="ICU",
    )

    result = submission.submit(session, sheets_client)

    assert result.state is submission.SubmissionState.FAILED
    assert "Age" in result.errors
    assert sheets_client.read_sheet(SheetName.PATIENTS) == []


def test_unknown_sheet_error_reaches_the_client(gateway_client, sheets_client):
    response = gateway_client.get("/", params={"sheet": "foo"})

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid sheet name")


def test_report_over_live_sheets(sheets_client):
    sheets_client.append_record(SheetName.DUTY_CHART, {"DoctorName": "Dr. Okafor", "Shift": "Night"})
    sheets_client.append_record(SheetName.DUTY_CHART, {"DoctorName": "Dr. Okafor", "Shift": "Morning"})
    sheets_client.append_record(SheetName.EQUIPMENT, {
        "EquipmentName": "CTG monitor",
        "BreakdownDate": "2024-01-10T00:00:00.000Z",
        "Status": "Under Repair",
    })

    report = monthly_report(sheets_client, datetime(2024, 1, 1).date())

    assert report.doctor_workload == {"Dr. Okafor": 2}
    assert report.equipment_status == {"Under Repair": 1}
    assert report.patients == []
