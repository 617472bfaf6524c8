"""Sheet names, selectors and header rows shared by the gateway and the forms."""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional


class SheetName(str, Enum):
    PATIENTS = "Patients"
    EQUIPMENT = "Equipment"
    DUTY_CHART = "DutyChart"

    @property
    def selector(self) -> str:
        """Lower-case selector used in the ``sheet`` query parameter."""
        return self.value.lower()


TIMESTAMP_FIELD = "Timestamp"

SHEET_HEADERS: Dict[SheetName, List[str]] = {
    SheetName.PATIENTS: [
        TIMESTAMP_FIELD,
        "PatientName",
        "Age",
        "Gender",
        "Diagnosis",
        "MedicalDescription",
        "Complications",
        "DateOfAdmission",
        "PredictedDischarge",
        "ActualDischarge",
        "ReasonForExtension",
        "Ward",
    ],
    SheetName.EQUIPMENT: [
        TIMESTAMP_FIELD,
        "EquipmentName",
        "Ward",
        "BreakdownDate",
        "ProblemDescription",
        "RepairDate",
        "ActionTaken",
        "Status",
    ],
    SheetName.DUTY_CHART: [
        TIMESTAMP_FIELD,
        "DoctorName",
        "StartDate",
        "EndDate",
        "Ward",
        "Shift",
    ],
}

# Keyed by the upper-cased selector, so "dutychart", "DutyChart" and
# "DUTYCHART" all resolve to the same sheet.
_SELECTORS: Dict[str, SheetName] = {sheet.value.upper(): sheet for sheet in SheetName}

INVALID_SHEET_MESSAGE = "Invalid sheet name. Use: patients, equipment, or dutychart"


class InvalidSheetError(ValueError):
    """Raised when a selector does not name one of the known sheets."""

    def __init__(self, selector: Optional[str]):
        self.selector = selector
        super().__init__(INVALID_SHEET_MESSAGE)


def resolve_sheet(selector: Optional[str]) -> SheetName:
    """Map a case-insensitive selector to its sheet."""
    if not selector:
        raise InvalidSheetError(selector)
    try:
        return _SELECTORS[selector.strip().upper()]
    except KeyError:
        raise InvalidSheetError(selector) from None


def to_iso_timestamp(moment: datetime) -> str:
    """Render a moment as ISO-8601 in UTC with millisecond precision, e.g. 2024-01-15T08:30:00.000Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
