"""
Draft records for the three data-entry forms.

Each form has its own frozen draft type with a fixed, typed field set. Field
names on the wire are the CamelCase sheet headers (``DateOfAdmission``), the
dataclass attributes are their snake_case spelling (``date_of_admission``).
"""

from dataclasses import dataclass, fields, replace
from datetime import date, datetime, timezone
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type, Union

from shared.domain.sheets import SheetName, to_iso_timestamp

WARDS = ("ICU", "Labour Ward", "Casualty", "Accident & Emergency")
GENDERS = ("Female", "Male", "Other")
EQUIPMENT_STATUSES = ("Reported", "Under Repair", "Fixed", "Replaced", "Pending")
SHIFTS = ("Morning", "Afternoon", "Night")

DateValue = Union[datetime, date, str, None]


def wire_name(attribute: str) -> str:
    return "".join(part.capitalize() for part in attribute.split("_"))


def parse_moment(value: DateValue) -> Optional[datetime]:
    """
    Coerce a date field value into an aware datetime.

    Empty values give None. Plain dates become midnight UTC and naive
    datetimes are taken to be UTC. Raises ValueError for unparseable strings.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str):
        return parse_moment(datetime.fromisoformat(value.strip()))
    raise ValueError(f"Unsupported date value: {value!r}")


@dataclass(frozen=True)
class Draft:
    """Base for form drafts. Drafts are values; edits return a new draft."""

    sheet: ClassVar[SheetName]
    date_fields: ClassVar[Tuple[str, ...]] = ()
    success_message: ClassVar[str] = "Record saved successfully!"
    list_label: ClassVar[str] = "records"

    @classmethod
    def empty(cls):
        return cls()

    @classmethod
    def field_names(cls) -> List[str]:
        return [wire_name(f.name) for f in fields(cls)]

    @classmethod
    def _attribute(cls, name: str) -> str:
        for f in fields(cls):
            if wire_name(f.name) == name:
                return f.name
        raise KeyError(f"{cls.__name__} has no field {name}")

    def get(self, name: str) -> Any:
        return getattr(self, self._attribute(name))

    def with_value(self, name: str, value: Any):
        return replace(self, **{self._attribute(name): value})

    def is_empty(self) -> bool:
        return self == self.empty()

    def to_payload(self) -> Dict[str, Any]:
        """
        Serialize for the gateway. Date fields are rendered as full ISO-8601
        timestamps in UTC; unset dates are left out. No identifier is attached.
        """
        payload = {}
        for name in self.field_names():
            value = self.get(name)
            if name in self.date_fields:
                moment = parse_moment(value)
                if moment is None:
                    continue
                value = to_iso_timestamp(moment)
            payload[name] = value
        return payload


@dataclass(frozen=True)
class PatientDraft(Draft):
    sheet: ClassVar[SheetName] = SheetName.PATIENTS
    date_fields: ClassVar[Tuple[str, ...]] = ("DateOfAdmission", "PredictedDischarge", "ActualDischarge")
    success_message: ClassVar[str] = "Patient record saved successfully!"
    list_label: ClassVar[str] = "patients"

    patient_name: str = ""
    age: str = ""
    gender: str = ""
    diagnosis: str = ""
    medical_description: str = ""
    complications: str = ""
    date_of_admission: DateValue = None
    predicted_discharge: DateValue = None
    actual_discharge: DateValue = None
    reason_for_extension: str = ""
    ward: str = ""


@dataclass(frozen=True)
class EquipmentDraft(Draft):
    sheet: ClassVar[SheetName] = SheetName.EQUIPMENT
    date_fields: ClassVar[Tuple[str, ...]] = ("BreakdownDate", "RepairDate")
    success_message: ClassVar[str] = "Equipment log saved successfully!"
    list_label: ClassVar[str] = "equipment"

    equipment_name: str = ""
    ward: str = ""
    breakdown_date: DateValue = None
    problem_description: str = ""
    repair_date: DateValue = None
    action_taken: str = ""
    status: str = ""


@dataclass(frozen=True)
class DutyDraft(Draft):
    sheet: ClassVar[SheetName] = SheetName.DUTY_CHART
    date_fields: ClassVar[Tuple[str, ...]] = ("StartDate", "EndDate")
    success_message: ClassVar[str] = "Duty schedule saved successfully!"
    list_label: ClassVar[str] = "duty chart"

    doctor_name: str = ""
    start_date: DateValue = None
    end_date: DateValue = None
    ward: str = ""
    shift: str = ""


DRAFT_TYPES: Dict[SheetName, Type[Draft]] = {
    SheetName.PATIENTS: PatientDraft,
    SheetName.EQUIPMENT: EquipmentDraft,
    SheetName.DUTY_CHART: DutyDraft,
}
