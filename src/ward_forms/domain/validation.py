"""
Field validation for the record drafts.

Every draft type has its own rule set over its own fields. Rules that compare
dates always read the draft as it currently stands, so checking a single field
means checking the draft with that field replaced.
"""

import re
from datetime import datetime, timezone
from functools import singledispatch
from typing import Any, Dict, Iterable, Optional

from ward_forms.domain.records import (
    EQUIPMENT_STATUSES,
    GENDERS,
    SHIFTS,
    WARDS,
    Draft,
    DutyDraft,
    EquipmentDraft,
    PatientDraft,
    parse_moment,
)

MIN_AGE = 0
MAX_AGE = 120
MIN_NAME_LENGTH = 2
WHOLE_NUMBER = re.compile(r"[+-]?[0-9]+")


def _required(value: Any, label: str) -> Optional[str]:
    if value is None or not str(value).strip():
        return f"{label} is required"
    return None


def _name(value: Any, label: str) -> Optional[str]:
    error = _required(value, label)
    if error:
        return error
    if len(str(value).strip()) < MIN_NAME_LENGTH:
        return f"{label} must be at least {MIN_NAME_LENGTH} characters"
    return None


def _one_of(value: Any, allowed: Iterable[str], label: str) -> Optional[str]:
    error = _required(value, label)
    if error:
        return error
    if value not in allowed:
        return f"{label} must be one of: {', '.join(allowed)}"
    return None


def _age(value: Any) -> Optional[str]:
    error = _required(value, "Age")
    if error:
        return error
    if isinstance(value, bool):
        return "Age must be a whole number"
    text = str(value).strip()
    if not WHOLE_NUMBER.fullmatch(text):
        return "Age must be a whole number"
    age = int(text)
    if not MIN_AGE <= age <= MAX_AGE:
        return f"Age must be between {MIN_AGE} and {MAX_AGE}"
    return None


class _Dates:
    """Parsed date fields of a draft, with parse failures kept as errors."""

    def __init__(self, draft: Draft):
        self.values = {}
        self.errors = {}
        for name in draft.date_fields:
            try:
                self.values[name] = parse_moment(draft.get(name))
            except (TypeError, ValueError):
                self.values[name] = None
                self.errors[name] = "Must be a valid date"

    def __getitem__(self, name):
        return self.values[name]


def _put(errors: Dict[str, str], name: str, error: Optional[str]):
    if error and name not in errors:
        errors[name] = error


@singledispatch
def _draft_errors(draft, now: datetime) -> Dict[str, str]:
    raise TypeError(f"No validation rules for {type(draft).__name__}")


@_draft_errors.register
def _(draft: PatientDraft, now: datetime) -> Dict[str, str]:
    dates = _Dates(draft)
    errors = dict(dates.errors)

    _put(errors, "PatientName", _name(draft.patient_name, "Patient name"))
    _put(errors, "Age", _age(draft.age))
    _put(errors, "Gender", _one_of(draft.gender, GENDERS, "Gender"))
    _put(errors, "Diagnosis", _required(draft.diagnosis, "Diagnosis"))
    _put(errors, "Ward", _one_of(draft.ward, WARDS, "Ward"))

    admitted = dates["DateOfAdmission"]
    predicted = dates["PredictedDischarge"]
    actual = dates["ActualDischarge"]

    if admitted is None:
        _put(errors, "DateOfAdmission", "Date of admission is required")
    elif admitted > now:
        _put(errors, "DateOfAdmission", "Date of admission cannot be in the future")

    if predicted is not None and admitted is not None and predicted < admitted:
        _put(errors, "PredictedDischarge", "Predicted discharge cannot be before date of admission")

    if actual is not None:
        if admitted is not None and actual < admitted:
            _put(errors, "ActualDischarge", "Actual discharge cannot be before date of admission")
        elif predicted is not None and actual < predicted:
            _put(errors, "ActualDischarge", "Actual discharge cannot be before predicted discharge")

    return errors


@_draft_errors.register
def _(draft: EquipmentDraft, now: datetime) -> Dict[str, str]:
    dates = _Dates(draft)
    errors = dict(dates.errors)

    _put(errors, "EquipmentName", _required(draft.equipment_name, "Equipment name"))
    _put(errors, "Ward", _one_of(draft.ward, WARDS, "Ward"))
    _put(errors, "ProblemDescription", _required(draft.problem_description, "Problem description"))
    _put(errors, "Status", _one_of(draft.status, EQUIPMENT_STATUSES, "Status"))

    broken = dates["BreakdownDate"]
    repaired = dates["RepairDate"]

    if broken is None:
        _put(errors, "BreakdownDate", "Breakdown date is required")
    elif broken > now:
        _put(errors, "BreakdownDate", "Breakdown date cannot be in the future")

    if repaired is not None and broken is not None and repaired < broken:
        _put(errors, "RepairDate", "Repair date cannot be before breakdown date")

    return errors


@_draft_errors.register
def _(draft: DutyDraft, now: datetime) -> Dict[str, str]:
    dates = _Dates(draft)
    errors = dict(dates.errors)

    _put(errors, "DoctorName", _name(draft.doctor_name, "Doctor name"))
    _put(errors, "Ward", _one_of(draft.ward, WARDS, "Ward"))
    _put(errors, "Shift", _one_of(draft.shift, SHIFTS, "Shift"))

    start = dates["StartDate"]
    end = dates["EndDate"]

    if start is None:
        _put(errors, "StartDate", "Start date is required")
    if end is None:
        _put(errors, "EndDate", "End date is required")
    elif start is not None and end < start:
        _put(errors, "EndDate", "End date cannot be before start date")

    return errors


def validate_draft(draft: Draft, now: Optional[datetime] = None) -> Dict[str, str]:
    """Validate every field of a draft. The draft is submittable iff the result is empty."""
    return _draft_errors(draft, now or datetime.now(timezone.utc))


def validate_field(draft: Draft, field_name: str, value: Any, now: Optional[datetime] = None) -> Optional[str]:
    """
    Validate one candidate value in the context of the current draft.

    Returns the error message for ``field_name`` or None when the value is
    acceptable. A field the draft does not have is reported as unknown.
    """
    if field_name not in draft.field_names():
        return f"Unknown field {field_name}"
    candidate = draft.with_value(field_name, value)
    return validate_draft(candidate, now).get(field_name)
