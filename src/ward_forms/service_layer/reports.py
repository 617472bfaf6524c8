"""
Monthly ward reports built from the three sheets.

The sheets are fetched concurrently and joined; if any fetch fails the whole
report fails with that fetch's error and no partial data is returned.
"""
import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from shared.domain.sheets import SheetName
from ward_forms.adapters.sheets_client import AbstractSheetsClient, SheetsClientError
from ward_forms.domain.records import parse_moment

logger = logging.getLogger(__name__)

Rows = List[Dict[str, Any]]

SHEET_LABELS = {
    SheetName.PATIENTS: "patients",
    SheetName.EQUIPMENT: "equipment",
    SheetName.DUTY_CHART: "duty chart",
}


class ReportError(Exception):
    """Raised when the data for a report cannot be fetched."""
    pass


@dataclass(frozen=True)
class WardSnapshot:
    patients: Rows
    equipment: Rows
    duty_chart: Rows


@dataclass(frozen=True)
class MonthlyReport:
    month: date
    patients: Rows
    equipment: Rows
    duty_chart: Rows
    ward_distribution: Dict[str, int] = field(default_factory=dict)
    doctor_workload: Dict[str, int] = field(default_factory=dict)
    equipment_status: Dict[str, int] = field(default_factory=dict)


def fetch_ward_snapshot(client: AbstractSheetsClient) -> WardSnapshot:
    """Read patients, equipment and duty chart concurrently and join on all three."""
    with ThreadPoolExecutor(max_workers=len(SHEET_LABELS)) as pool:
        futures = {sheet: pool.submit(client.read_sheet, sheet) for sheet in SHEET_LABELS}

        results = {}
        for sheet, future in futures.items():
            try:
                results[sheet] = future.result()
            except SheetsClientError as e:
                logger.error(f"Error fetching {SHEET_LABELS[sheet]}: {e}")
                raise ReportError(f"Error fetching {SHEET_LABELS[sheet]}: {e}") from e

    return WardSnapshot(
        patients=results[SheetName.PATIENTS],
        equipment=results[SheetName.EQUIPMENT],
        duty_chart=results[SheetName.DUTY_CHART],
    )


def month_bounds(month: date) -> Tuple[datetime, datetime]:
    """First instant of the month and first instant of the following month, in UTC."""
    start = datetime(month.year, month.month, 1, tzinfo=timezone.utc)
    if month.month == 12:
        end = datetime(month.year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(month.year, month.month + 1, 1, tzinfo=timezone.utc)
    return start, end


def _moment(row: Dict[str, Any], name: str) -> Optional[datetime]:
    try:
        return parse_moment(row.get(name))
    except (TypeError, ValueError):
        return None


def _within(rows: Rows, name: str, start: datetime, end: datetime) -> Rows:
    selected = []
    for row in rows:
        moment = _moment(row, name)
        if moment is not None and start <= moment < end:
            selected.append(row)
    return selected


def _count(rows: Rows, name: str) -> Dict[str, int]:
    return dict(Counter(str(row.get(name, "")) for row in rows))


def build_monthly_report(snapshot: WardSnapshot, month: date) -> MonthlyReport:
    """
    Filter the snapshot to one calendar month and compute its statistics.

    Patients are selected by DateOfAdmission and equipment by BreakdownDate;
    rows with missing or unparseable dates are left out. The duty chart is
    not filtered.
    """
    start, end = month_bounds(month)
    patients = _within(snapshot.patients, "DateOfAdmission", start, end)
    equipment = _within(snapshot.equipment, "BreakdownDate", start, end)

    logger.info(
        f"Report for {start:%Y-%m}: {len(patients)} patients, "
        f"{len(equipment)} equipment logs, {len(snapshot.duty_chart)} duty entries"
    )

    return MonthlyReport(
        month=start.date(),
        patients=patients,
        equipment=equipment,
        duty_chart=snapshot.duty_chart,
        ward_distribution=_count(patients, "Ward"),
        doctor_workload=_count(snapshot.duty_chart, "DoctorName"),
        equipment_status=_count(equipment, "Status"),
    )


def monthly_report(client: AbstractSheetsClient, month: date) -> MonthlyReport:
    return build_monthly_report(fetch_ward_snapshot(client), month)
