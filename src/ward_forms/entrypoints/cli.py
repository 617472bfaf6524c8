#!/usr/bin/env python3
"""
Command-line front end for the ward record forms.

Usage:
    # Submit a patient case sheet
    ward-records patient --set PatientName="Jane Doe" --set Age=45 \\
        --set Gender=Female --set Diagnosis="Pre-eclampsia" \\
        --set DateOfAdmission=2024-01-15 --set Ward=ICU

    # Submit a duty schedule and show the refreshed chart
    ward-records duty --set DoctorName="Dr. Okafor" --set StartDate=2024-01-15 \\
        --set EndDate=2024-01-21 --set Ward=Casualty --set Shift=Night

    # Print a sheet, or the statistics for one month
    ward-records list equipment
    ward-records report --month 2024-01
"""

import argparse
import json
import logging
import sys
from datetime import date, datetime
from typing import List, Optional

import config
from shared.domain.sheets import SheetName, InvalidSheetError, resolve_sheet
from ward_forms.adapters.sheets_client import HTTPSheetsClient, SheetsClientError
from ward_forms.domain.records import DRAFT_TYPES
from ward_forms.service_layer import submission
from ward_forms.service_layer.reports import ReportError, monthly_report

logger = logging.getLogger(__name__)

FORM_COMMANDS = {
    "patient": SheetName.PATIENTS,
    "equipment": SheetName.EQUIPMENT,
    "duty": SheetName.DUTY_CHART,
}


def parse_month(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"Month must look like YYYY-MM, got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ward-records",
        description="Enter and review ward patient, equipment and duty records"
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help="Proxy API URL (default: from APP_ENV / WARD_API_URL)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for command, sheet in FORM_COMMANDS.items():
        form = subparsers.add_parser(command, help=f"Submit a {sheet.value} record")
        form.add_argument(
            "--set",
            dest="fields",
            action="append",
            default=[],
            metavar="FIELD=VALUE",
            help=f"Field value; one of {', '.join(DRAFT_TYPES[sheet].field_names())}"
        )

    listing = subparsers.add_parser("list", help="Print every row of a sheet")
    listing.add_argument("sheet", help="patients, equipment or dutychart")

    report = subparsers.add_parser("report", help="Print the statistics for one month")
    report.add_argument(
        "--month",
        type=parse_month,
        default=date.today().replace(day=1),
        help="Month as YYYY-MM (default: current month)"
    )
    return parser


def run_form(sheet: SheetName, assignments: List[str], client, parser) -> int:
    draft_type = DRAFT_TYPES[sheet]
    session = submission.FormSession.open(draft_type, keep_list=sheet is SheetName.DUTY_CHART)

    for assignment in assignments:
        name, sep, value = assignment.partition("=")
        if not sep:
            parser.error(f"Expected FIELD=VALUE, got {assignment!r}")
        try:
            session = submission.edit(session, name.strip(), value)
        except KeyError:
            parser.error(f"Unknown field {name!r} for {sheet.value}")

    session = submission.submit(session, client)

    print(f"[{session.severity}] {session.message}")
    for name, error in session.errors.items():
        print(f"  {name}: {error}")
    if session.keeps_list:
        for row in session.records:
            print(json.dumps(row))

    return 0 if session.state is submission.SubmissionState.SUCCEEDED else 1


def run_list(selector: str, client) -> int:
    try:
        sheet = resolve_sheet(selector)
        rows = client.read_sheet(sheet)
    except (InvalidSheetError, SheetsClientError) as e:
        print(f"[error] {e}")
        return 1
    for row in rows:
        print(json.dumps(row))
    return 0


def run_report(month: date, client) -> int:
    try:
        report = monthly_report(client, month)
    except ReportError as e:
        print(f"[error] {e}")
        return 1

    print(json.dumps({
        "month": report.month.strftime("%Y-%m"),
        "patients": len(report.patients),
        "equipment": len(report.equipment),
        "duty_entries": len(report.duty_chart),
        "ward_distribution": report.ward_distribution,
        "doctor_workload": report.doctor_workload,
        "equipment_status": report.equipment_status,
    }, indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=getattr(logging, config.get_log_level()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    client = HTTPSheetsClient(base_url=args.api_url)

    if args.command in FORM_COMMANDS:
        return run_form(FORM_COMMANDS[args.command], args.fields, client, parser)
    if args.command == "list":
        return run_list(args.sheet, client)
    return run_report(args.month, client)


if __name__ == "__main__":
    sys.exit(main())
