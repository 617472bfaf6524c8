#!/usr/bin/env python3
"""
Post sample patient, equipment and duty records to a running proxy.

Requires the package to be installed (pip install -e .).

Usage:
    # Send all sample records once
    python scripts/seed_sample_records.py

    # Send records one by one with intervals
    python scripts/seed_sample_records.py --interval 2
"""

import argparse
import os
import time
from datetime import datetime, timedelta, timezone

import requests

from shared.domain.sheets import to_iso_timestamp


def get_api_url():
    """Get proxy API URL from environment variables."""
    host = os.environ.get("PROXY_HOST", "localhost")
    port = os.environ.get("PROXY_PORT", "10000")
    return f"http://{host}:{port}/api"


def iso_days_ago(days: int) -> str:
    return to_iso_timestamp(datetime.now(timezone.utc) - timedelta(days=days))


def sample_records():
    """(sheet selector, record) pairs covering every sheet."""
    return [
        ("patients", {
            "PatientName": "Amina Yusuf",
            "Age": "29",
            "Gender": "Female",
            "Diagnosis": "Pre-eclampsia",
            "MedicalDescription": "Elevated BP at 34 weeks",
            "Complications": "",
            "DateOfAdmission": iso_days_ago(3),
            "PredictedDischarge": iso_days_ago(-2),
            "ReasonForExtension": "",
            "Ward": "Labour Ward",
        }),
        ("patients", {
            "PatientName": "Grace Mensah",
            "Age": "41",
            "Gender": "Female",
            "Diagnosis": "Ectopic pregnancy",
            "MedicalDescription": "Laparoscopic salpingectomy",
            "Complications": "Post-operative anaemia",
            "DateOfAdmission": iso_days_ago(6),
            "PredictedDischarge": iso_days_ago(2),
            "ActualDischarge": iso_days_ago(1),
            "ReasonForExtension": "Transfusion",
            "Ward": "ICU",
        }),
        ("equipment", {
            "EquipmentName": "CTG monitor",
            "Ward": "Labour Ward",
            "BreakdownDate": iso_days_ago(5),
            "ProblemDescription": "Paper feed jams",
            "RepairDate": iso_days_ago(4),
            "ActionTaken": "Feed roller replaced",
            "Status": "Fixed",
        }),
        ("dutychart", {
            "DoctorName": "Dr. Okafor",
            "StartDate": iso_days_ago(1),
            "EndDate": iso_days_ago(-6),
            "Ward": "Casualty",
            "Shift": "Night",
        }),
    ]


def send_record(sheet: str, record: dict, api_url: str) -> bool:
    """Send one record to the proxy."""
    try:
        response = requests.post(api_url, params={"sheet": sheet}, json=record, timeout=30)

        if response.status_code == 200 and response.json().get("success"):
            print(f"Saved to {sheet}")
            return True
        else:
            print(f"Failed: {response.status_code} - {response.text[:200]}")
            return False

    except (requests.exceptions.RequestException, ValueError) as e:
        print(f"Request failed: {e}")
        return False


def health_check(api_url: str) -> bool:
    """Check if the proxy is available."""
    root_url = api_url.rsplit("/api", 1)[0] + "/"
    try:
        response = requests.get(root_url, timeout=5)
        if response.status_code == 200:
            print(f"Proxy healthy at {root_url}")
            return True
        else:
            print(f"Proxy unhealthy: {response.status_code}")
            return False
    except requests.exceptions.RequestException as e:
        print(f"Cannot reach proxy at {root_url}: {e}")
        return False


def main():
    parser = argparse.ArgumentParser(
        description="Post sample ward records through the proxy"
    )

    parser.add_argument(
        "--interval",
        type=int,
        default=0,
        help="Interval in seconds between records (default: 0 - send all at once)"
    )

    args = parser.parse_args()
    api_url = get_api_url()

    print(f"API URL: {api_url}\n")

    if not health_check(api_url):
        print("\nProxy not available. Make sure both services are running:")
        print("   ward-gateway & ward-proxy")
        return

    records = sample_records()
    success_count = 0
    for i, (sheet, record) in enumerate(records):
        if send_record(sheet, record, api_url):
            success_count += 1

        if args.interval > 0 and i < len(records) - 1:
            time.sleep(args.interval)

    print(f"\nSent {success_count}/{len(records)} records successfully")


if __name__ == "__main__":
    main()
