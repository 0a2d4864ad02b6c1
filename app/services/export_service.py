"""
CSV exports for attendance and leave listings.
"""
import csv
import io
from datetime import date
from typing import Any, Dict, Iterable, List


def _iso(value) -> str:
    return value.isoformat() if value else ""


def _rows_to_csv(header: List[str], rows: Iterable[List[Any]]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(header)
    writer.writerows(rows)
    return output.getvalue()


def attendance_csv(records: List[Dict[str, Any]]) -> str:
    header = [
        "Employee ID", "Name", "Email", "Date", "Check In", "Check Out",
        "Work Hours", "Extra Hours", "Status", "Notes",
    ]
    rows = []
    for record in records:
        user = record.get("user") or {}
        name = f"{user.get('first_name') or ''} {user.get('last_name') or ''}".strip()
        rows.append([
            user.get("employee_id") or "",
            name,
            user.get("email") or "",
            _iso(record["date"]),
            _iso(record["check_in"]),
            _iso(record["check_out"]),
            record["work_hours"],
            record["extra_hours"],
            record["status"],
            record.get("notes") or "",
        ])
    return _rows_to_csv(header, rows)


def leave_csv(leaves: List[Dict[str, Any]]) -> str:
    header = [
        "Name", "Leave Type", "Start Date", "End Date", "Days",
        "Status", "Reason", "Approver Comments", "Requested At",
    ]
    rows = [
        [
            leave["name"],
            leave["leave_type"],
            _iso(leave["start_date"]),
            _iso(leave["end_date"]),
            f"{leave['days_count']:g}",
            leave["status"],
            leave.get("reason") or "",
            leave.get("approver_comments") or "",
            _iso(leave.get("created_at")),
        ]
        for leave in leaves
    ]
    return _rows_to_csv(header, rows)


def export_filename(kind: str, on: date) -> str:
    return f"{kind}_export_{on.isoformat()}.csv"
