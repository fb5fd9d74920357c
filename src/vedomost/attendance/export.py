from __future__ import annotations

import csv
import io

from .service import AttendanceReport

EXPORT_FIELDS = ["date", "group_name", "student_name", "status", "comment"]


def report_to_csv(report: AttendanceReport) -> bytes:
    """Serialize a report to CSV bytes (utf-8-sig so spreadsheet apps detect UTF-8)."""
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=EXPORT_FIELDS)
    writer.writeheader()
    for row in report.rows:
        writer.writerow(row)
    return out.getvalue().encode("utf-8-sig")


def export_filename(report: AttendanceReport) -> str:
    if report.start == report.end:
        return f"attendance_{report.start.isoformat()}.csv"
    return f"attendance_{report.start.isoformat()}_{report.end.isoformat()}.csv"
