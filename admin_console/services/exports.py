"""
CSV and Excel report builders.

Report builders turn fetched records into ``(headers, rows)`` pairs; the
writers serialise those into downloadable bytes. CSV fields are quoted by
the ``csv`` module, so commas, quotes and newlines inside values survive
the round trip into a spreadsheet.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from admin_console.services.summaries import class_analytics, student_points

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

CSV_MEDIA_TYPE = "text/csv"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

MIN_COLUMN_WIDTH = 15
HEADER_FILL = PatternFill(start_color="E2E8F0", end_color="E2E8F0", fill_type="solid")
MAX_SHEET_NAME = 31


@dataclass
class Sheet:
    name: str
    headers: List[str]
    rows: List[List[Any]] = field(default_factory=list)


def _normalise_row(row: Sequence[Any], width: int) -> List[Any]:
    if len(row) > width:
        raise ValueError(f"Row has {len(row)} fields but the header has {width}")
    values = ["" if v is None else v for v in row]
    return values + [""] * (width - len(values))


def to_csv(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow(_normalise_row(row, len(headers)))
    return buffer.getvalue().encode("utf-8")


def _sheet_title(name: str, taken: set) -> str:
    # Excel forbids these characters in sheet titles
    for ch in "[]:*?/\\":
        name = name.replace(ch, "-")
    base = (name or "Sheet")[:MAX_SHEET_NAME]
    title = base
    suffix = 2
    while title.lower() in taken:
        tag = f" ({suffix})"
        title = base[:MAX_SHEET_NAME - len(tag)] + tag
        suffix += 1
    taken.add(title.lower())
    return title


def to_xlsx(sheets: Sequence[Sheet]) -> bytes:
    workbook = Workbook()
    workbook.remove(workbook.active)
    taken: set = set()

    for sheet in sheets:
        worksheet = workbook.create_sheet(title=_sheet_title(sheet.name, taken))
        worksheet.append(list(sheet.headers))
        for row in sheet.rows:
            worksheet.append(_normalise_row(row, len(sheet.headers)))

        for col, header in enumerate(sheet.headers, start=1):
            cell = worksheet.cell(row=1, column=col)
            cell.font = Font(bold=True)
            cell.fill = HEADER_FILL
            cell.alignment = Alignment(horizontal="center", vertical="center")
            worksheet.column_dimensions[get_column_letter(col)].width = max(len(header), MIN_COLUMN_WIDTH)

    if not workbook.worksheets:
        workbook.create_sheet(title="Report")

    buffer = io.BytesIO()
    workbook.save(buffer)
    logger.debug(f"Built workbook with {len(sheets)} sheet(s)")
    return buffer.getvalue()


# -------- Report builders --------

def attendance_report(records: List[Record]) -> Sheet:
    return Sheet(
        name="Attendance",
        headers=["Date", "Student", "Class", "Status", "Period", "Notes"],
        rows=[
            [a.get("attendance_date"), a.get("student_name"), a.get("class_name"),
             a.get("status"), a.get("period") or "", a.get("notes") or ""]
            for a in records
        ],
    )


def students_report(students: List[Record]) -> Sheet:
    return Sheet(
        name="Students",
        headers=["Student ID", "First Name", "Last Name", "Class", "Grade Level", "Date of Birth", "Link Code"],
        rows=[
            [s.get("student_id"), s.get("first_name"), s.get("last_name"), s.get("class_name") or "",
             s.get("grade_level") or "", s.get("date_of_birth") or "", s.get("parent_link_code") or ""]
            for s in students
        ],
    )


def incidents_report(incidents: List[Record]) -> Sheet:
    return Sheet(
        name="Incidents",
        headers=["Date", "Student", "Type", "Severity", "Points", "Status", "Description"],
        rows=[
            [i.get("date") or i.get("incident_date"), i.get("student_name"), i.get("incident_type"),
             i.get("severity"), i.get("points") or 0, i.get("status"), i.get("description") or ""]
            for i in incidents
        ],
    )


def merits_report(merits: List[Record]) -> Sheet:
    return Sheet(
        name="Merits",
        headers=["Date", "Student", "Type", "Points", "Description"],
        rows=[
            [m.get("date") or m.get("merit_date"), m.get("student_name"), m.get("merit_type"),
             m.get("points") or 0, m.get("description") or ""]
            for m in merits
        ],
    )


def detentions_report(detentions: List[Record]) -> Sheet:
    return Sheet(
        name="Detentions",
        headers=["Date", "Time", "Duration", "Status", "Students", "Location"],
        rows=[
            [d.get("detention_date"), d.get("detention_time") or "N/A", f"{d.get('duration') or 60} min",
             d.get("status"), d.get("student_count") or 0, d.get("location") or "N/A"]
            for d in detentions
        ],
    )


def detention_roster(detention: Record) -> Sheet:
    return Sheet(
        name="Detention",
        headers=["Student ID", "Student Name", "Status", "Attendance Time", "Notes"],
        rows=[
            [a.get("student_id"), a.get("student_name"), a.get("status"),
             a.get("attendance_time") or "", a.get("notes") or ""]
            for a in detention.get("assignments") or []
        ],
    )


def student_summary_report(students: List[Record], incidents: List[Record], merits: List[Record]) -> Sheet:
    return Sheet(
        name="Student Summary",
        headers=["Student ID", "Name", "Class", "Incidents", "Merits", "Net Points"],
        rows=[
            [row["student_id"], row["name"], row["class_name"] or "N/A",
             row["incidents"], row["merits"], row["net_points"]]
            for row in student_points(students, incidents, merits)
        ],
    )


def class_analytics_report(students: List[Record], incidents: List[Record], merits: List[Record]) -> Sheet:
    return Sheet(
        name="Class Analytics",
        headers=["Class", "Students", "Incidents", "Merits", "Incident Rate"],
        rows=[
            [c["class_name"], c["students"], c["incidents"], c["merits"], f"{c['incident_rate']:.2f}"]
            for c in class_analytics(students, incidents, merits)
        ],
    )


def teacher_activity_report(incidents: List[Record], merits: List[Record], detentions: List[Record]) -> Sheet:
    return Sheet(
        name="Teacher Activity",
        headers=["Report Type", "Count"],
        rows=[
            ["Total Incidents Logged", len(incidents)],
            ["Total Merits Awarded", len(merits)],
            ["Total Detentions", len(detentions)],
        ],
    )


def all_classes_report(classes: List[Record], students: List[Record], incidents: List[Record],
                       merits: List[Record]) -> List[Sheet]:
    sheets = []
    headers = ["Student ID", "Name", "Incidents", "Incident Points", "Merits", "Merit Points", "Net Points"]
    for cls in classes:
        class_students = [s for s in students if s.get("class_id") == cls.get("id")]
        points = student_points(class_students, incidents, merits, demerit_key="points_deducted")
        rows = [
            [row["student_id"] or row["id"], row["name"], row["incidents"], row["incident_points"],
             row["merits"], row["merit_points"], row["net_points"]]
            for row in points
        ]
        sheets.append(Sheet(name=cls.get("class_name") or f"Class {cls.get('id')}", headers=headers, rows=rows))
    return sheets

