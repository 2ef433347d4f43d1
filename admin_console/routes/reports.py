from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
import logging

from admin_console.dependencies.auth import admin_context
from admin_console.services import exports
from admin_console.services.school_api import fetch_all
from admin_console.services.summaries import count_by
from admin_console.utils.dates import export_timestamp
from admin_console.utils.filters import filtered_view, search
from admin_console.utils.responses import xlsx_download

logger = logging.getLogger(__name__)

router = APIRouter()

STUDENT_SEARCH_FIELDS = ("full_name", "student_id")

# report -> (file name stem, list that must not be empty, message when it is)
REPORTS = {
    "incidents": ("behaviour_report", "incidents", "No incident data available to export"),
    "merits": ("merit_report", "merits", "No merit data available to export"),
    "detentions": ("detentions_report", "detentions", "No detention data available to export"),
    "student_summary": ("student_progress_report", "students", "No student data available to export"),
    "class_analytics": ("class_analytics_report", "students", "No class data available to export"),
    "teacher_activity": ("teacher_activity_report", None, None),
}


def _fetch_everything(api):
    return fetch_all({
        "students": api.get_students,
        "teachers": api.get_teachers,
        "parents": api.get_parents,
        "classes": api.get_classes,
        "incidents": api.get_incidents,
        "merits": api.get_merits,
        "detentions": api.get_detentions,
    })


def _build_sheet(report: str, data: dict) -> exports.Sheet:
    if report == "incidents":
        return exports.incidents_report(data["incidents"])
    if report == "merits":
        return exports.merits_report(data["merits"])
    if report == "detentions":
        return exports.detentions_report(data["detentions"])
    if report == "student_summary":
        return exports.student_summary_report(data["students"], data["incidents"], data["merits"])
    if report == "class_analytics":
        return exports.class_analytics_report(data["students"], data["incidents"], data["merits"])
    return exports.teacher_activity_report(data["incidents"], data["merits"], data["detentions"])


# Reports landing page: headline counts and behaviour by type
@router.get("")
def get_reports(context=Depends(admin_context)):
    data = _fetch_everything(context["api"])
    behaviour = count_by(data["incidents"], "incident_type")
    return {
        "stats": {
            "total_students": len(data["students"]),
            "total_teachers": len(data["teachers"]),
            "total_parents": len(data["parents"]),
            "total_classes": len(data["classes"]),
            "incident_count": len(data["incidents"]),
            "merit_count": len(data["merits"]),
            "detention_count": len(data["detentions"]),
        },
        "behaviour_by_type": [{"type": k, "count": v} for k, v in behaviour.items()],
    }


# Student picker on the reports page
@router.get("/students")
def get_report_students(search_term: Optional[str] = Query(None, alias="search"), context=Depends(admin_context)):
    students = context["api"].get_students()
    return filtered_view(search(students, search_term, STUDENT_SEARCH_FIELDS), len(students))


# One sheet per class with each student's points
@router.get("/all-classes")
def export_all_classes(context=Depends(admin_context)):
    api = context["api"]
    data = fetch_all({
        "classes": api.get_classes,
        "students": api.get_students,
        "incidents": api.get_incidents,
        "merits": api.get_merits,
    })
    if not data["classes"] or not data["students"]:
        raise HTTPException(status_code=404, detail="No class data available to export")
    sheets = exports.all_classes_report(data["classes"], data["students"], data["incidents"], data["merits"])
    logger.info(f"Exporting all classes report with {len(sheets)} sheet(s)")
    return xlsx_download(exports.to_xlsx(sheets), f"all_classes_report_{export_timestamp()}.xlsx")


@router.get("/{report}")
def export_report(report: str, context=Depends(admin_context)):
    if report not in REPORTS:
        raise HTTPException(status_code=404, detail=f"Unknown report: {report}")
    stem, source, empty_message = REPORTS[report]

    data = _fetch_everything(context["api"])
    if source and not data[source]:
        raise HTTPException(status_code=404, detail=empty_message)

    sheet = _build_sheet(report, data)
    logger.info(f"Exporting {report} report with {len(sheet.rows)} row(s)")
    return xlsx_download(exports.to_xlsx([sheet]), f"{stem}_{export_timestamp()}.xlsx")
