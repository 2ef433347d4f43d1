from fastapi import APIRouter, Depends
from typing import Optional

from admin_console.dependencies.auth import admin_context
from admin_console.services import exports
from admin_console.services.summaries import attendance_summary
from admin_console.utils.dates import today
from admin_console.utils.responses import csv_download

router = APIRouter()


def _attendance_params(date: Optional[str], status: Optional[str], class_id: Optional[str]) -> dict:
    return {"date": date or today().isoformat(), "status": status, "class_id": class_id}


# Attendance for a day with summary cards and the status chart
@router.get("")
def get_attendance(date: Optional[str] = None, status: Optional[str] = None,
                   class_id: Optional[str] = None, context=Depends(admin_context)):
    records = context["api"].get_attendance(_attendance_params(date, status, class_id))
    return {"records": records, **attendance_summary(records)}


# Download the day's attendance as CSV
@router.get("/export")
def export_attendance(date: Optional[str] = None, status: Optional[str] = None,
                      class_id: Optional[str] = None, context=Depends(admin_context)):
    params = _attendance_params(date, status, class_id)
    report = exports.attendance_report(context["api"].get_attendance(params))
    return csv_download(exports.to_csv(report.headers, report.rows), f"attendance_{params['date']}.csv")
