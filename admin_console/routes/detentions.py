from fastapi import APIRouter, Depends
import logging

from admin_console.config import get_settings
from admin_console.dependencies.auth import admin_context
from admin_console.schemas.detention import (
    AssignStudents,
    AttendanceMark,
    DetentionForm,
    DetentionRuleForm,
    SessionStatus,
)
from admin_console.services import exports, summaries
from admin_console.services.school_api import fetch_all, settle_all
from admin_console.utils.dates import compact_time
from admin_console.utils.responses import csv_download

logger = logging.getLogger(__name__)

router = APIRouter()


def _sampled_attendance(api, detentions, sample: int):
    """Attendance tally over the first ``sample`` sessions; unreadable sessions are skipped."""
    calls = {
        str(d["id"]): (lambda detention_id=d["id"]: api.get_detention(detention_id))
        for d in detentions[:sample] if d.get("id") is not None
    }
    details = fetch_all(calls, tolerate=calls.keys()) if calls else {}
    assignments = []
    for detail in details.values():
        if isinstance(detail, dict):
            assignments.extend(detail.get("assignments") or [])
    present, absent, pending = summaries.detention_attendance(assignments)
    return [
        {"name": "Present", "value": present},
        {"name": "Absent", "value": absent},
        {"name": "Pending", "value": pending},
    ]


# Detention sessions with trend, status and attendance charts
@router.get("")
def get_detentions(context=Depends(admin_context)):
    api = context["api"]
    settings = get_settings()
    data = fetch_all(
        {
            "detentions": api.get_detentions,
            "rules": api.get_detention_rules,
            "teachers": api.get_teachers,
        },
        tolerate=("rules", "teachers"),
    )
    detentions = data["detentions"]
    return {
        "detentions": detentions,
        "rules": data["rules"],
        "teachers": data["teachers"],
        "trend": summaries.daily_trend(detentions, "detention_date", settings.trend_days),
        "status_chart": summaries.detention_status_chart(detentions),
        "attendance_chart": _sampled_attendance(api, detentions, settings.detention_attendance_sample),
    }


# -------- Rules --------

@router.get("/rules")
def get_rules(context=Depends(admin_context)):
    return context["api"].get_detention_rules()


# Create or update a rule (the backend upserts on id)
@router.post("/rules")
def save_rule(rule: DetentionRuleForm, context=Depends(admin_context)):
    return context["api"].save_detention_rule(rule.payload())


# Students waiting to be placed in a detention
@router.get("/queue")
def get_queue(context=Depends(admin_context)):
    return context["api"].get_detention_queue()


@router.put("/assignments/{assignment_id}/attendance")
def mark_attendance(assignment_id: int, mark: AttendanceMark, context=Depends(admin_context)):
    return context["api"].mark_detention_attendance(assignment_id, mark.status, mark.notes)


# -------- Sessions --------

@router.get("/{detention_id}")
def get_detention(detention_id: int, context=Depends(admin_context)):
    return context["api"].get_detention(detention_id)


@router.post("")
def create_detention(detention: DetentionForm, context=Depends(admin_context)):
    logger.info(f"Scheduling detention on {detention.detention_date} at {detention.detention_time}")
    return context["api"].create_detention(detention.payload())


@router.put("/{detention_id}")
def update_detention(detention_id: int, detention: DetentionForm, context=Depends(admin_context)):
    return context["api"].update_detention(detention_id, detention.payload())


@router.delete("/{detention_id}")
def delete_detention(detention_id: int, context=Depends(admin_context)):
    logger.info(f"Deleting detention {detention_id}")
    context["api"].delete_detention(detention_id)
    return {"message": "Detention deleted successfully"}


# Assign students to a session, one backend call per student
@router.post("/{detention_id}/assign")
def assign_students(detention_id: int, assignment: AssignStudents, context=Depends(admin_context)):
    api = context["api"]
    student_ids = list(dict.fromkeys(assignment.student_ids))
    calls = {
        str(student_id): (lambda student_id=student_id: api.assign_to_detention(detention_id, {
            "student_id": student_id,
            "incident_id": assignment.incident_id,
            "reason": assignment.reason,
        }))
        for student_id in student_ids
    }
    results, errors = settle_all(calls)

    assigned = [
        {"student_id": student_id, "assignment": results[str(student_id)]}
        for student_id in student_ids if str(student_id) in results
    ]
    failed = [
        {"student_id": student_id, "error": errors[str(student_id)].message}
        for student_id in student_ids if str(student_id) in errors
    ]
    logger.info(f"Assigned {len(assigned)} student(s) to detention {detention_id}, {len(failed)} failed")
    return {"assigned": assigned, "failed": failed}


# Fill the session from the detention rules
@router.post("/{detention_id}/auto-assign")
def auto_assign(detention_id: int, context=Depends(admin_context)):
    return context["api"].auto_assign_detention({"detention_id": detention_id})


@router.put("/{detention_id}/status")
def update_status(detention_id: int, status: SessionStatus, context=Depends(admin_context)):
    return context["api"].update_detention_session_status(detention_id, status.status)


# Roster for one session as CSV
@router.get("/{detention_id}/export")
def export_roster(detention_id: int, context=Depends(admin_context)):
    detention = context["api"].get_detention(detention_id) or {}
    report = exports.detention_roster(detention)
    day = detention.get("detention_date") or detention_id
    filename = f"detention_{day}_{compact_time(detention.get('detention_time'))}.csv"
    return csv_download(exports.to_csv(report.headers, report.rows), filename)
