from fastapi import APIRouter, Depends, HTTPException
from typing import Optional
import logging

from admin_console.config import get_settings
from admin_console.dependencies.auth import admin_context
from admin_console.schemas.behaviour import IncidentReview, IncidentUpdate
from admin_console.services import exports, summaries
from admin_console.services.school_api import fetch_all
from admin_console.utils.dates import today
from admin_console.utils.filters import match_field
from admin_console.utils.responses import csv_download

logger = logging.getLogger(__name__)

router = APIRouter()

REVIEWED_SEVERITIES = ("high", "medium")


def _incident_params(status, severity, start_date, end_date) -> dict:
    return {"status": status, "severity": severity, "start_date": start_date, "end_date": end_date}


# Behaviour dashboard: incidents with severity, type and daily trend charts
@router.get("")
def get_behaviour(status: Optional[str] = None, severity: Optional[str] = None,
                  start_date: Optional[str] = None, end_date: Optional[str] = None,
                  context=Depends(admin_context)):
    settings = get_settings()
    incidents = context["api"].get_incidents(_incident_params(status, severity, start_date, end_date))
    return {
        "incidents": incidents,
        "severity_chart": summaries.severity_chart(incidents),
        "type_chart": summaries.type_chart(incidents, "incident_type"),
        "trend": summaries.daily_trend(incidents, "incident_date", settings.trend_days),
    }


# Goldie badge leaderboard
@router.get("/leaderboard")
def get_leaderboard(context=Depends(admin_context)):
    api = context["api"]
    settings = get_settings()
    data = fetch_all({
        "merits": api.get_merits,
        "students": api.get_students,
        "incidents": api.get_incidents,
    })
    leaders = summaries.goldie_leaderboard(
        data["students"], data["incidents"], data["merits"],
        min_merits=settings.leaderboard_min_merits,
        size=settings.leaderboard_size,
    )
    logger.info(f"{len(leaders)} students eligible for the Goldie badge")
    return leaders


# Pending high/medium incidents waiting for an admin decision
@router.get("/approvals")
def get_approvals(severity: Optional[str] = None, context=Depends(admin_context)):
    pending = [
        incident for incident in context["api"].get_incidents({"status": "pending"})
        if incident.get("severity") in REVIEWED_SEVERITIES
    ]
    counts = summaries.severity_counts(pending)
    return {
        "incidents": match_field(pending, "severity", severity),
        "total": len(pending),
        "high": counts["high"],
        "medium": counts["medium"],
    }


def _review(incident_id: int, status: str, review: Optional[IncidentReview], api):
    notes = review.admin_notes if review else None
    logger.info(f"Incident {incident_id} marked {status}")
    return api.update_incident(incident_id, {"status": status, "admin_notes": notes or ""})


# Approve an incident so the parent is notified
@router.put("/{incident_id}/approve")
def approve_incident(incident_id: int, review: Optional[IncidentReview] = None, context=Depends(admin_context)):
    return _review(incident_id, "approved", review, context["api"])


# Reject an incident
@router.put("/{incident_id}/decline")
def decline_incident(incident_id: int, review: Optional[IncidentReview] = None, context=Depends(admin_context)):
    return _review(incident_id, "rejected", review, context["api"])


# Download incidents as CSV
@router.get("/export")
def export_incidents(status: Optional[str] = None, severity: Optional[str] = None,
                     start_date: Optional[str] = None, end_date: Optional[str] = None,
                     context=Depends(admin_context)):
    incidents = context["api"].get_incidents(_incident_params(status, severity, start_date, end_date))
    report = exports.incidents_report(incidents)
    return csv_download(exports.to_csv(report.headers, report.rows), f"incidents_{today().isoformat()}.csv")


# Get single incident
@router.get("/{incident_id}")
def get_incident(incident_id: int, context=Depends(admin_context)):
    return context["api"].get_incident(incident_id)


# Edit incident
@router.put("/{incident_id}")
def update_incident(incident_id: int, incident: IncidentUpdate, context=Depends(admin_context)):
    data = incident.changes()
    if not data:
        raise HTTPException(status_code=400, detail="No changes submitted")
    return context["api"].update_incident(incident_id, data)


# Delete incident
@router.delete("/{incident_id}")
def delete_incident(incident_id: int, context=Depends(admin_context)):
    logger.info(f"Deleting incident {incident_id}")
    context["api"].delete_incident(incident_id)
    return {"message": "Incident deleted successfully"}
