from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
import logging

from admin_console.dependencies.auth import admin_context
from admin_console.schemas.behaviour import MeritForm
from admin_console.services import summaries
from admin_console.utils.filters import filtered_view, search
from admin_console.utils.responses import download

logger = logging.getLogger(__name__)

router = APIRouter()

SEARCH_FIELDS = ("student_name", "class_name", "merit_type", "incident_type", "description", "teacher_name")
TABS = ("merits", "demerits")


# Merits or demerits (incidents) with the charts shown beside each tab
@router.get("")
def get_merits(tab: str = "merits", search_term: Optional[str] = Query(None, alias="search"),
               student_id: Optional[str] = None, start_date: Optional[str] = None,
               end_date: Optional[str] = None, context=Depends(admin_context)):
    if tab not in TABS:
        raise HTTPException(status_code=400, detail="Tab must be merits or demerits")
    api = context["api"]
    params = {"student_id": student_id, "start_date": start_date, "end_date": end_date}

    if tab == "merits":
        records = api.get_merits(params)
        charts = {"type_chart": summaries.type_chart(records, "merit_type")}
    else:
        records = api.get_incidents(params)
        charts = {
            "severity_chart": summaries.severity_chart(records),
            "type_chart": summaries.type_chart(records, "incident_type"),
        }
    filtered = search(records, search_term, SEARCH_FIELDS)
    return {
        **filtered_view(filtered, len(records)),
        "tab": tab,
        "total_points": summaries.sum_points(filtered),
        **charts,
    }


# Award merit
@router.post("")
def create_merit(merit: MeritForm, context=Depends(admin_context)):
    logger.info(f"Awarding {merit.points} merit point(s) to student {merit.student_id}")
    return context["api"].create_merit(merit.model_dump(exclude_none=True))


# Edit merit
@router.put("/{merit_id}")
def update_merit(merit_id: int, merit: MeritForm, context=Depends(admin_context)):
    return context["api"].update_merit(merit_id, merit.model_dump(exclude_none=True))


# Delete merit
@router.delete("/{merit_id}")
def delete_merit(merit_id: int, context=Depends(admin_context)):
    context["api"].delete_merit(merit_id)
    return {"message": "Merit deleted successfully"}


# Student record workbook, generated by the backend
@router.get("/export/student/{student_id}")
def export_student_record(student_id: int, context=Depends(admin_context)):
    content, media_type, filename = context["api"].export_student_record(student_id)
    return download(content, filename or f"student_record_{student_id}.xlsx", media_type)


# Class records workbook, generated by the backend
@router.get("/export/class/{class_id}")
def export_class_records(class_id: int, context=Depends(admin_context)):
    content, media_type, filename = context["api"].export_class_records(class_id)
    return download(content, filename or f"class_records_{class_id}.xlsx", media_type)
