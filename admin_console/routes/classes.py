from fastapi import APIRouter, Depends, Query
from typing import Optional
import logging

from admin_console.dependencies.auth import admin_context
from admin_console.schemas.school_class import ClassForm, TeacherAssignment
from admin_console.services.school_api import fetch_all
from admin_console.services.summaries import class_stats
from admin_console.utils.filters import filtered_view, search

logger = logging.getLogger(__name__)

router = APIRouter()

SEARCH_FIELDS = ("class_name", "grade_level", "teacher_name", "academic_year")


# Get all classes
@router.get("")
def get_classes(search_term: Optional[str] = Query(None, alias="search"), context=Depends(admin_context)):
    classes = context["api"].get_classes()
    return filtered_view(search(classes, search_term, SEARCH_FIELDS), len(classes))


# Class detail: roster plus attendance/behaviour stats
@router.get("/{class_id}")
def get_class(class_id: int, context=Depends(admin_context)):
    api = context["api"]
    scope = {"class_id": class_id}
    data = fetch_all(
        {
            "class": lambda: api.get_class(class_id),
            "students": lambda: api.get_students(scope),
            "attendance": lambda: api.get_attendance(scope),
            "incidents": lambda: api.get_incidents(scope),
            "merits": lambda: api.get_merits(scope),
        },
        tolerate=("attendance", "incidents", "merits"),
    )
    students = data["students"]
    return {
        "class": data["class"],
        "students": students,
        "stats": class_stats(students, data["attendance"], data["incidents"], data["merits"]),
    }


# Create class
@router.post("")
def create_class(school_class: ClassForm, context=Depends(admin_context)):
    logger.info(f"Creating class {school_class.class_name}")
    return context["api"].create_class(school_class.model_dump())


# Edit class
@router.put("/{class_id}")
def update_class(class_id: int, school_class: ClassForm, context=Depends(admin_context)):
    return context["api"].update_class(class_id, school_class.model_dump())


# Assign (or clear) the class teacher
@router.put("/{class_id}/teacher")
def assign_teacher(class_id: int, assignment: TeacherAssignment, context=Depends(admin_context)):
    return context["api"].update_class(class_id, {"teacher_id": assignment.teacher_id})


# Delete class
@router.delete("/{class_id}")
def delete_class(class_id: int, context=Depends(admin_context)):
    logger.info(f"Deleting class {class_id}")
    context["api"].delete_class(class_id)
    return {"message": "Class deleted successfully"}
