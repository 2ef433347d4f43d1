from fastapi import APIRouter, Depends, File, Query, UploadFile
from typing import Optional
import logging

from admin_console.config import get_settings
from admin_console.dependencies.auth import admin_context
from admin_console.schemas.student import ClassAssignment, StudentForm
from admin_console.services import exports, summaries
from admin_console.services.school_api import fetch_all
from admin_console.services.uploads import read_upload, validate_image_file
from admin_console.utils.dates import calculate_age, days_ago, export_timestamp
from admin_console.utils.filters import filtered_view, match_field, search
from admin_console.utils.responses import xlsx_download

logger = logging.getLogger(__name__)

router = APIRouter()

SEARCH_FIELDS = ("full_name", "first_name", "last_name", "student_id", "class_name", "parent_link_code")


# Get all students, optionally narrowed by search text and class
@router.get("")
def get_students(
    search_term: Optional[str] = Query(None, alias="search"),
    class_id: Optional[str] = None,
    context=Depends(admin_context),
):
    api = context["api"]
    data = fetch_all({"students": api.get_students, "classes": api.get_classes})
    students = data["students"]
    filtered = match_field(search(students, search_term, SEARCH_FIELDS), "class_id", class_id)
    return {**filtered_view(filtered, len(students)), "classes": data["classes"]}


# Export the student list as a spreadsheet
@router.get("/export")
def export_students(context=Depends(admin_context)):
    students = context["api"].get_students()
    content = exports.to_xlsx([exports.students_report(students)])
    return xlsx_download(content, f"students_{export_timestamp()}.xlsx")


# Get single student by id
@router.get("/{student_id}")
def get_student(student_id: int, context=Depends(admin_context)):
    return context["api"].get_student(student_id)


# Student profile: behaviour, attendance and detention history in one view
@router.get("/{student_id}/profile")
def get_student_profile(student_id: int, context=Depends(admin_context)):
    api = context["api"]
    settings = get_settings()
    data = fetch_all(
        {
            "student": lambda: api.get_student(student_id),
            "merits": lambda: api.get_merits({"student_id": student_id, "start_date": days_ago(90)}),
            "incidents": lambda: api.get_incidents({"student_id": student_id}),
            "attendance": lambda: api.get_attendance({"student_id": student_id, "start_date": days_ago(30)}),
            "detentions": lambda: api.get_student_detention_history(student_id),
        },
        tolerate=("merits", "incidents", "attendance", "detentions"),
    )
    student = data["student"] or {}
    return {
        "student": student,
        "age": calculate_age(student.get("date_of_birth")),
        "stats": summaries.student_stats(data["merits"], data["incidents"], data["attendance"]),
        "attendance_trend": summaries.attendance_trend(data["attendance"], settings.trend_days),
        "merits": data["merits"],
        "incidents": data["incidents"],
        "detentions": data["detentions"],
    }


# Create student
@router.post("")
def create_student(student: StudentForm, context=Depends(admin_context)):
    logger.info(f"Creating student {student.student_id}")
    return context["api"].create_student(student.model_dump(mode="json"))


# Edit student
@router.put("/{student_id}")
def update_student(student_id: int, student: StudentForm, context=Depends(admin_context)):
    return context["api"].update_student(student_id, student.model_dump(mode="json"))


# Delete student
@router.delete("/{student_id}")
def delete_student(student_id: int, context=Depends(admin_context)):
    logger.info(f"Deleting student {student_id}")
    context["api"].delete_student(student_id)
    return {"message": "Student deleted successfully"}


# Generate a parent link code for the student
@router.post("/{student_id}/link-code")
def generate_link_code(student_id: int, context=Depends(admin_context)):
    return context["api"].generate_link_code(student_id)


# Move the student to another class (or unassign them)
@router.put("/{student_id}/class")
def assign_class(student_id: int, assignment: ClassAssignment, context=Depends(admin_context)):
    return context["api"].assign_student_to_class(student_id, assignment.class_id, assignment.grade_level)


@router.post("/{student_id}/photo", summary="Upload student photo")
async def upload_photo(student_id: int, file: UploadFile = File(...), context=Depends(admin_context)):
    content = await read_upload(file)
    validate_image_file(file.filename, file.content_type, len(content))
    return context["api"].upload_student_photo(student_id, file.filename, content, file.content_type)
