from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from typing import Optional
import logging

from admin_console.dependencies.auth import admin_context
from admin_console.schemas.teacher import TeacherForm
from admin_console.services.school_api import fetch_all
from admin_console.services.summaries import teacher_stats
from admin_console.services.uploads import read_upload, validate_image_file
from admin_console.utils.filters import filtered_view, search

logger = logging.getLogger(__name__)

router = APIRouter()

SEARCH_FIELDS = ("name", "email", "employee_id")


# Get all teachers with headline stats
@router.get("")
def get_teachers(search_term: Optional[str] = Query(None, alias="search"), context=Depends(admin_context)):
    teachers = context["api"].get_teachers()
    filtered = search(teachers, search_term, SEARCH_FIELDS)
    return {**filtered_view(filtered, len(teachers)), "stats": teacher_stats(teachers)}


# Get a teacher together with their weekly timetable
@router.get("/{teacher_id}")
def get_teacher(teacher_id: int, context=Depends(admin_context)):
    api = context["api"]
    data = fetch_all(
        {
            "teacher": lambda: api.get_teacher(teacher_id),
            "timetable": lambda: api.get_teacher_timetable(teacher_id),
        },
        tolerate=("timetable",),
    )
    return data


# Create teacher
@router.post("")
def create_teacher(teacher: TeacherForm, context=Depends(admin_context)):
    if not teacher.password:
        raise HTTPException(status_code=400, detail="Password is required for new teachers")
    logger.info(f"Creating teacher {teacher.email}")
    return context["api"].create_teacher(teacher.model_dump(exclude_none=True))


# Edit teacher; a blank password leaves the current one unchanged
@router.put("/{teacher_id}")
def update_teacher(teacher_id: int, teacher: TeacherForm, context=Depends(admin_context)):
    return context["api"].update_teacher(teacher_id, teacher.model_dump(exclude_none=True))


# Delete teacher
@router.delete("/{teacher_id}")
def delete_teacher(teacher_id: int, context=Depends(admin_context)):
    logger.info(f"Deleting teacher {teacher_id}")
    context["api"].delete_teacher(teacher_id)
    return {"message": "Teacher deleted successfully"}


@router.post("/{teacher_id}/photo", summary="Upload teacher photo")
async def upload_photo(teacher_id: int, file: UploadFile = File(...), context=Depends(admin_context)):
    content = await read_upload(file)
    validate_image_file(file.filename, file.content_type, len(content))
    return context["api"].upload_teacher_photo(teacher_id, file.filename, content, file.content_type)
