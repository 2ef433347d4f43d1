from fastapi import APIRouter, Depends, HTTPException
import logging

from admin_console.dependencies.auth import admin_context
from admin_console.schemas.timetable import (
    ClassPeriodAssignment,
    ClassroomForm,
    SlotRows,
    SubjectForm,
    TimeSlotUpdate,
    TimetableTemplateForm,
)
from admin_console.services.school_api import fetch_all
from admin_console.utils.dates import academic_year

logger = logging.getLogger(__name__)

router = APIRouter()

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")

STANDARD_DAY = SlotRows(slots=[
    {"period_name": "Period 1", "slot_type": "lesson"},
    {"period_name": "Period 2", "slot_type": "lesson"},
    {"period_name": "Tea Break", "slot_type": "break"},
    {"period_name": "Period 3", "slot_type": "lesson"},
    {"period_name": "Period 4", "slot_type": "lesson"},
    {"period_name": "Period 5", "slot_type": "lesson"},
    {"period_name": "Lunch", "slot_type": "break"},
    {"period_name": "Period 6", "slot_type": "lesson"},
    {"period_name": "Period 7", "slot_type": "lesson"},
])


# -------- Templates --------

@router.get("/templates")
def get_templates(context=Depends(admin_context)):
    api = context["api"]
    return fetch_all(
        {
            "templates": api.get_timetable_templates,
            "subjects": api.get_subjects,
            "classrooms": api.get_classrooms,
        },
        tolerate=("subjects", "classrooms"),
    )


@router.get("/templates/{template_id}")
def get_template(template_id: int, context=Depends(admin_context)):
    return context["api"].get_timetable_template(template_id)


@router.post("/templates")
def create_template(template: TimetableTemplateForm, context=Depends(admin_context)):
    logger.info(f"Creating timetable template {template.name}")
    return context["api"].create_timetable_template(template.model_dump(exclude_none=True))


@router.put("/templates/{template_id}")
def update_template(template_id: int, template: TimetableTemplateForm, context=Depends(admin_context)):
    return context["api"].update_timetable_template(template_id, template.model_dump(exclude_none=True))


@router.delete("/templates/{template_id}")
def delete_template(template_id: int, context=Depends(admin_context)):
    logger.info(f"Deleting timetable template {template_id}")
    context["api"].delete_timetable_template(template_id)
    return {"message": "Template deleted successfully"}


# One template per weekday, each with the standard nine-slot day
@router.post("/quick-setup")
def quick_setup(context=Depends(admin_context)):
    api = context["api"]
    year = academic_year()
    created = []
    for day in WEEKDAYS:
        template = api.create_timetable_template({
            "name": f"{day} Timetable",
            "academic_year": year,
            "timetable_type": "fixed_weekly",
        })
        if not isinstance(template, dict) or template.get("id") is None:
            raise HTTPException(status_code=502, detail=f"School API did not return the {day} template")
        api.bulk_create_time_slots(template["id"], STANDARD_DAY.numbered())
        created.append(template)
    logger.info(f"Quick setup created {len(created)} day templates for {year}")
    return {"message": f"{len(created)} day-specific templates created successfully", "templates": created}


# -------- Time slots --------

@router.get("/templates/{template_id}/slots")
def get_slots(template_id: int, context=Depends(admin_context)):
    return context["api"].get_time_slots(template_id)


# Replace a template's slots with the submitted rows, numbered in order
@router.post("/templates/{template_id}/slots")
def save_slots(template_id: int, rows: SlotRows, context=Depends(admin_context)):
    return context["api"].bulk_create_time_slots(template_id, rows.numbered())


@router.put("/slots/{slot_id}")
def update_slot(slot_id: int, slot: TimeSlotUpdate, context=Depends(admin_context)):
    return context["api"].update_time_slot(slot_id, slot.model_dump(exclude_none=True))


@router.delete("/slots/{slot_id}")
def delete_slot(slot_id: int, context=Depends(admin_context)):
    context["api"].delete_time_slot(slot_id)
    return {"message": "Time slot deleted successfully"}


# -------- Subjects & classrooms --------

@router.get("/subjects")
def get_subjects(context=Depends(admin_context)):
    return context["api"].get_subjects()


@router.post("/subjects")
def create_subject(subject: SubjectForm, context=Depends(admin_context)):
    api = context["api"]
    existing = {str(s.get("name") or "").strip().lower() for s in api.get_subjects()}
    if subject.name.lower() in existing:
        raise HTTPException(status_code=409, detail=f"{subject.name} already exists in your school")
    return api.create_subject(subject.model_dump(exclude_none=True))


@router.delete("/subjects/{subject_id}")
def delete_subject(subject_id: int, context=Depends(admin_context)):
    context["api"].delete_subject(subject_id)
    return {"message": "Subject deleted successfully"}


@router.get("/classrooms")
def get_classrooms(context=Depends(admin_context)):
    return context["api"].get_classrooms()


@router.post("/classrooms")
def create_classroom(classroom: ClassroomForm, context=Depends(admin_context)):
    return context["api"].create_classroom(classroom.model_dump(exclude_none=True))


# -------- Class timetables --------

@router.get("/class/{class_id}")
def get_class_timetable(class_id: int, context=Depends(admin_context)):
    return context["api"].get_class_timetable(class_id)


@router.post("/class/{class_id}/assign")
def assign_period(class_id: int, assignment: ClassPeriodAssignment, context=Depends(admin_context)):
    return context["api"].assign_class_period(class_id, assignment.model_dump(exclude_none=True))


@router.put("/class-timetable/{entry_id}")
def update_class_timetable(entry_id: int, assignment: ClassPeriodAssignment, context=Depends(admin_context)):
    return context["api"].update_class_timetable(entry_id, assignment.model_dump(exclude_none=True))


@router.delete("/class-timetable/{entry_id}")
def delete_class_timetable(entry_id: int, context=Depends(admin_context)):
    context["api"].delete_class_timetable(entry_id)
    return {"message": "Timetable entry deleted successfully"}
