from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional

from admin_console.schemas.validators import blank_to_none, required_text, valid_time
from admin_console.utils.dates import academic_year as current_academic_year

SLOT_TYPES = ("lesson", "break", "assembly", "registration")


def _valid_slot_type(value: str) -> str:
    if value not in SLOT_TYPES:
        raise ValueError(f"Slot type must be one of: {', '.join(SLOT_TYPES)}")
    return value


# --- Timetable templates ---
class TimetableTemplateForm(BaseModel):
    name: str
    academic_year: Optional[str] = Field(default_factory=current_academic_year)
    timetable_type: str = "fixed_weekly"
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return required_text(value, "Template name")

    @field_validator("academic_year")
    @classmethod
    def default_academic_year(cls, value):
        return value or current_academic_year()


# --- Time slots ---
class SlotRow(BaseModel):
    period_name: Optional[str] = None
    slot_type: str = "lesson"
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    @field_validator("slot_type")
    @classmethod
    def check_slot_type(cls, value):
        return _valid_slot_type(value)


class SlotRows(BaseModel):
    slots: List[SlotRow] = Field(..., min_length=1)

    @model_validator(mode="after")
    def every_period_named(self):
        if any(not (row.period_name or "").strip() for row in self.slots):
            raise ValueError("Please enter a name for each period")
        return self

    def numbered(self) -> List[dict]:
        """Slots in submission order, numbered from 1."""
        numbered = []
        for index, row in enumerate(self.slots):
            slot = {
                "period_number": index + 1,
                "period_name": row.period_name.strip(),
                "slot_type": row.slot_type,
            }
            if row.start_time:
                slot["start_time"] = row.start_time
            if row.end_time:
                slot["end_time"] = row.end_time
            numbered.append(slot)
        return numbered


class TimeSlotUpdate(BaseModel):
    period_name: str
    slot_type: str = "lesson"
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)

    @field_validator("period_name")
    @classmethod
    def check_period_name(cls, value):
        return required_text(value, "Period name")

    @field_validator("slot_type")
    @classmethod
    def check_slot_type(cls, value):
        return _valid_slot_type(value)

    @field_validator("start_time")
    @classmethod
    def check_start(cls, value):
        return valid_time(value, "Start time")

    @field_validator("end_time")
    @classmethod
    def check_end(cls, value):
        return valid_time(value, "End time")

    @model_validator(mode="after")
    def start_before_end(self):
        # zero-padded HH:MM compares correctly as text
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ValueError("Start time must be before end time")
        return self


# --- Subjects & classrooms ---
class SubjectForm(BaseModel):
    name: str
    code: Optional[str] = None
    color: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return required_text(value, "Subject name")


class ClassroomForm(BaseModel):
    room_number: str
    room_name: Optional[str] = None
    capacity: Optional[int] = None

    @field_validator("capacity", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)

    @field_validator("room_number")
    @classmethod
    def check_room_number(cls, value):
        return required_text(value, "Room number")


class ClassPeriodAssignment(BaseModel):
    time_slot_id: int
    subject_id: Optional[int] = None
    teacher_id: Optional[int] = None
    classroom_id: Optional[int] = None
    day_of_week: Optional[str] = None

    @field_validator("subject_id", "teacher_id", "classroom_id", "day_of_week", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)
