from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional
from datetime import date

from admin_console.schemas.validators import blank_to_none, required_text, valid_time

SESSION_STATUSES = ("scheduled", "in_progress", "completed", "cancelled")
ATTENDANCE_MARKS = ("attended", "absent", "late", "excused")
RULE_ACTIONS = ("verbal_warning", "written_warning", "detention", "suspension", "expulsion")


# --- Detention sessions ---
class DetentionForm(BaseModel):
    detention_date: date
    detention_time: str
    duration: int = 60
    location: Optional[str] = None
    teacher_on_duty_id: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("location", "teacher_on_duty_id", "notes", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)

    @field_validator("detention_time")
    @classmethod
    def check_time(cls, value):
        value = required_text(value, "Detention time")
        return valid_time(value, "Detention time")

    @field_validator("duration")
    @classmethod
    def check_duration(cls, value):
        if value <= 0:
            raise ValueError("Duration must be greater than 0")
        return value

    def payload(self) -> dict:
        return self.model_dump(mode="json")


# --- Detention rules ---
class DetentionRuleForm(BaseModel):
    id: Optional[int] = None
    action_type: str = "detention"
    min_points: int
    max_points: Optional[int] = None
    severity: Optional[str] = None
    detention_duration: int = 60
    is_active: bool = True

    @field_validator("id", "max_points", "severity", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)

    @field_validator("action_type")
    @classmethod
    def check_action_type(cls, value):
        if value not in RULE_ACTIONS:
            raise ValueError(f"Action type must be one of: {', '.join(RULE_ACTIONS)}")
        return value

    @field_validator("min_points")
    @classmethod
    def check_min_points(cls, value):
        if value < 0:
            raise ValueError("Minimum points cannot be negative")
        return value

    @model_validator(mode="after")
    def check_range(self):
        if self.max_points is not None and self.max_points < self.min_points:
            raise ValueError("Maximum points must be greater than or equal to minimum points")
        return self

    def payload(self) -> dict:
        data = self.model_dump(exclude_none=True)
        data["is_active"] = 1 if self.is_active else 0
        return data


# --- Assignment & attendance ---
class AssignStudents(BaseModel):
    student_ids: List[int] = Field(..., min_length=1)
    incident_id: Optional[int] = None
    reason: Optional[str] = None


class SessionStatus(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def check_status(cls, value):
        if value not in SESSION_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(SESSION_STATUSES)}")
        return value


class AttendanceMark(BaseModel):
    status: str
    notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def check_status(cls, value):
        if value not in ATTENDANCE_MARKS:
            raise ValueError(f"Status must be one of: {', '.join(ATTENDANCE_MARKS)}")
        return value
