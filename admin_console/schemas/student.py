from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import date

from admin_console.schemas.validators import blank_to_none, required_text


# --- Students ---
class StudentForm(BaseModel):
    student_id: str
    first_name: str
    last_name: str
    date_of_birth: Optional[date] = None
    class_id: Optional[int] = None
    grade_level: Optional[str] = None
    gender: Optional[str] = None

    @field_validator("date_of_birth", "class_id", "grade_level", "gender", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)

    @field_validator("student_id")
    @classmethod
    def check_student_id(cls, value):
        return required_text(value, "Student ID")

    @field_validator("first_name")
    @classmethod
    def check_first_name(cls, value):
        return required_text(value, "First Name")

    @field_validator("last_name")
    @classmethod
    def check_last_name(cls, value):
        return required_text(value, "Last Name")


class ClassAssignment(BaseModel):
    class_id: Optional[int] = None
    grade_level: str = ""

    @field_validator("class_id", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)
